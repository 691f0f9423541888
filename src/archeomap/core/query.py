"""
Query orchestration for ArcheoMap.

Combines filtering, cascading metadata and color assignment into one call.
Each query is a pure function of (samples, request): the dataset is only
read, and colors are stored on fresh MapFeature objects.
"""

import logging

from .. import config
from ..analysis.statistics import build_filter_meta, calculate_date_range
from ..visualization.color_system import categorical_color, color_for_age, token_match_color
from .filters import apply_filters
from .types import ColorBy, MapFeature, QueryResponse

logger = logging.getLogger(__name__)


def _color_for(sample, request, date_range, default_color):
    color_by = request.color_by

    if color_by is ColorBy.AGE:
        return color_for_age(sample.age, date_range[0], date_range[1],
                             request.color_ramp, default_color=default_color)
    if color_by is ColorBy.CULTURE:
        return categorical_color(sample.culture, request.culture_filter.selected,
                                 request.culture_color_ramp, default_color=default_color)
    if color_by is ColorBy.Y_HAPLOGROUP:
        return categorical_color(sample.y_haplogroup, request.y_haplogroup_filter.selected,
                                 request.y_haplogroup_color_ramp, default_color=default_color)
    if color_by is ColorBy.MTDNA:
        return categorical_color(sample.mtdna, request.mtdna_filter.selected,
                                 request.mtdna_color_ramp, default_color=default_color)
    if color_by is ColorBy.Y_HAPLOTREE:
        return token_match_color(sample.y_haplotree, request.y_haplotree_filter.terms,
                                 request.y_haplotree_color_ramp, default_color=default_color)
    if color_by is ColorBy.NONE:
        return default_color
    raise ValueError(f"Unhandled color mode: {color_by!r}")


def assign_colors(features, request, date_range, default_color=config.DEFAULT_POINT_COLOR):
    """
    Assign display colors in place according to the request's color mode.

    Args:
        features: list of MapFeature (modified in place, order kept)
        request: FilterRequest with color_by and the per-dimension ramps
        date_range: (youngest, oldest) ages used to normalize age colors
        default_color: color for uncolored or unmatched samples

    Returns:
        list: the same features, for chaining
    """
    for feature in features:
        feature.display_color = _color_for(feature.sample, request, date_range, default_color)
    return features


def process_query(all_samples, request, default_color=config.DEFAULT_POINT_COLOR):
    """
    Process a complete filter query.

    1. Apply all filters to get the matching samples
    2. Compute metadata (counts, cascading options, legends) over all samples
    3. Assign colors, normalizing ages to the filtered subset's own range
    4. Return the response

    Args:
        all_samples: the complete dataset (sequence of Sample)
        request: FilterRequest
        default_color: color for uncolored or unmatched samples

    Returns:
        QueryResponse: filtered, colored features plus metadata
    """
    all_samples = list(all_samples)
    filtered = apply_filters(all_samples, request)
    meta = build_filter_meta(all_samples, filtered, request)

    # Age colors contrast within the visible subset
    if filtered:
        date_range = calculate_date_range(filtered)
    else:
        date_range = (meta.date_statistics.min, meta.date_statistics.max)

    features = assign_colors([MapFeature(s) for s in filtered], request, date_range,
                             default_color=default_color)

    logger.debug("Query matched %d of %d samples (color_by=%s)",
                 meta.filtered_count, meta.total_count, request.color_by.value)
    return QueryResponse(features, meta)
