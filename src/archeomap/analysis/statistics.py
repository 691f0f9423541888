"""
Statistical analysis of sample attributes and cascading filter options.

Cascading options answer "which values of dimension D could the user still
pick?": a value is available when at least one sample carries it and passes
every other dimension's current constraint. Availability is always computed
over the full dataset, never over the already-filtered subset, so narrowing
one dimension never dead-ends another.
"""

import math

import numpy as np

from .. import config
from ..core.filters import (
    lowercase_terms,
    normalized_bounds,
    passes_date,
    passes_selection,
    passes_y_haplotree,
)
from ..core.types import DateStatistics, FilterMeta
from ..visualization.legend_manager import (
    build_culture_legend,
    build_haplogroup_legend,
    build_y_haplotree_legend,
)

# Categorical dimensions that support cascading availability
CATEGORICAL_DIMENSIONS = ('culture', 'y_haplogroup', 'mtdna')


# =============================================================================
# Extraction Helpers
# =============================================================================

def extract_numeric(samples, field):
    """
    Collect the present values of a numeric attribute.

    Args:
        samples: sequence of Sample
        field (str): attribute name, e.g. 'age'

    Returns:
        list: float values in sample order, absent values skipped
    """
    return [float(getattr(s, field)) for s in samples if getattr(s, field) is not None]


def extract_categorical(samples, field):
    """
    Collect the unique present values of a categorical attribute.

    Returns:
        list: sorted unique strings, absent values excluded
    """
    return sorted({getattr(s, field) for s in samples if getattr(s, field) is not None})


def extract_ages(samples):
    return extract_numeric(samples, 'age')


def extract_cultures(samples):
    return extract_categorical(samples, 'culture')


def extract_y_haplogroups(samples):
    return extract_categorical(samples, 'y_haplogroup')


def extract_mtdna(samples):
    return extract_categorical(samples, 'mtdna')


# =============================================================================
# Date Statistics
# =============================================================================

def calculate_date_range(samples):
    """
    Minimum and maximum age of the dated samples.

    Returns:
        tuple: (min_age, max_age) in cal BP, or the configured defaults when
        no sample is dated
    """
    ages = extract_ages(samples)
    if not ages:
        return (config.DEFAULT_MIN_AGE, config.DEFAULT_MAX_AGE)
    return (min(ages), max(ages))


def percentile_indices(n):
    """
    0-based indices of the lower and upper percentiles in n sorted values.

    Returns (floor(n * LOWER_PERCENTILE), ceil(n * UPPER_PERCENTILE) - 1),
    clamped to [0, n - 1] with the lower index never above the upper one.
    """
    p98_idx = min(n - 1, math.ceil(n * config.UPPER_PERCENTILE) - 1)
    p2_idx = min(max(0, math.floor(n * config.LOWER_PERCENTILE)), p98_idx)
    return p2_idx, p98_idx


def calculate_date_statistics(samples):
    """
    Calculate min, max and the 2nd/98th percentile ages for slider scaling.

    Percentiles are nearest-rank on the sorted ages, with indices clamped so
    that min <= p2 <= p98 <= max for any non-empty dataset. Without dated
    samples the defaults are returned with p2 = p98 = their midpoint.

    Args:
        samples: sequence of Sample

    Returns:
        DateStatistics: the statistics
    """
    ages = np.sort(np.asarray(extract_ages(samples), dtype=float))
    n = len(ages)

    if n == 0:
        midpoint = (config.DEFAULT_MIN_AGE + config.DEFAULT_MAX_AGE) / 2
        return DateStatistics(config.DEFAULT_MIN_AGE, config.DEFAULT_MAX_AGE, midpoint, midpoint)

    p2_idx, p98_idx = percentile_indices(n)

    return DateStatistics(
        float(ages[0]),
        float(ages[-1]),
        float(ages[p2_idx]),
        float(ages[p98_idx]),
    )


# =============================================================================
# Cascading Filter Options
# =============================================================================

def sample_constraint(date_min=None, date_max=None, include_undated=True,
                      culture_filter=None, include_no_culture=True,
                      y_haplogroup_filter=None, include_no_y_haplogroup=True,
                      mtdna_filter=None, include_no_mtdna=True,
                      y_haplotree_filter=None):
    """
    Build a predicate combining the given constraints.

    A filter argument left as None leaves that dimension unconstrained. The
    Y dimension follows the same rule as apply_filters: active haplotree
    terms replace the Y-haplogroup selection.

    Returns:
        callable: sample -> bool
    """
    date_min, date_max = normalized_bounds(date_min, date_max)
    cultures = set(culture_filter.selected) if culture_filter is not None else None
    y_haplogroups = set(y_haplogroup_filter.selected) if y_haplogroup_filter is not None else None
    mtdna = set(mtdna_filter.selected) if mtdna_filter is not None else None
    terms = lowercase_terms(y_haplotree_filter.terms) if y_haplotree_filter is not None else set()

    def predicate(sample):
        if not passes_date(sample, date_min, date_max, include_undated):
            return False
        if cultures is not None and not passes_selection(sample.culture, cultures, include_no_culture):
            return False
        if terms:
            if not passes_y_haplotree(sample, terms):
                return False
        elif y_haplogroups is not None and not passes_selection(
                sample.y_haplogroup, y_haplogroups, include_no_y_haplogroup):
            return False
        if mtdna is not None and not passes_selection(sample.mtdna, mtdna, include_no_mtdna):
            return False
        return True

    return predicate


def constraints_excluding(request, dimension):
    """
    Keyword constraints of a request with one dimension left out.

    Args:
        request: FilterRequest
        dimension (str): 'date', 'culture', 'y_haplogroup' or 'mtdna'

    Returns:
        dict: keyword arguments for sample_constraint
    """
    constraints = {}
    if dimension != 'date':
        constraints.update(date_min=request.date_min, date_max=request.date_max,
                           include_undated=request.include_undated)
    if dimension != 'culture':
        constraints.update(culture_filter=request.culture_filter,
                           include_no_culture=request.include_no_culture)
    if dimension != 'y_haplogroup':
        constraints.update(y_haplogroup_filter=request.y_haplogroup_filter,
                           include_no_y_haplogroup=request.include_no_y_haplogroup,
                           y_haplotree_filter=request.y_haplotree_filter)
    if dimension != 'mtdna':
        constraints.update(mtdna_filter=request.mtdna_filter,
                           include_no_mtdna=request.include_no_mtdna)
    return constraints


def _available_values(samples, field, predicate):
    values = set()
    for sample in samples:
        value = getattr(sample, field)
        if value is not None and value not in values and predicate(sample):
            values.add(value)
    return sorted(values)


def compute_available(samples, dimension, request):
    """
    Values of a categorical dimension still selectable under a request.

    Args:
        samples: the full dataset
        dimension (str): one of CATEGORICAL_DIMENSIONS
        request: FilterRequest holding the other dimensions' constraints

    Returns:
        list: sorted available values

    Raises:
        ValueError: for an unknown dimension
    """
    if dimension not in CATEGORICAL_DIMENSIONS:
        raise ValueError(f"Unknown categorical dimension: {dimension}")
    predicate = sample_constraint(**constraints_excluding(request, dimension))
    return _available_values(samples, dimension, predicate)


def compute_available_cultures(samples, date_min=None, date_max=None, include_undated=True,
                               y_haplogroup_filter=None, include_no_y_haplogroup=True,
                               mtdna_filter=None, include_no_mtdna=True,
                               y_haplotree_filter=None):
    """
    Cultures with at least one sample passing the other constraints.

    When the user narrows the date range, the culture dropdown shrinks to
    the cultures present in that range.
    """
    predicate = sample_constraint(
        date_min=date_min, date_max=date_max, include_undated=include_undated,
        y_haplogroup_filter=y_haplogroup_filter, include_no_y_haplogroup=include_no_y_haplogroup,
        mtdna_filter=mtdna_filter, include_no_mtdna=include_no_mtdna,
        y_haplotree_filter=y_haplotree_filter,
    )
    return _available_values(samples, 'culture', predicate)


def compute_available_y_haplogroups(samples, date_min=None, date_max=None, include_undated=True,
                                    culture_filter=None, include_no_culture=True,
                                    mtdna_filter=None, include_no_mtdna=True):
    """Y-haplogroups with at least one sample passing the other constraints."""
    predicate = sample_constraint(
        date_min=date_min, date_max=date_max, include_undated=include_undated,
        culture_filter=culture_filter, include_no_culture=include_no_culture,
        mtdna_filter=mtdna_filter, include_no_mtdna=include_no_mtdna,
    )
    return _available_values(samples, 'y_haplogroup', predicate)


def compute_available_mtdna(samples, date_min=None, date_max=None, include_undated=True,
                            culture_filter=None, include_no_culture=True,
                            y_haplogroup_filter=None, include_no_y_haplogroup=True,
                            y_haplotree_filter=None):
    """mtDNA haplogroups with at least one sample passing the other constraints."""
    predicate = sample_constraint(
        date_min=date_min, date_max=date_max, include_undated=include_undated,
        culture_filter=culture_filter, include_no_culture=include_no_culture,
        y_haplogroup_filter=y_haplogroup_filter, include_no_y_haplogroup=include_no_y_haplogroup,
        y_haplotree_filter=y_haplotree_filter,
    )
    return _available_values(samples, 'mtdna', predicate)


def compute_available_date_range(samples, culture_filter=None, include_no_culture=True,
                                 y_haplogroup_filter=None, include_no_y_haplogroup=True,
                                 mtdna_filter=None, include_no_mtdna=True,
                                 y_haplotree_filter=None):
    """
    Date range of the dated samples passing the categorical constraints.

    When the user selects cultures, the date slider can show the range those
    cultures span.

    Returns:
        tuple: (min_age, max_age), or the configured defaults if no matching
        sample is dated
    """
    predicate = sample_constraint(
        culture_filter=culture_filter, include_no_culture=include_no_culture,
        y_haplogroup_filter=y_haplogroup_filter, include_no_y_haplogroup=include_no_y_haplogroup,
        mtdna_filter=mtdna_filter, include_no_mtdna=include_no_mtdna,
        y_haplotree_filter=y_haplotree_filter,
    )
    ages = [s.age for s in samples if s.age is not None and predicate(s)]
    if not ages:
        return (config.DEFAULT_MIN_AGE, config.DEFAULT_MAX_AGE)
    return (min(ages), max(ages))


def filter_by_search_prefix(values, search_text):
    """
    Keep values starting with the search text, ignoring case.

    An empty or blank search text returns the values unchanged.
    """
    values = list(values)
    if not search_text or not search_text.strip():
        return values
    prefix = search_text.strip().lower()
    return [v for v in values if v.lower().startswith(prefix)]


# =============================================================================
# Filter Metadata Builder
# =============================================================================

def build_filter_meta(all_samples, filtered_samples, request):
    """
    Build complete filter metadata for a query response.

    Args:
        all_samples: the full dataset (counts, availability, statistics)
        filtered_samples: samples after filtering (filtered count)
        request: FilterRequest

    Returns:
        FilterMeta: counts, cascading options, date statistics and legends
    """
    available_cultures = compute_available(all_samples, 'culture', request)
    available_y_haplogroups = compute_available(all_samples, 'y_haplogroup', request)
    available_mtdna = compute_available(all_samples, 'mtdna', request)

    available_date_range = compute_available_date_range(
        all_samples,
        request.culture_filter, request.include_no_culture,
        request.y_haplogroup_filter, request.include_no_y_haplogroup,
        request.mtdna_filter, request.include_no_mtdna,
        y_haplotree_filter=request.y_haplotree_filter,
    )

    return FilterMeta(
        total_count=len(all_samples),
        filtered_count=len(filtered_samples),
        available_cultures=available_cultures,
        available_y_haplogroups=available_y_haplogroups,
        available_mtdna=available_mtdna,
        filtered_y_haplogroups=filter_by_search_prefix(
            available_y_haplogroups, request.y_haplogroup_filter.search_text),
        filtered_mtdna=filter_by_search_prefix(
            available_mtdna, request.mtdna_filter.search_text),
        available_date_range=available_date_range,
        date_statistics=calculate_date_statistics(all_samples),
        culture_legend=build_culture_legend(request.culture_filter, request.culture_color_ramp),
        y_haplogroup_legend=build_haplogroup_legend(request.y_haplogroup_filter,
                                                    request.y_haplogroup_color_ramp),
        mtdna_legend=build_haplogroup_legend(request.mtdna_filter, request.mtdna_color_ramp),
        y_haplotree_legend=build_y_haplotree_legend(request.y_haplotree_filter,
                                                    request.y_haplotree_color_ramp),
    )
