"""
Core data structures for the ArcheoMap query engine.

Samples are immutable point records. Every optional attribute is normalized
on construction so that missing, None and empty-string values all become
None; the filter and color functions therefore only ever check ``is None``.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .. import config
from .exceptions import RequestError


def normalize_text(value):
    """
    Normalize an optional categorical value.

    Args:
        value: raw value (None, str, or anything convertible to str)

    Returns:
        str or None: stripped string, or None for missing/empty values
    """
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text if text else None


def normalize_age(value):
    """
    Normalize an optional age in cal BP.

    Unparseable, NaN, infinite and negative values are treated as absent.

    Args:
        value: raw value (None, number, or numeric string)

    Returns:
        float or None: the age, or None when absent or malformed
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        age = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(age) or math.isinf(age) or age < 0:
        return None
    return age


@dataclass(frozen=True)
class Sample:
    """
    A single archaeogenetic sample plotted as a map point.

    Attributes:
        id: sample identifier
        position: (longitude, latitude) in WGS84 degrees
        age: calibrated years BP (larger = older), or None
        culture: archaeological culture, or None
        y_haplogroup: Y-chromosome haplogroup, or None
        mtdna: mitochondrial haplogroup, or None
        y_haplotree: '>'-delimited Y-haplotree path, or None
        properties: extra source columns passed through to responses
    """
    id: str
    position: Tuple[float, float] = (0.0, 0.0)
    age: Optional[float] = None
    culture: Optional[str] = None
    y_haplogroup: Optional[str] = None
    mtdna: Optional[str] = None
    y_haplotree: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, 'id', "" if self.id is None else str(self.id))
        lon, lat = self.position
        object.__setattr__(self, 'position', (float(lon), float(lat)))
        object.__setattr__(self, 'age', normalize_age(self.age))
        for name in ('culture', 'y_haplogroup', 'mtdna', 'y_haplotree'):
            object.__setattr__(self, name, normalize_text(getattr(self, name)))

    @property
    def longitude(self):
        return self.position[0]

    @property
    def latitude(self):
        return self.position[1]

    @property
    def is_dated(self):
        return self.age is not None

    def to_properties(self):
        """GeoJSON properties dict using the source column names."""
        props = dict(self.properties)
        props.update({
            "sample_id": self.id,
            "average_age_calbp": self.age,
            "culture": self.culture,
            "y_haplogroup": self.y_haplogroup,
            "mtdna": self.mtdna,
            "y_haplotree": self.y_haplotree,
        })
        return props

    def to_geojson(self):
        return {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [self.longitude, self.latitude]},
            "properties": self.to_properties(),
        }


@dataclass
class MapFeature:
    """
    Per-query view of a sample that survived filtering.

    The display color lives here rather than on the Sample so that the
    shared dataset is never mutated by a query.
    """
    sample: Sample
    display_color: Optional[str] = None

    def to_geojson(self):
        feature = self.sample.to_geojson()
        feature["properties"]["_color"] = self.display_color
        return feature


class ColorBy(Enum):
    """Coloring modes for filtered samples."""
    NONE = "none"
    AGE = "age"
    CULTURE = "culture"
    Y_HAPLOGROUP = "y_haplogroup"
    MTDNA = "mtdna"
    Y_HAPLOTREE = "y_haplotree"

    @classmethod
    def parse(cls, tag):
        """
        Decode a color-by tag, accepting snake_case and camelCase spellings.

        Unknown, empty and None tags decode to NONE.
        """
        if isinstance(tag, cls):
            return tag
        if tag is None:
            return cls.NONE
        key = str(tag).strip().lower().replace("_", "").replace("-", "")
        for mode in cls:
            if mode.value.replace("_", "") == key:
                return mode
        return cls.NONE


def _as_string_tuple(values):
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]
    return tuple(str(v) for v in values)


@dataclass(frozen=True)
class CultureFilter:
    """
    Cultures to include.

    - empty selection + include_no_culture=False -> show nothing
    - empty selection + include_no_culture=True  -> only samples without culture
    - non-empty selection -> selected cultures (+ no-culture samples if flagged)

    Selection order is significant: it drives categorical colors.
    """
    selected: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'selected', _as_string_tuple(self.selected))


@dataclass(frozen=True)
class HaplogroupFilter:
    """Y-haplogroup or mtDNA selection plus the dropdown search text."""
    search_text: str = ""
    selected: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'search_text', "" if self.search_text is None else str(self.search_text))
        object.__setattr__(self, 'selected', _as_string_tuple(self.selected))


@dataclass(frozen=True)
class YHaplotreeFilter:
    """Terms matched case-insensitively against Y-haplotree path nodes."""
    terms: Tuple[str, ...] = ()

    def __post_init__(self):
        terms = tuple(t.strip() for t in _as_string_tuple(self.terms))
        object.__setattr__(self, 'terms', tuple(t for t in terms if t))

    @property
    def active(self):
        return bool(self.terms)


def _parse_bound(payload, key):
    value = payload.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise RequestError(f"{key} must be a number, got {value!r}")
    try:
        bound = float(value)
    except (TypeError, ValueError):
        raise RequestError(f"{key} must be a number, got {value!r}")
    if math.isnan(bound):
        raise RequestError(f"{key} must be a number, got {value!r}")
    return bound


def _parse_flag(payload, key, default=True):
    value = payload.get(key, default)
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, str):
        return value.strip().lower() not in ("false", "0", "no", "off")
    return bool(value)


def _parse_list(payload, key):
    value = payload.get(key)
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise RequestError(f"{key} must be a list of strings, got {value!r}")
    return value


@dataclass
class FilterRequest:
    """
    A filter-and-color request. All fields default to "no filtering".

    Attributes:
        date_min: lower age bound in cal BP (None = unbounded)
        date_max: upper age bound in cal BP (None = unbounded)
        include_undated: keep samples without an age
        culture_filter / include_no_culture: culture selection
        y_haplogroup_filter / include_no_y_haplogroup: Y-haplogroup selection
        mtdna_filter / include_no_mtdna: mtDNA selection
        y_haplotree_filter: haplotree token terms; when active the
            Y-haplogroup filter is bypassed
        color_by: coloring mode
        color_ramp: ramp for age coloring
        culture_color_ramp, y_haplogroup_color_ramp, mtdna_color_ramp,
        y_haplotree_color_ramp: ramps for categorical coloring

    Inverted date bounds are swapped on construction.
    """
    date_min: Optional[float] = None
    date_max: Optional[float] = None
    include_undated: bool = True
    culture_filter: CultureFilter = field(default_factory=CultureFilter)
    include_no_culture: bool = True
    y_haplogroup_filter: HaplogroupFilter = field(default_factory=HaplogroupFilter)
    include_no_y_haplogroup: bool = True
    mtdna_filter: HaplogroupFilter = field(default_factory=HaplogroupFilter)
    include_no_mtdna: bool = True
    y_haplotree_filter: YHaplotreeFilter = field(default_factory=YHaplotreeFilter)
    color_by: ColorBy = ColorBy.NONE
    color_ramp: str = config.DEFAULT_COLOR_RAMP
    culture_color_ramp: str = config.DEFAULT_COLOR_RAMP
    y_haplogroup_color_ramp: str = config.DEFAULT_COLOR_RAMP
    mtdna_color_ramp: str = config.DEFAULT_COLOR_RAMP
    y_haplotree_color_ramp: str = config.DEFAULT_COLOR_RAMP

    def __post_init__(self):
        if self.date_min is not None:
            self.date_min = float(self.date_min)
        if self.date_max is not None:
            self.date_max = float(self.date_max)
        if (self.date_min is not None and self.date_max is not None
                and self.date_min > self.date_max):
            self.date_min, self.date_max = self.date_max, self.date_min
        self.color_by = ColorBy.parse(self.color_by)

    @classmethod
    def from_payload(cls, payload):
        """
        Decode a JSON request body (camelCase keys) into a FilterRequest.

        Unknown keys are ignored and missing keys take their defaults.

        Args:
            payload (dict or None): decoded JSON body

        Returns:
            FilterRequest: the decoded request

        Raises:
            RequestError: if the payload is not an object, a date bound is not
                numeric, or a selection field is not a list
        """
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise RequestError("Request body must be a JSON object")

        def ramp(key):
            return str(payload.get(key) or config.DEFAULT_COLOR_RAMP)

        return cls(
            date_min=_parse_bound(payload, "dateMin"),
            date_max=_parse_bound(payload, "dateMax"),
            include_undated=_parse_flag(payload, "includeUndated"),
            culture_filter=CultureFilter(_parse_list(payload, "selectedCultures")),
            include_no_culture=_parse_flag(payload, "includeNoCulture"),
            y_haplogroup_filter=HaplogroupFilter(
                payload.get("yHaplogroupSearchText") or "",
                _parse_list(payload, "selectedYHaplogroups"),
            ),
            include_no_y_haplogroup=_parse_flag(payload, "includeNoYHaplogroup"),
            mtdna_filter=HaplogroupFilter(
                payload.get("mtdnaSearchText") or "",
                _parse_list(payload, "selectedMtdna"),
            ),
            include_no_mtdna=_parse_flag(payload, "includeNoMtdna"),
            y_haplotree_filter=YHaplotreeFilter(_parse_list(payload, "yHaplotreeTerms")),
            color_by=ColorBy.parse(payload.get("colorBy")),
            color_ramp=ramp("colorRamp"),
            culture_color_ramp=ramp("cultureColorRamp"),
            y_haplogroup_color_ramp=ramp("yHaplogroupColorRamp"),
            mtdna_color_ramp=ramp("mtdnaColorRamp"),
            y_haplotree_color_ramp=ramp("yHaplotreeColorRamp"),
        )


@dataclass(frozen=True)
class DateStatistics:
    """
    Age statistics used for piecewise slider scaling.

    Attributes:
        min: youngest age
        max: oldest age
        p2: 2nd percentile age
        p98: 98th percentile age
    """
    min: float
    max: float
    p2: float
    p98: float

    def to_dict(self):
        return {"min": self.min, "max": self.max, "p2": self.p2, "p98": self.p98}


def _legend_to_list(legend):
    return [{"name": name, "color": color} for name, color in legend]


@dataclass
class FilterMeta:
    """
    Metadata about a query result that drives the cascading filter UI.

    The available_* lists are computed over the full dataset, each one
    projected against the other dimensions' constraints. The filtered_*
    haplogroup lists are the available lists narrowed by the search text.
    """
    total_count: int
    filtered_count: int
    available_cultures: List[str]
    available_y_haplogroups: List[str]
    available_mtdna: List[str]
    filtered_y_haplogroups: List[str]
    filtered_mtdna: List[str]
    available_date_range: Tuple[float, float]
    date_statistics: DateStatistics
    culture_legend: List[Tuple[str, str]] = field(default_factory=list)
    y_haplogroup_legend: List[Tuple[str, str]] = field(default_factory=list)
    mtdna_legend: List[Tuple[str, str]] = field(default_factory=list)
    y_haplotree_legend: List[Tuple[str, str]] = field(default_factory=list)

    def to_dict(self):
        return {
            "totalCount": self.total_count,
            "filteredCount": self.filtered_count,
            "availableCultures": list(self.available_cultures),
            "availableYHaplogroups": list(self.available_y_haplogroups),
            "availableMtdna": list(self.available_mtdna),
            "filteredYHaplogroups": list(self.filtered_y_haplogroups),
            "filteredMtdna": list(self.filtered_mtdna),
            "availableDateRange": {
                "min": self.available_date_range[0],
                "max": self.available_date_range[1],
            },
            "dateStatistics": self.date_statistics.to_dict(),
            "cultureLegend": _legend_to_list(self.culture_legend),
            "yHaplogroupLegend": _legend_to_list(self.y_haplogroup_legend),
            "mtdnaLegend": _legend_to_list(self.mtdna_legend),
            "yHaplotreeLegend": _legend_to_list(self.y_haplotree_legend),
        }


@dataclass
class QueryResponse:
    """Filtered, colored features plus their metadata."""
    features: List[MapFeature]
    meta: FilterMeta

    def to_dict(self):
        return {
            "features": [f.to_geojson() for f in self.features],
            "meta": self.meta.to_dict(),
        }
