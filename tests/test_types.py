"""
Tests for sample normalization and request decoding.
"""

import math

import pytest

from archeomap import config
from archeomap.core.exceptions import ArcheoMapError, RequestError
from archeomap.core.types import (
    ColorBy,
    FilterRequest,
    MapFeature,
    Sample,
    YHaplotreeFilter,
    normalize_age,
    normalize_text,
)


class TestNormalization:

    @pytest.mark.parametrize("raw", [None, "", "   ", float("nan")])
    def test_absent_text(self, raw):
        assert normalize_text(raw) is None

    def test_text_is_stripped(self):
        assert normalize_text("  Yamnaya ") == "Yamnaya"

    @pytest.mark.parametrize("raw", [None, "", "abc", -1, float("nan"), math.inf, True])
    def test_absent_age(self, raw):
        assert normalize_age(raw) is None

    def test_numeric_string_age(self):
        assert normalize_age("4500.5") == 4500.5
        assert normalize_age(0) == 0.0

    def test_sample_normalizes_fields(self):
        sample = Sample("s", (1, 2), age="bad", culture="", mtdna="  H1 ")
        assert sample.age is None
        assert not sample.is_dated
        assert sample.culture is None
        assert sample.mtdna == "H1"
        assert (sample.longitude, sample.latitude) == (1.0, 2.0)

    def test_map_feature_carries_color_without_touching_sample(self):
        sample = Sample("s", (10.0, 20.0), age=100.0, culture="A", properties={"site": "Cave"})
        feature = MapFeature(sample, "#123456").to_geojson()
        assert feature["geometry"]["coordinates"] == [10.0, 20.0]
        assert feature["properties"]["_color"] == "#123456"
        assert feature["properties"]["site"] == "Cave"
        assert "_color" not in sample.to_properties()


class TestColorBy:

    @pytest.mark.parametrize("tag, expected", [
        ("age", ColorBy.AGE),
        ("culture", ColorBy.CULTURE),
        ("y_haplogroup", ColorBy.Y_HAPLOGROUP),
        ("yHaplogroup", ColorBy.Y_HAPLOGROUP),
        ("mtdna", ColorBy.MTDNA),
        ("y_haplotree", ColorBy.Y_HAPLOTREE),
        ("yHaplotree", ColorBy.Y_HAPLOTREE),
        ("", ColorBy.NONE),
        (None, ColorBy.NONE),
        ("rainbow", ColorBy.NONE),
    ])
    def test_parse(self, tag, expected):
        assert ColorBy.parse(tag) is expected


class TestFilterRequest:

    def test_defaults(self):
        request = FilterRequest()
        assert request.date_min is None and request.date_max is None
        assert request.include_undated
        assert request.culture_filter.selected == ()
        assert request.color_by is ColorBy.NONE
        assert request.color_ramp == config.DEFAULT_COLOR_RAMP

    def test_inverted_bounds_are_swapped(self):
        request = FilterRequest(date_min=9000, date_max=4000)
        assert (request.date_min, request.date_max) == (4000.0, 9000.0)

    def test_haplotree_terms_are_trimmed(self):
        terms = YHaplotreeFilter([" M269 ", "", "  ", "L51"])
        assert terms.terms == ("M269", "L51")
        assert terms.active
        assert not YHaplotreeFilter().active

    def test_from_payload(self):
        request = FilterRequest.from_payload({
            "dateMin": "4000",
            "dateMax": 9000,
            "includeUndated": False,
            "selectedCultures": ["Yamnaya", "Bell Beaker"],
            "includeNoCulture": False,
            "yHaplogroupSearchText": "R1",
            "selectedYHaplogroups": ["R1b"],
            "selectedMtdna": ["H1"],
            "includeNoMtdna": "false",
            "yHaplotreeTerms": ["M269"],
            "colorBy": "culture",
            "cultureColorRamp": "plasma",
            "unknownKey": 1,
        })
        assert (request.date_min, request.date_max) == (4000.0, 9000.0)
        assert not request.include_undated
        assert request.culture_filter.selected == ("Yamnaya", "Bell Beaker")
        assert not request.include_no_culture
        assert request.y_haplogroup_filter.search_text == "R1"
        assert request.y_haplogroup_filter.selected == ("R1b",)
        assert request.include_no_y_haplogroup
        assert request.mtdna_filter.selected == ("H1",)
        assert not request.include_no_mtdna
        assert request.y_haplotree_filter.terms == ("M269",)
        assert request.color_by is ColorBy.CULTURE
        assert request.culture_color_ramp == "plasma"
        assert request.color_ramp == config.DEFAULT_COLOR_RAMP

    def test_empty_payload_is_default_request(self):
        assert FilterRequest.from_payload(None) == FilterRequest()
        assert FilterRequest.from_payload({}) == FilterRequest()

    def test_null_bounds_are_unbounded(self):
        request = FilterRequest.from_payload({"dateMin": None, "dateMax": ""})
        assert request.date_min is None and request.date_max is None

    @pytest.mark.parametrize("payload", [
        {"dateMin": "old"},
        {"dateMax": [1, 2]},
        {"dateMin": True},
        {"dateMax": "nan"},
    ])
    def test_bad_date_bound_raises(self, payload):
        with pytest.raises(RequestError):
            FilterRequest.from_payload(payload)

    @pytest.mark.parametrize("payload", [
        {"selectedCultures": 5},
        {"selectedYHaplogroups": "R1b"},
        {"selectedMtdna": {"H1": True}},
        {"yHaplotreeTerms": 3},
    ])
    def test_non_list_selection_raises(self, payload):
        with pytest.raises(RequestError) as excinfo:
            FilterRequest.from_payload(payload)
        assert next(iter(payload)) in str(excinfo.value)

    def test_null_selection_is_empty(self):
        request = FilterRequest.from_payload({"selectedCultures": None, "yHaplotreeTerms": None})
        assert request.culture_filter.selected == ()
        assert not request.y_haplotree_filter.active

    @pytest.mark.parametrize("raw", [None, "", "  "])
    def test_blank_flag_takes_default(self, raw):
        request = FilterRequest.from_payload({"includeUndated": raw, "includeNoCulture": raw})
        assert request.include_undated
        assert request.include_no_culture

    def test_string_flags(self):
        request = FilterRequest.from_payload({"includeUndated": "false", "includeNoMtdna": "yes"})
        assert not request.include_undated
        assert request.include_no_mtdna

    def test_non_object_payload_raises(self):
        with pytest.raises(RequestError) as excinfo:
            FilterRequest.from_payload(["dateMin", 1])
        assert isinstance(excinfo.value, ArcheoMapError)
        assert isinstance(excinfo.value, ValueError)
