"""
Tests for the color ramp engine.
"""

import pytest

from archeomap import config
from archeomap.visualization.color_system import (
    COLOR_RAMPS,
    ColorRamp,
    categorical_color,
    color_for_age,
    get_color_ramp_info,
    hex_to_rgb,
    interpolate_color,
    rgb_to_hex,
    token_match_color,
)

VIRIDIS_FIRST = "#440154"
VIRIDIS_MID = "#26838f"
VIRIDIS_LAST = "#fee825"


class TestConversion:

    def test_hex_to_rgb(self):
        assert hex_to_rgb("#ff0000") == (255, 0, 0)
        assert hex_to_rgb("00ff00") == (0, 255, 0)

    def test_malformed_hex_is_black(self):
        assert hex_to_rgb("#fff") == (0, 0, 0)
        assert hex_to_rgb("#zzzzzz") == (0, 0, 0)

    def test_rgb_to_hex_pads(self):
        assert rgb_to_hex((1, 2, 255)) == "#0102ff"


class TestInterpolation:

    def test_endpoints(self):
        for name, ramp in COLOR_RAMPS.items():
            assert interpolate_color(name, 0.0) == ramp.colors[0]
            assert interpolate_color(name, 1.0) == ramp.colors[-1]

    def test_clamped_outside_unit_interval(self):
        assert interpolate_color("viridis", -3.0) == VIRIDIS_FIRST
        assert interpolate_color("viridis", 7.5) == VIRIDIS_LAST

    def test_midpoint_lands_on_center_stop(self):
        assert interpolate_color("viridis", 0.5) == VIRIDIS_MID

    def test_between_stops_rounds_channels(self):
        # Halfway between #440154 (68,1,84) and #482777 (72,39,119)
        assert interpolate_color("viridis", 1 / 16) == "#461466"

    def test_single_color_ramp(self):
        ramp = ColorRamp("mono", ("#123456",))
        assert interpolate_color(ramp, 0.0) == "#123456"
        assert interpolate_color(ramp, 0.7) == "#123456"

    def test_unknown_ramp_falls_back_to_gray(self):
        assert interpolate_color("no-such-ramp", 0.3) == "#808080"

    def test_ramp_info_lists_every_ramp(self):
        info = get_color_ramp_info()
        assert set(info) == set(COLOR_RAMPS)
        assert info["viridis"]["colors"][0] == VIRIDIS_FIRST
        assert info["turbo"]["label"]


class TestCategoricalColor:

    def test_position_in_selection(self):
        selected = ["Yamnaya", "Bell Beaker", "Corded Ware"]
        assert categorical_color("Yamnaya", selected, "viridis") == VIRIDIS_FIRST
        assert categorical_color("Bell Beaker", selected, "viridis") == VIRIDIS_MID
        assert categorical_color("Corded Ware", selected, "viridis") == VIRIDIS_LAST

    def test_single_selection_uses_ramp_center(self):
        assert categorical_color("Yamnaya", ["Yamnaya"], "viridis") == VIRIDIS_MID

    def test_reordering_changes_color(self):
        a = categorical_color("Yamnaya", ["Yamnaya", "Bell Beaker"], "viridis")
        b = categorical_color("Yamnaya", ["Bell Beaker", "Yamnaya"], "viridis")
        assert a != b

    @pytest.mark.parametrize("value", [None, ""])
    def test_absent_value_gets_default(self, value):
        assert categorical_color(value, ["Yamnaya"], "viridis", default_color="#000001") == "#000001"

    def test_unselected_or_empty_selection_gets_default(self):
        assert categorical_color("Yamnaya", ["Bell Beaker"], "viridis") == config.FALLBACK_COLOR
        assert categorical_color("Yamnaya", [], "viridis") == config.FALLBACK_COLOR


class TestTokenMatchColor:
    PATH = "R-M207>M173>M343>M269"

    def test_first_matching_term_wins(self):
        # Term order decides, not path order
        terms = ["M269", "M173", "L51"]
        assert token_match_color(self.PATH, terms, "viridis") == VIRIDIS_FIRST

    def test_later_term_index(self):
        terms = ["L51", "xyz", "m173"]
        assert token_match_color(self.PATH, terms, "viridis") == VIRIDIS_LAST

    def test_case_insensitive_and_trimmed(self):
        assert token_match_color("R-M207 > m269 ", ["M269"], "viridis") == VIRIDIS_MID

    def test_partial_token_does_not_match(self):
        assert token_match_color(self.PATH, ["M26"], "viridis") == config.FALLBACK_COLOR

    @pytest.mark.parametrize("path", [None, ""])
    def test_absent_path_gets_default(self, path):
        assert token_match_color(path, ["M269"], "viridis") == config.FALLBACK_COLOR

    def test_no_terms_gets_default(self):
        assert token_match_color(self.PATH, [], "viridis") == config.FALLBACK_COLOR


class TestAgeColor:

    def test_oldest_maps_to_ramp_start(self):
        assert color_for_age(12000.0, 5000.0, 12000.0, "viridis") == VIRIDIS_FIRST
        assert color_for_age(5000.0, 5000.0, 12000.0, "viridis") == VIRIDIS_LAST

    def test_zero_width_range_uses_midpoint(self):
        assert color_for_age(5000.0, 5000.0, 5000.0, "viridis") == VIRIDIS_MID

    def test_missing_age_gets_default(self):
        assert color_for_age(None, 0.0, 10000.0, "viridis", default_color="#808080") == "#808080"
