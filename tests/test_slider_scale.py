"""
Tests for the piecewise slider scale.
"""

import pytest

from archeomap.analysis.statistics import calculate_date_statistics
from archeomap.core.types import Sample
from archeomap.ui.slider_scale import PiecewiseScale, calculate_percentiles


@pytest.fixture
def scale():
    return PiecewiseScale(0, 10000, p2=100, p98=9000)


class TestPiecewiseScale:

    def test_breakpoints(self, scale):
        assert scale.to_slider(0) == 0
        assert scale.to_slider(100) == 50
        assert scale.to_slider(9000) == 950
        assert scale.to_slider(10000) == 1000

    @pytest.mark.parametrize("value", [0, 100, 5000, 9000, 10000])
    def test_value_round_trip(self, scale, value):
        assert scale.to_value(scale.to_slider(value)) == pytest.approx(value, abs=1e-6)

    @pytest.mark.parametrize("position", [0, 50, 500, 950, 1000])
    def test_slider_round_trip(self, scale, position):
        assert scale.to_slider(scale.to_value(position)) == pytest.approx(position, abs=1e-6)

    def test_middle_segment_is_linear(self, scale):
        assert scale.to_value(500) == pytest.approx(100 + (450 / 900) * 8900)

    def test_monotonic(self, scale):
        positions = [scale.to_slider(v) for v in range(0, 10001, 250)]
        assert positions == sorted(positions)

    def test_degenerate_segments_stay_finite(self):
        flat = PiecewiseScale(5, 5, p2=5, p98=5)
        assert flat.to_slider(5) == 50
        edges = PiecewiseScale(0, 10, p2=0, p98=10)
        assert edges.to_slider(0) == 50
        assert edges.to_slider(10) == 950
        middle = PiecewiseScale(0, 10, p2=4, p98=4)
        assert middle.to_slider(4) == pytest.approx(50)
        assert middle.to_slider(7) == pytest.approx(950 + 0.5 * 50)

    def test_linear_without_percentiles(self):
        linear = PiecewiseScale(0, 100)
        assert linear.is_linear
        assert linear.to_slider(50) == 500
        assert linear.to_value(250) == 25
        assert PiecewiseScale(7, 7).to_slider(7) == 500

    def test_clamp(self, scale):
        assert scale.clamp(-5) == 0
        assert scale.clamp(20000) == 10000
        assert scale.clamp(42) == 42

    def test_range_style(self, scale):
        assert scale.range_style(100, 900) == {"left": "10.0%", "width": "80.0%"}

    def test_from_date_statistics(self):
        stats = calculate_date_statistics([Sample(str(i), age=float(i)) for i in range(1, 101)])
        scale = PiecewiseScale.from_date_statistics(stats)
        assert scale.bounds == {"dataMin": 1.0, "dataMax": 100.0, "p2": 3.0, "p98": 98.0}
        assert scale.to_slider(3.0) == 50


class TestCalculatePercentiles:

    def test_basic(self):
        result = calculate_percentiles(range(100, 0, -1))
        assert result["min"] == 1.0
        assert result["max"] == 100.0
        assert result["p2"] == 3.0

    def test_empty(self):
        assert calculate_percentiles([]) is None

    def test_from_values_matches_date_statistics(self):
        ages = list(range(100, 0, -1))
        scale = PiecewiseScale.from_values(ages)
        stats = calculate_date_statistics([Sample(str(a), age=float(a)) for a in ages])
        assert (scale.p2, scale.p98) == (stats.p2, stats.p98) == (3.0, 98.0)
        assert (scale.data_min, scale.data_max) == (1.0, 100.0)

    def test_from_values_empty_is_linear(self):
        scale = PiecewiseScale.from_values([])
        assert scale.is_linear
        assert (scale.data_min, scale.data_max) == (0.0, 1.0)
