"""
Piecewise slider scale for the date range control.

Maps data values to slider positions and back with three linear segments:
[min, p2] -> [0, left_break], [p2, p98] -> [left_break, right_break] and
[p98, max] -> [right_break, slider_max]. Outliers are squeezed into the
edge segments so the bulk of the distribution gets most of the slider.
"""

import math

import numpy as np

from .. import config
from ..analysis.statistics import percentile_indices


def calculate_percentiles(values, percentiles=(2, 98)):
    """
    Calculate min, max and arbitrary percentiles of a list of numbers.

    Each percentile p is read at index floor(n * p / 100). For the slider
    breakpoints use analysis.statistics.percentile_indices, whose upper
    index is ceil(n * 0.98) - 1.

    Args:
        values: iterable of numbers
        percentiles: percentiles to compute (0-100)

    Returns:
        dict or None: {'min', 'max', 'p<k>' ...}, or None for empty input
    """
    ordered = np.sort(np.asarray(list(values), dtype=float))
    if len(ordered) == 0:
        return None

    result = {"min": float(ordered[0]), "max": float(ordered[-1])}
    for p in percentiles:
        index = math.floor(len(ordered) * (p / 100))
        result[f"p{p}"] = float(ordered[min(index, len(ordered) - 1)])
    return result


class PiecewiseScale:
    """
    Bidirectional value <-> slider mapping with percentile compression.

    When p2 or p98 is None the scale is a single linear map over
    [data_min, data_max].
    """

    def __init__(self, data_min, data_max, p2=None, p98=None,
                 left_break=config.SLIDER_LEFT_BREAK,
                 right_break=config.SLIDER_RIGHT_BREAK,
                 slider_min=config.SLIDER_MIN,
                 slider_max=config.SLIDER_MAX):
        self.data_min = float(data_min)
        self.data_max = float(data_max)
        self.p2 = None if p2 is None else float(p2)
        self.p98 = None if p98 is None else float(p98)
        self.left_break = float(left_break)
        self.right_break = float(right_break)
        self.slider_min = float(slider_min)
        self.slider_max = float(slider_max)

    @classmethod
    def from_values(cls, values, **kwargs):
        """
        Build a scale from raw values; empty input gives a linear [0, 1] scale.

        Breakpoints use the same percentile indices as the date statistics
        served by /api/config.
        """
        ordered = np.sort(np.asarray(list(values), dtype=float))
        if len(ordered) == 0:
            return cls(0.0, 1.0, **kwargs)
        p2_idx, p98_idx = percentile_indices(len(ordered))
        return cls(ordered[0], ordered[-1], ordered[p2_idx], ordered[p98_idx], **kwargs)

    @classmethod
    def from_date_statistics(cls, stats, **kwargs):
        return cls(stats.min, stats.max, stats.p2, stats.p98, **kwargs)

    @property
    def is_linear(self):
        return self.p2 is None or self.p98 is None

    @property
    def bounds(self):
        return {"dataMin": self.data_min, "dataMax": self.data_max, "p2": self.p2, "p98": self.p98}

    def to_slider(self, value):
        """
        Convert a data value to a slider position.

        Degenerate segments (zero data width) return the segment's boundary
        position instead of dividing by zero.
        """
        value = float(value)

        if self.is_linear:
            if self.data_max == self.data_min:
                return self.slider_max / 2
            t = (value - self.data_min) / (self.data_max - self.data_min)
            return self.slider_min + t * (self.slider_max - self.slider_min)

        if value <= self.p2:
            if self.p2 == self.data_min:
                return self.left_break
            t = (value - self.data_min) / (self.p2 - self.data_min)
            return self.slider_min + t * (self.left_break - self.slider_min)
        elif value <= self.p98:
            if self.p98 == self.p2:
                return (self.left_break + self.right_break) / 2
            t = (value - self.p2) / (self.p98 - self.p2)
            return self.left_break + t * (self.right_break - self.left_break)
        else:
            if self.data_max == self.p98:
                return self.right_break
            t = (value - self.p98) / (self.data_max - self.p98)
            return self.right_break + t * (self.slider_max - self.right_break)

    def to_value(self, slider_pos):
        """Convert a slider position back to a data value."""
        slider_pos = float(slider_pos)

        if self.is_linear:
            t = (slider_pos - self.slider_min) / (self.slider_max - self.slider_min)
            return self.data_min + t * (self.data_max - self.data_min)

        if slider_pos <= self.left_break:
            t = (slider_pos - self.slider_min) / (self.left_break - self.slider_min)
            return self.data_min + t * (self.p2 - self.data_min)
        elif slider_pos <= self.right_break:
            t = (slider_pos - self.left_break) / (self.right_break - self.left_break)
            return self.p2 + t * (self.p98 - self.p2)
        else:
            t = (slider_pos - self.right_break) / (self.slider_max - self.right_break)
            return self.p98 + t * (self.data_max - self.p98)

    def clamp(self, value):
        """Restrict a value to [data_min, data_max]."""
        return min(self.data_max, max(self.data_min, float(value)))

    def range_style(self, slider_low, slider_high):
        """
        CSS left/width percentages for the highlighted band between two handles.
        """
        span = self.slider_max - self.slider_min
        left = (slider_low - self.slider_min) / span * 100
        right = (slider_high - self.slider_min) / span * 100
        return {"left": f"{left}%", "width": f"{right - left}%"}
