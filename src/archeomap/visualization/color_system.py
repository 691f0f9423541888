"""
Color system module for ArcheoMap.

Defines the named color ramps and maps ages, categorical labels and
haplotree terms onto them by linear interpolation in RGB space.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .. import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColorRamp:
    """
    Named gradient of hex colors, ordered from low to high values.

    Attributes:
        name: identifier used in requests (e.g. "viridis")
        colors: hex colors "#RRGGBB"
        label: human-readable label for dropdowns
    """
    name: str
    colors: Tuple[str, ...]
    label: str = ""


# Nine-stop approximations of the usual sequential/diverging palettes
COLOR_RAMPS = {
    "viridis": ColorRamp(
        "viridis",
        ("#440154", "#482777", "#3e4a89", "#31688e", "#26838f",
         "#1f9d8a", "#6cce5a", "#b6de2b", "#fee825"),
        "Viridis (purple → yellow)",
    ),
    "plasma": ColorRamp(
        "plasma",
        ("#0d0887", "#46039f", "#7201a8", "#9c179e", "#bd3786",
         "#d8576b", "#ed7953", "#fb9f3a", "#fdca26"),
        "Plasma (purple → orange)",
    ),
    "warm": ColorRamp(
        "warm",
        ("#4575b4", "#74add1", "#abd9e9", "#e0f3f8", "#ffffbf",
         "#fee090", "#fdae61", "#f46d43", "#d73027"),
        "Warm (blue → red)",
    ),
    "cool": ColorRamp(
        "cool",
        ("#d73027", "#f46d43", "#fdae61", "#fee090", "#ffffbf",
         "#e0f3f8", "#abd9e9", "#74add1", "#4575b4"),
        "Cool (red → blue)",
    ),
    "spectral": ColorRamp(
        "spectral",
        ("#9e0142", "#d53e4f", "#f46d43", "#fdae61", "#fee08b",
         "#e6f598", "#abdda4", "#66c2a5", "#3288bd"),
        "Spectral (red → blue)",
    ),
    "turbo": ColorRamp(
        "turbo",
        ("#30123b", "#4662d7", "#36aaf9", "#1ae4b6", "#72fe5e",
         "#c8ef34", "#fcce2e", "#f38b20", "#ca3e13"),
        "Turbo (rainbow)",
    ),
}


def hex_to_rgb(hex_color):
    """
    Convert hex color to an RGB tuple (0-255 range).

    Accepts "#RRGGBB" and "RRGGBB"; anything else maps to black.
    """
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        return (0, 0, 0)
    try:
        return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))
    except ValueError:
        return (0, 0, 0)


def rgb_to_hex(rgb_tuple):
    """Convert an RGB tuple (0-255 range) to a lowercase hex string."""
    rgb_int = tuple(int(np.clip(c, 0, 255)) for c in rgb_tuple)
    return '#{:02x}{:02x}{:02x}'.format(*rgb_int)


def get_color_ramp(ramp):
    """
    Resolve a ramp name (or pass a ColorRamp through).

    Returns:
        ColorRamp or None: None when the name is unknown
    """
    if isinstance(ramp, ColorRamp):
        return ramp
    return COLOR_RAMPS.get(ramp)


def interpolate_color(ramp, t):
    """
    Interpolate a color from a ramp at normalized position t.

    Args:
        ramp: ColorRamp or ramp name
        t: float position, clamped to [0, 1]

    Returns:
        str: hex color; FALLBACK_COLOR when the ramp is unknown or empty
    """
    resolved = get_color_ramp(ramp)
    if resolved is None:
        logger.warning("Unknown color ramp: %s, using gray", ramp)
        return config.FALLBACK_COLOR

    colors = resolved.colors
    n = len(colors)
    if n == 0:
        return config.FALLBACK_COLOR
    if n == 1:
        return colors[0]

    t = float(np.clip(t, 0.0, 1.0))
    scaled_t = t * (n - 1)
    lower_idx = min(int(np.floor(scaled_t)), n - 1)
    upper_idx = min(lower_idx + 1, n - 1)
    local_t = scaled_t - lower_idx

    r1, g1, b1 = hex_to_rgb(colors[lower_idx])
    r2, g2, b2 = hex_to_rgb(colors[upper_idx])

    channels = [
        int(round(c1 + (c2 - c1) * local_t))
        for c1, c2 in ((r1, r2), (g1, g2), (b1, b2))
    ]
    return rgb_to_hex(channels)


def rank_position(index, n):
    """Map a 0-based rank among n items to a ramp position (0.5 for a single item)."""
    if n == 1:
        return 0.5
    return index / (n - 1)


def color_for_age(age, date_min, date_max, ramp, default_color=config.FALLBACK_COLOR):
    """
    Get color for an age within a date range.

    Ages are cal BP, so the oldest bound (date_max) maps to the start of the
    ramp and the youngest bound (date_min) to the end.

    Args:
        age: float or None
        date_min: youngest bound of the range
        date_max: oldest bound of the range
        ramp: ColorRamp or ramp name
        default_color: returned for missing ages

    Returns:
        str: hex color
    """
    if age is None:
        return default_color

    span = date_max - date_min
    if span == 0:
        return interpolate_color(ramp, 0.5)

    t = (date_max - float(age)) / span
    return interpolate_color(ramp, t)


def categorical_color(value, ordered_values, ramp, default_color=config.FALLBACK_COLOR):
    """
    Get color for a label from its position in an ordered selection.

    Colors follow list position, so reordering the selection changes them.

    Args:
        value: label (culture, haplogroup) or None
        ordered_values: sequence of selected labels
        ramp: ColorRamp or ramp name
        default_color: returned when value is absent or not selected

    Returns:
        str: hex color
    """
    if value is None or value == "" or not ordered_values:
        return default_color

    ordered_values = list(ordered_values)
    try:
        idx = ordered_values.index(value)
    except ValueError:
        return default_color

    return interpolate_color(ramp, rank_position(idx, len(ordered_values)))


def split_haplotree_path(path):
    """Split a '>'-delimited haplotree path into stripped, lowercased nodes."""
    if path is None:
        return []
    return [node.strip().lower() for node in str(path).split('>')]


def token_match_color(path, ordered_terms, ramp, default_color=config.FALLBACK_COLOR):
    """
    Get color for a haplotree path from the first term that names one of its nodes.

    Matching is exact per node and case-insensitive; the winning term is the
    first one in term order, regardless of where it appears in the path.

    Args:
        path: '>'-delimited haplotree path or None
        ordered_terms: sequence of search terms
        ramp: ColorRamp or ramp name
        default_color: returned when nothing matches

    Returns:
        str: hex color
    """
    if path is None or path == "" or not ordered_terms:
        return default_color

    nodes = set(split_haplotree_path(path))
    terms = list(ordered_terms)
    for idx, term in enumerate(terms):
        if term.strip().lower() in nodes:
            return interpolate_color(ramp, rank_position(idx, len(terms)))

    return default_color


def get_color_ramp_info():
    """Ramp colors and labels keyed by name, for the config endpoint."""
    return {
        name: {"colors": list(ramp.colors), "label": ramp.label}
        for name, ramp in COLOR_RAMPS.items()
    }
