"""
Spatial helpers for positioning the initial map view.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class MapBounds:
    """Geographic bounding box in degrees."""
    min_lon: float
    max_lon: float
    min_lat: float
    max_lat: float


WORLD_BOUNDS = MapBounds(-180.0, 180.0, -90.0, 90.0)


def calculate_bounds(samples, padding):
    """
    Compute the bounding box of the sample positions.

    Args:
        samples: sequence of Sample
        padding (float): degrees added on every side

    Returns:
        MapBounds: padded bounds, or the whole world if there are no samples
    """
    if len(samples) == 0:
        return WORLD_BOUNDS

    positions = np.array([s.position for s in samples], dtype=float)  # shape (N, 2)
    lons, lats = positions[:, 0], positions[:, 1]

    return MapBounds(
        float(lons.min() - padding),
        float(lons.max() + padding),
        float(lats.min() - padding),
        float(lats.max() + padding),
    )


def calculate_center(bounds):
    """Return (center_lat, center_lon) of a bounding box."""
    center_lat = (bounds.min_lat + bounds.max_lat) / 2
    center_lon = (bounds.min_lon + bounds.max_lon) / 2
    return (center_lat, center_lon)


# (span threshold in degrees, zoom level), widest first
_ZOOM_STEPS = [(100, 2), (50, 3), (20, 4), (10, 5), (5, 6), (2, 7), (1, 8)]


def estimate_zoom_level(bounds):
    """
    Rough zoom level (1-18) that fits the larger of the two spans.
    """
    max_span = max(bounds.max_lat - bounds.min_lat, bounds.max_lon - bounds.min_lon)
    for threshold, zoom in _ZOOM_STEPS:
        if max_span > threshold:
            return zoom
    return 10
