"""
Configuration module for ArcheoMap.

This module contains constants, default parameters, and configuration
settings used throughout the query engine and the map server. It holds no
per-request state; the hosting application passes a MapSettings instance
where it needs overrides.
"""

from dataclasses import dataclass

# Date range defaults (cal BP) used when no dated samples exist
DEFAULT_MIN_AGE = 0.0
DEFAULT_MAX_AGE = 50000.0

# Marker defaults
DEFAULT_POINT_COLOR = "#e41a1c"
DEFAULT_POINT_RADIUS = 4

# Returned for unknown color ramps and unmatched categorical values
FALLBACK_COLOR = "#808080"

# Color ramp used for every colorable dimension unless the request overrides it
DEFAULT_COLOR_RAMP = "viridis"

# Range slider geometry
# The slider spans [SLIDER_MIN, SLIDER_MAX]; the two breaks split it into
# 5% / 90% / 5% segments for [min, p2], [p2, p98] and [p98, max].
SLIDER_MIN = 0
SLIDER_MAX = 1000
SLIDER_LEFT_BREAK = 50
SLIDER_RIGHT_BREAK = 950

# Percentiles used for slider compression
LOWER_PERCENTILE = 0.02
UPPER_PERCENTILE = 0.98

# Map display defaults
DEFAULT_PADDING = 5.0  # degrees around the data bounds
DEFAULT_ZOOM = 6
DEFAULT_TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
DEFAULT_TILE_ATTRIBUTION = "© OpenStreetMap contributors"

# Server defaults
DEFAULT_PORT = 8000

# Named tile layers (name, url, attribution)
TILE_PRESETS = {
    'osm': (
        "OpenStreetMap",
        "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
        "© OpenStreetMap contributors",
    ),
    'topo': (
        "OpenTopoMap",
        "https://{s}.tile.opentopomap.org/{z}/{x}/{y}.png",
        "© OpenStreetMap contributors, © OpenTopoMap",
    ),
    'humanitarian': (
        "Humanitarian",
        "https://{s}.tile.openstreetmap.fr/hot/{z}/{x}/{y}.png",
        "© OpenStreetMap contributors",
    ),
}


@dataclass(frozen=True)
class MapSettings:
    """Display settings for the hosted map."""
    padding: float = DEFAULT_PADDING
    initial_zoom: int = DEFAULT_ZOOM
    point_color: str = DEFAULT_POINT_COLOR
    point_radius: int = DEFAULT_POINT_RADIUS
    tile_url: str = DEFAULT_TILE_URL
    tile_attribution: str = DEFAULT_TILE_ATTRIBUTION

    @classmethod
    def from_preset(cls, preset, **overrides):
        """
        Create settings from a named tile preset, falling back to OpenStreetMap.

        Args:
            preset (str): Key of TILE_PRESETS ('osm', 'topo', 'humanitarian')
            **overrides: Any other MapSettings field

        Returns:
            MapSettings: settings using the preset's tile layer
        """
        _, url, attribution = TILE_PRESETS.get(preset, TILE_PRESETS['osm'])
        overrides.setdefault('tile_url', url)
        overrides.setdefault('tile_attribution', attribution)
        return cls(**overrides)


def slider_config():
    """Slider geometry as served to the frontend."""
    return {
        "min": SLIDER_MIN,
        "max": SLIDER_MAX,
        "segments": {
            "leftBreak": SLIDER_LEFT_BREAK,
            "rightBreak": SLIDER_RIGHT_BREAK,
        },
    }
