"""
Visualization components for ArcheoMap.

This module contains the color ramps, color assignment helpers and legends.
"""

__all__ = ['color_system', 'legend_manager']
