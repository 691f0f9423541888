"""
UI support for ArcheoMap.

This module contains the piecewise scale behind the date range slider.
"""

__all__ = ['slider_scale']
