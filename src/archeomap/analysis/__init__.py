"""
Analysis components for ArcheoMap.

This module contains date statistics, cascading filter option discovery and
map geometry helpers.
"""

__all__ = ['statistics', 'geometry']
