"""
ArcheoMap: filtering, cascading filter options and coloring for
archaeogenetic sample maps.

This package provides the query engine behind an interactive map of ancient
DNA samples, plus a small Flask API that serves it.
"""

__version__ = "0.1.0"
__author__ = "ArcheoMap Team"

__all__ = ['config', 'core', 'analysis', 'visualization', 'preprocessing', 'ui', 'server']
