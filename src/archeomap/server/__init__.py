"""
Flask API serving the ArcheoMap query engine.
"""

__all__ = ['app', 'store']
