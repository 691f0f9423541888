"""
Data loading and normalization for ArcheoMap.
"""

__all__ = ['data_processing']
