"""
Core query engine for ArcheoMap.

This module contains the record and request types, the per-dimension filter
predicates, and the query orchestration that ties filtering, metadata and
coloring together.
"""

__all__ = ['types', 'exceptions', 'filters', 'query']
