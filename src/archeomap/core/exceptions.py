"""
Exception types raised by ArcheoMap.
"""


class ArcheoMapError(Exception):
    """Base class for all ArcheoMap errors."""


class RequestError(ArcheoMapError, ValueError):
    """A filter request payload is structurally invalid (e.g. a non-numeric date bound)."""


class DataSourceError(ArcheoMapError):
    """The sample data source is not configured, missing, or unreadable."""
