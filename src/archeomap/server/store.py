"""
Dataset holder for the map server.

One SampleStore is created per Flask app and kept in
``app.extensions["archeomap"]``; request handlers read the dataset from it
instead of from module-level globals.
"""

import logging
import threading

from ..config import MapSettings
from ..core.exceptions import DataSourceError
from ..preprocessing.data_processing import load_samples

logger = logging.getLogger(__name__)


class SampleStore:
    """
    Lazily loaded, read-only sample dataset.

    Args:
        data_path (str, optional): file to load samples from
        samples (list, optional): preloaded samples (skips file loading)
        settings (MapSettings, optional): map display settings
        loader (callable, optional): path -> list of Sample
    """

    def __init__(self, data_path=None, samples=None, settings=None, loader=load_samples):
        self.data_path = data_path
        self.settings = settings or MapSettings()
        self._loader = loader
        self._samples = list(samples) if samples is not None else None
        self._lock = threading.Lock()

    @property
    def data_source(self):
        if self.data_path:
            return self.data_path
        return "<in-memory>" if self._samples is not None else None

    @property
    def is_cached(self):
        return self._samples is not None

    def get_samples(self):
        """
        Return the dataset, loading it on first use.

        The dataset is fully loaded before any caller sees it.

        Raises:
            DataSourceError: if no source is configured or loading fails
        """
        if self._samples is not None:
            return self._samples
        with self._lock:
            if self._samples is None:
                if not self.data_path:
                    raise DataSourceError("No data source configured")
                self._samples = self._loader(self.data_path)
                logger.info("Cached %d samples from %s", len(self._samples), self.data_path)
        return self._samples

    def clear(self):
        """Drop the cached dataset; the next access reloads it from data_path."""
        if not self.data_path:
            return
        with self._lock:
            self._samples = None
