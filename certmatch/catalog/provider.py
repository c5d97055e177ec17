#!/usr/bin/env python3
"""
Catalog Provider - Holds the current catalog and swaps it atomically.

Evaluations take one reference via current() and keep using it; a reload
builds a complete new catalog first and only then replaces the reference,
so no evaluation ever sees a half-built catalog.
"""

import logging
import threading
from typing import Optional

from certmatch.catalog.defaults import default_catalog
from certmatch.catalog.registry import CertificateCatalog, load_catalog
from certmatch.config_loader import CatalogConfig

logger = logging.getLogger(__name__)


class CatalogProvider:
    """Thread-safe holder for the process-wide current catalog."""

    def __init__(self, catalog: Optional[CertificateCatalog] = None):
        self._lock = threading.Lock()
        self._catalog = catalog if catalog is not None else default_catalog()
        self._version = 1

    @classmethod
    def from_config(cls, config: CatalogConfig) -> "CatalogProvider":
        """Build a provider from the catalog section of EngineConfig."""
        if config.catalog_file:
            return cls(load_catalog(config.catalog_file))
        return cls(default_catalog())

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def current(self) -> CertificateCatalog:
        with self._lock:
            return self._catalog

    def swap(self, catalog: CertificateCatalog) -> CertificateCatalog:
        """
        Replace the current catalog.

        Returns:
            The catalog that was replaced
        """
        with self._lock:
            previous = self._catalog
            self._catalog = catalog
            self._version += 1
            version = self._version
        logger.info(f"Catalog swapped to version {version} ({len(catalog)} types)")
        return previous

    def reload_from_file(self, catalog_path: str) -> CertificateCatalog:
        """Load a catalog file and swap it in. A failed load leaves the current catalog in place."""
        catalog = load_catalog(catalog_path)
        self.swap(catalog)
        return catalog
