#!/usr/bin/env python3
"""
Catalog Module - Recognized certificate types.

- models.py: CertificateType, CertificateLevel, CertificateCategory
- registry.py: Immutable CertificateCatalog and YAML loading
- defaults.py: Built-in Dutch security catalog
- provider.py: Atomic catalog swapping for hot reloads
"""

from certmatch.catalog.models import CertificateCategory, CertificateLevel, CertificateType
from certmatch.catalog.registry import CertificateCatalog, load_catalog
from certmatch.catalog.defaults import DEFAULT_CERTIFICATES, default_catalog
from certmatch.catalog.provider import CatalogProvider

__all__ = [
    'CertificateCategory',
    'CertificateLevel',
    'CertificateType',
    'CertificateCatalog',
    'load_catalog',
    'DEFAULT_CERTIFICATES',
    'default_catalog',
    'CatalogProvider',
]
