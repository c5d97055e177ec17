#!/usr/bin/env python3
"""
Certificate Catalog - Immutable lookup of recognized certificate types.

The catalog is an explicit value handed to every evaluation; there is no
module-level singleton. Build one from the default table, from config
entries, or from a YAML catalog file.
"""

import logging
import os
from datetime import timedelta
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from certmatch.catalog.models import (
    CertificateCategory,
    CertificateLevel,
    CertificateType,
    parse_category,
    parse_level,
)
from certmatch.config_loader import CatalogEntryConfig, CatalogFileConfig
from certmatch.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class CertificateCatalog:
    """Read-only, ordered collection of CertificateType keyed by id."""

    def __init__(self, certificate_types: Iterable[CertificateType]):
        ordered: List[CertificateType] = []
        by_id: Dict[str, CertificateType] = {}
        for cert_type in certificate_types:
            if cert_type.id in by_id:
                logger.error(f"Duplicate certificate type id in catalog: {cert_type.id}")
                raise ConfigurationError(f"Duplicate certificate type id: {cert_type.id}")
            by_id[cert_type.id] = cert_type
            ordered.append(cert_type)
        self._types: Tuple[CertificateType, ...] = tuple(ordered)
        self._by_id = by_id

    def __iter__(self) -> Iterator[CertificateType]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, certificate_type_id: object) -> bool:
        return certificate_type_id in self._by_id

    def __repr__(self) -> str:
        return f"CertificateCatalog({len(self)} types)"

    def all(self) -> List[CertificateType]:
        return list(self._types)

    def ids(self) -> List[str]:
        return [t.id for t in self._types]

    def get(self, certificate_type_id: str) -> Optional[CertificateType]:
        return self._by_id.get(certificate_type_id)

    def require(self, certificate_type_id: str) -> CertificateType:
        """Like get(), but an unknown id is a ConfigurationError."""
        cert_type = self._by_id.get(certificate_type_id)
        if cert_type is None:
            raise ConfigurationError(f"Unknown certificate type id: {certificate_type_id}")
        return cert_type

    def find_by_name(self, text: str) -> Optional[CertificateType]:
        """
        Find the first catalog entry whose name matches `text`.

        Case-insensitive substring match against display names and
        equivalent names; first match in catalog order wins.
        """
        for cert_type in self._types:
            if cert_type.matches_name(text):
                return cert_type
        return None

    def by_category(self, category: CertificateCategory) -> List[CertificateType]:
        return [t for t in self._types if t.category == category]

    def by_level(self, level: CertificateLevel) -> List[CertificateType]:
        return [t for t in self._types if t.level == level]

    def mandatory_baseline(self) -> List[CertificateType]:
        return [t for t in self._types if t.is_mandatory_baseline]

    @classmethod
    def from_entries(cls, entries: Iterable[CatalogEntryConfig]) -> "CertificateCatalog":
        """Build a catalog from validated config entries."""
        return cls(certificate_type_from_entry(entry) for entry in entries)


def certificate_type_from_entry(entry: CatalogEntryConfig) -> CertificateType:
    return CertificateType(
        id=entry.id,
        display_name=entry.display_name,
        level=parse_level(entry.level),
        category=parse_category(entry.category),
        validity_period=timedelta(days=entry.validity_days),
        equivalent_names=tuple(entry.equivalent_names),
        match_weight=entry.match_weight,
        is_mandatory_baseline=entry.is_mandatory_baseline,
        prerequisites=tuple(entry.prerequisites),
        estimated_days_to_obtain=entry.estimated_days_to_obtain,
        estimated_cost=entry.estimated_cost,
        training_providers=tuple(entry.training_providers),
    )


def load_catalog(catalog_path: str) -> CertificateCatalog:
    """
    Load a catalog from a YAML file with a top-level `certificates:` list.

    Args:
        catalog_path: Path to the YAML catalog

    Returns:
        CertificateCatalog in file order

    Raises:
        ConfigurationError: if the file is missing or its content is invalid
    """
    if not os.path.exists(catalog_path):
        raise ConfigurationError(f"Catalog file not found: {catalog_path}")

    with open(catalog_path, "r") as f:
        data = yaml.safe_load(f) or {}

    try:
        catalog_file = CatalogFileConfig(**data)
    except ValidationError as e:
        logger.error(f"Invalid catalog file {catalog_path}: {e}")
        raise ConfigurationError(f"Invalid catalog file {catalog_path}: {e}") from e

    catalog = CertificateCatalog.from_entries(catalog_file.certificates)
    logger.info(f"Loaded {len(catalog)} certificate types from {catalog_path}")
    return catalog
