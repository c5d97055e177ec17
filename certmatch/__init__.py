#!/usr/bin/env python3
"""
certmatch - Certificate eligibility and matching engine.

Public API:
- EligibilityEngine / evaluate / evaluate_batch: Evaluate holdings against job requirements
- CertificateCatalog / default_catalog / CatalogProvider: Certificate types
- Holding / Requirement / RequirementSet: Inputs
- MatchResult: Output
"""

from certmatch.catalog import (
    CatalogProvider,
    CertificateCatalog,
    CertificateCategory,
    CertificateLevel,
    CertificateType,
    default_catalog,
    load_catalog,
)
from certmatch.config_loader import EngineConfig, load_config
from certmatch.engine import EligibilityEngine, evaluate, evaluate_batch, summarize_batch
from certmatch.exceptions import CertMatchError, ConfigurationError, DataQualityWarning
from certmatch.matcher import (
    DisqualifyingFactor,
    Holding,
    HoldingStatus,
    MatchStatus,
    Requirement,
    RequirementPriority,
    RequirementSet,
    generate_requirement_set,
)
from certmatch.scorer import MatchResult, MatchTier

__version__ = "0.1.0"

__all__ = [
    'CatalogProvider',
    'CertMatchError',
    'CertificateCatalog',
    'CertificateCategory',
    'CertificateLevel',
    'CertificateType',
    'ConfigurationError',
    'DataQualityWarning',
    'DisqualifyingFactor',
    'EligibilityEngine',
    'EngineConfig',
    'Holding',
    'HoldingStatus',
    'MatchResult',
    'MatchStatus',
    'MatchTier',
    'Requirement',
    'RequirementPriority',
    'RequirementSet',
    'default_catalog',
    'evaluate',
    'evaluate_batch',
    'generate_requirement_set',
    'load_catalog',
    'load_config',
    'summarize_batch',
]
