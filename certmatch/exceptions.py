#!/usr/bin/env python3
"""
Custom exceptions for the eligibility engine.
"""

from typing import Optional


class CertMatchError(Exception):
    """Base exception for eligibility engine errors."""
    pass


class ConfigurationError(CertMatchError):
    """Raised when inputs reference catalog data that does not exist or the
    catalog/config itself is invalid. Fatal to the evaluation call."""
    pass


class DataQualityWarning(CertMatchError):
    """Raised when a holding carries unusable data (e.g. expiry not after issue).

    The engine recovers from this locally by excluding the holding.
    """

    def __init__(self, message: str, holding_id: Optional[str] = None):
        super().__init__(message)
        self.holding_id = holding_id
