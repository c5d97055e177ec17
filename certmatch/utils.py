#!/usr/bin/env python3
"""
Shared helpers: UTC normalisation, half-up rounding, name normalisation.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional, Union

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

DateLike = Union[datetime, date, str]


def ensure_utc(value: Optional[DateLike]) -> Optional[datetime]:
    """Normalise a date, datetime or ISO-8601 string to an aware UTC datetime.

    Naive datetimes are assumed to already be UTC. Plain dates become
    midnight UTC.

    Args:
        value: The value to normalise (None passes through)

    Returns:
        Timezone-aware datetime in UTC, or None
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = date_parser.isoparse(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    raise TypeError(f"Unsupported date value: {value!r}")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def round_half_up(numerator: int, denominator: int) -> int:
    """Round a non-negative rational numerator/denominator half-up to an int.

    Python's round() uses banker's rounding, which would turn 47.5 into 48
    but 22.5 into 22.
    """
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return (2 * numerator + denominator) // (2 * denominator)


def clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


def normalize_name(text: str) -> str:
    """Lowercase and collapse whitespace for name comparisons."""
    return " ".join(str(text).lower().split())
