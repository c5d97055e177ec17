#!/usr/bin/env python3
"""
Catalog Models - Certificate types, levels and categories.

Levels and categories are plain enums; the data each variant carries
(hierarchy level) lives in lookup tables keyed by member.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Dict, Optional, Tuple

from certmatch.exceptions import ConfigurationError
from certmatch.utils import normalize_name


class CertificateLevel(Enum):
    """Ordered certificate levels (entry < basic < advanced < expert)."""
    ENTRY = "entry"
    BASIC = "basic"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def hierarchy_level(self) -> int:
        return _LEVEL_HIERARCHY[self]

    def covers(self, other: "CertificateLevel") -> bool:
        """True if this level is at least as high as `other`."""
        return self.hierarchy_level >= other.hierarchy_level


# The gap at 3 leaves room for an intermediate level without renumbering
_LEVEL_HIERARCHY: Dict[CertificateLevel, int] = {
    CertificateLevel.ENTRY: 1,
    CertificateLevel.BASIC: 2,
    CertificateLevel.ADVANCED: 4,
    CertificateLevel.EXPERT: 5,
}


class CertificateCategory(Enum):
    SECURITY = "security"
    SAFETY = "safety"
    DRIVING = "driving"
    FIRST_AID = "first_aid"


# Explicit (holder, required) pairs that cover each other even though the
# catalog does not model them as a level pair in one category.
SPECIAL_COVERAGE: Tuple[Tuple[str, str], ...] = (
    ("wpbr_b", "wpbr_a"),
)


def parse_level(value) -> CertificateLevel:
    if isinstance(value, CertificateLevel):
        return value
    try:
        return CertificateLevel(str(value).strip().lower())
    except ValueError:
        raise ConfigurationError(f"Unknown certificate level: {value!r}")


def parse_category(value) -> CertificateCategory:
    if isinstance(value, CertificateCategory):
        return value
    normalized = str(value).strip().lower().replace(" ", "_")
    if normalized == "firstaid":
        normalized = "first_aid"
    try:
        return CertificateCategory(normalized)
    except ValueError:
        raise ConfigurationError(f"Unknown certificate category: {value!r}")


@dataclass(frozen=True)
class CertificateType:
    """Immutable catalog entry describing one recognized qualification."""
    id: str
    display_name: str
    level: CertificateLevel
    category: CertificateCategory
    validity_period: timedelta
    equivalent_names: Tuple[str, ...] = ()
    match_weight: int = 50
    is_mandatory_baseline: bool = False
    prerequisites: Tuple[str, ...] = ()
    estimated_days_to_obtain: Optional[int] = None
    estimated_cost: Optional[float] = None
    training_providers: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.id:
            raise ConfigurationError("Certificate type id must not be empty")
        if not 0 <= self.match_weight <= 100:
            raise ConfigurationError(
                f"match_weight for {self.id} must be in [0, 100], got {self.match_weight}"
            )
        if self.validity_period <= timedelta(0):
            raise ConfigurationError(f"validity_period for {self.id} must be positive")

    def covers(self, other: "CertificateType") -> bool:
        """
        Whether holding this type satisfies a requirement for `other`.

        Same category and a hierarchy level at least as high, or one of the
        explicit SPECIAL_COVERAGE pairs.
        """
        if self.id == other.id:
            return True
        if (self.id, other.id) in SPECIAL_COVERAGE:
            return True
        return self.category == other.category and self.level.covers(other.level)

    def matches_name(self, text: str) -> bool:
        """
        Case-insensitive fuzzy name check.

        Matches when the display name contains the text or the text contains
        the display name, or when any equivalent name contains the text.
        Substring containment can over-match short names; callers that need
        certainty should compare ids.
        """
        search = normalize_name(text)
        if not search:
            return False
        name = normalize_name(self.display_name)
        if search in name or name in search:
            return True
        return any(search in normalize_name(equiv) for equiv in self.equivalent_names)

    def is_equivalent_to(self, other: "CertificateType") -> bool:
        """Name-based equivalence between two distinct catalog entries."""
        if self.id == other.id:
            return True
        if self.matches_name(other.display_name):
            return True
        return any(self.matches_name(name) for name in other.equivalent_names)
