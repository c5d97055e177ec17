#!/usr/bin/env python3
"""
Matcher Models - Holdings, requirements and per-requirement match details.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from certmatch.exceptions import DataQualityWarning
from certmatch.utils import ensure_utc

DEFAULT_EXPIRING_SOON_DAYS = 180


class HoldingStatus(Enum):
    """Lifecycle status of a holding, always derived, never stored."""
    PENDING = "pending"
    VALID = "valid"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"

    @property
    def is_usable(self) -> bool:
        return self in (HoldingStatus.VALID, HoldingStatus.EXPIRING_SOON)

    @property
    def needs_attention(self) -> bool:
        return self in (HoldingStatus.EXPIRING_SOON, HoldingStatus.EXPIRED)


@dataclass(frozen=True)
class Holding:
    """A worker's instance of a catalog certificate type."""
    id: str
    owner_id: str
    certificate_type_id: str
    issue_date: Union[date, datetime]
    expiry_date: Union[date, datetime]
    certificate_number: str = ""
    verified: bool = False
    # Tenure with this certificate, supplied by the caller
    experience_months: Optional[int] = None

    def has_valid_dates(self) -> bool:
        issue = ensure_utc(self.issue_date)
        expiry = ensure_utc(self.expiry_date)
        return issue is not None and expiry is not None and expiry > issue

    def validate(self) -> None:
        """Raise DataQualityWarning if the holding cannot take part in matching."""
        if self.issue_date is None or self.expiry_date is None:
            raise DataQualityWarning(f"Holding {self.id} is missing issue or expiry date", self.id)
        try:
            dates_ok = self.has_valid_dates()
        except (TypeError, ValueError) as e:
            raise DataQualityWarning(f"Holding {self.id} has unparseable dates: {e}", self.id) from e
        if not dates_ok:
            raise DataQualityWarning(
                f"Holding {self.id} expires ({self.expiry_date}) on or before issue ({self.issue_date})",
                self.id,
            )

    def lifecycle_status(
        self,
        now: datetime,
        expiring_soon_days: int = DEFAULT_EXPIRING_SOON_DAYS
    ) -> HoldingStatus:
        """
        Derive lifecycle status at `now`.

        Unverified holdings stay pending whatever their dates; otherwise
        expired at or after expiry, expiring soon inside the window, else valid.
        """
        if not self.verified:
            return HoldingStatus.PENDING
        now = ensure_utc(now)
        expiry = ensure_utc(self.expiry_date)
        if now >= expiry:
            return HoldingStatus.EXPIRED
        if expiry - now <= timedelta(days=expiring_soon_days):
            return HoldingStatus.EXPIRING_SOON
        return HoldingStatus.VALID

    def days_until_expiry(self, now: datetime) -> int:
        """Whole days until expiry (negative once expired)."""
        delta = ensure_utc(self.expiry_date) - ensure_utc(now)
        return delta.days


class RequirementPriority(Enum):
    MANDATORY = "mandatory"
    PREFERRED = "preferred"
    ADVANTAGEOUS = "advantageous"
    OPTIONAL = "optional"

    @property
    def weight(self) -> int:
        return _PRIORITY_WEIGHT[self]

    @property
    def display_name(self) -> str:
        return _PRIORITY_DISPLAY[self]


_PRIORITY_WEIGHT: Dict[RequirementPriority, int] = {
    RequirementPriority.MANDATORY: 100,
    RequirementPriority.PREFERRED: 75,
    RequirementPriority.ADVANTAGEOUS: 50,
    RequirementPriority.OPTIONAL: 25,
}

_PRIORITY_DISPLAY: Dict[RequirementPriority, str] = {
    RequirementPriority.MANDATORY: "Mandatory",
    RequirementPriority.PREFERRED: "Preferred",
    RequirementPriority.ADVANTAGEOUS: "Advantageous",
    RequirementPriority.OPTIONAL: "Optional",
}


def highest_priority(priorities: List[RequirementPriority]) -> Optional[RequirementPriority]:
    if not priorities:
        return None
    return max(priorities, key=lambda p: p.weight)


class DisqualifyingFactor(Enum):
    """Hard-fail conditions a job can opt into."""
    EXPIRED_CERTIFICATE = "expired_certificate"
    EXPIRING_MANDATORY = "expiring_mandatory"
    MISSING_PREFERRED = "missing_preferred"
    UNVERIFIED_HOLDINGS = "unverified_holdings"


@dataclass(frozen=True)
class Requirement:
    """One line item of a job's certificate needs."""
    certificate_type_id: str
    priority: RequirementPriority = RequirementPriority.MANDATORY
    accept_equivalents: bool = True
    accept_higher_levels: bool = True
    min_experience_months: Optional[int] = None
    required_by: Optional[Union[date, datetime]] = None
    description: Optional[str] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class RequirementSet:
    """A job's full certificate policy."""
    job_id: str
    requirements: Tuple[Requirement, ...] = ()
    allow_partial_match: bool = True
    minimum_match_score: int = 70
    disqualifying_factors: FrozenSet[DisqualifyingFactor] = field(default_factory=frozenset)

    def __post_init__(self):
        # Accept lists/sets from callers but keep the value hashable and immutable
        object.__setattr__(self, "requirements", tuple(self.requirements))
        object.__setattr__(self, "disqualifying_factors", frozenset(self.disqualifying_factors))
        if not 0 <= self.minimum_match_score <= 100:
            raise ValueError(f"minimum_match_score must be in [0, 100], got {self.minimum_match_score}")

    def requirement_id(self, index: int) -> str:
        requirement = self.requirements[index]
        if requirement.id:
            return requirement.id
        return f"{self.job_id}:{index}:{requirement.certificate_type_id}"

    def keyed_requirements(self) -> List[Tuple[str, Requirement]]:
        return [(self.requirement_id(i), r) for i, r in enumerate(self.requirements)]

    @property
    def total_weight(self) -> int:
        return sum(r.priority.weight for r in self.requirements)


class MatchStatus(Enum):
    EXACT_MATCH = "exact_match"
    EQUIVALENT_MATCH = "equivalent_match"
    HIGHER_LEVEL_MATCH = "higher_level_match"
    PARTIAL_MATCH = "partial_match"
    EXPIRED = "expired"
    MISSING = "missing"

    @property
    def weight(self) -> int:
        """Percentage of the requirement's priority weight this status earns."""
        return _STATUS_WEIGHT[self]

    @property
    def is_met(self) -> bool:
        return self in (
            MatchStatus.EXACT_MATCH,
            MatchStatus.EQUIVALENT_MATCH,
            MatchStatus.HIGHER_LEVEL_MATCH,
        )

    @property
    def is_gap(self) -> bool:
        return self in (MatchStatus.MISSING, MatchStatus.EXPIRED)

    def downgraded(self) -> "MatchStatus":
        """One tier lower, used for insufficient experience."""
        return _DOWNGRADE.get(self, self)


_STATUS_WEIGHT: Dict[MatchStatus, int] = {
    MatchStatus.EXACT_MATCH: 100,
    MatchStatus.EQUIVALENT_MATCH: 95,
    MatchStatus.HIGHER_LEVEL_MATCH: 90,
    MatchStatus.PARTIAL_MATCH: 70,
    MatchStatus.EXPIRED: 30,
    MatchStatus.MISSING: 0,
}

_DOWNGRADE: Dict[MatchStatus, MatchStatus] = {
    MatchStatus.EXACT_MATCH: MatchStatus.EQUIVALENT_MATCH,
    MatchStatus.EQUIVALENT_MATCH: MatchStatus.HIGHER_LEVEL_MATCH,
    MatchStatus.HIGHER_LEVEL_MATCH: MatchStatus.PARTIAL_MATCH,
}


@dataclass(frozen=True)
class MatchDetail:
    """Best resolution of one requirement against a worker's holdings."""
    requirement_id: str
    certificate_type_id: str
    priority: RequirementPriority
    match_status: MatchStatus
    score_contribution: int
    reason: str
    matched_holding_id: Optional[str] = None
    days_until_expiry: Optional[int] = None
    required_by: Optional[datetime] = None
    # Matched holding is usable but inside the expiring-soon window
    expiring_soon: bool = False
