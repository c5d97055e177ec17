#!/usr/bin/env python3
"""
Scoring Models - Data structures for match results.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Tuple

from certmatch.matcher.models import (
    DisqualifyingFactor,
    MatchDetail,
    RequirementPriority,
)
from certmatch.utils import ensure_utc


class MatchTier(Enum):
    """Qualitative bucket for an overall score."""
    PERFECT = "perfect"
    EXCELLENT = "excellent"
    GOOD = "good"
    PARTIAL = "partial"
    INSUFFICIENT = "insufficient"
    UNQUALIFIED = "unqualified"

    @property
    def min_score(self) -> int:
        return _TIER_MIN_SCORE[self]

    @classmethod
    def from_score(cls, score: int) -> "MatchTier":
        for tier in _TIERS_DESCENDING:
            if score >= tier.min_score:
                return tier
        return cls.UNQUALIFIED


_TIER_MIN_SCORE: Dict[MatchTier, int] = {
    MatchTier.PERFECT: 95,
    MatchTier.EXCELLENT: 85,
    MatchTier.GOOD: 70,
    MatchTier.PARTIAL: 50,
    MatchTier.INSUFFICIENT: 25,
    MatchTier.UNQUALIFIED: 0,
}

_TIERS_DESCENDING = sorted(_TIER_MIN_SCORE, key=lambda t: -_TIER_MIN_SCORE[t])


@dataclass(frozen=True)
class CertificateGap:
    """A missing or expired requirement, with the score resolving it would recover."""
    certificate_type_id: str
    priority: RequirementPriority
    impact_score: int
    reason: str
    requirement_id: str = ""
    is_expired: bool = False
    recommendation: Optional[str] = None
    estimated_time_to_obtain: Optional[timedelta] = None
    estimated_cost: Optional[float] = None
    training_providers: Tuple[str, ...] = ()
    required_by: Optional[datetime] = None

    @property
    def urgency_level(self) -> str:
        if self.priority == RequirementPriority.MANDATORY:
            return "critical"
        if self.impact_score >= 75:
            return "high"
        if self.impact_score >= 50:
            return "medium"
        return "low"


@dataclass(frozen=True)
class CertificateRecommendation:
    """A certificate worth obtaining, ranked by urgency."""
    certificate_type_id: str
    priority: RequirementPriority
    potential_score_improvement: int
    urgency_score: int
    reason: str = ""
    prerequisites: Tuple[str, ...] = ()
    estimated_time_to_obtain: Optional[timedelta] = None
    estimated_cost: Optional[float] = None
    training_providers: Tuple[str, ...] = ()

    @property
    def category(self) -> str:
        if self.priority == RequirementPriority.MANDATORY:
            return "mandatory"
        if self.potential_score_improvement >= 20:
            return "strongly_recommended"
        if self.potential_score_improvement >= 10:
            return "recommended"
        return "optional"


@dataclass(frozen=True)
class MatchResult:
    """Immutable outcome of evaluating one worker against one job."""
    job_id: str
    owner_id: str
    overall_score: int
    match_tier: MatchTier
    is_eligible: bool
    calculated_at: datetime
    match_details: Tuple[MatchDetail, ...] = ()
    gaps: Tuple[CertificateGap, ...] = ()
    recommendations: Tuple[CertificateRecommendation, ...] = ()
    mandatory_met: int = 0
    mandatory_total: int = 0
    preferred_met: int = 0
    preferred_total: int = 0
    valid_for: Optional[timedelta] = None
    disqualifications: Tuple[DisqualifyingFactor, ...] = ()
    excluded_holdings: Tuple[str, ...] = ()
    excluded_requirements: Tuple[str, ...] = ()

    @property
    def critical_gaps(self) -> List[CertificateGap]:
        return [g for g in self.gaps if g.priority == RequirementPriority.MANDATORY]

    @property
    def needs_attention(self) -> bool:
        """True when something should be acted on: gaps or a matched certificate nearing expiry."""
        return bool(self.gaps) or any(d.expiring_soon for d in self.match_details)

    def is_valid(self, now: datetime) -> bool:
        """Whether the result may still be used at `now` without recomputing."""
        if self.valid_for is None:
            return True
        return ensure_utc(now) < self.calculated_at + self.valid_for

    @property
    def summary(self) -> str:
        if self.is_eligible:
            text = f"Eligible ({self.match_tier.value}, score {self.overall_score})"
        else:
            text = f"Not eligible ({self.match_tier.value}, score {self.overall_score})"
        if self.mandatory_total:
            text += f"; mandatory {self.mandatory_met}/{self.mandatory_total}"
        if self.preferred_total:
            text += f"; preferred {self.preferred_met}/{self.preferred_total}"
        if self.disqualifications:
            text += "; disqualified by " + ", ".join(d.value for d in self.disqualifications)
        return text


@dataclass
class BatchMatchSummary:
    """Aggregate view over many MatchResults."""
    total: int = 0
    eligible_count: int = 0
    average_score: float = 0.0
    best_match: Optional[MatchResult] = None
    tier_distribution: Dict[str, int] = field(default_factory=dict)
