#!/usr/bin/env python3
"""
Scoring Engine - Aggregate match details into a score and eligibility verdict.

overall_score = round(100 * sum(contribution) / sum(priority weight)), half-up.
An empty requirement set scores 100.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from certmatch.matcher.models import (
    DisqualifyingFactor,
    MatchDetail,
    MatchStatus,
    RequirementPriority,
    RequirementSet,
)
from certmatch.scorer.models import MatchTier
from certmatch.utils import clamp, round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreOutcome:
    overall_score: int
    match_tier: MatchTier
    is_eligible: bool
    mandatory_met: int
    mandatory_total: int
    preferred_met: int
    preferred_total: int
    disqualifications: Tuple[DisqualifyingFactor, ...] = ()


def calculate_overall_score(details: Sequence[MatchDetail]) -> int:
    total_weight = sum(d.priority.weight for d in details)
    if total_weight == 0:
        return 100
    earned = sum(d.score_contribution for d in details)
    return clamp(round_half_up(100 * earned, total_weight))


def count_met(details: Sequence[MatchDetail], priority: RequirementPriority) -> Tuple[int, int]:
    """
    Count (met, total) for one priority.

    Only exact, equivalent and higher-level matches count as met; partial
    and expired matches earn points but do not satisfy the requirement.
    """
    relevant = [d for d in details if d.priority == priority]
    met = len([d for d in relevant if d.match_status.is_met])
    return met, len(relevant)


def triggered_disqualifications(
    details: Sequence[MatchDetail],
    requirement_set: RequirementSet,
    pending_holdings: int = 0
) -> Tuple[DisqualifyingFactor, ...]:
    """
    Return the job's disqualifying factors that apply, in declaration order.

    Args:
        details: Resolved match details
        requirement_set: Job policy naming the factors that apply
        pending_holdings: Number of the worker's holdings still awaiting verification
    """
    triggered: List[DisqualifyingFactor] = []
    for factor in DisqualifyingFactor:
        if factor not in requirement_set.disqualifying_factors:
            continue
        if factor == DisqualifyingFactor.EXPIRED_CERTIFICATE:
            hit = any(d.match_status == MatchStatus.EXPIRED for d in details)
        elif factor == DisqualifyingFactor.EXPIRING_MANDATORY:
            hit = any(
                d.priority == RequirementPriority.MANDATORY and d.expiring_soon
                for d in details
            )
        elif factor == DisqualifyingFactor.MISSING_PREFERRED:
            hit = any(
                d.priority == RequirementPriority.PREFERRED and d.match_status == MatchStatus.MISSING
                for d in details
            )
        else:
            hit = pending_holdings > 0
        if hit:
            triggered.append(factor)
    return tuple(triggered)


def is_eligible(
    overall_score: int,
    mandatory_met: int,
    mandatory_total: int,
    requirement_set: RequirementSet,
    disqualifications: Sequence[DisqualifyingFactor] = ()
) -> bool:
    """
    Unmet mandatory requirements always disqualify. The score threshold is an
    extra gate only when partial matches are allowed.
    """
    if mandatory_met != mandatory_total:
        return False
    if disqualifications:
        return False
    if requirement_set.allow_partial_match:
        return overall_score >= requirement_set.minimum_match_score
    return True


def score_details(
    details: Sequence[MatchDetail],
    requirement_set: RequirementSet,
    pending_holdings: int = 0
) -> ScoreOutcome:
    """
    Score resolved details against the job's policy.

    Args:
        details: One MatchDetail per (kept) requirement
        requirement_set: Job policy (threshold, partial matching, disqualifiers)
        pending_holdings: Unverified holdings count, for the unverified disqualifier

    Returns:
        ScoreOutcome
    """
    overall = calculate_overall_score(details)
    mandatory_met, mandatory_total = count_met(details, RequirementPriority.MANDATORY)
    preferred_met, preferred_total = count_met(details, RequirementPriority.PREFERRED)
    disqualifications = triggered_disqualifications(details, requirement_set, pending_holdings)
    eligible = is_eligible(overall, mandatory_met, mandatory_total, requirement_set, disqualifications)

    return ScoreOutcome(
        overall_score=overall,
        match_tier=MatchTier.from_score(overall),
        is_eligible=eligible,
        mandatory_met=mandatory_met,
        mandatory_total=mandatory_total,
        preferred_met=preferred_met,
        preferred_total=preferred_total,
        disqualifications=disqualifications,
    )
