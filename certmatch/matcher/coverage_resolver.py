#!/usr/bin/env python3
"""
Coverage Resolver - Find the best holding for one requirement.

Tiers, best first: exact type, equivalent name, higher level, expired
holding of the right type, missing. Within a tier the holding with the
latest expiry wins, then the lowest id, so resolution is deterministic.

This is the single source of truth for per-requirement matching.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from certmatch.catalog.models import CertificateType
from certmatch.catalog.registry import CertificateCatalog
from certmatch.matcher.models import (
    DEFAULT_EXPIRING_SOON_DAYS,
    Holding,
    HoldingStatus,
    MatchDetail,
    MatchStatus,
    Requirement,
    RequirementPriority,
)
from certmatch.utils import ensure_utc, round_half_up

logger = logging.getLogger(__name__)

_TIER_RANK: Dict[MatchStatus, int] = {
    MatchStatus.EXACT_MATCH: 0,
    MatchStatus.EQUIVALENT_MATCH: 1,
    MatchStatus.HIGHER_LEVEL_MATCH: 2,
}


def score_contribution(priority: RequirementPriority, status: MatchStatus) -> int:
    """Points a requirement adds: round(priority.weight * status.weight / 100), half-up."""
    return round_half_up(priority.weight * status.weight, 100)


def _latest_expiry_first(holding: Holding) -> Tuple[float, str]:
    return (-ensure_utc(holding.expiry_date).timestamp(), holding.id)


class CoverageResolver:
    """Resolve requirements against a worker's holdings."""

    def __init__(self, expiring_soon_days: int = DEFAULT_EXPIRING_SOON_DAYS):
        """
        Initialize resolver.

        Args:
            expiring_soon_days: Window before expiry in which a holding counts as expiring soon
        """
        self.expiring_soon_days = expiring_soon_days

    def resolve(
        self,
        requirement_id: str,
        requirement: Requirement,
        holdings: Sequence[Holding],
        catalog: CertificateCatalog,
        now: datetime
    ) -> MatchDetail:
        """
        Resolve one requirement to its single best MatchDetail.

        Holdings whose type is not in the catalog are ignored here; the
        engine decides whether that is an error before calling in.

        Args:
            requirement_id: Stable id of the requirement within its set
            requirement: The requirement to satisfy
            holdings: All of the worker's (validated) holdings
            catalog: Catalog used for coverage and equivalence
            now: Evaluation time

        Returns:
            MatchDetail for the requirement
        """
        required = catalog.require(requirement.certificate_type_id)
        statuses = {h.id: h.lifecycle_status(now, self.expiring_soon_days) for h in holdings}

        usable: List[Tuple[MatchStatus, Holding, CertificateType]] = []
        expired: List[Tuple[Holding, CertificateType]] = []
        pending: List[Holding] = []

        for holding in holdings:
            held_type = catalog.get(holding.certificate_type_id)
            if held_type is None:
                continue
            status = statuses[holding.id]
            tier = self._tier_for(requirement, required, held_type)
            if tier is None:
                continue
            if status.is_usable:
                usable.append((tier, holding, held_type))
            elif status == HoldingStatus.EXPIRED:
                if tier in (MatchStatus.EXACT_MATCH, MatchStatus.EQUIVALENT_MATCH):
                    expired.append((holding, held_type))
            else:
                pending.append(holding)

        if usable:
            detail = self._best_usable(requirement_id, requirement, required, usable, now)
            if detail is not None:
                return detail

        # A mandatory requirement rejects any holding below the experience minimum, expired or not
        experienced = [
            (holding, held_type) for holding, held_type in expired
            if self._apply_experience(requirement, MatchStatus.EXPIRED, holding) != MatchStatus.MISSING
        ]
        if experienced:
            holding, held_type = min(experienced, key=lambda pair: _latest_expiry_first(pair[0]))
            days = holding.days_until_expiry(now)
            return self._detail(
                requirement_id, requirement, MatchStatus.EXPIRED,
                reason=f"{held_type.display_name} expired {abs(days)} days ago",
                holding=holding, days_until_expiry=days,
            )

        if usable or expired:
            reason = (
                f"{required.display_name} held but with less than "
                f"{requirement.min_experience_months} months experience"
            )
        elif pending:
            reason = f"{required.display_name} is awaiting verification"
        else:
            reason = f"No {required.display_name} or accepted alternative held"
        return self._detail(requirement_id, requirement, MatchStatus.MISSING, reason=reason)

    def _tier_for(
        self,
        requirement: Requirement,
        required: CertificateType,
        held_type: CertificateType
    ) -> Optional[MatchStatus]:
        """Best raw tier a held type could reach for the requirement, ignoring status."""
        if held_type.id == required.id:
            return MatchStatus.EXACT_MATCH
        if requirement.accept_equivalents and required.is_equivalent_to(held_type):
            return MatchStatus.EQUIVALENT_MATCH
        if requirement.accept_higher_levels and held_type.covers(required):
            return MatchStatus.HIGHER_LEVEL_MATCH
        return None

    def _apply_experience(
        self,
        requirement: Requirement,
        status: MatchStatus,
        holding: Holding
    ) -> MatchStatus:
        minimum = requirement.min_experience_months
        if minimum is None:
            return status
        if holding.experience_months is not None and holding.experience_months >= minimum:
            return status
        if requirement.priority == RequirementPriority.MANDATORY:
            return MatchStatus.MISSING
        return status.downgraded()

    def _best_usable(
        self,
        requirement_id: str,
        requirement: Requirement,
        required: CertificateType,
        usable: List[Tuple[MatchStatus, Holding, CertificateType]],
        now: datetime
    ) -> Optional[MatchDetail]:
        evaluated = []
        for tier, holding, held_type in usable:
            effective = self._apply_experience(requirement, tier, holding)
            evaluated.append((effective, tier, holding, held_type))

        effective, tier, holding, held_type = min(
            evaluated,
            key=lambda e: (-e[0].weight, _TIER_RANK[e[1]], _latest_expiry_first(e[2])),
        )
        if effective == MatchStatus.MISSING:
            return None

        if tier == MatchStatus.EXACT_MATCH:
            reason = f"Holds {held_type.display_name}"
        elif tier == MatchStatus.EQUIVALENT_MATCH:
            reason = f"{held_type.display_name} is accepted as equivalent to {required.display_name}"
        else:
            reason = f"{held_type.display_name} covers {required.display_name}"
        if effective != tier:
            reason += (
                f"; below required experience of {requirement.min_experience_months} months, "
                f"counted as {effective.value.replace('_', ' ')}"
            )

        days = holding.days_until_expiry(now)
        expiring = holding.lifecycle_status(now, self.expiring_soon_days) == HoldingStatus.EXPIRING_SOON
        if expiring:
            reason += f" (expires in {days} days)"

        logger.debug(f"Requirement {requirement_id}: {effective.value} via holding {holding.id}")
        return self._detail(
            requirement_id, requirement, effective,
            reason=reason, holding=holding, days_until_expiry=days, expiring_soon=expiring,
        )

    @staticmethod
    def _detail(
        requirement_id: str,
        requirement: Requirement,
        status: MatchStatus,
        reason: str,
        holding: Optional[Holding] = None,
        days_until_expiry: Optional[int] = None,
        expiring_soon: bool = False
    ) -> MatchDetail:
        return MatchDetail(
            requirement_id=requirement_id,
            certificate_type_id=requirement.certificate_type_id,
            priority=requirement.priority,
            match_status=status,
            score_contribution=score_contribution(requirement.priority, status),
            reason=reason,
            matched_holding_id=holding.id if holding is not None else None,
            days_until_expiry=days_until_expiry,
            required_by=ensure_utc(requirement.required_by),
            expiring_soon=expiring_soon,
        )
