#!/usr/bin/env python3
"""
Recommendations - Rank certificates worth obtaining for one job.

For each catalog type the worker does not already hold in a usable state,
add a simulated fresh holding, re-run resolution and scoring, and keep the
types that raise the score. This is O(catalog x requirements), fine for
catalogs of tens of entries.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence, Set, Tuple

from certmatch.catalog.models import CertificateType
from certmatch.catalog.registry import CertificateCatalog
from certmatch.config_loader import RecommendationConfig
from certmatch.matcher.coverage_resolver import CoverageResolver
from certmatch.matcher.models import (
    Holding,
    MatchDetail,
    Requirement,
    RequirementPriority,
    highest_priority,
)
from certmatch.scorer.gaps import estimate_acquisition
from certmatch.scorer.models import CertificateRecommendation
from certmatch.scorer.scoring import calculate_overall_score
from certmatch.utils import clamp, ensure_utc

logger = logging.getLogger(__name__)

SIMULATED_HOLDING_PREFIX = "simulated:"


def unmet_prerequisites(
    cert_type: CertificateType,
    catalog: CertificateCatalog,
    usable_types: Sequence[CertificateType]
) -> Tuple[str, ...]:
    """
    Prerequisites (transitively) the worker still lacks, nearest first.

    A prerequisite counts as met when a usable held type covers it; met
    prerequisites are not expanded further. Cycles are ignored.
    """
    unmet: List[str] = []
    seen: Set[str] = {cert_type.id}
    queue = list(cert_type.prerequisites)

    while queue:
        prereq_id = queue.pop(0)
        if prereq_id in seen:
            continue
        seen.add(prereq_id)
        prereq = catalog.get(prereq_id)
        if prereq is None:
            logger.warning(f"{cert_type.id} lists unknown prerequisite {prereq_id}")
            unmet.append(prereq_id)
            continue
        if any(held.covers(prereq) for held in usable_types):
            continue
        unmet.append(prereq_id)
        queue.extend(prereq.prerequisites)

    return tuple(unmet)


class RecommendationGenerator:
    """Simulate each candidate certificate and rank the ones that help."""

    def __init__(self, resolver: CoverageResolver, config: RecommendationConfig):
        self.resolver = resolver
        self.config = config

    def urgency_score(
        self,
        priority: RequirementPriority,
        improvement: int,
        unmet_count: int,
        near_deadline: bool = False
    ) -> int:
        """
        (wp * priority + wi * min(100, scale * improvement)) / (1 + unmet), half-up,
        plus the deadline bonus, clamped to 0..100.
        """
        wp = Decimal(str(self.config.urgency_priority_weight))
        wi = Decimal(str(self.config.urgency_improvement_weight))
        scale = Decimal(str(self.config.improvement_scale))
        scaled_improvement = min(Decimal(100), scale * improvement)
        raw = (wp * priority.weight + wi * scaled_improvement) / (1 + unmet_count)
        urgency = int(raw.quantize(Decimal(1), rounding=ROUND_HALF_UP))
        if near_deadline:
            urgency += self.config.deadline_bonus
        return clamp(urgency)

    def _near_deadline(self, required_by: Optional[datetime], now: datetime) -> bool:
        if required_by is None:
            return False
        return ensure_utc(required_by) - now <= timedelta(days=self.config.deadline_window_days)

    def generate(
        self,
        owner_id: str,
        holdings: Sequence[Holding],
        keyed_requirements: Sequence[Tuple[str, Requirement]],
        baseline_details: Sequence[MatchDetail],
        catalog: CertificateCatalog,
        now: datetime
    ) -> Tuple[CertificateRecommendation, ...]:
        """
        Rank recommendations for one worker/job pair.

        Args:
            owner_id: Worker id, used on simulated holdings
            holdings: The worker's validated holdings
            keyed_requirements: (requirement_id, Requirement) pairs that were scored
            baseline_details: Details from the real evaluation, same order
            catalog: Catalog to draw candidates from
            now: Evaluation time

        Returns:
            Recommendations sorted by urgency desc, improvement desc, id asc; capped
        """
        if not self.config.enabled or not keyed_requirements:
            return ()

        now = ensure_utc(now)
        baseline_score = calculate_overall_score(baseline_details)
        usable_types = [
            catalog.get(h.certificate_type_id) for h in holdings
            if catalog.get(h.certificate_type_id) is not None
            and h.lifecycle_status(now, self.resolver.expiring_soon_days).is_usable
        ]
        usable_ids = {t.id for t in usable_types}

        recommendations: List[CertificateRecommendation] = []
        for cert_type in catalog:
            if cert_type.id in usable_ids:
                continue

            simulated = Holding(
                id=f"{SIMULATED_HOLDING_PREFIX}{cert_type.id}",
                owner_id=owner_id,
                certificate_type_id=cert_type.id,
                issue_date=now,
                expiry_date=now + cert_type.validity_period,
                verified=True,
            )
            candidate_holdings = list(holdings) + [simulated]
            simulated_details = [
                self.resolver.resolve(rid, req, candidate_holdings, catalog, now)
                for rid, req in keyed_requirements
            ]
            improvement = calculate_overall_score(simulated_details) - baseline_score
            if improvement <= 0:
                continue

            improved = [
                sim for base, sim in zip(baseline_details, simulated_details)
                if sim.score_contribution > base.score_contribution
            ]
            priority = highest_priority([d.priority for d in improved]) or RequirementPriority.OPTIONAL
            near_deadline = any(self._near_deadline(d.required_by, now) for d in improved)
            prerequisites = unmet_prerequisites(cert_type, catalog, usable_types)
            urgency = self.urgency_score(priority, improvement, len(prerequisites), near_deadline)
            estimated_time, estimated_cost = estimate_acquisition(cert_type, self.config)

            reason = f"Would raise the score by {improvement} points"
            if prerequisites:
                reason += f"; first requires {', '.join(prerequisites)}"

            recommendations.append(CertificateRecommendation(
                certificate_type_id=cert_type.id,
                priority=priority,
                potential_score_improvement=improvement,
                urgency_score=urgency,
                reason=reason,
                prerequisites=prerequisites,
                estimated_time_to_obtain=estimated_time,
                estimated_cost=estimated_cost,
                training_providers=cert_type.training_providers,
            ))

        recommendations.sort(
            key=lambda r: (-r.urgency_score, -r.potential_score_improvement, r.certificate_type_id)
        )
        return tuple(recommendations[:self.config.max_recommendations])
