#!/usr/bin/env python3
"""
Eligibility Engine - Evaluate a worker's holdings against a job's requirements.

Pipeline per evaluation:
1. Validate holdings (bad dates are excluded with a data-quality warning)
2. Check catalog references (unknown ids fail, or are excluded in lenient mode)
3. Resolve each requirement to its best MatchDetail
4. Score, derive gaps, simulate recommendations
5. Return an immutable MatchResult

Evaluations share no mutable state, so batches fan out over a thread pool.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from collections import Counter
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from certmatch.catalog.provider import CatalogProvider
from certmatch.catalog.registry import CertificateCatalog
from certmatch.config_loader import EngineConfig
from certmatch.exceptions import ConfigurationError, DataQualityWarning
from certmatch.matcher.coverage_resolver import CoverageResolver
from certmatch.matcher.models import Holding, HoldingStatus, Requirement, RequirementSet
from certmatch.scorer.gaps import build_gaps
from certmatch.scorer.models import BatchMatchSummary, MatchResult
from certmatch.scorer.recommendations import RecommendationGenerator
from certmatch.scorer.scoring import score_details
from certmatch.utils import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class EligibilityEngine:
    """
    Stateless evaluator wired from EngineConfig.

    The catalog is passed per call; when omitted, the provider's current
    catalog is taken once at the start of the call.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        catalog_provider: Optional[CatalogProvider] = None
    ):
        self.config = config or EngineConfig()
        self.catalog_provider = catalog_provider or CatalogProvider.from_config(self.config.catalog)
        self.resolver = CoverageResolver(self.config.resolver.expiring_soon_days)
        self.recommender = RecommendationGenerator(self.resolver, self.config.recommendations)

    def _valid_for(self) -> Optional[timedelta]:
        hours = self.config.result_valid_for_hours
        return timedelta(hours=hours) if hours is not None else None

    def _filter_holdings(
        self,
        holdings: Sequence[Holding],
        catalog: CertificateCatalog,
        lenient: bool
    ) -> Tuple[List[Holding], List[str]]:
        kept: List[Holding] = []
        excluded: List[str] = []
        for holding in holdings:
            try:
                holding.validate()
            except DataQualityWarning as e:
                logger.warning(f"Data quality: excluding holding {holding.id}: {e}")
                excluded.append(holding.id)
                continue

            if holding.certificate_type_id not in catalog:
                message = (
                    f"Holding {holding.id} references unknown certificate type "
                    f"{holding.certificate_type_id}"
                )
                if not lenient:
                    logger.error(message)
                    raise ConfigurationError(message)
                logger.warning(f"{message}; excluded (lenient mode)")
                excluded.append(holding.id)
                continue

            kept.append(holding)
        return kept, excluded

    def _filter_requirements(
        self,
        requirement_set: RequirementSet,
        catalog: CertificateCatalog,
        lenient: bool
    ) -> Tuple[List[Tuple[str, Requirement]], List[str]]:
        kept: List[Tuple[str, Requirement]] = []
        excluded: List[str] = []
        for requirement_id, requirement in requirement_set.keyed_requirements():
            if requirement.certificate_type_id in catalog:
                kept.append((requirement_id, requirement))
                continue
            message = (
                f"Requirement {requirement_id} of job {requirement_set.job_id} references "
                f"unknown certificate type {requirement.certificate_type_id}"
            )
            if not lenient:
                logger.error(message)
                raise ConfigurationError(message)
            logger.warning(f"{message}; excluded (lenient mode)")
            excluded.append(requirement_id)
        return kept, excluded

    def evaluate(
        self,
        holdings: Sequence[Holding],
        requirement_set: RequirementSet,
        catalog: Optional[CertificateCatalog] = None,
        now: Optional[datetime] = None,
        lenient: Optional[bool] = None,
        owner_id: Optional[str] = None
    ) -> MatchResult:
        """
        Evaluate one worker against one job.

        Args:
            holdings: The worker's holdings (may be empty)
            requirement_set: The job's requirements and policy
            catalog: Catalog to resolve against; defaults to the provider's current one
            now: Evaluation time; pass it for reproducible results
            lenient: Exclude unknown catalog references instead of failing
                     (defaults to config.lenient)
            owner_id: Worker id; defaults to the first holding's owner

        Returns:
            MatchResult

        Raises:
            ConfigurationError: on unknown catalog references when not lenient
        """
        catalog = catalog if catalog is not None else self.catalog_provider.current()
        now = ensure_utc(now) if now is not None else utc_now()
        lenient = self.config.lenient if lenient is None else lenient
        if owner_id is None:
            owner_id = holdings[0].owner_id if holdings else ""

        kept_holdings, excluded_holdings = self._filter_holdings(holdings, catalog, lenient)
        keyed_requirements, excluded_requirements = self._filter_requirements(
            requirement_set, catalog, lenient
        )

        details = [
            self.resolver.resolve(requirement_id, requirement, kept_holdings, catalog, now)
            for requirement_id, requirement in keyed_requirements
        ]
        pending = len([
            h for h in kept_holdings
            if h.lifecycle_status(now, self.resolver.expiring_soon_days) == HoldingStatus.PENDING
        ])
        outcome = score_details(details, requirement_set, pending_holdings=pending)
        gaps = build_gaps(details, catalog, self.config.recommendations)
        recommendations = self.recommender.generate(
            owner_id, kept_holdings, keyed_requirements, details, catalog, now
        )

        result = MatchResult(
            job_id=requirement_set.job_id,
            owner_id=owner_id,
            overall_score=outcome.overall_score,
            match_tier=outcome.match_tier,
            is_eligible=outcome.is_eligible,
            calculated_at=now,
            match_details=tuple(details),
            gaps=gaps,
            recommendations=recommendations,
            mandatory_met=outcome.mandatory_met,
            mandatory_total=outcome.mandatory_total,
            preferred_met=outcome.preferred_met,
            preferred_total=outcome.preferred_total,
            valid_for=self._valid_for(),
            disqualifications=outcome.disqualifications,
            excluded_holdings=tuple(excluded_holdings),
            excluded_requirements=tuple(excluded_requirements),
        )
        logger.info(
            f"Evaluated owner {owner_id or '-'} for job {requirement_set.job_id}: "
            f"score={result.overall_score} tier={result.match_tier.value} eligible={result.is_eligible}"
        )
        return result

    def evaluate_batch(
        self,
        holdings: Sequence[Holding],
        requirement_sets: Sequence[RequirementSet],
        catalog: Optional[CertificateCatalog] = None,
        now: Optional[datetime] = None,
        lenient: Optional[bool] = None
    ) -> List[MatchResult]:
        """
        Evaluate one worker against many jobs.

        All evaluations share one `now` and one catalog reference. Results
        are returned in the order of `requirement_sets`; the first
        ConfigurationError aborts the batch.
        """
        catalog = catalog if catalog is not None else self.catalog_provider.current()
        now = ensure_utc(now) if now is not None else utc_now()
        if not requirement_sets:
            return []

        with ThreadPoolExecutor(max_workers=self.config.batch.max_workers) as executor:
            futures = [
                executor.submit(self.evaluate, holdings, requirement_set, catalog, now, lenient)
                for requirement_set in requirement_sets
            ]
            results = [future.result() for future in futures]

        logger.info(f"Batch evaluated {len(results)} jobs")
        return results

    def evaluate_candidates(
        self,
        holdings_by_owner: Dict[str, Sequence[Holding]],
        requirement_set: RequirementSet,
        catalog: Optional[CertificateCatalog] = None,
        now: Optional[datetime] = None,
        lenient: Optional[bool] = None
    ) -> List[MatchResult]:
        """
        Evaluate many workers against one job.

        Returns:
            Results sorted by overall_score (highest first), then owner id
        """
        catalog = catalog if catalog is not None else self.catalog_provider.current()
        now = ensure_utc(now) if now is not None else utc_now()
        if not holdings_by_owner:
            return []

        with ThreadPoolExecutor(max_workers=self.config.batch.max_workers) as executor:
            futures = [
                executor.submit(
                    self.evaluate, holdings, requirement_set, catalog, now, lenient, owner_id
                )
                for owner_id, holdings in holdings_by_owner.items()
            ]
            results = [future.result() for future in futures]

        results.sort(key=lambda r: (-r.overall_score, r.owner_id))
        return results


def summarize_batch(results: Sequence[MatchResult]) -> BatchMatchSummary:
    """Best match, average score, eligible count and tier distribution."""
    if not results:
        return BatchMatchSummary()

    best = min(results, key=lambda r: (-r.overall_score, r.job_id, r.owner_id))
    distribution = Counter(r.match_tier.value for r in results)
    return BatchMatchSummary(
        total=len(results),
        eligible_count=len([r for r in results if r.is_eligible]),
        average_score=round(sum(r.overall_score for r in results) / len(results), 2),
        best_match=best,
        tier_distribution=dict(distribution),
    )


def evaluate(
    holdings: Sequence[Holding],
    requirement_set: RequirementSet,
    catalog: CertificateCatalog,
    now: Optional[datetime] = None,
    lenient: bool = False
) -> MatchResult:
    """Evaluate with default engine settings."""
    return EligibilityEngine().evaluate(holdings, requirement_set, catalog, now=now, lenient=lenient)


def evaluate_batch(
    holdings: Sequence[Holding],
    requirement_sets: Sequence[RequirementSet],
    catalog: CertificateCatalog,
    now: Optional[datetime] = None,
    lenient: bool = False
) -> List[MatchResult]:
    """Batch-evaluate with default engine settings."""
    return EligibilityEngine().evaluate_batch(holdings, requirement_sets, catalog, now=now, lenient=lenient)
