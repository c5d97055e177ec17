#!/usr/bin/env python3
"""
Gap Analysis - Missing and expired requirements with impact and cost estimates.
"""

import logging
from datetime import timedelta
from typing import List, Optional, Sequence, Tuple

from certmatch.catalog.models import CertificateType
from certmatch.catalog.registry import CertificateCatalog
from certmatch.config_loader import RecommendationConfig
from certmatch.matcher.models import MatchDetail, MatchStatus
from certmatch.scorer.models import CertificateGap
from certmatch.utils import round_half_up

logger = logging.getLogger(__name__)


def estimate_acquisition(
    cert_type: Optional[CertificateType],
    config: RecommendationConfig,
    renewal: bool = False
) -> Tuple[timedelta, float]:
    """
    Estimate time and cost to obtain (or renew) a certificate.

    Falls back to config defaults when the catalog entry has no estimate.

    Returns:
        (estimated_time, estimated_cost_eur)
    """
    days = config.default_days_to_obtain
    cost = config.default_cost
    if cert_type is not None:
        if cert_type.estimated_days_to_obtain is not None:
            days = cert_type.estimated_days_to_obtain
        if cert_type.estimated_cost is not None:
            cost = cert_type.estimated_cost
    if renewal:
        days = days * config.renewal_time_factor
        cost = cost * config.renewal_cost_factor
    return timedelta(days=days), round(cost, 2)


def _recommendation_text(cert_type: Optional[CertificateType], name: str, renewal: bool) -> str:
    action = "Renew" if renewal else "Obtain"
    if cert_type is not None and cert_type.training_providers:
        return f"{action} {name} via {cert_type.training_providers[0]}"
    return f"{action} {name}"


def build_gaps(
    details: Sequence[MatchDetail],
    catalog: CertificateCatalog,
    config: RecommendationConfig
) -> Tuple[CertificateGap, ...]:
    """
    Emit one CertificateGap per missing or expired detail.

    impact_score = round(100 * priority weight / sum of all priority weights),
    i.e. the points the worker would regain by resolving that gap alone.

    Args:
        details: All resolved details for the evaluation
        catalog: Catalog for names and estimates
        config: Estimate defaults and renewal factors

    Returns:
        Gaps in requirement order
    """
    total_weight = sum(d.priority.weight for d in details)
    gaps: List[CertificateGap] = []

    for detail in details:
        if not detail.match_status.is_gap:
            continue

        cert_type = catalog.get(detail.certificate_type_id)
        name = cert_type.display_name if cert_type else detail.certificate_type_id
        renewal = detail.match_status == MatchStatus.EXPIRED
        impact = round_half_up(100 * detail.priority.weight, total_weight) if total_weight else 0
        estimated_time, estimated_cost = estimate_acquisition(cert_type, config, renewal=renewal)

        if renewal:
            reason = f"{detail.priority.display_name} certificate {name} has expired"
        else:
            reason = f"{detail.priority.display_name} certificate {name} is not held"

        gaps.append(CertificateGap(
            certificate_type_id=detail.certificate_type_id,
            priority=detail.priority,
            impact_score=impact,
            reason=reason,
            requirement_id=detail.requirement_id,
            is_expired=renewal,
            recommendation=_recommendation_text(cert_type, name, renewal),
            estimated_time_to_obtain=estimated_time,
            estimated_cost=estimated_cost,
            training_providers=cert_type.training_providers if cert_type else (),
            required_by=detail.required_by,
        ))

    if gaps:
        logger.debug(f"Identified {len(gaps)} certificate gaps")
    return tuple(gaps)
