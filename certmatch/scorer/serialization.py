#!/usr/bin/env python3
"""
Serialization - Convert MatchResults to and from plain JSON-compatible data.

Enums become their values, datetimes ISO-8601 strings, durations seconds.
"""

import json
import logging
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, Optional

from certmatch.matcher.models import (
    DisqualifyingFactor,
    MatchDetail,
    MatchStatus,
    RequirementPriority,
)
from certmatch.scorer.models import (
    BatchMatchSummary,
    CertificateGap,
    CertificateRecommendation,
    MatchResult,
    MatchTier,
)
from certmatch.utils import ensure_utc

logger = logging.getLogger(__name__)


def _to_native_types(obj):
    """Recursively convert enums, dates, durations and tuples to JSON-native types."""
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return ensure_utc(obj).isoformat()
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, timedelta):
        return obj.total_seconds()
    if isinstance(obj, dict):
        return {k: _to_native_types(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_to_native_types(item) for item in obj]
    return obj


def to_dict(obj) -> Dict[str, Any]:
    """Convert a MatchResult (or any result dataclass) to a plain dict."""
    if not is_dataclass(obj):
        raise TypeError(f"Expected a dataclass instance, got {type(obj).__name__}")
    data = _to_native_types(asdict(obj))
    if isinstance(obj, MatchResult):
        data['summary'] = obj.summary
    return data


def to_json(obj, indent: Optional[int] = 2) -> str:
    return json.dumps(to_dict(obj), indent=indent, sort_keys=False)


def _parse_duration(value) -> Optional[timedelta]:
    if value is None:
        return None
    return timedelta(seconds=float(value))


def _parse_datetime(value) -> Optional[datetime]:
    if value is None:
        return None
    return ensure_utc(value)


def match_detail_from_dict(data: Dict[str, Any]) -> MatchDetail:
    return MatchDetail(
        requirement_id=data['requirement_id'],
        certificate_type_id=data['certificate_type_id'],
        priority=RequirementPriority(data['priority']),
        match_status=MatchStatus(data['match_status']),
        score_contribution=int(data['score_contribution']),
        reason=data.get('reason', ""),
        matched_holding_id=data.get('matched_holding_id'),
        days_until_expiry=data.get('days_until_expiry'),
        required_by=_parse_datetime(data.get('required_by')),
        expiring_soon=bool(data.get('expiring_soon', False)),
    )


def gap_from_dict(data: Dict[str, Any]) -> CertificateGap:
    return CertificateGap(
        certificate_type_id=data['certificate_type_id'],
        priority=RequirementPriority(data['priority']),
        impact_score=int(data['impact_score']),
        reason=data.get('reason', ""),
        requirement_id=data.get('requirement_id', ""),
        is_expired=bool(data.get('is_expired', False)),
        recommendation=data.get('recommendation'),
        estimated_time_to_obtain=_parse_duration(data.get('estimated_time_to_obtain')),
        estimated_cost=data.get('estimated_cost'),
        training_providers=tuple(data.get('training_providers') or ()),
        required_by=_parse_datetime(data.get('required_by')),
    )


def recommendation_from_dict(data: Dict[str, Any]) -> CertificateRecommendation:
    return CertificateRecommendation(
        certificate_type_id=data['certificate_type_id'],
        priority=RequirementPriority(data['priority']),
        potential_score_improvement=int(data['potential_score_improvement']),
        urgency_score=int(data['urgency_score']),
        reason=data.get('reason', ""),
        prerequisites=tuple(data.get('prerequisites') or ()),
        estimated_time_to_obtain=_parse_duration(data.get('estimated_time_to_obtain')),
        estimated_cost=data.get('estimated_cost'),
        training_providers=tuple(data.get('training_providers') or ()),
    )


def match_result_from_dict(data: Dict[str, Any]) -> MatchResult:
    """Rebuild a MatchResult from to_dict() output. Derived keys like `summary` are ignored."""
    return MatchResult(
        job_id=data['job_id'],
        owner_id=data['owner_id'],
        overall_score=int(data['overall_score']),
        match_tier=MatchTier(data['match_tier']),
        is_eligible=bool(data['is_eligible']),
        calculated_at=_parse_datetime(data['calculated_at']),
        match_details=tuple(match_detail_from_dict(d) for d in data.get('match_details', [])),
        gaps=tuple(gap_from_dict(g) for g in data.get('gaps', [])),
        recommendations=tuple(recommendation_from_dict(r) for r in data.get('recommendations', [])),
        mandatory_met=int(data.get('mandatory_met', 0)),
        mandatory_total=int(data.get('mandatory_total', 0)),
        preferred_met=int(data.get('preferred_met', 0)),
        preferred_total=int(data.get('preferred_total', 0)),
        valid_for=_parse_duration(data.get('valid_for')),
        disqualifications=tuple(DisqualifyingFactor(d) for d in data.get('disqualifications', [])),
        excluded_holdings=tuple(data.get('excluded_holdings', [])),
        excluded_requirements=tuple(data.get('excluded_requirements', [])),
    )


def batch_summary_to_dict(summary: BatchMatchSummary) -> Dict[str, Any]:
    return {
        'total': summary.total,
        'eligible_count': summary.eligible_count,
        'average_score': summary.average_score,
        'best_match': to_dict(summary.best_match) if summary.best_match else None,
        'tier_distribution': dict(summary.tier_distribution),
    }
