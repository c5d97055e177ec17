#!/usr/bin/env python3
"""
Input helpers - Build holdings and requirement sets from plain dicts / YAML.

Used by the CLI and by collaborators that receive data as JSON.
"""

import logging
import os
from typing import Any, Dict, Iterable, List, Optional

import yaml

from certmatch.exceptions import ConfigurationError, DataQualityWarning
from certmatch.matcher.job_context import (
    JobEnvironmentType,
    JobSecurityLevel,
    generate_requirement_set,
)
from certmatch.matcher.models import (
    DisqualifyingFactor,
    Holding,
    Requirement,
    RequirementPriority,
    RequirementSet,
)
from certmatch.utils import ensure_utc

logger = logging.getLogger(__name__)


def _parse_enum(enum_cls, value, field_name: str):
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise ConfigurationError(f"Invalid {field_name}: {value!r}")


def _months(value, error_cls, label: str, **error_kwargs) -> Optional[int]:
    if value is None:
        return None
    try:
        months = int(value)
    except (TypeError, ValueError):
        raise error_cls(f"Invalid {label}: {value!r}", **error_kwargs)
    if isinstance(value, float) and value != months:
        raise error_cls(f"Invalid {label}: {value!r}", **error_kwargs)
    if months < 0:
        raise error_cls(f"Invalid {label}: {value!r}", **error_kwargs)
    return months


def holding_from_dict(data: Dict[str, Any]) -> Holding:
    """
    Build a Holding. Dates may be date/datetime objects or ISO-8601 strings.

    Malformed dates are kept as-is so the engine can exclude the holding
    with a data-quality warning instead of failing the whole load.

    Raises:
        DataQualityWarning: if experience_months is not a whole, non-negative number
    """
    def _date(value):
        try:
            return ensure_utc(value)
        except (TypeError, ValueError, OverflowError):
            logger.warning(f"Unparseable date {value!r} on holding {data.get('id')}")
            return value

    return Holding(
        id=str(data['id']),
        owner_id=str(data.get('owner_id', "")),
        certificate_type_id=str(data['certificate_type_id']),
        issue_date=_date(data.get('issue_date')),
        expiry_date=_date(data.get('expiry_date')),
        certificate_number=str(data.get('certificate_number', "")),
        verified=bool(data.get('verified', False)),
        experience_months=_months(
            data.get('experience_months'), DataQualityWarning,
            f"experience_months on holding {data.get('id')}", holding_id=str(data['id']),
        ),
    )


def holdings_from_dicts(items: Iterable[Dict[str, Any]]) -> List[Holding]:
    """Build holdings, skipping (with a warning) any that carry unusable data."""
    holdings: List[Holding] = []
    for item in items or []:
        try:
            holdings.append(holding_from_dict(item))
        except DataQualityWarning as e:
            logger.warning(f"Data quality: skipping holding {e.holding_id}: {e}")
    return holdings


def requirement_from_dict(data: Dict[str, Any]) -> Requirement:
    required_by = data.get('required_by')
    return Requirement(
        certificate_type_id=str(data['certificate_type_id']),
        priority=_parse_enum(RequirementPriority, data.get('priority', 'mandatory'), 'priority'),
        accept_equivalents=bool(data.get('accept_equivalents', True)),
        accept_higher_levels=bool(data.get('accept_higher_levels', True)),
        min_experience_months=_months(
            data.get('min_experience_months'), ConfigurationError, "min_experience_months"
        ),
        required_by=ensure_utc(required_by) if required_by is not None else None,
        description=data.get('description'),
        id=data.get('id'),
    )


def requirement_set_from_dict(
    data: Dict[str, Any],
    default_minimum_match_score: int = 70
) -> RequirementSet:
    """
    Build a RequirementSet.

    Either list `requirements` explicitly, or give `security_level` and
    `environment_type` to generate them (explicit requirements are then
    appended as additional ones).
    """
    if 'job_id' not in data:
        raise ConfigurationError("Job definition is missing job_id")

    requirements = [requirement_from_dict(r) for r in data.get('requirements') or []]
    factors = [
        _parse_enum(DisqualifyingFactor, f, 'disqualifying factor')
        for f in data.get('disqualifying_factors') or []
    ]

    if data.get('security_level'):
        requirement_set = generate_requirement_set(
            job_id=str(data['job_id']),
            security_level=_parse_enum(JobSecurityLevel, data['security_level'], 'security_level'),
            environment_type=_parse_enum(
                JobEnvironmentType, data.get('environment_type', 'office'), 'environment_type'
            ),
            additional_requirements=requirements,
            disqualifying_factors=factors,
        )
        overrides = {}
        if 'allow_partial_match' in data:
            overrides['allow_partial_match'] = bool(data['allow_partial_match'])
        if 'minimum_match_score' in data:
            overrides['minimum_match_score'] = int(data['minimum_match_score'])
        if overrides:
            requirement_set = RequirementSet(
                job_id=requirement_set.job_id,
                requirements=requirement_set.requirements,
                allow_partial_match=overrides.get(
                    'allow_partial_match', requirement_set.allow_partial_match
                ),
                minimum_match_score=overrides.get(
                    'minimum_match_score', requirement_set.minimum_match_score
                ),
                disqualifying_factors=requirement_set.disqualifying_factors,
            )
        return requirement_set

    return RequirementSet(
        job_id=str(data['job_id']),
        requirements=tuple(requirements),
        allow_partial_match=bool(data.get('allow_partial_match', True)),
        minimum_match_score=int(data.get('minimum_match_score', default_minimum_match_score)),
        disqualifying_factors=frozenset(factors),
    )


def load_yaml(path: str) -> Any:
    if not os.path.exists(path):
        raise ConfigurationError(f"File not found: {path}")
    with open(path, "r") as f:
        return yaml.safe_load(f)


def load_holdings(path: str) -> List[Holding]:
    """Load holdings from a YAML/JSON file: a list, or a mapping with `holdings:`."""
    data = load_yaml(path)
    if isinstance(data, dict):
        data = data.get('holdings', [])
    return holdings_from_dicts(data)


def load_requirement_sets(path: str, default_minimum_match_score: int = 70) -> List[RequirementSet]:
    """Load one job (mapping) or several (`jobs:` list) from a YAML/JSON file."""
    data = load_yaml(path)
    if isinstance(data, dict) and 'jobs' in data:
        items = data['jobs'] or []
    elif isinstance(data, list):
        items = data
    else:
        items = [data]
    return [requirement_set_from_dict(item, default_minimum_match_score) for item in items]
