#!/usr/bin/env python3
"""
Matcher Module - Holdings, requirements and coverage resolution.

Public API:
- CoverageResolver: Best MatchDetail per requirement
- Holding / Requirement / RequirementSet: Input models
- generate_requirement_set: RequirementSet from job security level and environment
"""

from certmatch.matcher.models import (
    DisqualifyingFactor,
    Holding,
    HoldingStatus,
    MatchDetail,
    MatchStatus,
    Requirement,
    RequirementPriority,
    RequirementSet,
)
from certmatch.matcher.coverage_resolver import CoverageResolver, score_contribution
from certmatch.matcher.job_context import (
    JobEnvironmentType,
    JobSecurityLevel,
    generate_requirement_set,
)

__all__ = [
    'CoverageResolver',
    'DisqualifyingFactor',
    'Holding',
    'HoldingStatus',
    'JobEnvironmentType',
    'JobSecurityLevel',
    'MatchDetail',
    'MatchStatus',
    'Requirement',
    'RequirementPriority',
    'RequirementSet',
    'generate_requirement_set',
    'score_contribution',
]
