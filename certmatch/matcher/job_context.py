#!/usr/bin/env python3
"""
Job Context - Derive a RequirementSet from a job's security level and environment.

Security levels dictate the mandatory certificates and the minimum score;
the environment adds preferred certificates on top.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from certmatch.matcher.models import (
    DisqualifyingFactor,
    Requirement,
    RequirementPriority,
    RequirementSet,
)

logger = logging.getLogger(__name__)


class JobSecurityLevel(Enum):
    BASIC = "basic"
    STANDARD = "standard"
    ENHANCED = "enhanced"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def required_certificates(self) -> Tuple[str, ...]:
        return _LEVEL_CERTIFICATES[self]

    @property
    def minimum_match_score(self) -> int:
        return _LEVEL_MIN_SCORE[self]


_LEVEL_CERTIFICATES: Dict[JobSecurityLevel, Tuple[str, ...]] = {
    JobSecurityLevel.BASIC: ("wpbr_a",),
    JobSecurityLevel.STANDARD: ("wpbr_a",),
    JobSecurityLevel.ENHANCED: ("wpbr_a", "bhv"),
    JobSecurityLevel.HIGH: ("wpbr_b", "bhv", "vca_basic"),
    JobSecurityLevel.CRITICAL: ("wpbr_b", "persoonbeveiliging", "bhv", "ehbo"),
}

_LEVEL_MIN_SCORE: Dict[JobSecurityLevel, int] = {
    JobSecurityLevel.BASIC: 60,
    JobSecurityLevel.STANDARD: 70,
    JobSecurityLevel.ENHANCED: 80,
    JobSecurityLevel.HIGH: 85,
    JobSecurityLevel.CRITICAL: 95,
}


class JobEnvironmentType(Enum):
    OFFICE = "office"
    RETAIL = "retail"
    CONSTRUCTION = "construction"
    INDUSTRIAL = "industrial"
    EVENT = "event"
    HOSPITAL = "hospital"
    AIRPORT = "airport"
    GOVERNMENT = "government"
    TRANSPORT = "transport"
    RESIDENTIAL = "residential"
    NIGHTLIFE = "nightlife"

    @property
    def suggested_certificates(self) -> Tuple[str, ...]:
        return _ENVIRONMENT_CERTIFICATES[self]


_ENVIRONMENT_CERTIFICATES: Dict[JobEnvironmentType, Tuple[str, ...]] = {
    JobEnvironmentType.OFFICE: ("wpbr_a",),
    JobEnvironmentType.RETAIL: ("wpbr_a",),
    JobEnvironmentType.CONSTRUCTION: ("wpbr_a", "vca_basic"),
    JobEnvironmentType.INDUSTRIAL: ("wpbr_a", "vca_basic", "bhv"),
    JobEnvironmentType.EVENT: ("wpbr_a", "bhv", "ehbo"),
    JobEnvironmentType.HOSPITAL: ("wpbr_a", "bhv"),
    JobEnvironmentType.AIRPORT: ("wpbr_b",),
    JobEnvironmentType.GOVERNMENT: ("wpbr_b",),
    JobEnvironmentType.TRANSPORT: ("wpbr_a", "rijbewijs_b"),
    JobEnvironmentType.RESIDENTIAL: ("wpbr_a",),
    JobEnvironmentType.NIGHTLIFE: ("wpbr_a", "bhv"),
}


def generate_requirement_set(
    job_id: str,
    security_level: JobSecurityLevel,
    environment_type: JobEnvironmentType,
    additional_requirements: Optional[Iterable[Requirement]] = None,
    disqualifying_factors: Optional[Iterable[DisqualifyingFactor]] = None
) -> RequirementSet:
    """
    Build a RequirementSet from job context.

    Args:
        job_id: Job identifier
        security_level: Drives mandatory certificates and the minimum score
        environment_type: Adds preferred certificates not already mandatory
        additional_requirements: Appended as-is after the generated ones
        disqualifying_factors: Hard-fail conditions for the job

    Returns:
        RequirementSet; partial matches are disallowed for critical jobs
    """
    requirements: List[Requirement] = []
    included = set()

    for cert_id in security_level.required_certificates:
        requirements.append(Requirement(
            certificate_type_id=cert_id,
            priority=RequirementPriority.MANDATORY,
            description=f"Required for {security_level.value} security level",
        ))
        included.add(cert_id)

    for cert_id in environment_type.suggested_certificates:
        if cert_id in included:
            continue
        requirements.append(Requirement(
            certificate_type_id=cert_id,
            priority=RequirementPriority.PREFERRED,
            description=f"Recommended for {environment_type.value} environment",
        ))
        included.add(cert_id)

    if additional_requirements:
        requirements.extend(additional_requirements)

    logger.debug(
        f"Generated {len(requirements)} requirements for job {job_id} "
        f"({security_level.value}/{environment_type.value})"
    )

    return RequirementSet(
        job_id=job_id,
        requirements=tuple(requirements),
        allow_partial_match=security_level != JobSecurityLevel.CRITICAL,
        minimum_match_score=security_level.minimum_match_score,
        disqualifying_factors=frozenset(disqualifying_factors or ()),
    )
