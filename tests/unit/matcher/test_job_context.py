#!/usr/bin/env python3
"""Test requirement generation from job security level and environment."""

from certmatch.matcher import (
    DisqualifyingFactor,
    JobEnvironmentType,
    JobSecurityLevel,
    Requirement,
    RequirementPriority,
    generate_requirement_set,
)


def _summary(requirement_set):
    return [(r.certificate_type_id, r.priority) for r in requirement_set.requirements]


def test_enhanced_event_job():
    requirement_set = generate_requirement_set(
        "job-1", JobSecurityLevel.ENHANCED, JobEnvironmentType.EVENT
    )

    assert _summary(requirement_set) == [
        ("wpbr_a", RequirementPriority.MANDATORY),
        ("bhv", RequirementPriority.MANDATORY),
        ("ehbo", RequirementPriority.PREFERRED),
    ]
    assert requirement_set.minimum_match_score == 80
    assert requirement_set.allow_partial_match is True


def test_environment_does_not_duplicate_mandatory():
    requirement_set = generate_requirement_set(
        "job-2", JobSecurityLevel.BASIC, JobEnvironmentType.OFFICE
    )
    assert _summary(requirement_set) == [("wpbr_a", RequirementPriority.MANDATORY)]
    assert requirement_set.minimum_match_score == 60


def test_critical_disallows_partial_matches():
    requirement_set = generate_requirement_set(
        "job-3", JobSecurityLevel.CRITICAL, JobEnvironmentType.AIRPORT
    )

    assert [r.certificate_type_id for r in requirement_set.requirements] == [
        "wpbr_b", "persoonbeveiliging", "bhv", "ehbo",
    ]
    assert requirement_set.allow_partial_match is False
    assert requirement_set.minimum_match_score == 95


def test_additional_requirements_are_appended():
    extra = Requirement("rijbewijs_b", RequirementPriority.OPTIONAL, id="drive")
    requirement_set = generate_requirement_set(
        "job-4",
        JobSecurityLevel.HIGH,
        JobEnvironmentType.CONSTRUCTION,
        additional_requirements=[extra],
        disqualifying_factors=[DisqualifyingFactor.EXPIRED_CERTIFICATE],
    )

    assert _summary(requirement_set) == [
        ("wpbr_b", RequirementPriority.MANDATORY),
        ("bhv", RequirementPriority.MANDATORY),
        ("vca_basic", RequirementPriority.MANDATORY),
        ("wpbr_a", RequirementPriority.PREFERRED),
        ("rijbewijs_b", RequirementPriority.OPTIONAL),
    ]
    assert requirement_set.requirements[-1] is extra
    assert requirement_set.disqualifying_factors == frozenset({DisqualifyingFactor.EXPIRED_CERTIFICATE})


def test_every_level_and_environment_has_certificates():
    for level in JobSecurityLevel:
        assert level.required_certificates
    for environment in JobEnvironmentType:
        assert environment.suggested_certificates
