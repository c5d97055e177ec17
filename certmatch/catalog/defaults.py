#!/usr/bin/env python3
"""
Default catalog of Dutch private-security certificates.
"""

from datetime import timedelta
from typing import Tuple

from certmatch.catalog.models import CertificateCategory, CertificateLevel, CertificateType
from certmatch.catalog.registry import CertificateCatalog

FIVE_YEARS = timedelta(days=1825)
THREE_YEARS = timedelta(days=1095)
TEN_YEARS = timedelta(days=3650)

DEFAULT_CERTIFICATES: Tuple[CertificateType, ...] = (
    CertificateType(
        id="wpbr_a",
        display_name="WPBR Diploma A",
        level=CertificateLevel.BASIC,
        category=CertificateCategory.SECURITY,
        validity_period=FIVE_YEARS,
        equivalent_names=("beveiligingsdiploma a", "beveiliger a"),
        match_weight=90,
        is_mandatory_baseline=True,
        estimated_days_to_obtain=30,
        estimated_cost=450.0,
        training_providers=("Politie Nederland", "ROC Nederland"),
    ),
    CertificateType(
        id="wpbr_b",
        display_name="WPBR Diploma B",
        level=CertificateLevel.ADVANCED,
        category=CertificateCategory.SECURITY,
        validity_period=FIVE_YEARS,
        equivalent_names=("beveiligingsdiploma b", "beveiliger b"),
        match_weight=100,
        prerequisites=("wpbr_a",),
        estimated_days_to_obtain=60,
        estimated_cost=750.0,
        training_providers=("Politie Nederland", "ROC Nederland"),
    ),
    CertificateType(
        id="vca_basic",
        display_name="VCA Basis Certificaat",
        level=CertificateLevel.BASIC,
        category=CertificateCategory.SAFETY,
        validity_period=TEN_YEARS,
        equivalent_names=("vca", "vca certificaat"),
        match_weight=70,
        estimated_days_to_obtain=1,
        estimated_cost=85.0,
        training_providers=("SSVV", "ROC Nederland"),
    ),
    CertificateType(
        id="bhv",
        display_name="BHV Certificaat",
        level=CertificateLevel.BASIC,
        category=CertificateCategory.FIRST_AID,
        validity_period=THREE_YEARS,
        equivalent_names=("bedrijfshulpverlening",),
        match_weight=60,
        estimated_days_to_obtain=1,
        estimated_cost=150.0,
        training_providers=("Oranje Kruis", "Rode Kruis Nederland"),
    ),
    CertificateType(
        id="ehbo",
        display_name="EHBO Certificaat",
        level=CertificateLevel.BASIC,
        category=CertificateCategory.FIRST_AID,
        validity_period=THREE_YEARS,
        equivalent_names=("eerste hulp",),
        match_weight=50,
        estimated_days_to_obtain=2,
        estimated_cost=125.0,
        training_providers=("Rode Kruis Nederland", "Oranje Kruis"),
    ),
    CertificateType(
        id="portier",
        display_name="Portier Diploma",
        level=CertificateLevel.BASIC,
        category=CertificateCategory.SECURITY,
        validity_period=FIVE_YEARS,
        equivalent_names=("portier certificaat",),
        match_weight=80,
        estimated_days_to_obtain=14,
        estimated_cost=350.0,
        training_providers=("ROC Nederland", "PBWO"),
    ),
    CertificateType(
        id="persoonbeveiliging",
        display_name="Persoonbeveiliging Diploma",
        level=CertificateLevel.EXPERT,
        category=CertificateCategory.SECURITY,
        validity_period=FIVE_YEARS,
        equivalent_names=("bodyguard diploma", "close protection"),
        match_weight=95,
        prerequisites=("wpbr_b",),
        estimated_days_to_obtain=90,
        estimated_cost=1200.0,
        training_providers=("Politie Nederland", "Specialized Security Training"),
    ),
    CertificateType(
        id="rijbewijs_b",
        display_name="Rijbewijs B",
        level=CertificateLevel.BASIC,
        category=CertificateCategory.DRIVING,
        validity_period=TEN_YEARS,
        equivalent_names=("rijbewijs", "driving license"),
        match_weight=30,
        estimated_days_to_obtain=90,
        estimated_cost=1500.0,
    ),
)


def default_catalog() -> CertificateCatalog:
    return CertificateCatalog(DEFAULT_CERTIFICATES)
