#!/usr/bin/env python3
"""
Test suite for the certificate catalog (models, registry, defaults).
"""

import unittest
from datetime import timedelta

import pytest

from certmatch.catalog import (
    CertificateCatalog,
    CertificateCategory,
    CertificateLevel,
    CertificateType,
    default_catalog,
    load_catalog,
)
from certmatch.exceptions import ConfigurationError
from tests.fixtures.certificate_fixtures import CERT_A, CERT_B, synthetic_catalog


class TestCertificateLevel(unittest.TestCase):

    def test_hierarchy_levels(self):
        self.assertEqual(CertificateLevel.ENTRY.hierarchy_level, 1)
        self.assertEqual(CertificateLevel.BASIC.hierarchy_level, 2)
        self.assertEqual(CertificateLevel.ADVANCED.hierarchy_level, 4)
        self.assertEqual(CertificateLevel.EXPERT.hierarchy_level, 5)

    def test_level_covers_is_at_least(self):
        self.assertTrue(CertificateLevel.EXPERT.covers(CertificateLevel.BASIC))
        self.assertTrue(CertificateLevel.BASIC.covers(CertificateLevel.BASIC))
        self.assertFalse(CertificateLevel.BASIC.covers(CertificateLevel.ADVANCED))


class TestCertificateType(unittest.TestCase):
    """Validation and coverage on individual catalog entries."""

    def test_match_weight_out_of_range_rejected(self):
        with self.assertRaises(ConfigurationError):
            CertificateType(
                id="bad",
                display_name="Bad",
                level=CertificateLevel.BASIC,
                category=CertificateCategory.SAFETY,
                validity_period=timedelta(days=10),
                match_weight=101,
            )

    def test_non_positive_validity_rejected(self):
        with self.assertRaises(ConfigurationError):
            CertificateType(
                id="bad",
                display_name="Bad",
                level=CertificateLevel.BASIC,
                category=CertificateCategory.SAFETY,
                validity_period=timedelta(0),
            )

    def test_covers_requires_same_category(self):
        catalog = default_catalog()
        # bhv and vca_basic are both basic, but different categories
        self.assertFalse(catalog.get("bhv").covers(catalog.get("vca_basic")))
        # bhv and ehbo share first_aid at the same level
        self.assertTrue(catalog.get("bhv").covers(catalog.get("ehbo")))

    def test_wpbr_b_covers_wpbr_a_but_not_reverse(self):
        catalog = default_catalog()
        self.assertTrue(catalog.get("wpbr_b").covers(catalog.get("wpbr_a")))
        self.assertFalse(catalog.get("wpbr_a").covers(catalog.get("wpbr_b")))

    def test_expert_covers_advanced_in_category(self):
        catalog = default_catalog()
        self.assertTrue(catalog.get("persoonbeveiliging").covers(catalog.get("wpbr_b")))

    def test_matches_name_is_case_insensitive_both_directions(self):
        self.assertTrue(CERT_A.matches_name("GUARD LICENSE"))
        self.assertTrue(CERT_A.matches_name("  Guard License A holder  "))
        self.assertTrue(CERT_A.matches_name("guard a"))
        self.assertFalse(CERT_A.matches_name("forklift"))
        self.assertFalse(CERT_A.matches_name(""))

    def test_unrelated_types_are_not_equivalent(self):
        self.assertFalse(CERT_A.is_equivalent_to(CERT_B))
        self.assertFalse(CERT_B.is_equivalent_to(CERT_A))


class TestCertificateCatalog(unittest.TestCase):

    def setUp(self):
        self.catalog = default_catalog()

    def test_default_catalog_contents(self):
        self.assertEqual(
            self.catalog.ids(),
            ["wpbr_a", "wpbr_b", "vca_basic", "bhv", "ehbo", "portier",
             "persoonbeveiliging", "rijbewijs_b"],
        )
        self.assertEqual(len(self.catalog), 8)
        self.assertIn("bhv", self.catalog)
        self.assertNotIn("unknown", self.catalog)

    def test_get_unknown_returns_none(self):
        self.assertIsNone(self.catalog.get("unknown"))

    def test_require_unknown_raises(self):
        with self.assertRaises(ConfigurationError):
            self.catalog.require("unknown")

    def test_find_by_name_equivalent(self):
        self.assertEqual(self.catalog.find_by_name("Beveiliger A").id, "wpbr_a")
        self.assertEqual(self.catalog.find_by_name("close protection").id, "persoonbeveiliging")

    def test_find_by_name_first_match_in_catalog_order(self):
        # "wpbr" matches both diplomas; wpbr_a comes first
        self.assertEqual(self.catalog.find_by_name("WPBR").id, "wpbr_a")

    def test_find_by_name_no_match(self):
        self.assertIsNone(self.catalog.find_by_name("pilot license"))

    def test_by_category(self):
        first_aid = self.catalog.by_category(CertificateCategory.FIRST_AID)
        self.assertEqual([t.id for t in first_aid], ["bhv", "ehbo"])

    def test_by_level(self):
        expert = self.catalog.by_level(CertificateLevel.EXPERT)
        self.assertEqual([t.id for t in expert], ["persoonbeveiliging"])

    def test_mandatory_baseline(self):
        self.assertEqual([t.id for t in self.catalog.mandatory_baseline()], ["wpbr_a"])

    def test_default_estimates_and_prerequisites(self):
        wpbr_b = self.catalog.get("wpbr_b")
        self.assertEqual(wpbr_b.prerequisites, ("wpbr_a",))
        self.assertEqual(wpbr_b.estimated_days_to_obtain, 60)
        self.assertEqual(wpbr_b.estimated_cost, 750.0)
        self.assertEqual(self.catalog.get("persoonbeveiliging").prerequisites, ("wpbr_b",))

    def test_duplicate_ids_rejected(self):
        with self.assertRaises(ConfigurationError):
            CertificateCatalog([CERT_A, CERT_A])

    def test_iteration_preserves_order(self):
        catalog = synthetic_catalog()
        self.assertEqual(
            [t.id for t in catalog],
            ["cert_a", "cert_a_plus", "cert_legacy", "cert_b", "cert_c"],
        )

    def test_all_returns_a_copy_in_catalog_order(self):
        catalog = synthetic_catalog()
        types = catalog.all()
        self.assertEqual(types, list(catalog))
        types.clear()
        self.assertEqual(len(catalog), 5)


def test_load_catalog_from_yaml(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "certificates:\n"
        "  - id: x1\n"
        "    display_name: Crowd Control\n"
        "    level: advanced\n"
        "    category: firstAid\n"
        "    validity_days: 730\n"
        "    equivalent_names: [crowd manager]\n"
        "    match_weight: 65\n"
        "  - id: x2\n"
        "    display_name: Door Supervisor\n"
    )

    catalog = load_catalog(str(path))

    assert catalog.ids() == ["x1", "x2"]
    x1 = catalog.get("x1")
    assert x1.level == CertificateLevel.ADVANCED
    assert x1.category == CertificateCategory.FIRST_AID
    assert x1.validity_period == timedelta(days=730)
    assert x1.equivalent_names == ("crowd manager",)
    # Defaults from CatalogEntryConfig
    assert catalog.get("x2").match_weight == 50


def test_load_catalog_invalid_weight(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "certificates:\n"
        "  - id: x1\n"
        "    display_name: Crowd Control\n"
        "    match_weight: 150\n"
    )
    with pytest.raises(ConfigurationError):
        load_catalog(str(path))


def test_load_catalog_unknown_level(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "certificates:\n"
        "  - id: x1\n"
        "    display_name: Crowd Control\n"
        "    level: grandmaster\n"
    )
    with pytest.raises(ConfigurationError):
        load_catalog(str(path))


def test_load_catalog_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_catalog(str(tmp_path / "nope.yaml"))
