#!/usr/bin/env python3
"""Test CatalogProvider atomic swapping."""

import threading

import pytest

from certmatch.catalog import CatalogProvider, CertificateCatalog, default_catalog
from certmatch.config_loader import CatalogConfig
from certmatch.engine import EligibilityEngine
from certmatch.exceptions import ConfigurationError
from certmatch.matcher import Requirement, RequirementSet
from tests.fixtures.certificate_fixtures import NOW, make_holding, synthetic_catalog


def test_defaults_to_builtin_catalog():
    provider = CatalogProvider()
    assert "wpbr_a" in provider.current()
    assert provider.version == 1


def test_from_config_without_file_uses_default():
    provider = CatalogProvider.from_config(CatalogConfig())
    assert provider.current().ids() == default_catalog().ids()


def test_swap_returns_previous_and_bumps_version():
    original = default_catalog()
    replacement = synthetic_catalog()
    provider = CatalogProvider(original)

    previous = provider.swap(replacement)

    assert previous is original
    assert provider.current() is replacement
    assert provider.version == 2


def test_failed_reload_keeps_current(tmp_path):
    provider = CatalogProvider(synthetic_catalog())
    current = provider.current()

    with pytest.raises(ConfigurationError):
        provider.reload_from_file(str(tmp_path / "missing.yaml"))

    assert provider.current() is current
    assert provider.version == 1


def test_reload_from_file(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text("certificates:\n  - id: only\n    display_name: Only One\n")
    provider = CatalogProvider(synthetic_catalog())

    provider.reload_from_file(str(path))

    assert provider.current().ids() == ["only"]


def test_engine_uses_swapped_catalog():
    provider = CatalogProvider(synthetic_catalog())
    engine = EligibilityEngine(catalog_provider=provider)
    requirement_set = RequirementSet(job_id="job-1", requirements=[Requirement("cert_a")])
    holdings = [make_holding("h1", "cert_a")]

    assert engine.evaluate(holdings, requirement_set, now=NOW).overall_score == 100

    provider.swap(default_catalog())

    # cert_a no longer exists in the active catalog
    with pytest.raises(ConfigurationError):
        engine.evaluate(holdings, requirement_set, now=NOW)


def test_concurrent_readers_always_see_a_complete_catalog():
    first = synthetic_catalog()
    second = default_catalog()
    provider = CatalogProvider(first)
    seen = []
    stop = threading.Event()

    def reader():
        while True:
            catalog = provider.current()
            seen.append(tuple(catalog.ids()))
            if stop.is_set():
                break

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for i in range(50):
        provider.swap(second if i % 2 == 0 else first)
    stop.set()
    for t in threads:
        t.join()

    valid = {tuple(first.ids()), tuple(second.ids())}
    assert seen
    assert set(seen) <= valid
    assert isinstance(provider.current(), CertificateCatalog)
