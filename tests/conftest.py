"""
Pytest configuration and fixtures.

Plain data builders live in tests/fixtures/certificate_fixtures.py so that
unittest-style classes can import them directly.
"""

import pytest

from certmatch.catalog import default_catalog
from certmatch.config_loader import EngineConfig
from certmatch.engine import EligibilityEngine
from tests.fixtures.certificate_fixtures import NOW, synthetic_catalog


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests that evaluate large batches (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def catalog():
    """Small synthetic catalog with unambiguous coverage relations."""
    return synthetic_catalog()


@pytest.fixture
def dutch_catalog():
    return default_catalog()


@pytest.fixture
def engine():
    return EligibilityEngine(EngineConfig())
