"""
Pytest configuration for the regulated assets tests: validates the
environment and provides shared fixtures.
"""

import sys

import httpx
import pytest

from regulated_assets.metadata.stellar_toml import StellarToml
from tests.helpers import SAMPLE_TOML

# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture
def sample_toml_text() -> str:
    return SAMPLE_TOML


@pytest.fixture
def sample_toml() -> StellarToml:
    return StellarToml.from_string(SAMPLE_TOML)


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """List that mock handlers append each received request to."""
    return []


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Validate test environment."""
    missing = []
    for mod in ("httpx", "pydantic", "pydantic_settings", "click", "yaml"):
        try:
            __import__(mod)
        except ImportError:
            missing.append(mod)

    if missing:
        print(
            f"\n Missing dependencies: {', '.join(missing)}\n"
            " Run: pip install -e '.[dev]'\n",
            file=sys.stderr,
        )
        raise SystemExit(1)
