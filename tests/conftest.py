"""
Pytest configuration and shared fixtures for hashtree tests.

This conftest.py:
1. Adds project root and tests root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Isolates tests from HASHTREE_* environment variables
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from fixtures.common import make_items  # noqa: E402
from hashtree.config import set_default_config  # noqa: E402
from hashtree.merkle import build  # noqa: E402


# =============================================================================
# Environment Isolation
# =============================================================================

_ENV_KEYS = [
    "HASHTREE_LOG_LEVEL",
    "HASHTREE_LOG_FILE",
    "HASHTREE_MAX_WORKERS",
    "HASHTREE_PARALLEL_THRESHOLD",
    "HASHTREE_INDEX_LEAVES",
]


@pytest.fixture(autouse=True)
def clean_runtime_config(monkeypatch):
    """Run every test against default configuration."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def eight_items():
    """The integers 0..7."""
    return make_items(8)


@pytest.fixture
def eight_item_tree(eight_items):
    """Tree over the integers 0..7 (no padding needed)."""
    return build(eight_items)


@pytest.fixture
def three_item_tree():
    """Tree over the integers 0..2 (one padding leaf)."""
    return build(make_items(3))


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_check_passed():
    """Helper to assert a specific check passed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert checks[0].ok, f"Check '{check_id}' failed: {checks[0].message}"
    return _assert


@pytest.fixture
def assert_check_failed():
    """Helper to assert a specific check failed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert not checks[0].ok, f"Check '{check_id}' unexpectedly passed"
    return _assert
