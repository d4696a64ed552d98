"""
Pytest configuration and shared fixtures for Merkle proof tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_merkle = importlib.import_module("fixtures.merkle_fixtures")

make_demo_leaves = _merkle.make_demo_leaves
make_leaves = _merkle.make_leaves
make_tree = _merkle.make_tree
make_registry = _merkle.make_registry


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def demo_leaves():
    """Provide the three-leaf demo set."""
    return make_demo_leaves()


@pytest.fixture
def demo_tree(demo_leaves):
    """Provide a tree built over the demo leaves."""
    return make_tree(demo_leaves)


@pytest.fixture
def registry():
    """Provide an empty root registry."""
    return make_registry()


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Clear MERKLE_* variables and run from an empty directory."""
    import os

    for key in list(os.environ):
        if key.startswith("MERKLE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
