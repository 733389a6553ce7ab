"""Pytest-bdd configuration and shared fixtures for resolution feature tests."""

import pytest


@pytest.fixture
def context():
    """Shared test context for scenario state."""
    return {"schemas": {}, "results": [], "error": None}
