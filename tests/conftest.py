"""Shared fixtures for the fieldwalker test suite."""

import pytest


@pytest.fixture(autouse=True)
def clean_walk_env(monkeypatch):
    """Keep walk defaults independent of the developer's environment."""
    monkeypatch.delenv("FIELDWALKER_MAX_DEPTH", raising=False)
    monkeypatch.delenv("FIELDWALKER_INCLUDE_PRIVATE", raising=False)
