"""Shared fixtures for integration tests.

These tests use real components (config loader, adapter registry, real
adapter modules) with HTTP mocked via respx.
"""

from __future__ import annotations

import os

import pytest
import respx


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Strip STREAMHOUND_* variables so tests see only what they set."""

    for key in list(os.environ):
        if key.startswith("STREAMHOUND_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch
