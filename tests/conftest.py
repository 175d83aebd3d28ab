"""
Pytest configuration and shared fixtures for fetch-shaper tests.

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

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_transport = importlib.import_module("fixtures.transport_fixtures")

FakeResponse = _transport.FakeResponse
FakeTransport = _transport.FakeTransport
StubSession = _transport.StubSession
make_requests_response = _transport.make_requests_response


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def fake_response():
    """Provide a 200 JSON FakeResponse."""
    return FakeResponse({"ok": True})


@pytest.fixture
def fake_transport(fake_response):
    """Provide a FakeTransport returning fake_response."""
    return FakeTransport(fake_response)


@pytest.fixture
def shaper(fake_transport):
    """Provide a RequestShaper over fake_transport."""
    from fetch_shaper.http import RequestShaper
    return RequestShaper(fake_transport)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove FETCH_SHAPER_* variables so config tests start from defaults."""
    import os
    for key in list(os.environ):
        if key.startswith("FETCH_SHAPER_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def reset_default_config():
    """Reset the process-wide default config around a test."""
    from fetch_shaper.config import set_default_config
    set_default_config(None)
    yield
    set_default_config(None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
