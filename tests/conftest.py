"""Pytest configuration and fixtures.

Provides environment isolation, settings-cache resets and logging setup.
All fixtures here are autouse unless noted.
"""

from __future__ import annotations

import logging
import os

import pytest

from resultkit.config import get_settings

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    monkeypatch.setattr("resultkit.config.load_dotenv", lambda *_a, **_k: False)


@pytest.fixture(autouse=True)
def isolate_resultkit_env(monkeypatch):
    """Clear RESULTKIT_* variables and the cached settings around each test."""
    for key in list(os.environ.keys()):
        if key.startswith("RESULTKIT_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def strict_mode(monkeypatch):
    """Turn on strict mode through the environment (opt-in, not autouse)."""
    monkeypatch.setenv("RESULTKIT_STRICT", "1")


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("asyncio").setLevel(logging.WARNING)
