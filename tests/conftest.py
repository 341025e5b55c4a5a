"""Pytest configuration and fixtures.

Provides environment isolation for ``FALLIBLE_*`` settings and shared error
fixtures. Environment fixtures are autouse unless noted.
"""

from __future__ import annotations

import logging
import os

import pytest

from fallible.config import reset_settings_cache
from tests.helpers import NotFoundError, Recorder, ValidationError

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def isolate_settings_env(request, monkeypatch):
    """Ensure a clean settings environment for each test.

    Clears FALLIBLE_* env vars and the process-level settings cache.
    Opt-out: @pytest.mark.allow_env_pollution
    """
    if not request.node.get_closest_marker("allow_env_pollution"):
        for key in list(os.environ.keys()):
            if key.startswith("FALLIBLE_"):
                monkeypatch.delenv(key, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture
def fallible_logs(caplog):
    """Capture DEBUG and above from the fallible loggers."""
    caplog.set_level(logging.DEBUG, logger="fallible")
    return caplog


# =============================================================================
# Error Fixtures
# =============================================================================


@pytest.fixture
def failed() -> NotFoundError:
    """A concrete error whose message is ``"failed"``."""
    return NotFoundError("failed")


@pytest.fixture
def invalid() -> ValidationError:
    return ValidationError("bad input", hint="Send a non-empty key.")


@pytest.fixture
def recorder() -> Recorder:
    return Recorder(returns=-1)
