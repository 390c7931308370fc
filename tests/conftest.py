"""
Root Pytest Fixtures.

Shared fixtures available to all test types.
"""

from collections.abc import Generator

import pytest

from call_api_check.core.config import get_app_config, get_settings
from call_api_check.core.config_schema import ApplicationSchema
from call_api_check.core.logging import setup_logging


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _clear_config_cache() -> Generator[None, None, None]:
    """Clear cached settings between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


@pytest.fixture
def application() -> ApplicationSchema:
    """
    Application settings with the shipped defaults.

    Usage:
        def test_defaults(application):
            options, invocation = classify_arguments(["-c", "X", "--"], application)
    """
    return ApplicationSchema(
        name="call-api-check",
        version="0.1.0",
        daemon={
            "scheme": "https",
            "host": "localhost",
            "port": 5668,
            "checker_path": "/v1/checker",
        },
        timeouts={"check": 60},
    )


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _quiet_logging() -> None:
    """Route structlog through stdlib logging with no handlers attached."""
    setup_logging(level="WARNING", enable_console=False, enable_file_logging=False)
