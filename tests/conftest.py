# tests/conftest.py
"""Shared test setup for the project."""

from collections.abc import Generator

import pytest

import assetpipe.builders.styles as mod_styles
import assetpipe.logs as mod_logs
from tests.utils import DEFAULT_TEST_LOG_LEVEL
from tests.utils.log_fixtures import (
    direct_logger,
    module_logger,
)


# Re-exported so pytest can discover them.
__all__ = [
    "direct_logger",
    "module_logger",
]

_ENV_KEYS = (
    "ASSETPIPE_MODE",
    "BUILD_MODE",
    "ASSETPIPE_LOG_LEVEL",
    "LOG_LEVEL",
    "FAKE_PREFIXER_FAIL",
)


@pytest.fixture(autouse=True)
def reset_logger_level() -> Generator[None, None, None]:
    """Put the app logger back at the test level around every test."""
    logger = mod_logs.getAppLogger()
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)
    yield
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Mode and level come from the test, never the developer's shell."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_prefixer_warning() -> None:
    mod_styles.reset_missing_prefixers()
