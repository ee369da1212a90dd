# tests/utils/log_fixtures.py
"""Fixtures for tests that inspect or isolate the app logger."""

import uuid

import pytest

import assetpipe.logs as mod_logs

from .patch_everywhere import patch_everywhere
from .trace import make_test_trace


TEST_TRACE = make_test_trace(icon="📏")


def _suffix() -> str:
    return "_" + uuid.uuid4().hex[:6]


@pytest.fixture
def direct_logger() -> mod_logs.AppLogger:
    """A brand-new AppLogger with no shared state.

    Does NOT affect getAppLogger(); only for testing the logger itself.
    """
    logger = mod_logs.AppLogger(f"test_logger{_suffix()}", enable_color=False)
    logger.setLevel("trace")
    return logger


@pytest.fixture
def module_logger(monkeypatch: pytest.MonkeyPatch) -> mod_logs.AppLogger:
    """Replace getAppLogger() everywhere with an isolated instance.

    Every module that calls getAppLogger() sees this logger for the
    duration of the test.
    """
    new_logger = mod_logs.AppLogger(f"isolated_logger{_suffix()}", enable_color=False)
    new_logger.setLevel("trace")
    patch_everywhere(monkeypatch, mod_logs, "getAppLogger", lambda: new_logger)
    TEST_TRACE(
        "module_logger fixture",
        f"id={id(new_logger)}",
        f"level={new_logger.level_name}",
    )
    return new_logger
