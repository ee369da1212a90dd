# tests/0_independant/test_determine_color_enabled.py
"""Tests for CLILogger.determine_color_enabled()."""

import sys
import types

import pytest

import assetpipe.utils_logs as mod_utils_logs


@pytest.fixture(autouse=True)
def clean_color_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("NO_COLOR", "FORCE_COLOR"):
        monkeypatch.delenv(var, raising=False)


def test_no_color_disables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NO_COLOR", "1")
    assert mod_utils_logs.CLILogger.determine_color_enabled() is False


@pytest.mark.parametrize("value", ["1", "true", "TRUE", "yes", "Yes"])
def test_force_color_enables(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("FORCE_COLOR", value)
    assert mod_utils_logs.CLILogger.determine_color_enabled() is True


def test_falls_back_to_tty_detection(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without env vars, falls back to sys.stdout.isatty()."""
    monkeypatch.setattr(sys, "stdout", types.SimpleNamespace(isatty=lambda: True))
    assert mod_utils_logs.CLILogger.determine_color_enabled() is True

    monkeypatch.setattr(sys, "stdout", types.SimpleNamespace(isatty=lambda: False))
    assert mod_utils_logs.CLILogger.determine_color_enabled() is False


def test_no_color_overrides_force_color(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setenv("FORCE_COLOR", "1")
    assert mod_utils_logs.CLILogger.determine_color_enabled() is False
