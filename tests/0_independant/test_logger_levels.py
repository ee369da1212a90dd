# tests/0_independant/test_logger_levels.py
"""Tests for the custom levels, level resolution and stream routing."""

import argparse
import logging

import pytest

import assetpipe.logs as mod_logs
import assetpipe.utils_logs as mod_utils_logs


def test_trace_and_silent_levels_registered() -> None:
    assert logging.getLevelName(mod_utils_logs.TRACE_LEVEL) == "TRACE"
    assert logging.getLevelName(mod_utils_logs.SILENT_LEVEL) == "SILENT"
    assert mod_utils_logs.TRACE_LEVEL < logging.DEBUG


def test_set_level_is_case_insensitive(direct_logger: mod_logs.AppLogger) -> None:
    direct_logger.setLevel("Warning")
    assert direct_logger.level == logging.WARNING
    assert direct_logger.level_name == "WARNING"


def test_determine_log_level_prefers_cli(
    monkeypatch: pytest.MonkeyPatch,
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- setup ---
    monkeypatch.setenv("LOG_LEVEL", "error")
    args = argparse.Namespace(log_level="debug")

    # --- execute and verify ---
    assert direct_logger.determine_log_level(args=args) == "DEBUG"


def test_determine_log_level_env_order(
    monkeypatch: pytest.MonkeyPatch,
    direct_logger: mod_logs.AppLogger,
) -> None:
    """The program-specific variable wins over the generic one."""
    monkeypatch.setenv("LOG_LEVEL", "error")
    assert direct_logger.determine_log_level(root_log_level="debug") == "ERROR"

    monkeypatch.setenv("ASSETPIPE_LOG_LEVEL", "warning")
    assert direct_logger.determine_log_level(root_log_level="debug") == "WARNING"


def test_determine_log_level_falls_back_to_config_then_default(
    direct_logger: mod_logs.AppLogger,
) -> None:
    assert direct_logger.determine_log_level(root_log_level="trace") == "TRACE"
    assert direct_logger.determine_log_level() == "INFO"


def test_log_dynamic_respects_level(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- setup ---
    direct_logger.setLevel("info")

    # --- execute ---
    direct_logger.log_dynamic("debug", "hidden message")
    direct_logger.log_dynamic("info", "shown message")

    # --- verify ---
    out = capsys.readouterr().out
    assert "hidden message" not in out
    assert "shown message" in out


def test_dual_stream_splits_by_level(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- execute ---
    direct_logger.info("to stdout")
    direct_logger.error("to stderr")

    # --- verify ---
    captured = capsys.readouterr()
    assert "to stdout" in captured.out
    assert "to stderr" in captured.err
    assert "to stderr" not in captured.out


def test_error_if_not_debug_hides_traceback_at_info(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- setup ---
    direct_logger.setLevel("info")

    # --- execute ---
    try:
        raise ValueError("boom")  # noqa: TRY301
    except ValueError:
        direct_logger.error_if_not_debug("failed: boom")

    # --- verify ---
    err = capsys.readouterr().err
    assert "failed: boom" in err
    assert "Traceback" not in err


def test_error_if_not_debug_shows_traceback_at_debug(
    capsys: pytest.CaptureFixture[str],
    direct_logger: mod_logs.AppLogger,
) -> None:
    # --- setup ---
    direct_logger.setLevel("debug")

    # --- execute ---
    try:
        raise ValueError("boom")  # noqa: TRY301
    except ValueError:
        direct_logger.error_if_not_debug("failed: boom")

    # --- verify ---
    assert "Traceback" in capsys.readouterr().err


def test_safe_log_never_raises(capfd: pytest.CaptureFixture[str]) -> None:
    # writes to the real stderr, below pytest's sys-level capture
    mod_utils_logs.safe_log("emergency")
    assert "emergency" in capfd.readouterr().err
