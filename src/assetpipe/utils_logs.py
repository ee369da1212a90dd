# src/assetpipe/utils_logs.py
"""Console logger shared by the CLI, the builders, and the dev server.

Builders run concurrently, so every record carries the name of the build
task that emitted it (`[styles]`, `[images]`, ...). The name lives in a
context variable: asyncio tasks and `asyncio.to_thread` copy it, so a
builder and the worker threads it starts are tagged alike.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Generator
from contextlib import contextmanager, suppress
from contextvars import ContextVar
from typing import Any, TextIO, cast

from .constants import DEFAULT_ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL
from .meta import PROGRAM_ENV
from .utils_types import cast_hint


# --- Constants ---------------------------------------------------------------

RESET = "\033[0m"
CYAN = "\033[36m"
MAGENTA = "\033[35m"
YELLOW = "\033[93m"
RED = "\033[91m"
GRAY = "\033[90m"

TRACE_LEVEL = logging.DEBUG - 5
SILENT_LEVEL = logging.CRITICAL + 1  # disables all logging

LEVEL_ORDER = [
    "trace",
    "debug",
    "info",
    "warning",
    "error",
    "critical",
    "silent",
]

# level name -> (color, tag); info has no tag
LEVEL_TAGS = {
    "TRACE": (GRAY, "[TRACE]"),
    "DEBUG": (CYAN, "[DEBUG]"),
    "WARNING": (YELLOW, "⚠️ "),
    "ERROR": (RED, "❌ "),
    "CRITICAL": (RED, "💥 "),
}

TASK_TAG_COLOR = MAGENTA

_current_task: ContextVar[str | None] = ContextVar("assetpipe_task", default=None)


def current_task_tag() -> str | None:
    return _current_task.get()


@contextmanager
def task_tag(name: str) -> Generator[None, None, None]:
    """Tag every record logged inside the block (and its child tasks) with `name`."""
    token = _current_task.set(name)
    try:
        yield
    finally:
        _current_task.reset(token)


def safe_log(msg: str) -> None:
    """Emergency logger that never fails."""
    stream = cast("TextIO", sys.__stderr__)
    try:
        print(msg, file=stream)
    except Exception:  # noqa: BLE001
        with suppress(Exception):
            stream.write(f"[INTERNAL] {msg}\n")


# --- CLI logger ----------------------------------------------------------------


class CLILogger(logging.Logger):
    """Logger with TRACE/SILENT levels, task tags, and split stdout/stderr output."""

    enable_color: bool = False

    _logging_module_extended: bool = False

    # stdout/stderr seen when the handler was built; pytest capsys swaps them
    _last_streams: tuple[TextIO, TextIO] | None = None

    def __init__(
        self,
        name: str,
        level: int = logging.NOTSET,
        *,
        enable_color: bool | None = None,
    ) -> None:
        super().__init__(name, level)
        if self.level == logging.NOTSET:
            self.setLevel(self.determine_log_level())
        if enable_color is None:
            enable_color = type(self).determine_color_enabled()
        self.enable_color = enable_color
        self.propagate = False

    @classmethod
    def extend_logging_module(cls) -> bool:
        """Register TRACE and SILENT with the logging module (once)."""
        if cls._logging_module_extended:
            return False
        cls._logging_module_extended = True

        logging.setLoggerClass(cls)
        logging.addLevelName(TRACE_LEVEL, "TRACE")
        logging.addLevelName(SILENT_LEVEL, "SILENT")
        return True

    @classmethod
    def determine_color_enabled(cls) -> bool:
        """NO_COLOR wins, then FORCE_COLOR, then whether stdout is a TTY."""
        if "NO_COLOR" in os.environ:
            return False
        if os.getenv("FORCE_COLOR", "").lower() in {"1", "true", "yes"}:
            return True
        return sys.stdout.isatty()

    def determine_log_level(
        self,
        *,
        args: argparse.Namespace | None = None,
        root_log_level: str | None = None,
    ) -> str:
        """Resolve log level from CLI → env → root config → default."""
        args_level = getattr(args, "log_level", None)
        if args_level is not None:
            return cast_hint(str, args_level).upper()

        env_level = os.getenv(f"{PROGRAM_ENV}_{DEFAULT_ENV_LOG_LEVEL}") or os.getenv(
            DEFAULT_ENV_LOG_LEVEL
        )
        return (env_level or root_log_level or DEFAULT_LOG_LEVEL).upper()

    def setLevel(self, level: int | str) -> None:  # noqa: N802
        if isinstance(level, str):
            level = level.upper()
        super().setLevel(level)

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.getEffectiveLevel())

    def _ensure_handler(self) -> None:
        streams = (sys.stdout, sys.stderr)
        if self.handlers and self._last_streams is not None:
            if all(a is b for a, b in zip(self._last_streams, streams)):
                return

        self.handlers.clear()
        handler = DualStreamHandler()
        handler.setFormatter(TagFormatter("%(message)s"))
        handler.enable_color = self.enable_color
        self.addHandler(handler)
        self._last_streams = streams

    def _log(  # type: ignore[override]
        self, level: int, msg: str, args: tuple[Any, ...], **kwargs: Any
    ) -> None:
        self._ensure_handler()
        extra = dict(kwargs.pop("extra", None) or {})
        extra.setdefault("task", current_task_tag())
        super()._log(level, msg, args, extra=extra, **kwargs)

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, msg, args, **kwargs)

    def log_dynamic(
        self, level: str | int, msg: str, *args: Any, **kwargs: Any
    ) -> None:
        """Log at a level chosen at runtime, by number or name."""
        level_no = logging.getLevelName(level.upper()) if isinstance(level, str) else level
        if not isinstance(level_no, int):
            self.error("Unknown log level: %r", level)
            return
        if self.isEnabledFor(level_no):
            self._log(level_no, msg, args, **kwargs)

    def error_if_not_debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an error; include the traceback only when debug is enabled."""
        self._log_if_not_debug(logging.ERROR, msg, args, **kwargs)

    def critical_if_not_debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_if_not_debug(logging.CRITICAL, msg, args, **kwargs)

    def _log_if_not_debug(
        self, level: int, msg: str, args: tuple[Any, ...], **kwargs: Any
    ) -> None:
        exc_info = kwargs.pop("exc_info", True)
        if not self.isEnabledFor(logging.DEBUG):
            exc_info = False
        if self.isEnabledFor(level):
            self._log(level, msg, args, exc_info=exc_info, **kwargs)


# --- Formatter and handler -------------------------------------------------------


class TagFormatter(logging.Formatter):
    """Prefix a message with its level tag and the build task's name."""

    def format(self, record: logging.LogRecord) -> str:
        color = getattr(record, "enable_color", False)
        parts = []

        level_color, level_tag = LEVEL_TAGS.get(record.levelname, ("", ""))
        if level_tag:
            parts.append(f"{level_color}{level_tag}{RESET}" if color else level_tag)

        task = getattr(record, "task", None)
        if task:
            tag = f"[{task}]"
            parts.append(f"{TASK_TAG_COLOR}{tag}{RESET}" if color else tag)

        parts.append(super().format(record))
        return " ".join(parts)


class DualStreamHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Send info/debug/trace to stdout, everything else to stderr."""

    enable_color: bool = False

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr if record.levelno >= logging.WARNING else sys.stdout
        record.enable_color = self.enable_color
        super().emit(record)
