# src/assetpipe/logs.py

import logging
from typing import cast

from .meta import PROGRAM_PACKAGE
from .utils_logs import CLILogger


class AppLogger(CLILogger):
    """App-specific logger class."""


# --- Logger initialization ---------------------------------------------------

# Must happen *before* any loggers are created.
AppLogger.extend_logging_module()

_APP_LOGGER = cast("AppLogger", logging.getLogger(PROGRAM_PACKAGE))


def getAppLogger() -> AppLogger:  # noqa: N802
    """Return the configured app logger."""
    return _APP_LOGGER

