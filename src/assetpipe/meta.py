# src/assetpipe/meta.py
"""Program identity shared by the CLI, config discovery, and logging."""

from typing import NamedTuple


PROGRAM_DISPLAY = "assetpipe"
PROGRAM_SCRIPT = "assetpipe"
PROGRAM_PACKAGE = "assetpipe"
PROGRAM_CONFIG = "assetpipe"  # .assetpipe.jsonc, [tool.assetpipe]
PROGRAM_ENV = "ASSETPIPE"


class Metadata(NamedTuple):
    version: str
    commit: str
