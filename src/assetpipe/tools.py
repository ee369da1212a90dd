# src/assetpipe/tools.py
"""Locating and running external executables (bundler, prefixer)."""

import asyncio
import os
import shutil
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .config import ToolConfigResolved
from .logs import getAppLogger


@dataclass
class ToolResult:
    command: list[str]
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def message(self) -> str:
        """Best human-readable explanation of the run (stderr, else stdout)."""
        text = self.stderr or self.stdout
        return text.decode("utf-8", errors="replace").strip()


def find_tool_executable(
    tool_name: str,
    custom_path: str | None = None,
) -> str | None:
    """Find tool executable, checking custom_path first, then PATH.

    Args:
        tool_name: Name of the tool to find
        custom_path: Optional custom path to the executable

    Returns:
        Path to executable if found, None otherwise
    """
    if custom_path:
        path = Path(custom_path)
        if path.exists() and path.is_file():
            return str(path.resolve())
        # If custom path doesn't exist, fall back to PATH

    return shutil.which(tool_name)


def build_tool_command(
    tool: ToolConfigResolved,
    extra: list[str],
) -> list[str] | None:
    """Build the full command for a tool, or None if it is not installed.

    Order: executable, configured args, configured options, then the
    per-invocation `extra` arguments.
    """
    executable = find_tool_executable(tool["command"], custom_path=tool["path"])
    if not executable:
        return None
    return [executable, *tool["args"], *tool["options"], *extra]


async def run_tool(
    command: list[str],
    *,
    stdin: bytes | None = None,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> ToolResult:
    """Run a command as an asyncio child process and collect its output.

    If the awaiting task is cancelled the child is killed before the
    cancellation propagates.
    """
    logger = getAppLogger()
    logger.debug("Running: %s", " ".join(command))

    proc = await asyncio.create_subprocess_exec(
        *command,
        stdin=asyncio.subprocess.PIPE if stdin is not None else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
        env={**os.environ, **env} if env else None,
    )
    try:
        stdout, stderr = await proc.communicate(stdin)
    except asyncio.CancelledError:
        if proc.returncode is None:
            proc.kill()
            await proc.wait()
        raise

    result = ToolResult(
        command=command,
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout,
        stderr=stderr,
    )
    logger.trace("[run_tool] exit=%d command=%s", result.returncode, command[0])
    return result
