# src/assetpipe/actions.py
import asyncio
import re
import subprocess
from contextlib import suppress
from pathlib import Path

from .build import run_build, run_task
from .context import BuildContext
from .logs import getAppLogger
from .meta import PROGRAM_PACKAGE, Metadata
from .server import DevServer
from .tasks import GraphReport


def run_once(name: str, ctx: BuildContext) -> GraphReport:
    """Run `build`, `clean` or one category builder to completion."""
    if name == "build":
        return asyncio.run(run_build(ctx))
    return asyncio.run(run_task(name, ctx))


def run_watch(ctx: BuildContext, server_cls: type[DevServer] = DevServer) -> GraphReport:
    """Build, then serve and rebuild on change until interrupted.

    The server is only started if the initial build succeeded. Build and
    server share one event loop.
    """
    logger = getAppLogger()
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        report = loop.run_until_complete(run_build(ctx))
        if not report.ok:
            logger.error("Initial build failed; not starting the dev server.")
            return report

        server = server_cls(ctx, loop=loop)
        logger.info("👀 Watching for changes... Press Ctrl+C to stop.")
        try:
            server.start()
        except KeyboardInterrupt:
            logger.info("\n🛑 Watch stopped.")
        return report
    finally:
        asyncio.set_event_loop(None)
        loop.close()


def get_metadata() -> Metadata:
    """Return (version, commit) for this tool.

    Version comes from the installed distribution, else pyproject.toml;
    commit from git when run from a checkout.
    """
    logger = getAppLogger()
    version = "unknown"
    commit = "unknown"

    with suppress(Exception):
        from importlib.metadata import version as dist_version  # noqa: PLC0415

        version = dist_version(PROGRAM_PACKAGE)

    root = Path(__file__).resolve().parents[2]
    pyproject = root / "pyproject.toml"
    if version == "unknown" and pyproject.exists():
        logger.trace(f"trying to read metadata from {pyproject}")
        text = pyproject.read_text(encoding="utf-8")
        match = re.search(r'(?m)^\s*version\s*=\s*["\']([^"\']+)["\']', text)
        if match:
            version = match.group(1)

    with suppress(Exception):
        logger.trace("trying to get commit from git")
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            cwd=root,
            capture_output=True,
            text=True,
            check=True,
        )
        commit = result.stdout.strip()

    logger.trace(f"got package version {version} with commit {commit}")
    return Metadata(version, commit)
