# src/assetpipe/builders/copy.py
"""Pure-copy builders: HTML pages and fonts."""

import asyncio
import shutil
from pathlib import Path

from assetpipe.context import BuildContext
from assetpipe.logs import getAppLogger
from assetpipe.utils import expand_glob, output_path_for, plural


def copy_file(src: Path, dest: Path) -> Path:
    """Copy one file, creating parent directories. Follows symlinks."""
    logger = getAppLogger()
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dest)
    logger.debug("📄 %s → %s", src, dest)
    return dest


async def copy_category(ctx: BuildContext, name: str) -> list[Path]:
    """Copy every file matching the category glob into its output directory."""
    logger = getAppLogger()
    category = ctx.category(name)
    sources = expand_glob(category["input"], ctx.root)

    written: list[Path] = []
    for src in sources:
        dest = output_path_for(src, category["input"], ctx.root, category["output"])
        written.append(await asyncio.to_thread(copy_file, src, dest))

    logger.info("📦 copied %d file%s", len(written), plural(written))
    return written


async def build_html(ctx: BuildContext) -> list[Path]:
    return await copy_category(ctx, "html")


async def build_fonts(ctx: BuildContext) -> list[Path]:
    return await copy_category(ctx, "fonts")
