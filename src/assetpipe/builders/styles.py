# src/assetpipe/builders/styles.py
"""Sass → prefixed → minified CSS.

Per non-partial source the steps run strictly in order: compile (with a
source map in development), vendor-prefix, rename to `<stem><suffix>.css`,
minify, write the map, write the stylesheet, then inject it into any
connected browser.

Compile and prefix errors are logged and the file is skipped; they do not
fail the task, so a typo never takes down `watch`.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path

import rcssmin
import sass

from assetpipe.context import BuildContext
from assetpipe.logs import getAppLogger
from assetpipe.tools import build_tool_command, run_tool
from assetpipe.utils import expand_glob, get_glob_root, output_path_for, plural


# prefixer commands already reported missing in this process
_missing_prefixers: set[str] = set()


@dataclass
class CompiledStyle:
    source: Path
    dest: Path
    css: str
    source_map: str | None = None

    @property
    def map_path(self) -> Path:
        return self.dest.with_name(self.dest.name + ".map")


def is_partial(path: Path) -> bool:
    return path.name.startswith("_")


def min_name(src: Path, suffix: str) -> str:
    """`app.scss` → `app.min.css`."""
    return f"{src.stem}{suffix}.css"


def compile_sass(ctx: BuildContext, src: Path, dest: Path) -> CompiledStyle:
    """Compile one Sass file with libsass.

    Raises:
        sass.CompileError: On a Sass syntax or import error
    """
    opts = ctx.config["styles"]
    include_root = ctx.root / get_glob_root(ctx.category("styles")["input"])
    common = {
        "filename": str(src),
        "output_style": opts["output_style"],
        "source_comments": opts["source_comments"],
        "include_paths": [str(include_root)],
    }

    if not ctx.is_dev:
        return CompiledStyle(src, dest, sass.compile(**common))

    map_path = dest.with_name(dest.name + ".map")
    css, source_map = sass.compile(
        **common,
        source_map_filename=str(map_path),
        output_filename_hint=str(dest),
        source_map_contents=True,
        omit_source_map_url=True,
    )
    return CompiledStyle(src, dest, css, source_map)


async def prefix_css(ctx: BuildContext, css: str, source: Path) -> str | None:
    """Vendor-prefix CSS through the prefixer tool.

    Returns None if the prefixer ran and failed. A prefixer that is not
    installed is reported once and the CSS passes through unchanged.
    """
    logger = getAppLogger()
    opts = ctx.config["styles"]
    tool = opts["prefixer"]
    command = build_tool_command(tool, [])
    if command is None:
        if tool["command"] not in _missing_prefixers:
            _missing_prefixers.add(tool["command"])
            logger.warning(
                "Prefixer %r not found; CSS will not be vendor-prefixed",
                tool["command"],
            )
        return css

    env = {"BROWSERSLIST": ", ".join(opts["browsers"])}
    result = await run_tool(command, stdin=css.encode("utf-8"), cwd=ctx.root, env=env)
    if not result.ok:
        logger.error(
            "Prefixing %s failed (exit %d): %s",
            source,
            result.returncode,
            result.message(),
        )
        return None
    return result.stdout.decode("utf-8")


def minify_css(css: str) -> str:
    return rcssmin.cssmin(css, keep_bang_comments=False)


def write_style(style: CompiledStyle) -> list[Path]:
    """Write the stylesheet (and its map, when tracked) to disk."""
    style.dest.parent.mkdir(parents=True, exist_ok=True)
    written = []
    css = style.css
    if style.source_map is not None:
        style.map_path.write_text(style.source_map, encoding="utf-8")
        css = f"{css}\n/*# sourceMappingURL={style.map_path.name} */\n"
        written.append(style.map_path)
    style.dest.write_text(css, encoding="utf-8")
    written.append(style.dest)
    return written


async def build_style(ctx: BuildContext, src: Path) -> CompiledStyle | None:
    """Run the whole per-file pipeline; None when the file was skipped."""
    logger = getAppLogger()
    category = ctx.category("styles")
    out = output_path_for(src, category["input"], ctx.root, category["output"])
    dest = out.with_name(min_name(src, ctx.config["styles"]["suffix"]))

    try:
        style = await asyncio.to_thread(compile_sass, ctx, src, dest)
    except sass.CompileError as e:
        logger.error_if_not_debug("Sass error in %s:\n%s", src, e)
        return None

    prefixed = await prefix_css(ctx, style.css, src)
    if prefixed is None:
        return None
    style.css = minify_css(prefixed)

    await asyncio.to_thread(write_style, style)
    logger.debug("🎨 %s → %s", src, style.dest)
    return style


async def build_styles(ctx: BuildContext) -> list[Path]:
    logger = getAppLogger()
    category = ctx.category("styles")
    sources = [p for p in expand_glob(category["input"], ctx.root) if not is_partial(p)]

    results = await asyncio.gather(*(build_style(ctx, src) for src in sources))
    written = [style.dest for style in results if style is not None]
    skipped = len(sources) - len(written)

    if ctx.notifier is not None and written:
        ctx.notifier.inject(written)

    logger.info(
        "🎨 wrote %d stylesheet%s%s",
        len(written),
        plural(written),
        f" ({skipped} skipped after errors)" if skipped else "",
    )
    return written


def reset_missing_prefixers() -> None:
    """Forget which prefixers were reported missing (for a fresh warning)."""
    _missing_prefixers.clear()

