# src/assetpipe/config/config_resolve.py
"""Merge defaults, config file, environment and CLI into a resolved config."""

import argparse
import os
from pathlib import Path
from typing import Any, cast

from assetpipe.constants import (
    CATEGORIES,
    DEFAULT_BROWSERS,
    DEFAULT_BUNDLER,
    DEFAULT_ENV_MODE,
    DEFAULT_GIF_INTERLACE,
    DEFAULT_HOST,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MIN_SUFFIX,
    DEFAULT_MODE,
    DEFAULT_OPEN_BROWSER,
    DEFAULT_OUT_DIR,
    DEFAULT_PATHS,
    DEFAULT_PNG_COMPRESS_LEVEL,
    DEFAULT_PORT,
    DEFAULT_PREFIXER,
    DEFAULT_SASS_OUTPUT_STYLE,
    DEFAULT_SASS_SOURCE_COMMENTS,
    DEFAULT_SCRIPT_TARGET,
    DEFAULT_STRICT_CONFIG,
    DEFAULT_SVG_CLEANUP_IDS,
    DEFAULT_SVG_REMOVE_VIEWBOX,
    MODES,
)
from assetpipe.logs import getAppLogger
from assetpipe.meta import PROGRAM_ENV

from .config_types import (
    CategoryName,
    CategoryResolved,
    ImagesConfigResolved,
    Mode,
    OriginType,
    RootConfig,
    RootConfigResolved,
    ScriptsConfigResolved,
    ServerConfigResolved,
    StylesConfigResolved,
    ToolConfig,
    ToolConfigResolved,
)


def _check_mode(value: str, origin: OriginType) -> Mode:
    mode = value.strip().lower()
    # accept the short spellings NODE_ENV users type
    mode = {"dev": "development", "prod": "production"}.get(mode, mode)
    if mode not in MODES:
        xmsg = f"Invalid mode {value!r} from {origin} (expected one of {MODES})"
        raise ValueError(xmsg)
    return cast("Mode", mode)


def resolve_mode(
    args: argparse.Namespace | None,
    root_cfg: RootConfig | None = None,
) -> tuple[Mode, OriginType]:
    """Resolve build mode from CLI → env → config → default.

    The result is fixed for the life of the process.
    """
    cli_mode = getattr(args, "mode", None)
    if cli_mode:
        return _check_mode(cli_mode, "cli"), "cli"

    env_mode = os.getenv(f"{PROGRAM_ENV}_MODE") or os.getenv(DEFAULT_ENV_MODE)
    if env_mode:
        return _check_mode(env_mode, "env"), "env"

    cfg_mode = (root_cfg or {}).get("mode")
    if cfg_mode:
        return _check_mode(cfg_mode, "config"), "config"

    return cast("Mode", DEFAULT_MODE), "default"


def resolve_tool(raw: ToolConfig | None, default: dict[str, Any]) -> ToolConfigResolved:
    """Fill a tool config from its defaults; `args` replaces, `options` appends."""
    raw = raw or {}
    return {
        "command": raw.get("command", default["command"]),
        "args": list(raw.get("args", default["args"])),
        "path": raw.get("path"),
        "options": list(raw.get("options", [])),
    }


def _resolve_category(
    name: CategoryName,
    raw: dict[str, Any],
    root: Path,
    out: Path,
) -> CategoryResolved:
    defaults = DEFAULT_PATHS[name]
    merged = {**defaults, **raw}
    # an explicit output is relative to the project root, a default one to `out`
    output = root / raw["output"] if "output" in raw else out / defaults["output"]
    resolved: CategoryResolved = {
        "name": name,
        "input": merged["input"],
        "output": output.resolve(),
    }
    if name == "scripts":
        resolved["entry"] = (root / merged["entry"]).resolve()
        resolved["filename"] = merged["filename"]
    return resolved


def resolve_config(
    root_cfg: RootConfig | None,
    args: argparse.Namespace | None,
    config_dir: Path,
    cwd: Path,
    *,
    config_path: Path | None = None,
) -> RootConfigResolved:
    """Fully resolve a config; every field of the result is present."""
    logger = getAppLogger()
    cfg: RootConfig = root_cfg or cast("RootConfig", {})
    root = config_dir.resolve()

    mode, mode_origin = resolve_mode(args, cfg)
    logger.trace("[resolve_config] mode=%s (from %s)", mode, mode_origin)

    out = (root / cfg.get("out", DEFAULT_OUT_DIR)).resolve()

    raw_paths = cast("dict[str, dict[str, Any]]", cfg.get("paths", {}))
    paths = {
        name: _resolve_category(
            cast("CategoryName", name), raw_paths.get(name, {}), root, out
        )
        for name in CATEGORIES
    }

    raw_scripts = cfg.get("scripts", {})
    scripts: ScriptsConfigResolved = {
        "bundler": resolve_tool(raw_scripts.get("bundler"), DEFAULT_BUNDLER),
        "target": raw_scripts.get("target", DEFAULT_SCRIPT_TARGET),
    }

    raw_styles = cfg.get("styles", {})
    styles: StylesConfigResolved = {
        "output_style": raw_styles.get("output_style", DEFAULT_SASS_OUTPUT_STYLE),
        "source_comments": raw_styles.get(
            "source_comments", DEFAULT_SASS_SOURCE_COMMENTS
        ),
        "suffix": raw_styles.get("suffix", DEFAULT_MIN_SUFFIX),
        "browsers": list(raw_styles.get("browsers", DEFAULT_BROWSERS)),
        "prefixer": resolve_tool(raw_styles.get("prefixer"), DEFAULT_PREFIXER),
    }

    raw_images = cfg.get("images", {})
    images: ImagesConfigResolved = {
        "jpeg_quality": raw_images.get("jpeg_quality", DEFAULT_JPEG_QUALITY),
        "png_compress_level": raw_images.get(
            "png_compress_level", DEFAULT_PNG_COMPRESS_LEVEL
        ),
        "gif_interlace": raw_images.get("gif_interlace", DEFAULT_GIF_INTERLACE),
        "svg_remove_viewbox": raw_images.get(
            "svg_remove_viewbox", DEFAULT_SVG_REMOVE_VIEWBOX
        ),
        "svg_cleanup_ids": raw_images.get("svg_cleanup_ids", DEFAULT_SVG_CLEANUP_IDS),
    }

    raw_server = cfg.get("server", {})
    server: ServerConfigResolved = {
        "host": getattr(args, "host", None) or raw_server.get("host", DEFAULT_HOST),
        "port": getattr(args, "port", None) or raw_server.get("port", DEFAULT_PORT),
        "open": raw_server.get("open", DEFAULT_OPEN_BROWSER),
        "browser": raw_server.get("browser"),
    }
    if getattr(args, "open_browser", None) is False:
        server["open"] = False

    resolved: RootConfigResolved = {
        "mode": mode,
        "log_level": cfg.get("log_level", DEFAULT_LOG_LEVEL),
        "strict_config": cfg.get("strict_config", DEFAULT_STRICT_CONFIG),
        "root": root,
        "out": out,
        "paths": paths,
        "scripts": scripts,
        "styles": styles,
        "images": images,
        "server": server,
        "__meta__": {
            "config_path": config_path,
            "config_root": root,
            "cli_root": cwd.resolve(),
            "mode_origin": mode_origin,
        },
    }
    return resolved
