# src/assetpipe/cli.py

import argparse
import platform
import sys
from dataclasses import dataclass
from difflib import get_close_matches
from pathlib import Path

from .actions import get_metadata, run_once, run_watch
from .build import TASK_NAMES
from .config import (
    RootConfig,
    RootConfigResolved,
    load_and_validate_config,
    resolve_config,
)
from .context import BuildContext
from .logs import getAppLogger
from .meta import PROGRAM_DISPLAY, PROGRAM_SCRIPT
from .utils import get_sys_version_info
from .utils_logs import LEVEL_ORDER, safe_log
from .utils_types import cast_hint


# --------------------------------------------------------------------------- #
# CLI setup and helpers
# --------------------------------------------------------------------------- #


class HintingArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        # Build known option strings: ["-v", "--verbose", "--log-level", ...]
        known_opts: list[str] = []
        for action in self._actions:
            known_opts.extend([s for s in action.option_strings if s])

        hint_lines: list[str] = []
        # "unrecognized arguments: --prodution ..."
        if "unrecognized arguments:" in message:
            bad = message.split("unrecognized arguments:", 1)[1].strip()
            bad_args = [tok for tok in bad.split() if tok.startswith("-")]
            for arg in bad_args:
                close = get_close_matches(arg, known_opts, n=1, cutoff=0.6)
                if close:
                    hint_lines.append(f"Hint: did you mean {close[0]}?")

        # "argument TASK: invalid choice: 'biuld' (choose from ...)"
        elif "invalid choice:" in message and "'" in message:
            bad = message.split("invalid choice:", 1)[1].split("'")[1]
            close = get_close_matches(bad, TASK_NAMES, n=1, cutoff=0.6)
            if close:
                hint_lines.append(f"Hint: did you mean {close[0]}?")

        self.print_usage(sys.stderr)
        full = f"{self.prog}: error: {message}"
        if hint_lines:
            full += "\n" + "\n".join(hint_lines)
        self.exit(2, full + "\n")


def _setup_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = HintingArgumentParser(
        prog=PROGRAM_SCRIPT,
        description="Build and serve front-end assets.",
    )

    parser.add_argument(
        "task",
        nargs="?",
        default="build",
        choices=TASK_NAMES,
        metavar="TASK",
        help=(
            "Task to run (default: build). One of: "
            + ", ".join(TASK_NAMES)
            + ". 'watch' builds, then serves with live reload."
        ),
    )
    parser.add_argument("-c", "--config", help="Path to build config file.")

    # --- Build mode ---
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--production",
        "--prod",
        dest="mode",
        action="store_const",
        const="production",
        help="Production build: minified, optimized, no source maps.",
    )
    mode.add_argument(
        "--development",
        "--dev",
        dest="mode",
        action="store_const",
        const="development",
        help="Development build: source maps, no image compression (default).",
    )
    mode.add_argument(
        "--mode",
        dest="mode",
        metavar="MODE",
        help="Build mode: development or production.",
    )
    mode.set_defaults(mode=None)

    # --- Dev server ---
    parser.add_argument("--host", help="Dev server host (watch only).")
    parser.add_argument("--port", type=int, help="Dev server port (watch only).")
    parser.add_argument(
        "--no-open",
        dest="open_browser",
        action="store_false",
        default=None,
        help="Do not open a browser when the dev server starts.",
    )

    # --- Color ---
    color = parser.add_mutually_exclusive_group()
    color.add_argument(
        "--no-color",
        dest="use_color",
        action="store_const",
        const=False,
        help="Disable ANSI color output.",
    )
    color.add_argument(
        "--color",
        dest="use_color",
        action="store_const",
        const=True,
        help="Force-enable ANSI color output (overrides auto-detect).",
    )
    color.set_defaults(use_color=None)

    # --- Version and verbosity ---
    parser.add_argument("--version", action="store_true", help="Show version info.")

    log_level = parser.add_mutually_exclusive_group()
    log_level.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="Suppress non-critical output (same as --log-level warning).",
    )
    log_level.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const="debug",
        dest="log_level",
        help="Verbose output (same as --log-level debug).",
    )
    log_level.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        default=None,
        dest="log_level",
        help="Set log verbosity level.",
    )
    return parser


# --------------------------------------------------------------------------- #
# Main entry helpers
# --------------------------------------------------------------------------- #


@dataclass
class _LoadedConfig:
    """Container for loaded and resolved configuration data."""

    config_path: Path | None
    resolved: RootConfigResolved
    config_dir: Path
    cwd: Path


def _initialize_logger(args: argparse.Namespace) -> None:
    """Initialize logger with CLI args, env vars, and defaults."""
    logger = getAppLogger()
    logger.setLevel(logger.determine_log_level(args=args))
    use_color = getattr(args, "use_color", None)
    logger.enable_color = (
        use_color if use_color is not None else logger.determine_color_enabled()
    )
    # handlers copy the color flag when built
    logger.handlers.clear()
    logger.trace("[BOOT] log-level initialized: %s", logger.level_name)

    logger.debug(
        "Runtime: Python %s (%s)\n    %s",
        platform.python_version(),
        platform.python_implementation(),
        sys.version.replace("\n", " "),
    )


def _handle_early_exits(args: argparse.Namespace) -> int | None:
    """Handle --version and the Python version check.

    Returns exit code if we should exit early, None otherwise.
    """
    logger = getAppLogger()

    if getattr(args, "version", None):
        meta = get_metadata()
        logger.info("%s %s (%s)", PROGRAM_DISPLAY, meta.version, meta.commit)
        return 0

    if get_sys_version_info() < (3, 10):
        logger.error("%s requires Python 3.10 or newer.", PROGRAM_DISPLAY)
        return 1

    return None


def _load_and_resolve_config(args: argparse.Namespace) -> _LoadedConfig:
    """Load the config file (if any) and resolve the final configuration."""
    logger = getAppLogger()
    cwd = Path.cwd().resolve()

    config_path: Path | None = None
    root_cfg: RootConfig | None = None
    config_result = load_and_validate_config(args, cwd)
    if config_result is not None:
        config_path, root_cfg, _validation_summary = config_result

    logger.trace("[CONFIG] log-level re-resolved from config: %s", logger.level_name)

    if root_cfg is None:
        root_cfg = cast_hint(RootConfig, {})
    config_dir = config_path.parent if config_path else cwd

    resolved = resolve_config(root_cfg, args, config_dir, cwd, config_path=config_path)
    return _LoadedConfig(
        config_path=config_path,
        resolved=resolved,
        config_dir=config_dir,
        cwd=cwd,
    )


# --------------------------------------------------------------------------- #
# Main entry
# --------------------------------------------------------------------------- #


def main(argv: list[str] | None = None) -> int:
    logger = getAppLogger()  # init (use env + defaults)

    try:
        parser = _setup_parser()
        args = parser.parse_args(argv)

        # --- Early runtime init (use CLI + env + defaults) ---
        _initialize_logger(args)

        early_exit_code = _handle_early_exits(args)
        if early_exit_code is not None:
            return early_exit_code

        config = _load_and_resolve_config(args)

        if config.config_path:
            logger.info("🔧 Using config: %s", config.config_path.name)
        else:
            logger.debug("🔧 No config file found; using defaults.")
        logger.debug("📁 Project root: %s", config.config_dir)
        logger.debug(
            "⚙️  Mode: %s (from %s)",
            config.resolved["mode"],
            config.resolved["__meta__"]["mode_origin"],
        )

        ctx = BuildContext.from_config(config.resolved)
        if args.task == "watch":
            report = run_watch(ctx)
        else:
            report = run_once(args.task, ctx)

        if not report.ok:
            return 1

    except (FileNotFoundError, ValueError, TypeError, RuntimeError) as e:
        # controlled termination
        try:
            logger.error_if_not_debug(str(e))
        except Exception:  # noqa: BLE001
            safe_log(f"[FATAL] Logging failed while reporting: {e}")
        return 1

    except Exception as e:  # noqa: BLE001
        # unexpected internal error
        try:
            logger.critical_if_not_debug("Unexpected internal error: %s", e)
        except Exception:  # noqa: BLE001
            safe_log(f"[FATAL] Logging failed while reporting: {e}")
        return 1

    else:
        return 0
