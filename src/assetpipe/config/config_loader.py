# src/assetpipe/config/config_loader.py


import argparse
import sys
import traceback
from pathlib import Path
from typing import Any, cast

from assetpipe.logs import getAppLogger
from assetpipe.meta import PROGRAM_CONFIG
from assetpipe.utils import load_jsonc, load_toml, remove_path_in_error_message

from .config_types import RootConfig
from .config_validate import ValidationSummary, validate_config


PYPROJECT = "pyproject.toml"


def _pyproject_section(path: Path) -> dict[str, Any] | None:
    """Return `[tool.<program>]` from a pyproject.toml, if present."""
    data = load_toml(path)
    if not data:
        return None
    section = data.get("tool", {}).get(PROGRAM_CONFIG)
    return cast("dict[str, Any] | None", section)


def find_config(
    args: argparse.Namespace,
    cwd: Path,
    *,
    missing_level: str = "debug",
) -> Path | None:
    """Locate a configuration file.

    Search order:
      1. Explicit path from CLI (--config)
      2. .{PROGRAM_CONFIG}.py, .{PROGRAM_CONFIG}.jsonc, .{PROGRAM_CONFIG}.json
         in the current directory, then each parent
      3. A pyproject.toml with a [tool.{PROGRAM_CONFIG}] table, same walk

    Returns the first matching path, or None if no config was found.
    """
    logger = getAppLogger()

    if getattr(args, "config", None):
        config = Path(args.config).expanduser().resolve()
        logger.trace(f"[find_config] Checking explicit path: {config}")
        if not config.exists():
            xmsg = f"Specified config file not found: {config}"
            raise FileNotFoundError(xmsg)
        if config.is_dir():
            xmsg = f"Specified config path is a directory, not a file: {config}"
            raise ValueError(xmsg)
        return config

    candidate_names = [
        f".{PROGRAM_CONFIG}.py",
        f".{PROGRAM_CONFIG}.jsonc",
        f".{PROGRAM_CONFIG}.json",
    ]
    current = cwd
    while True:
        found = [current / n for n in candidate_names if (current / n).exists()]
        if len(found) > 1:
            names = ", ".join(p.name for p in found)
            logger.warning(
                "Multiple config files detected (%s); using %s.", names, found[0].name
            )
        if found:
            return found[0]

        pyproject = current / PYPROJECT
        if pyproject.is_file() and _pyproject_section(pyproject) is not None:
            return pyproject

        parent = current.parent
        if parent == current:
            break
        current = parent

    logger.log_dynamic(missing_level, f"No config file found in {cwd} or parents")
    return None


def load_config(config_path: Path) -> dict[str, Any] | list[Any] | None:
    """Load configuration data from a file.

    Supports:
      - Python configs: .py files exporting `config`
      - JSON/JSONC configs: .json, .jsonc files
      - pyproject.toml: the [tool.{PROGRAM_CONFIG}] table

    Returns None for intentionally empty configs (e.g. empty files or
    `config = None`).
    """
    logger = getAppLogger()
    logger.trace(f"[load_config] Loading from {config_path} ({config_path.suffix})")

    if config_path.name == PYPROJECT:
        return _pyproject_section(config_path)

    if config_path.suffix == ".py":
        config_globals: dict[str, Any] = {}

        # configs are trusted user code and may import local helpers
        parent_dir = str(config_path.parent)
        added_to_sys_path = parent_dir not in sys.path
        if added_to_sys_path:
            sys.path.insert(0, parent_dir)

        try:
            source = config_path.read_text(encoding="utf-8")
            exec(compile(source, str(config_path), "exec"), config_globals)  # noqa: S102
        except Exception as e:
            tb = traceback.format_exc()
            xmsg = (
                f"Error while executing Python config: {config_path.name}\n"
                f"{type(e).__name__}: {e}\n{tb}"
            )
            raise RuntimeError(xmsg) from e
        finally:
            if added_to_sys_path and sys.path[0] == parent_dir:
                sys.path.pop(0)

        if "config" not in config_globals:
            xmsg = f"{config_path.name} did not define `config`"
            raise ValueError(xmsg)

        result = config_globals["config"]
        if not isinstance(result, (dict, type(None))):
            xmsg = (
                f"config in {config_path.name} must be a dict or None"
                f", not {type(result).__name__}"
            )
            raise TypeError(xmsg)
        return cast("dict[str, Any] | None", result)

    try:
        return load_jsonc(config_path)
    except ValueError as e:
        clean_msg = remove_path_in_error_message(str(e), config_path)
        xmsg = (
            f"Error while loading configuration file '{config_path.name}': {clean_msg}"
        )
        raise ValueError(xmsg) from e


def parse_config(raw_config: dict[str, Any] | list[Any] | None) -> RootConfig | None:
    """Normalize a raw config into a RootConfig dict.

    None stays None (empty config); a list root is rejected.
    """
    if raw_config is None:
        return None
    if isinstance(raw_config, list):
        xmsg = "Config root must be an object, not a list"
        raise TypeError(xmsg)
    return cast("RootConfig", dict(raw_config))


def load_and_validate_config(
    args: argparse.Namespace,
    cwd: Path | None = None,
) -> tuple[Path, RootConfig, ValidationSummary] | None:
    """Find, load, parse and validate the config.

    Returns None when no config file exists or it is empty.

    Raises:
        ValueError: If validation fails under strict_config
    """
    logger = getAppLogger()
    cwd = cwd or Path.cwd().resolve()

    config_path = find_config(args, cwd)
    if config_path is None:
        return None

    root_cfg = parse_config(load_config(config_path))
    if root_cfg is None:
        logger.debug("Config %s is empty; using defaults.", config_path.name)
        return None

    # config log level applies unless the CLI or env already chose one
    if getattr(args, "log_level", None) is None and root_cfg.get("log_level"):
        logger.setLevel(logger.determine_log_level(root_log_level=root_cfg["log_level"]))

    summary = validate_config(cast("dict[str, Any]", root_cfg))
    if not summary.valid:
        xmsg = (
            f"Invalid configuration in {config_path.name}"
            " (strict_config=true prevents continuing)"
        )
        raise ValueError(xmsg)

    return config_path, root_cfg, summary
