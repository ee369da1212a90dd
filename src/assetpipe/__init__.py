# src/assetpipe/__init__.py

"""assetpipe: build and serve front-end assets.

Full developer API
==================
This package re-exports all non-private symbols from its submodules,
making it suitable for programmatic use or custom task wiring.
Anything prefixed with "_" is considered internal and may change.

Highlights:
    - main()              → CLI entrypoint
    - run_build()         → clean, then every category builder
    - run_task()          → one named task
    - resolve_config()    → Merge defaults, config file, env and CLI
    - DevServer           → livereload server with per-category rebuilds
"""

from .actions import get_metadata, run_once, run_watch
from .build import TASK_NAMES, make_build_graph, make_task_graph, run_build, run_task
from .builders import BUILDERS, clean_output
from .cli import main
from .config import (
    OriginType,
    RootConfig,
    RootConfigResolved,
    find_config,
    load_and_validate_config,
    load_config,
    parse_config,
    resolve_config,
    resolve_mode,
    validate_config,
)
from .constants import (
    CATEGORIES,
    DEFAULT_ENV_LOG_LEVEL,
    DEFAULT_ENV_MODE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MODE,
    DEFAULT_OUT_DIR,
    DEFAULT_PATHS,
    DEFAULT_STRICT_CONFIG,
)
from .context import BuildContext, ReloadNotifier
from .logs import getAppLogger
from .meta import (
    PROGRAM_CONFIG,
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    Metadata,
)
from .server import DevServer, LiveReloadNotifier, RebuildSupervisor, WatchSubscription
from .tasks import BuildError, GraphReport, TaskGraph, TaskNode, TaskResult


__all__ = [  # noqa: RUF022
    # actions
    "get_metadata",
    "run_once",
    "run_watch",
    # build
    "TASK_NAMES",
    "make_build_graph",
    "make_task_graph",
    "run_build",
    "run_task",
    # builders
    "BUILDERS",
    "clean_output",
    # cli
    "main",
    # config
    "find_config",
    "load_and_validate_config",
    "load_config",
    "OriginType",
    "parse_config",
    "resolve_config",
    "resolve_mode",
    "RootConfig",
    "RootConfigResolved",
    "validate_config",
    # constants
    "CATEGORIES",
    "DEFAULT_ENV_LOG_LEVEL",
    "DEFAULT_ENV_MODE",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_MODE",
    "DEFAULT_OUT_DIR",
    "DEFAULT_PATHS",
    "DEFAULT_STRICT_CONFIG",
    # context
    "BuildContext",
    "ReloadNotifier",
    # logs
    "getAppLogger",
    # meta
    "Metadata",
    "PROGRAM_CONFIG",
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    # server
    "DevServer",
    "LiveReloadNotifier",
    "RebuildSupervisor",
    "WatchSubscription",
    # tasks
    "BuildError",
    "GraphReport",
    "TaskGraph",
    "TaskNode",
    "TaskResult",
]
