# tests/utils/__init__.py

from .buildconfig import (
    make_config,
    make_config_content,
    make_ctx,
    make_project,
    make_tool_config,
    write_config_file,
)
from .constants import DEFAULT_TEST_LOG_LEVEL, PROJ_ROOT
from .fake_tools import (
    FAKE_TOOLS_SUPPORTED,
    write_fake_bundler,
    write_fake_prefixer,
    write_fake_tool,
)
from .force_mtime_advance import force_mtime_advance
from .patch_everywhere import patch_everywhere
from .trace import TEST_TRACE, make_test_trace


__all__ = [  # noqa: RUF022
    # buildconfig
    "make_config",
    "make_config_content",
    "make_ctx",
    "make_project",
    "make_tool_config",
    "write_config_file",
    # constants
    "DEFAULT_TEST_LOG_LEVEL",
    "PROJ_ROOT",
    # fake_tools
    "FAKE_TOOLS_SUPPORTED",
    "write_fake_bundler",
    "write_fake_prefixer",
    "write_fake_tool",
    # force_mtime_advance
    "force_mtime_advance",
    # patch_everywhere
    "patch_everywhere",
    # trace
    "TEST_TRACE",
    "make_test_trace",
]
