# src/assetpipe/config/__init__.py

"""Configuration handling for assetpipe.

This module provides configuration loading, parsing, validation, and resolution.
"""

from .config_loader import (
    find_config,
    load_and_validate_config,
    load_config,
    parse_config,
)
from .config_resolve import resolve_config, resolve_mode, resolve_tool
from .config_types import (
    CategoryConfig,
    CategoryName,
    CategoryResolved,
    ImagesConfig,
    ImagesConfigResolved,
    MetaConfigResolved,
    Mode,
    OriginType,
    PathsConfig,
    RootConfig,
    RootConfigResolved,
    ScriptsConfig,
    ScriptsConfigResolved,
    ServerConfig,
    ServerConfigResolved,
    StylesConfig,
    StylesConfigResolved,
    ToolConfig,
    ToolConfigResolved,
)
from .config_validate import ValidationSummary, validate_config


__all__ = [  # noqa: RUF022
    # config_loader
    "find_config",
    "load_and_validate_config",
    "load_config",
    "parse_config",
    # config_resolve
    "resolve_config",
    "resolve_mode",
    "resolve_tool",
    # config_types
    "CategoryConfig",
    "CategoryName",
    "CategoryResolved",
    "ImagesConfig",
    "ImagesConfigResolved",
    "MetaConfigResolved",
    "Mode",
    "OriginType",
    "PathsConfig",
    "RootConfig",
    "RootConfigResolved",
    "ScriptsConfig",
    "ScriptsConfigResolved",
    "ServerConfig",
    "ServerConfigResolved",
    "StylesConfig",
    "StylesConfigResolved",
    "ToolConfig",
    "ToolConfigResolved",
    # config_validate
    "ValidationSummary",
    "validate_config",
]
