# src/assetpipe/config/config_types.py


from pathlib import Path
from typing import Literal, TypedDict

from typing_extensions import NotRequired


Mode = Literal["development", "production"]
CategoryName = Literal["scripts", "styles", "images", "html", "fonts"]
OriginType = Literal["cli", "env", "config", "default"]


# External tool configuration (bundler, prefixer)
class ToolConfig(TypedDict, total=False):
    command: str  # executable name
    args: list[str]  # base arguments (replaces defaults)
    path: str  # custom executable path
    options: list[str]  # additional arguments (appends to args)


class CategoryConfig(TypedDict, total=False):
    input: str  # glob, relative to the project root
    output: str  # directory, relative to the project root (default: under `out`)
    entry: str  # scripts only: the bundler entry file
    filename: str  # scripts only: the bundle file name


class PathsConfig(TypedDict, total=False):
    scripts: CategoryConfig
    styles: CategoryConfig
    images: CategoryConfig
    html: CategoryConfig
    fonts: CategoryConfig


class ScriptsConfig(TypedDict, total=False):
    bundler: ToolConfig
    target: str


class StylesConfig(TypedDict, total=False):
    output_style: str  # libsass: nested, expanded, compact, compressed
    source_comments: bool
    suffix: str  # inserted before .css, e.g. ".min"
    browsers: list[str]  # browserslist queries
    prefixer: ToolConfig


class ImagesConfig(TypedDict, total=False):
    jpeg_quality: int
    png_compress_level: int
    gif_interlace: bool
    svg_remove_viewbox: bool
    svg_cleanup_ids: bool


class ServerConfig(TypedDict, total=False):
    host: str
    port: int
    open: bool
    browser: str | None  # webbrowser name; None → system default


class RootConfig(TypedDict, total=False):
    mode: Mode
    log_level: str
    strict_config: bool
    out: str  # output root, emptied by `clean`

    paths: PathsConfig
    scripts: ScriptsConfig
    styles: StylesConfig
    images: ImagesConfig
    server: ServerConfig


# Resolved types - all fields are guaranteed to be present with final values
class ToolConfigResolved(TypedDict):
    command: str
    args: list[str]
    path: str | None
    options: list[str]


class CategoryResolved(TypedDict):
    name: CategoryName
    input: str  # glob as written (relative to root)
    output: Path  # absolute
    entry: NotRequired[Path]  # scripts only, absolute
    filename: NotRequired[str]  # scripts only


class ScriptsConfigResolved(TypedDict):
    bundler: ToolConfigResolved
    target: str


class StylesConfigResolved(TypedDict):
    output_style: str
    source_comments: bool
    suffix: str
    browsers: list[str]
    prefixer: ToolConfigResolved


class ImagesConfigResolved(TypedDict):
    jpeg_quality: int
    png_compress_level: int
    gif_interlace: bool
    svg_remove_viewbox: bool
    svg_cleanup_ids: bool


class ServerConfigResolved(TypedDict):
    host: str
    port: int
    open: bool
    browser: str | None


class MetaConfigResolved(TypedDict):
    config_path: Path | None
    config_root: Path
    cli_root: Path
    mode_origin: OriginType


class RootConfigResolved(TypedDict):
    mode: Mode
    log_level: str
    strict_config: bool
    root: Path  # project root; globs resolve against it
    out: Path  # absolute output root

    paths: dict[str, CategoryResolved]
    scripts: ScriptsConfigResolved
    styles: StylesConfigResolved
    images: ImagesConfigResolved
    server: ServerConfigResolved

    __meta__: MetaConfigResolved
