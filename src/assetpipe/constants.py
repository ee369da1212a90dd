# src/assetpipe/constants.py
"""Central constants used across the project."""

from typing import Any


CATEGORIES: tuple[str, ...] = ("scripts", "styles", "images", "html", "fonts")
MODES: tuple[str, ...] = ("development", "production")

# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"
DEFAULT_ENV_MODE: str = "BUILD_MODE"

# --- program defaults ---
DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_MODE: str = "development"

# --- config defaults ---
DEFAULT_STRICT_CONFIG: bool = True
DEFAULT_OUT_DIR: str = "dist"

# The path table. Inputs are globs relative to the project root; default
# outputs are relative to the output root.
DEFAULT_PATHS: dict[str, dict[str, str]] = {
    "scripts": {
        "input": "src/js/**/*",
        "output": "js",
        "entry": "src/js/main.js",
        "filename": "main.js",
    },
    "styles": {
        "input": "src/scss/**/*.scss",
        "output": "css",
    },
    "images": {
        "input": "src/images/**/*",
        "output": "images",
    },
    "html": {
        "input": "src/*.html",
        "output": ".",
    },
    "fonts": {
        "input": "src/fonts/**/*",
        "output": "fonts",
    },
}

# --- scripts ---
DEFAULT_SCRIPT_TARGET: str = "es2015"
DEFAULT_BUNDLER: dict[str, Any] = {
    "command": "esbuild",
    "args": ["--bundle", "--log-level=warning"],
}

# --- styles ---
DEFAULT_SASS_OUTPUT_STYLE: str = "expanded"
DEFAULT_SASS_SOURCE_COMMENTS: bool = True
DEFAULT_MIN_SUFFIX: str = ".min"
DEFAULT_BROWSERS: list[str] = ["> 0.5%", "last 2 versions", "not dead"]
DEFAULT_PREFIXER: dict[str, Any] = {
    "command": "postcss",
    "args": ["--use", "autoprefixer", "--no-map"],
}

# --- images ---
DEFAULT_JPEG_QUALITY: int = 75
DEFAULT_PNG_COMPRESS_LEVEL: int = 9
DEFAULT_GIF_INTERLACE: bool = True
DEFAULT_SVG_REMOVE_VIEWBOX: bool = True
DEFAULT_SVG_CLEANUP_IDS: bool = True

# --- dev server ---
DEFAULT_HOST: str = "localhost"
DEFAULT_PORT: int = 3000
DEFAULT_OPEN_BROWSER: bool = True
DEFAULT_OPEN_DELAY: float = 0.5  # seconds
