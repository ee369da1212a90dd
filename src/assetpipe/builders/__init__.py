# src/assetpipe/builders/__init__.py
"""One builder per asset category, plus the output cleaner."""

from collections.abc import Awaitable, Callable
from pathlib import Path

from assetpipe.context import BuildContext

from .clean import clean_output
from .copy import build_fonts, build_html, copy_file
from .images import build_images
from .scripts import build_scripts
from .styles import build_styles


Builder = Callable[[BuildContext], Awaitable[list[Path]]]

BUILDERS: dict[str, Builder] = {
    "scripts": build_scripts,
    "styles": build_styles,
    "images": build_images,
    "html": build_html,
    "fonts": build_fonts,
}


__all__ = [
    "BUILDERS",
    "Builder",
    "build_fonts",
    "build_html",
    "build_images",
    "build_scripts",
    "build_styles",
    "clean_output",
    "copy_file",
]
