# src/assetpipe/builders/images.py
"""Incremental image optimization.

Files whose output is already at least as new as the source are skipped.
Development copies bytes unchanged; production re-encodes GIF, JPEG and
PNG with Pillow and cleans SVG markup. An optimized result that is not
smaller is discarded in favour of the original bytes.
"""

import asyncio
import io
import itertools
import re
import string
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterator
from pathlib import Path

from PIL import Image

from assetpipe.config import ImagesConfigResolved
from assetpipe.context import BuildContext
from assetpipe.logs import getAppLogger
from assetpipe.utils import expand_glob, output_path_for, plural

from .copy import copy_file


_URL_REF = re.compile(r"url\(\s*['\"]?#([^'\")\s]+)['\"]?\s*\)")
_NUMBER = re.compile(r"^\s*(-?\d+(?:\.\d+)?)(?:px)?\s*$")


# --- newer --------------------------------------------------------------------


def is_up_to_date(src: Path, dest: Path) -> bool:
    """True if `dest` exists and is at least as new as `src`."""
    try:
        return dest.stat().st_mtime >= src.stat().st_mtime
    except FileNotFoundError:
        return False


# --- raster -------------------------------------------------------------------


def optimize_gif(data: bytes, opts: ImagesConfigResolved) -> bytes:
    with Image.open(io.BytesIO(data)) as img:
        buf = io.BytesIO()
        img.save(
            buf,
            format="GIF",
            save_all=getattr(img, "is_animated", False),
            optimize=True,
            interlace=opts["gif_interlace"],
        )
    return buf.getvalue()


def optimize_jpeg(data: bytes, opts: ImagesConfigResolved) -> bytes:
    with Image.open(io.BytesIO(data)) as img:
        extra = {}
        # keep colour profile and EXIF (Orientation) so photos display as shot
        for key in ("icc_profile", "exif"):
            if img.info.get(key):
                extra[key] = img.info[key]
        buf = io.BytesIO()
        img.save(
            buf,
            format="JPEG",
            quality=opts["jpeg_quality"],
            progressive=True,
            optimize=True,
            **extra,
        )
    return buf.getvalue()


def optimize_png(data: bytes, opts: ImagesConfigResolved) -> bytes:
    with Image.open(io.BytesIO(data)) as img:
        buf = io.BytesIO()
        img.save(
            buf,
            format="PNG",
            optimize=True,
            compress_level=opts["png_compress_level"],
        )
    return buf.getvalue()


# --- svg ----------------------------------------------------------------------


def _short_ids() -> Iterator[str]:
    """a, b, ..., Z, aa, ab, ... (always a valid XML name)."""
    letters = string.ascii_letters
    for size in itertools.count(1):
        for chars in itertools.product(letters, repeat=size):
            yield "".join(chars)


def _register_namespaces(data: bytes) -> None:
    # keep the source's prefixes so output doesn't gain ns0: noise
    for _event, (prefix, uri) in ET.iterparse(io.BytesIO(data), events=("start-ns",)):
        ET.register_namespace(prefix, uri)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _number(value: str | None) -> float | None:
    if value is None:
        return None
    match = _NUMBER.match(value)
    return float(match.group(1)) if match else None


def remove_redundant_viewbox(root: ET.Element) -> bool:
    """Drop viewBox when it is exactly `0 0 width height`."""
    viewbox = root.get("viewBox")
    width, height = _number(root.get("width")), _number(root.get("height"))
    if viewbox is None or width is None or height is None:
        return False
    try:
        values = [float(v) for v in re.split(r"[\s,]+", viewbox.strip())]
    except ValueError:
        return False
    if values != [0.0, 0.0, width, height]:
        return False
    del root.attrib["viewBox"]
    return True


def _references(value: str) -> list[str]:
    refs = _URL_REF.findall(value)
    if value.startswith("#"):
        refs.append(value[1:])
    return refs


def cleanup_ids(root: ET.Element) -> dict[str, str]:
    """Remove unreferenced IDs and shorten referenced ones.

    Returns the old → new mapping of the IDs that were kept. Documents
    with <script> or <style> are left alone: their references can't be
    rewritten safely.
    """
    elements = list(root.iter())
    if any(_local(el.tag) in ("script", "style") for el in elements):
        return {}

    referenced: set[str] = set()
    for el in elements:
        for key, value in el.attrib.items():
            if key == "id":
                continue
            if _local(key) == "href" or "url(" in value:
                referenced.update(_references(value))

    names = _short_ids()
    mapping: dict[str, str] = {}
    for el in elements:
        old = el.get("id")
        if old is None:
            continue
        if old in referenced:
            mapping[old] = next(names)
            el.set("id", mapping[old])
        else:
            del el.attrib["id"]

    def _rewrite_url(match: re.Match[str]) -> str:
        return f"url(#{mapping.get(match.group(1), match.group(1))})"

    for el in elements:
        for key, value in list(el.attrib.items()):
            if key == "id":
                continue
            if _local(key) == "href" and value.startswith("#"):
                el.set(key, "#" + mapping.get(value[1:], value[1:]))
            elif "url(" in value:
                el.set(key, _URL_REF.sub(_rewrite_url, value))
    return mapping


def optimize_svg(data: bytes, opts: ImagesConfigResolved) -> bytes:
    _register_namespaces(data)
    root = ET.fromstring(data)  # noqa: S314
    if opts["svg_remove_viewbox"]:
        remove_redundant_viewbox(root)
    if opts["svg_cleanup_ids"]:
        cleanup_ids(root)
    return ET.tostring(root, encoding="utf-8", xml_declaration=False)


OPTIMIZERS: dict[str, Callable[[bytes, ImagesConfigResolved], bytes]] = {
    ".gif": optimize_gif,
    ".jpg": optimize_jpeg,
    ".jpeg": optimize_jpeg,
    ".png": optimize_png,
    ".svg": optimize_svg,
}


# --- builder ------------------------------------------------------------------


def process_image(ctx: BuildContext, src: Path, dest: Path) -> int:
    """Write one image to `dest`; returns bytes saved (0 in development)."""
    logger = getAppLogger()
    dest.parent.mkdir(parents=True, exist_ok=True)

    optimizer = OPTIMIZERS.get(src.suffix.lower())
    if ctx.is_dev or optimizer is None:
        copy_file(src, dest)
        return 0

    original = src.read_bytes()
    optimized = optimizer(original, ctx.config["images"])
    if len(optimized) >= len(original):
        logger.trace("%s: optimized is not smaller, keeping original", src)
        dest.write_bytes(original)
        return 0

    dest.write_bytes(optimized)
    return len(original) - len(optimized)


async def build_images(ctx: BuildContext) -> list[Path]:
    logger = getAppLogger()
    category = ctx.category("images")
    written: list[Path] = []
    saved = 0
    unchanged = 0

    for src in expand_glob(category["input"], ctx.root):
        dest = output_path_for(src, category["input"], ctx.root, category["output"])
        if is_up_to_date(src, dest):
            unchanged += 1
            continue
        saved += await asyncio.to_thread(process_image, ctx, src, dest)
        logger.debug("🖼️  %s → %s", src, dest)
        written.append(dest)

    logger.info(
        "🖼️  wrote %d file%s, %d up to date%s",
        len(written),
        plural(written),
        unchanged,
        f", saved {saved} bytes" if saved else "",
    )
    return written
