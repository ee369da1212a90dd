# src/assetpipe/utils.py


import json
import re
import sys
from pathlib import Path
from typing import Any, cast

from .logs import getAppLogger


# --- utils --------------------------------------------------------------------


def get_sys_version_info() -> tuple[int, int, int] | tuple[int, int, int, str, int]:
    return sys.version_info


def load_toml(path: Path, *, required: bool = False) -> dict[str, Any] | None:
    """Load and parse a TOML file, supporting Python 3.10 and 3.11+.

    Uses `tomllib` on 3.11+ and `tomli` on 3.10.

    Raises:
        FileNotFoundError: If the file doesn't exist
        RuntimeError: If required=True and no TOML parser is available
    """
    if not path.exists():
        xmsg = f"TOML file not found: {path}"
        raise FileNotFoundError(xmsg)

    try:
        import tomllib  # type: ignore[import-not-found] # noqa: PLC0415

        with path.open("rb") as f:
            return tomllib.load(f)  # type: ignore[no-any-return]
    except ImportError:
        pass

    try:
        import tomli  # type: ignore[import-not-found,unused-ignore] # noqa: PLC0415

        with path.open("rb") as f:
            return tomli.load(f)  # type: ignore[no-any-return,unused-ignore]
    except ImportError:
        if required:
            xmsg = (
                "TOML parsing requires 'tomli' package on Python 3.10. "
                "Install it with: pip install tomli"
            )
            raise RuntimeError(xmsg) from None
        return None


# strings first so comment markers inside them survive
_JSONC_TOKENS = re.compile(
    r'(?P<string>"(?:\\.|[^"\\])*")'
    r"|(?P<block>/\*.*?\*/)"
    r"|(?P<line>(?<!:)//[^\n]*|#[^\n]*)",
    re.DOTALL,
)


def _strip_jsonc_comments(text: str) -> str:
    """Strip //, # and /* */ comments from JSONC, leaving strings intact."""

    def _keep_strings(match: re.Match[str]) -> str:
        if match.group("string") is not None:
            return match.group("string")
        # keep line structure so json error positions stay meaningful
        return "\n" * match.group(0).count("\n")

    return _JSONC_TOKENS.sub(_keep_strings, text)


def load_jsonc(path: Path) -> dict[str, Any] | list[Any] | None:
    """Load JSONC (JSON with comments and trailing commas)."""
    logger = getAppLogger()
    logger.trace(f"[load_jsonc] Loading from {path}")

    if not path.exists():
        xmsg = f"JSONC file not found: {path}"
        raise FileNotFoundError(xmsg)

    if not path.is_file():
        xmsg = f"Expected a file: {path}"
        raise ValueError(xmsg)

    text = _strip_jsonc_comments(path.read_text(encoding="utf-8"))
    text = re.sub(r",(?=\s*[}\]])", "", text).strip()

    if not text:
        # Empty or only comments → interpret as "no config"
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        xmsg = (
            f"Invalid JSONC syntax in {path}:"
            f" {e.msg} (line {e.lineno}, column {e.colno})"
        )
        raise ValueError(xmsg) from e

    if not isinstance(data, (dict, list)):
        xmsg = f"Invalid JSONC root type: {type(data).__name__}"
        raise ValueError(xmsg)  # noqa: TRY004

    return cast("dict[str, Any] | list[Any]", data)


def remove_path_in_error_message(inner_msg: str, path: Path) -> str:
    """Remove redundant file path mentions from a wrapped error message.

    Example:
        "Invalid JSONC syntax in /abs/path/config.jsonc: Expecting value"
        → "Invalid JSONC syntax: Expecting value"
    """
    full_path = str(path)
    filename = path.name
    candidates = [
        f"in {full_path}",
        f"in '{full_path}'",
        f"in {filename}",
        f"in '{filename}'",
        full_path,
        filename,
    ]

    clean_msg = inner_msg
    for pattern in candidates:
        clean_msg = clean_msg.replace(pattern, "").strip(": ").strip()

    clean_msg = re.sub(r"\s{2,}", " ", clean_msg)
    return re.sub(r"\s*:\s*", ": ", clean_msg)


def plural(obj: Any) -> str:
    """Return 's' if obj represents a plural count."""
    count: int | float
    try:
        count = len(obj)
    except TypeError:
        count = obj if isinstance(obj, (int, float)) else 0
    return "s" if count != 1 else ""


# --- globs --------------------------------------------------------------------


def has_glob_chars(s: str) -> bool:
    return any(c in s for c in "*?[]")


def get_glob_root(pattern: str) -> Path:
    """Return the non-glob portion of a path like 'src/**/*.txt'."""
    if not pattern:
        return Path()

    parts: list[str] = []
    for part in Path(pattern.replace("\\", "/")).parts:
        if has_glob_chars(part):
            break
        parts.append(part)
    return Path(*parts) if parts else Path()


def expand_glob(pattern: str, root: Path) -> list[Path]:
    """Return the sorted files matching `pattern`, resolved against `root`.

    A pattern without glob characters is a literal file (or nothing).
    """
    logger = getAppLogger()
    pattern = pattern.replace("\\", "/")
    base = get_glob_root(pattern)
    if not base.is_absolute():
        base = root / base

    if not has_glob_chars(pattern):
        return [base] if base.is_file() else []

    rel_pattern = str(Path(pattern).relative_to(get_glob_root(pattern)))
    if not base.is_dir():
        logger.trace("[GLOB] root does not exist: %s", base)
        return []

    matches = sorted(p for p in base.glob(rel_pattern) if p.is_file())
    logger.trace("[GLOB] %s matched %d file%s", pattern, len(matches), plural(matches))
    return matches


def output_path_for(src: Path, pattern: str, root: Path, out_dir: Path) -> Path:
    """Map a matched file to its output path, keeping the path below the glob root.

    `src/images/**/*` with `src/images/icons/a.png` → `<out_dir>/icons/a.png`.
    """
    base = get_glob_root(pattern)
    if not base.is_absolute():
        base = root / base
    if base.is_file():
        base = base.parent
    try:
        rel = src.relative_to(base)
    except ValueError:
        rel = Path(src.name)
    return out_dir / rel
