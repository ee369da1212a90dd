# src/assetpipe/config/config_validate.py
"""Structural validation of a parsed config against the RootConfig schema."""

from dataclasses import dataclass, field
from difflib import get_close_matches
from types import UnionType
from typing import Any, Literal, Union, get_args, get_origin, is_typeddict

from assetpipe.constants import DEFAULT_STRICT_CONFIG
from assetpipe.logs import getAppLogger
from assetpipe.utils import plural
from assetpipe.utils_types import schema_from_typeddict

from .config_types import RootConfig


@dataclass
class ValidationSummary:
    valid: bool = True
    strict: bool = DEFAULT_STRICT_CONFIG
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def report(self, msg: str) -> None:
        """Record a problem as an error (strict) or a warning."""
        if self.strict:
            self.errors.append(msg)
            self.valid = False
        else:
            self.warnings.append(msg)


def _infer_type_label(hint: Any) -> str:
    origin = get_origin(hint)
    if origin is Literal:
        return " | ".join(repr(a) for a in get_args(hint))
    if origin in (Union, UnionType):
        return " | ".join(_infer_type_label(a) for a in get_args(hint))
    if origin is list:
        (item,) = get_args(hint) or (Any,)
        return f"list[{_infer_type_label(item)}]"
    if hint is type(None):
        return "null"
    if is_typeddict(hint):
        return "object"
    return getattr(hint, "__name__", str(hint))


def _matches_type(value: Any, hint: Any) -> bool:  # noqa: PLR0911
    origin = get_origin(hint)
    if hint is Any:
        return True
    if origin is Literal:
        return value in get_args(hint)
    if origin in (Union, UnionType):
        return any(_matches_type(value, a) for a in get_args(hint))
    if origin is list:
        if not isinstance(value, list):
            return False
        (item,) = get_args(hint) or (Any,)
        return all(_matches_type(v, item) for v in value)
    if is_typeddict(hint):
        return isinstance(value, dict)
    if hint is type(None):
        return value is None
    if hint is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if hint is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, hint)


def _validate_typed_dict(
    data: dict[str, Any],
    schema: type[Any],
    context: str,
    summary: ValidationSummary,
) -> None:
    fields = schema_from_typeddict(schema)
    for key, value in data.items():
        where = f"{context}.{key}" if context else key
        if key not in fields:
            hint = get_close_matches(key, list(fields), n=1, cutoff=0.6)
            suffix = f" (did you mean {hint[0]!r}?)" if hint else ""
            summary.report(f"Unknown key {where!r}{suffix}")
            continue

        expected = fields[key]
        if not _matches_type(value, expected):
            summary.report(
                f"{where!r} expected {_infer_type_label(expected)},"
                f" got {type(value).__name__}"
            )
            continue

        if is_typeddict(expected):
            _validate_typed_dict(value, expected, where, summary)


def validate_config(parsed: dict[str, Any]) -> ValidationSummary:
    """Validate a parsed config; `strict_config` decides errors vs warnings."""
    logger = getAppLogger()
    strict = parsed.get("strict_config", DEFAULT_STRICT_CONFIG)
    summary = ValidationSummary(strict=bool(strict))

    _validate_typed_dict(parsed, RootConfig, "", summary)

    for msg in summary.warnings:
        logger.warning(msg)
    for msg in summary.errors:
        logger.error(msg)

    if summary.errors or summary.warnings:
        count = len(summary.errors) + len(summary.warnings)
        logger.debug("Config validation found %d problem%s", count, plural(count))
    return summary
