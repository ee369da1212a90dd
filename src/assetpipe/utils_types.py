# src/assetpipe/utils_types.py

from typing import Any, TypeVar, cast, get_type_hints


T = TypeVar("T")


def cast_hint(_typ: type[T], value: Any) -> T:
    """Explicit cast that documents intent but is purely for type hinting.

    Use where a narrowing is intentional and `typing.cast` would trip
    redundant-cast warnings. Performs *no runtime checks*.
    """
    return cast("T", value)


def schema_from_typeddict(td: type[Any]) -> dict[str, Any]:
    """Extract field names and their annotated types from a TypedDict."""
    return get_type_hints(td, include_extras=True)
