"""Utility functions for typed-config."""

from collections.abc import Mapping
from typing import Any

from .exceptions import MergeConflictError

ROOT_KEY = "<root>"


class _Missing:
    """Marker for an absent value, distinct from ``None``."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def deep_merge(base: Any, override: Any, key: str | None = None) -> Any:
    """Deep merge two values with override precedence.

    Rules, evaluated in order:
    1. Absent base: override is returned as is.
    2. Absent override: base is returned as is.
    3. Sequence base: override is appended (wrapped in a list when scalar).
    4. Mapping base: override must be a mapping and is merged key by key.
    5. Anything else: override wins.

    Args:
        base: Lower precedence value
        override: Higher precedence value
        key: Dotted path of the values being merged, used in error messages

    Returns:
        Merged value (base and override are not modified)

    Raises:
        MergeConflictError: If base is a mapping and override is not

    Examples:
        >>> deep_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})
        {'a': 1, 'b': {'c': 2, 'd': 3}}

        >>> deep_merge({"hosts": ["a"]}, {"hosts": "b"})
        {'hosts': ['a', 'b']}

        >>> deep_merge(1, MISSING)
        1
    """
    if base is MISSING:
        return override
    if override is MISSING:
        return base

    if isinstance(base, (list, tuple)):
        extra = list(override) if isinstance(override, (list, tuple)) else [override]
        return [*base, *extra]

    if isinstance(base, Mapping):
        # JSON null carries no keys
        if override is None:
            return dict(base)
        if not isinstance(override, Mapping):
            raise MergeConflictError(key or ROOT_KEY, type(override))

        result = dict(base)
        for name, value in override.items():
            child_key = f"{key}.{name}" if key else str(name)
            result[name] = deep_merge(result.get(name, MISSING), value, child_key)
        return result

    return override


def merge_sources(*sources: Any) -> dict[str, Any]:
    """Fold sources pairwise, lowest precedence first, starting from an empty mapping."""
    merged: dict[str, Any] = {}
    for source in sources:
        merged = deep_merge(merged, source)
    return merged


def split_key_path(path: str) -> list[str]:
    """Split a dotted key path into its segments."""
    return str(path).split(".")


def resolve_prefix(data: Any, prefix: str) -> Any:
    """Extract the sub-tree of raw data found at a dotted prefix path.

    Args:
        data: Raw configuration data
        prefix: Dotted path, e.g. ``"apps.api"``

    Returns:
        The mapping at the path, or MISSING if any segment is absent or
        a value along the path (the last one included) is not a mapping
    """
    current = data
    for segment in split_key_path(prefix):
        if not isinstance(current, Mapping) or segment not in current:
            return MISSING
        current = current[segment]
    return current if isinstance(current, Mapping) else MISSING


def lookup_path(value: Any, path: str) -> Any:
    """Walk a validated configuration value along a dotted key path.

    Models are walked by attribute (declared fields first, then extra
    fields), mappings by key and sequences by integer index.

    Returns:
        The value found, or MISSING
    """
    current = value
    for segment in split_key_path(path):
        current = _step(current, segment)
        if current is MISSING:
            break
    return current


def _step(current: Any, segment: str) -> Any:
    if current is MISSING or current is None:
        return MISSING

    model_fields = getattr(type(current), "model_fields", None)
    if model_fields is not None:
        if segment in model_fields:
            return getattr(current, segment)
        extra = getattr(current, "model_extra", None) or {}
        return extra.get(segment, MISSING)

    if isinstance(current, Mapping):
        return current.get(segment, MISSING)

    if isinstance(current, (list, tuple)) and segment.isdecimal():
        index = int(segment)
        return current[index] if index < len(current) else MISSING

    return MISSING
