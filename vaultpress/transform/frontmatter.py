"""Normalizes flat dot-notation frontmatter into a nested tree.

    {"relation.parents": [], "title": "X"}
    -> nested {"relation": {"parents": []}, "title": "X"}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from vaultpress.models import NormalizedMetadata


class _Missing:
    """Marks a path that does not exist, as opposed to a ``None`` value."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def normalize_frontmatter(raw: Mapping[str, Any] | None) -> NormalizedMetadata:
    flat = dict(raw) if raw else {}
    nested: dict[str, Any] = {}

    for key, value in flat.items():
        if "." in key:
            _set_nested_value(nested, key.split("."), value)
        else:
            nested[key] = value

    return NormalizedMetadata(flat=flat, nested=nested)


def _set_nested_value(target: dict[str, Any], segments: list[str], value: Any) -> None:
    current = target
    for key in segments[:-1]:
        child = current.get(key)
        # Copy mappings taken from the flat input so it is never mutated
        child = dict(child) if isinstance(child, dict) else {}
        current[key] = child
        current = child
    current[segments[-1]] = value


def resolve_path(tree: Mapping[str, Any], path: str) -> Any:
    """Walk ``tree`` along a dotted ``path``.

    Returns MISSING when a segment is absent or a non-mapping is indexed.
    """
    segments = [s for s in path.split(".") if s]
    if not segments:
        return MISSING

    current: Any = tree
    for segment in segments:
        if not isinstance(current, Mapping) or segment not in current:
            return MISSING
        current = current[segment]
    return current
