"""Document tree helpers.

Parsed documents are kept as the plain values the YAML and JSON parsers
produce. These helpers classify them and down-cast with a typed error.
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Any


class TreeTypeError(TypeError):
    """A tree node was not of the expected kind."""


class NodeKind(str, Enum):
    MAPPING = "Mapping"
    SEQUENCE = "Sequence"
    STRING = "String"
    INTEGER = "Integer"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    TIMESTAMP = "Timestamp"
    NULL = "Null"


def kind_of(value: Any) -> NodeKind:
    """Classify a parsed value. Booleans are never integers."""
    if value is None:
        return NodeKind.NULL
    if isinstance(value, bool):
        return NodeKind.BOOLEAN
    if isinstance(value, int):
        return NodeKind.INTEGER
    if isinstance(value, float):
        return NodeKind.FLOAT
    if isinstance(value, str):
        return NodeKind.STRING
    if isinstance(value, dict):
        return NodeKind.MAPPING
    if isinstance(value, list):
        return NodeKind.SEQUENCE
    # YAML timestamps
    if isinstance(value, (datetime.date, datetime.datetime)):
        return NodeKind.TIMESTAMP
    raise TreeTypeError(f"unsupported node type {type(value).__name__}")


def check_tree(value: Any) -> None:
    """Raise TreeTypeError if any key or value in ``value`` is not a tree node.

    ``yaml.safe_load`` also builds sets (``!!set``) and bytes (``!!binary``),
    which compliance data has no use for.
    """
    kind = kind_of(value)
    if kind is NodeKind.MAPPING:
        for key, item in value.items():
            kind_of(key)
            check_tree(item)
    elif kind is NodeKind.SEQUENCE:
        for item in value:
            check_tree(item)


def _cast(value: Any, expected: NodeKind, what: str) -> Any:
    actual = kind_of(value)
    if actual is not expected:
        label = f"{what}: " if what else ""
        raise TreeTypeError(f"{label}expected {expected.value}, got {actual.value}")
    return value


def as_mapping(value: Any, what: str = "") -> dict:
    return _cast(value, NodeKind.MAPPING, what)


def as_list(value: Any) -> list:
    """Wrap a scalar in a list. None becomes an empty list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def is_truthy(value: Any) -> bool:
    """Only null and false are falsy in compliance data; 0 and "" count as set."""
    return value is not None and value is not False


def render(value: Any) -> str:
    """Render a value for use inside a diagnostic message."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict):
        inner = ", ".join(f"{render(k)}: {_render_item(v)}" for k, v in value.items())
        return "{" + inner + "}"
    if isinstance(value, list):
        return "[" + ", ".join(_render_item(v) for v in value) + "]"
    return str(value)


def _render_item(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if value is None:
        return "null"
    return render(value)
