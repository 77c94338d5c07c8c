"""Deep merge for compliance data and configuration.

Mappings merge recursively and the override wins for everything else.
When ``merge_lists`` is set, lists are unioned instead of replaced, and a
``knockout_prefix`` lets the override remove elements merged earlier:

    base:     {"pkgs": ["telnet", "rsh"]}
    override: {"pkgs": ["--telnet", "ftp"]}
    result:   {"pkgs": ["rsh", "ftp"]}

A value equal to the bare prefix removes the key entirely.
"""

from __future__ import annotations

from typing import Any, Optional

_MISSING = object()


def unique(items: list) -> list:
    """Deduplicate preserving first-seen order. Works on unhashable items."""
    result: list = []
    for item in items:
        if not any(type(seen) is type(item) and seen == item for seen in result):
            result.append(item)
    return result


def deep_merge(
    base: dict,
    override: dict,
    merge_lists: bool = False,
    knockout_prefix: Optional[str] = None,
) -> dict:
    """Deep merge two dicts without mutating either."""
    result = dict(base)
    for key, value in override.items():
        merged = _merge_value(result.get(key, _MISSING), value, merge_lists, knockout_prefix)
        if merged is _MISSING:
            result.pop(key, None)
        else:
            result[key] = merged
    return result


def _is_knockout(item: Any, knockout_prefix: Optional[str]) -> bool:
    return bool(knockout_prefix) and isinstance(item, str) and item.startswith(knockout_prefix)


def _merge_value(current: Any, value: Any, merge_lists: bool, knockout_prefix: Optional[str]) -> Any:
    if knockout_prefix and value == knockout_prefix:
        return _MISSING

    if isinstance(value, dict):
        existing = current if isinstance(current, dict) else {}
        return deep_merge(existing, value, merge_lists, knockout_prefix)

    if isinstance(value, list) and merge_lists:
        existing = current if isinstance(current, list) else []
        knocked = {item[len(knockout_prefix):] for item in value if _is_knockout(item, knockout_prefix)}
        if knocked:
            existing = [item for item in existing if not (isinstance(item, str) and item in knocked)]
        additions = [item for item in value if not _is_knockout(item, knockout_prefix)]
        return unique(existing + additions)

    # nil never clobbers an existing value when unioning
    if value is None and merge_lists and current is not _MISSING:
        return current

    return value
