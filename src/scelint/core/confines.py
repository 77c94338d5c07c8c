"""Confinement contexts.

Profiles, CEs and checks may carry a ``confine`` clause restricting them to
particular environments, e.g. ``confine: {os.family: [RedHat, CentOS]}``.
This module derives the set of contexts to compile against and decides
which entries survive under a given context.
"""

from __future__ import annotations

from typing import Any, Optional

from ..models.diagnostics import Diagnostics
from ..models.tree import as_list, render

CONFINED_SECTIONS = ("profiles", "ce", "checks")


def collect_confines(merged: Any) -> dict:
    """Combine every confine clause found in the merged data. Later keys win."""
    confine: dict = {}
    if not isinstance(merged, dict):
        return confine

    for section in CONFINED_SECTIONS:
        entries = merged.get(section)
        if not isinstance(entries, dict):
            continue
        for entry in entries.values():
            if isinstance(entry, dict) and isinstance(entry.get("confine"), dict):
                confine.update(entry["confine"])

    return confine


def expand_confines(confine: dict) -> list[dict]:
    """Enumerate confinement contexts.

    The number of contexts is the product of the value counts, and context
    ``i`` takes ``values[i % len(values)]`` for every setting. When value
    counts differ this cycles the shorter lists rather than producing the
    full cartesian product.
    """
    contexts: list[dict] = []
    if not confine:
        return contexts

    count = 1
    for value in confine.values():
        count *= len(as_list(value))

    for i in range(count):
        context = {}
        for setting, value in confine.items():
            values = as_list(value)
            context[setting] = values[i % len(values)]
        contexts.append(context)

    return contexts


def should_delete(
    d: Diagnostics,
    file: str,
    key: str,
    specification: Any,
    context: Optional[dict],
) -> bool:
    """Decide whether an entry is confined out of ``context``.

    The entry is kept as soon as any one of its confine settings matches.
    A setting missing from the context removes the entry outright, even if
    a later setting would have matched.
    """
    if not isinstance(specification, dict) or "confine" not in specification:
        return False

    confine = specification["confine"]
    if not isinstance(confine, dict):
        d.warning(f"{file}: 'confine' is not a Hash in key {key}")
        return False

    for setting, allowed in confine.items():
        if not isinstance(context, dict) or setting not in context:
            return True
        allowed_values = as_list(allowed)
        for value in as_list(context[setting]):
            if value in allowed_values:
                return False

    return True


def apply_confinement(d: Diagnostics, file: str, section: Any, context: Optional[dict]) -> Any:
    """Return a copy of ``section`` without the entries confined out of ``context``.

    Without a context nothing is filtered. Sections that are not hashes are
    returned unchanged.
    """
    if context is None or not isinstance(section, dict):
        return section

    return {
        key: specification
        for key, specification in section.items()
        if not should_delete(d, file, key, specification, context)
    }


def describe_context(context: Optional[dict]) -> str:
    if context is None:
        return "(no confinement data)"
    return f"(confined: {render(context)})"
