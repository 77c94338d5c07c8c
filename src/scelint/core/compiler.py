"""Hiera compilation.

Resolves, for one profile and one confinement context, the Puppet class
parameters the profile's checks would set. Runs in four passes:

1. Merge every document with confined-out entries removed.
2. Index the usable checks by check, control and CE name.
3. Collect the checks the profile references.
4. Resolve parameter values, reporting conflicts.
"""

from __future__ import annotations

from typing import Any, Optional

from .confines import apply_confinement, describe_context
from .loader import MERGED_DATA
from .merge import deep_merge, unique
from .rules import CHECK_TYPE
from ..models.diagnostics import Diagnostics
from ..models.tree import is_truthy, kind_of, render

MAP_TYPES = ("checks", "controls", "ces")


class HieraCompiler:
    """Compiles Hiera data from a set of parsed compliance documents."""

    def __init__(
        self,
        documents: dict[str, Any],
        diagnostics: Diagnostics,
        knockout_prefix: Optional[str] = "--",
        check_type: str = CHECK_TYPE,
    ) -> None:
        self.documents = documents
        self.diagnostics = diagnostics
        self.knockout_prefix = knockout_prefix
        self.check_type = check_type

    # -----------------------------------------------------------------------
    # Pass 1
    # -----------------------------------------------------------------------

    def merge_confined(self, context: Optional[dict] = None) -> dict:
        """Merge all documents, dropping entries confined out of ``context``."""
        d = self.diagnostics
        label = describe_context(context)
        merged: dict = {}

        for file, data in self.documents.items():
            if file == MERGED_DATA or not isinstance(data, dict):
                continue

            for key, value in data.items():
                confined = apply_confinement(d, file, value, context)

                if not isinstance(confined, dict):
                    if key in merged and key != "version":
                        message = f"{file} {label}: key {key} redefined"
                        if merged[key] == confined:
                            d.note(message)
                        else:
                            d.warning(
                                f"{message} (previous value: {render(merged[key])}, "
                                f"new value: {render(confined)})"
                            )
                    merged[key] = confined
                    continue

                section = merged.get(key)
                if not isinstance(section, dict):
                    section = {}
                merged[key] = deep_merge(
                    section,
                    confined,
                    merge_lists=True,
                    knockout_prefix=self.knockout_prefix,
                )

        return merged

    # -----------------------------------------------------------------------
    # Pass 2
    # -----------------------------------------------------------------------

    def build_check_map(self, merged: dict, context: Optional[dict] = None) -> dict[str, dict[str, list[dict]]]:
        """Index applicable checks by check name, control name and CE name."""
        d = self.diagnostics
        label = describe_context(context)
        check_map: dict[str, dict[str, list[dict]]] = {map_type: {} for map_type in MAP_TYPES}

        checks = merged.get("checks")
        if not isinstance(checks, dict):
            return check_map

        ces = merged.get("ce") if isinstance(merged.get("ce"), dict) else {}

        for check_name, specification in checks.items():
            prefix = f"check {check_name} {label}"
            if not isinstance(specification, dict) or specification.get("type") != self.check_type:
                d.warning(f"{prefix}: Not a Puppet parameter")
                continue

            settings = specification.get("settings")
            if not isinstance(settings, dict):
                d.warning(f"{prefix}: Missing required 'settings' Hash")
                continue

            if not isinstance(settings.get("parameter"), str):
                d.warning(f"{prefix}: Missing required key 'parameter' or wrong data type")
                continue

            if "value" not in settings:
                d.warning(f"{prefix}: Missing required key 'value' for parameter {settings['parameter']}")
                continue

            check_map["checks"][check_name] = [specification]

            controls = specification.get("controls")
            if isinstance(controls, dict):
                for control_name, enabled in controls.items():
                    if is_truthy(enabled):
                        check_map["controls"].setdefault(control_name, []).append(specification)

            check_ces = specification.get("ces")
            if isinstance(check_ces, list):
                for ce_name in check_ces:
                    if not isinstance(ce_name, str) or ce_name not in ces:
                        continue

                    check_map["ces"].setdefault(ce_name, []).append(specification)

                    ce = ces[ce_name]
                    ce_controls = ce.get("controls") if isinstance(ce, dict) else None
                    if isinstance(ce_controls, dict):
                        for control_name, enabled in ce_controls.items():
                            if is_truthy(enabled):
                                check_map["controls"].setdefault(control_name, []).append(specification)

        return check_map

    # -----------------------------------------------------------------------
    # Passes 3 and 4
    # -----------------------------------------------------------------------

    def profile_specifications(
        self,
        merged: dict,
        check_map: dict[str, dict[str, list[dict]]],
        profile: str,
    ) -> list[dict]:
        """Check specifications a profile pulls in, in checks/controls/ces order."""
        profiles = merged.get("profiles")
        info = profiles.get(profile) if isinstance(profiles, dict) else None
        if not isinstance(info, dict):
            info = {}

        specifications: list[dict] = []
        for map_type in MAP_TYPES:
            references = info.get(map_type)
            if not isinstance(references, dict):
                continue
            for key, enabled in references.items():
                if not is_truthy(enabled) or key not in check_map[map_type]:
                    continue
                specifications.extend(check_map[map_type][key])
        return specifications

    def resolve(self, profile: str, specifications: list[dict], context: Optional[dict] = None) -> dict:
        """Resolve parameter values from specifications, in order."""
        d = self.diagnostics
        prefix = f"{profile} {describe_context(context)}"
        hiera: dict = {}

        for spec in specifications:
            parameter = spec["settings"]["parameter"]
            value = spec["settings"]["value"]

            if parameter not in hiera:
                hiera[parameter] = value
                continue

            previous = hiera[parameter]
            previous_kind = kind_of(previous)
            new_kind = kind_of(value)

            if previous_kind is not new_kind:
                d.error(
                    f"{prefix}: key {parameter} type mismatch "
                    f"(previous value: {render(previous)} ({previous_kind.value}), "
                    f"new value: {render(value)} ({new_kind.value}))"
                )
                hiera[parameter] = value
                continue

            if isinstance(value, dict):
                d.note(f"{prefix}: Merging Hash values for {parameter}")
                hiera[parameter] = deep_merge(previous, value, merge_lists=True)
                continue

            if isinstance(value, list):
                d.note(f"{prefix}: Merging Array values for {parameter}")
                hiera[parameter] = unique(previous + value)
                continue

            message = f"{prefix}: key {parameter} redefined"
            if previous == value:
                d.note(message)
            else:
                d.warning(f"{message} (previous value: {render(previous)}, new value: {render(value)})")
            hiera[parameter] = value

        return hiera

    def compile(self, profile: str, context: Optional[dict] = None) -> dict:
        """Compile the Hiera data for ``profile`` under ``context``."""
        merged = self.merge_confined(context)
        check_map = self.build_check_map(merged, context)
        specifications = self.profile_specifications(merged, check_map, profile)

        if not specifications:
            self.diagnostics.note(f"{profile} {describe_context(context)}: No Hiera values found")
            return {}

        return self.resolve(profile, specifications, context)
