"""Schema rules for SIMP compliance data.

Each rule inspects one part of a document and records diagnostics; none of
them raise for bad data they understand. Unexpected keys are warnings so
the schema can grow without breaking older linters.
"""

from __future__ import annotations

from typing import Any

from .loader import MERGED_DATA
from ..models.diagnostics import Diagnostics
from ..models.tree import as_mapping, is_truthy, render

SCHEMA_VERSION = "2.0.0"

CHECK_TYPE = "puppet-class-parameter"

TOP_LEVEL_KEYS = ("version", "profiles", "ce", "checks", "controls")

PROFILE_KEYS = ("title", "description", "controls", "ces", "checks", "confine")

CE_KEYS = (
    "title",
    "description",
    "controls",
    "identifiers",
    "oval-ids",
    "confine",
    "imported_data",
    "notes",
)

CHECK_KEYS = (
    "type",
    "settings",
    "controls",
    "identifiers",
    "oval-ids",
    "ces",
    "confine",
    "remediation",
)

SETTINGS_KEYS = ("parameter", "value")

IMPORTED_DATA_KEYS = ("checktext", "fixtext")

REASON_KEYS = ("reason",)

RISK_KEYS = ("level", "reason")


# ---------------------------------------------------------------------------
# Document level
# ---------------------------------------------------------------------------

def check_version(d: Diagnostics, file: str, data: dict) -> None:
    if data.get("version") != SCHEMA_VERSION:
        d.error(f"{file}: version check failed")


def check_keys(d: Diagnostics, file: str, data: dict) -> None:
    for key in data:
        if key not in TOP_LEVEL_KEYS:
            d.warning(f"{file}: unexpected key '{key}'")


# ---------------------------------------------------------------------------
# Shared field rules
# ---------------------------------------------------------------------------

def check_title(d: Diagnostics, file: str, data: Any) -> None:
    if not isinstance(data, str):
        d.warning(f"{file}: bad title '{render(data)}'")


def check_description(d: Diagnostics, file: str, data: Any) -> None:
    if not isinstance(data, str):
        d.warning(f"{file}: bad description '{render(data)}'")


def check_controls(d: Diagnostics, file: str, data: Any) -> None:
    if not isinstance(data, dict):
        d.warning(f"{file}: bad controls '{render(data)}'")
        return
    for key, value in data.items():
        if not (isinstance(key, str) and is_truthy(value)):
            d.warning(f"{file}: bad control '{key}'")


def check_profile_ces(d: Diagnostics, file: str, data: Any) -> None:
    if not isinstance(data, dict):
        d.warning(f"{file}: bad ces '{render(data)}'")
        return
    for key, value in data.items():
        if not (isinstance(key, str) and value is True):
            d.warning(f"{file}: bad ce '{key}'")


def check_profile_checks(d: Diagnostics, file: str, data: Any) -> None:
    if not isinstance(data, dict):
        d.warning(f"{file}: bad checks '{render(data)}'")
        return
    for key, value in data.items():
        if not (isinstance(key, str) and value is True):
            d.warning(f"{file}: bad check '{key}'")


def check_confine(d: Diagnostics, file: str, data: Any) -> None:
    if not isinstance(data, dict):
        d.warning(f"{file}: bad confine '{render(data)}'")


def check_identifiers(d: Diagnostics, file: str, data: Any) -> None:
    if not isinstance(data, dict):
        d.warning(f"{file}: bad identifiers '{render(data)}'")
        return
    for key, value in data.items():
        if isinstance(key, str) and isinstance(value, list):
            for identifier in value:
                if not isinstance(identifier, str):
                    d.warning(f"{file}: bad identifier '{render(identifier)}'")
        else:
            d.warning(f"{file}: bad identifier '{key}'")


def check_oval_ids(d: Diagnostics, file: str, data: Any) -> None:
    if not isinstance(data, list):
        d.warning(f"{file}: bad oval-ids '{render(data)}'")
        return
    for key in data:
        if not isinstance(key, str):
            d.warning(f"{file}: bad oval-id '{render(key)}'")


def check_imported_data(d: Diagnostics, file: str, data: Any) -> None:
    if not isinstance(data, dict):
        d.warning(f"{file}: bad imported_data '{render(data)}'")
        return
    for key, value in data.items():
        if key not in IMPORTED_DATA_KEYS:
            d.warning(f"{file}: unexpected key '{key}'")
        if not isinstance(value, str):
            d.warning(f"{file} (key '{key}'): bad data '{render(value)}'")


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def check_profiles(d: Diagnostics, file: str, data: Any) -> None:
    for profile, value in as_mapping(data, "profiles").items():
        value = as_mapping(value, f"profile '{profile}'")
        for key in value:
            if key not in PROFILE_KEYS:
                d.warning(f"{file} (profile '{profile}'): unexpected key '{key}'")

        if value.get("title") is not None:
            check_title(d, file, value["title"])
        if value.get("description") is not None:
            check_description(d, file, value["description"])
        if value.get("controls") is not None:
            check_controls(d, file, value["controls"])
        if value.get("ces") is not None:
            check_profile_ces(d, file, value["ces"])
        if value.get("checks") is not None:
            check_profile_checks(d, file, value["checks"])
        if value.get("confine") is not None:
            check_confine(d, file, value["confine"])


def check_ce(d: Diagnostics, file: str, data: Any) -> None:
    for ce, value in as_mapping(data, "ce").items():
        value = as_mapping(value, f"CE '{ce}'")
        for key in value:
            if key not in CE_KEYS:
                d.warning(f"{file} (CE '{ce}'): unexpected key '{key}'")

        if value.get("title") is not None:
            check_title(d, file, value["title"])
        if value.get("description") is not None:
            check_description(d, file, value["description"])
        if value.get("controls") is not None:
            check_controls(d, file, value["controls"])
        if value.get("identifiers") is not None:
            check_identifiers(d, file, value["identifiers"])
        if value.get("oval-ids") is not None:
            check_oval_ids(d, file, value["oval-ids"])
        if value.get("confine") is not None:
            check_confine(d, file, value["confine"])
        if value.get("imported_data") is not None:
            check_imported_data(d, file, value["imported_data"])


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

def check_type(d: Diagnostics, file: str, check: str, data: Any) -> None:
    if data != CHECK_TYPE:
        d.error(f"{file} (check '{check}'): unknown type '{render(data)}'")


def check_parameter(d: Diagnostics, file: str, check: str, parameter: Any) -> None:
    if not (isinstance(parameter, str) and parameter):
        d.error(f"{file} (check '{check}'): invalid parameter '{render(parameter)}'")


def _check_remediation_entries(
    d: Diagnostics,
    file: str,
    check: str,
    section: str,
    entries: Any,
    allowed: tuple[str, ...],
    required: str,
    required_type: type,
    malformed: str,
) -> None:
    if not isinstance(entries, list):
        d.error(f"{file} (check '{check}'): {malformed}")
        return

    for entry in entries:
        # Anything other than a hash here is incorrect
        if not isinstance(entry, dict):
            d.error(f"{file} (check '{check}'): {malformed}")
            continue

        for unknown_element in entry:
            if unknown_element not in allowed:
                d.warning(
                    f"{file} (check '{check}'): Unknown element {unknown_element} "
                    f"in remediation section {section}"
                )

        value = entry.get(required)
        if not isinstance(value, required_type) or isinstance(value, bool):
            d.error(f"{file} (check '{check}'): {malformed}")


def check_remediation(d: Diagnostics, file: str, check: str, remediation_section: Any) -> None:
    if not isinstance(remediation_section, dict):
        d.error(f"{file} (check '{check}'): malformed remediation section, expecting a hash.")
        return

    for section, value in remediation_section.items():
        if section in ("scan-false-positive", "disabled"):
            _check_remediation_entries(
                d, file, check, section, value,
                allowed=REASON_KEYS,
                required="reason",
                required_type=str,
                malformed=f"malformed remediation section {section}, must be an array of reason hashes.",
            )
        elif section == "risk":
            # reasons are optional for risk entries
            _check_remediation_entries(
                d, file, check, section, value,
                allowed=RISK_KEYS,
                required="level",
                required_type=int,
                malformed=(
                    f"malformed remediation section {section}, "
                    "must be an array of hashes containing levels and reasons."
                ),
            )
        else:
            d.warning(
                f"{file} (check '{check}'): {section} is not a recognized section "
                "within the remediation section"
            )


def check_settings(d: Diagnostics, file: str, check: str, data: Any) -> None:
    if data is None:
        d.error(f"{file} (check '{check}'): missing settings")
        return

    if not isinstance(data, dict):
        d.error(f"{file} (check '{check}'): malformed settings '{render(data)}', expecting a hash")
        return

    if "parameter" in data:
        check_parameter(d, file, check, data["parameter"])
    else:
        d.error(f"{file} (check '{check}'): missing key 'parameter'")

    # value can be anything, it only has to be present
    if "value" not in data:
        d.error(f"{file} (check '{check}'): missing key 'value'")

    for key in data:
        if key not in SETTINGS_KEYS:
            d.warning(f"{file} (check '{check}'): unexpected key '{key}'")


def check_check_ces(d: Diagnostics, file: str, data: Any) -> None:
    if not isinstance(data, list):
        d.warning(f"{file}: bad ces '{render(data)}'")
        return
    for key in data:
        if not isinstance(key, str):
            d.warning(f"{file}: bad ce '{render(key)}'")


def check_checks(d: Diagnostics, file: str, data: Any) -> None:
    merged = file == MERGED_DATA

    for check, value in as_mapping(data, "checks").items():
        if value is None:
            d.warning(f"{file} (check '{check}'): empty value")
            continue

        if not isinstance(value, dict):
            d.error(
                f"{file} (check '{check}'): contains something other than a hash, "
                "this is most likely caused by a missing note or ce element under the check"
            )
            continue

        for key in value:
            if key not in CHECK_KEYS:
                d.warning(f"{file} (check '{check}'): unexpected key '{key}'")

        # Partial files may leave these to another file; the merged view may not.
        if is_truthy(value.get("type")) or merged:
            check_type(d, file, check, value.get("type"))
        if is_truthy(value.get("settings")) or merged:
            check_settings(d, file, check, value.get("settings"))
        if is_truthy(value.get("remediation")):
            check_remediation(d, file, check, value["remediation"])
        if value.get("controls") is not None:
            check_controls(d, file, value["controls"])
        if value.get("identifiers") is not None:
            check_identifiers(d, file, value["identifiers"])
        if value.get("oval-ids") is not None:
            check_oval_ids(d, file, value["oval-ids"])
        if value.get("ces") is not None:
            check_check_ces(d, file, value["ces"])
        if value.get("confine") is not None:
            check_confine(d, file, value["confine"])


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def lint_document(d: Diagnostics, file: str, data: Any) -> None:
    """Run every rule against one document.

    A document whose shape stops the rules (e.g. a root that is not a hash)
    is reported as a single error; other documents are unaffected.
    """
    try:
        data = as_mapping(data, "document root")

        check_version(d, file, data)
        check_keys(d, file, data)

        if is_truthy(data.get("profiles")):
            check_profiles(d, file, data["profiles"])
        if is_truthy(data.get("ce")):
            check_ce(d, file, data["ce"])
        if is_truthy(data.get("checks")):
            check_checks(d, file, data["checks"])
        if is_truthy(data.get("controls")):
            check_controls(d, file, data["controls"])
    except Exception as e:
        d.error(f"{file}: {e} (not a hash?)")
