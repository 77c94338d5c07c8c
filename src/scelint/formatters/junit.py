"""JUnit XML formatter for CI/CD integration."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from xml.dom import minidom
from xml.etree import ElementTree as ET

from ..models.diagnostics import Diagnostics, Level


def _split_source(message: str) -> tuple[str, str]:
    """Split "<source> (...): text" into the source and the text."""
    source, sep, rest = message.partition(": ")
    if not sep:
        return "", message
    return source.split(" (", 1)[0], rest


def export_junit_results(
    diagnostics: Diagnostics,
    output_path: Path,
    strict: bool = False,
    project_name: str = "scelint",
    duration: float = 0,
) -> dict:
    """Export diagnostics as JUnit XML.

    Args:
        diagnostics: Diagnostics from a lint run.
        output_path: Path to write the XML file.
        strict: Also mark warnings as failures.
        project_name: Name for the testsuites element.
        duration: Total duration in seconds.

    Returns:
        Dict with: path, total_tests, failures, passed.
    """
    fail_set = {Level.ERROR, Level.WARNING} if strict else {Level.ERROR}

    testsuites = ET.Element("testsuites")
    testsuites.set("name", project_name)
    testsuites.set("timestamp", datetime.now().strftime("%Y-%m-%dT%H:%M:%S"))

    total_tests = 0
    total_failures = 0

    for level, messages in diagnostics.by_level().items():
        if not messages:
            continue

        testsuite = ET.SubElement(testsuites, "testsuite")
        testsuite.set("name", level.value)
        testsuite.set("tests", str(len(messages)))

        suite_failures = 0

        for index, message in enumerate(messages, start=1):
            total_tests += 1
            source, text = _split_source(message)

            testcase = ET.SubElement(testsuite, "testcase")
            testcase.set("name", f"{level.value.upper()}-{index:03d}: {text}")
            testcase.set("classname", source or level.value)

            if level in fail_set:
                total_failures += 1
                suite_failures += 1

                failure = ET.SubElement(testcase, "failure")
                failure.set("message", message)
                failure.set("type", level.value)
                failure.text = message

        testsuite.set("failures", str(suite_failures))
        testsuite.set("errors", "0")
        testsuite.set("skipped", "0")

    testsuites.set("tests", str(total_tests))
    testsuites.set("failures", str(total_failures))
    testsuites.set("errors", "0")
    if duration > 0:
        testsuites.set("time", str(round(duration, 2)))

    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Pretty-print XML
    rough = ET.tostring(testsuites, encoding="unicode")
    dom = minidom.parseString(rough)
    xml_str = dom.toprettyxml(indent="  ", encoding="UTF-8")
    output_path.write_bytes(xml_str)

    return {
        "path": str(output_path),
        "total_tests": total_tests,
        "failures": total_failures,
        "passed": total_tests - total_failures,
    }
