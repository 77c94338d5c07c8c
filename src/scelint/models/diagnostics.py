"""Diagnostic data models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Level(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


class Diagnostics(BaseModel):
    """Append-only diagnostics collected over one validation run.

    Passed explicitly to every rule and compile call. Messages are kept in
    append order and never deduplicated.
    """

    errors: list[str] = []
    warnings: list[str] = []
    notes: list[str] = []

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def note(self, message: str) -> None:
        self.notes.append(message)

    def by_level(self) -> dict[Level, list[str]]:
        return {
            Level.ERROR: self.errors,
            Level.WARNING: self.warnings,
            Level.NOTE: self.notes,
        }

    def counts(self) -> dict[str, int]:
        return {
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "notes": len(self.notes),
        }


class LintReport(BaseModel):
    """Result of one lint run, as exported in JSON output."""

    version: str
    files: list[str] = []
    profiles: list[str] = []
    errors: list[str] = []
    warnings: list[str] = []
    notes: list[str] = []
