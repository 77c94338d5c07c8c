"""Exceptions raised by the scelint engine.

Problems found in compliance data are reported as diagnostics, not raised.
Only conditions that make a run impossible surface as exceptions.
"""

from __future__ import annotations


class ScelintError(Exception):
    """Base class for scelint failures."""


class InputPathError(ScelintError):
    """An input location is neither an existing file nor a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Can't find path '{path}'")
        self.path = path
