"""Lint driver.

Loads compliance data from the given paths, runs the schema rules over
every document (and the merged view), then compiles Hiera data for every
profile, unconfined and under every confinement context.

Example::

    lint = Lint(["/path/to/module"])
    for message in lint.errors:
        print(message)
"""

from __future__ import annotations

import copy
from typing import Any, Iterable, Optional

from .compiler import HieraCompiler
from .config import DEFAULT_CONFIG
from .confines import collect_confines, expand_confines
from .loader import MERGED_DATA, DocumentStore, merge_corpus
from .rules import lint_document
from .. import __version__
from ..models.diagnostics import Diagnostics, LintReport


class Lint:
    """Checks SIMP compliance data found under ``paths``.

    Raises InputPathError if a path does not exist. An empty corpus is not
    an error: nothing is checked and all diagnostics stay empty.
    """

    def __init__(self, paths: Iterable[str] = (".",), config: Optional[dict] = None) -> None:
        self.config = config if config is not None else copy.deepcopy(DEFAULT_CONFIG)
        self.diagnostics = Diagnostics()
        self._data: dict[str, Any] = {}
        self._profiles: Optional[list[str]] = None
        self._confines: Optional[list[dict]] = None

        store = DocumentStore(
            self.diagnostics,
            data_dirs=self.config.get("data_dirs", DEFAULT_CONFIG["data_dirs"]),
            file_types=self.config.get("file_types", DEFAULT_CONFIG["file_types"]),
        )
        documents = store.load(paths)

        self.compiler = HieraCompiler(
            documents,
            self.diagnostics,
            knockout_prefix=self.config.get("knockout_prefix", DEFAULT_CONFIG["knockout_prefix"]),
        )

        if not documents:
            return

        self._data = dict(documents)
        self._data[MERGED_DATA] = merge_corpus(documents)

        for file, data in self._data.items():
            lint_document(self.diagnostics, file, data)

        self.validate()

    @property
    def errors(self) -> list[str]:
        return self.diagnostics.errors

    @property
    def warnings(self) -> list[str]:
        return self.diagnostics.warnings

    @property
    def notes(self) -> list[str]:
        return self.diagnostics.notes

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    @property
    def files(self) -> list[str]:
        return [file for file in self._data if file != MERGED_DATA]

    def profiles(self) -> Optional[list[str]]:
        """Profile names in the merged data, or None if there are none."""
        if self._profiles is not None:
            return self._profiles

        merged = self._data.get(MERGED_DATA)
        if not isinstance(merged, dict) or not isinstance(merged.get("profiles"), dict):
            return None

        self._profiles = list(merged["profiles"])
        return self._profiles

    def confines(self) -> list[dict]:
        if self._confines is None:
            self._confines = expand_confines(collect_confines(self._data.get(MERGED_DATA)))
        return self._confines

    def compile(self, profile: str, confine: Optional[dict] = None) -> dict:
        return self.compiler.compile(profile, confine)

    def validate(self) -> None:
        profiles = self.profiles()
        if profiles is None:
            self.diagnostics.note("No profiles found, unable to validate Hiera data")
            return

        for profile in profiles:
            # One broken profile must not stop the others.
            try:
                self.compile(profile)
                for confine in self.confines():
                    self.compile(profile, confine)
            except Exception as e:
                self.diagnostics.error(f"{profile}: failed to compile Hiera data: {e}")

    def report(self) -> LintReport:
        return LintReport(
            version=__version__,
            files=self.files,
            profiles=self.profiles() or [],
            errors=list(self.errors),
            warnings=list(self.warnings),
            notes=list(self.notes),
        )
