"""Compliance data loading.

Discovers SIMP compliance profile files under the conventional data
directories, parses them and merges them into a single view.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

from .errors import InputPathError
from .merge import deep_merge
from ..models.diagnostics import Diagnostics
from ..models.tree import TreeTypeError, check_tree

DATA_DIRS = (
    "SIMP/compliance_profiles",
    "simp/compliance_profiles",
)

FILE_TYPES = ("yaml", "json")

MERGED_DATA = "merged data"


def _parse_yaml(text: str) -> Any:
    return yaml.safe_load(text)


def _parse_json(text: str) -> Any:
    return json.loads(text)


PARSERS = {
    "yaml": _parse_yaml,
    "json": _parse_json,
}


class DocumentStore:
    """Parses compliance data files, memoized by path."""

    def __init__(
        self,
        diagnostics: Diagnostics,
        data_dirs: Iterable[str] = DATA_DIRS,
        file_types: Iterable[str] = FILE_TYPES,
    ) -> None:
        self.diagnostics = diagnostics
        self.data_dirs = list(data_dirs)
        self.file_types = [t for t in file_types if t in PARSERS]
        self._cache: dict[str, Any] = {}

    def file_type(self, file: str) -> Optional[str]:
        suffix = Path(file).suffix.lstrip(".")
        return suffix if suffix in self.file_types else None

    def parse(self, file: str) -> Any:
        """Parse one file. Returns None (with an error recorded) on failure."""
        if file in self._cache:
            return self._cache[file]

        file_type = self.file_type(file)
        if file_type is None:
            self.diagnostics.error(f"{file}: Failed to determine file type")
            return None

        try:
            text = Path(file).read_text(encoding="utf-8")
            data = PARSERS[file_type](text)
            check_tree(data)
        except (OSError, ValueError, TreeTypeError, yaml.YAMLError) as e:
            message = str(e).replace("\n", " ")
            self.diagnostics.error(f"{file}: Failed to parse file: {message}")
            return None

        if data is not None:
            self._cache[file] = data
        return data

    def discover(self, path: Path) -> list[str]:
        """Find data files under the conventional directories of a module."""
        found: list[str] = []
        for data_dir in self.data_dirs:
            base = path / data_dir
            if not base.is_dir():
                continue
            for file_type in self.file_types:
                found.extend(str(f) for f in sorted(base.rglob(f"*.{file_type}")) if f.is_file())
        return found

    def load(self, paths: Iterable[str]) -> dict[str, Any]:
        """Load every document reachable from the given paths, in discovery order.

        Raises InputPathError for a path that is neither a file nor a directory.
        """
        documents: dict[str, Any] = {}

        for path in paths:
            location = Path(path)
            if location.is_dir():
                candidates = self.discover(location)
            elif location.exists():
                candidates = [str(path)]
            else:
                raise InputPathError(str(path))

            for file in candidates:
                data = self.parse(file)
                if data is None:
                    continue
                documents[file] = data

        return documents


def merge_corpus(documents: dict[str, Any]) -> dict:
    """Deep merge all documents in order. Later scalars silently win."""
    merged: dict = {}
    for file, data in documents.items():
        if file == MERGED_DATA or not isinstance(data, dict):
            continue
        merged = deep_merge(merged, data)
    return merged
