"""Shared fixtures for scelint tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest
import yaml


@pytest.fixture
def module_dir(tmp_path: Path) -> Path:
    """Create an empty module with the conventional data directory."""
    module = tmp_path / "test-module"
    (module / "SIMP" / "compliance_profiles").mkdir(parents=True)
    return module


@pytest.fixture
def write_data(module_dir: Path) -> Callable[..., Path]:
    """Return a helper writing a data file into the module's data directory."""

    def _write(name: str, data: object, subdir: str = "SIMP/compliance_profiles") -> Path:
        path = module_dir / subdir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if name.endswith(".json"):
            path.write_text(json.dumps(data), encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def baseline_document() -> dict:
    """One profile referencing one control, satisfied by one check."""
    return {
        "version": "2.0.0",
        "profiles": {
            "baseline": {
                "title": "Baseline",
                "description": "Baseline profile",
                "controls": {"ctrl-1": True},
            },
        },
        "checks": {
            "chk-1": {
                "type": "puppet-class-parameter",
                "settings": {"parameter": "foo::bar", "value": True},
                "controls": {"ctrl-1": True},
            },
        },
    }

