"""3-layer configuration system for scelint.

Loads and merges configuration from:
1. Default settings (built-in)
2. Project config (.scelint.yaml in the working directory)
3. CLI parameters (override)
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Optional

import yaml

from .merge import deep_merge

CONFIG_FILENAME = ".scelint.yaml"

DEFAULT_CONFIG: dict = {
    "data_dirs": [
        "SIMP/compliance_profiles",
        "simp/compliance_profiles",
    ],
    "file_types": ["yaml", "json"],
    "knockout_prefix": "--",
    "output": {
        "format": "text",
        "verbose": False,
    },
    "ci": {
        "strict": False,
        "exit_codes": {"ok": 0, "errors": 1, "input": 2},
    },
}


def load_project_config(project_path: Path, config_file: Optional[Path] = None) -> dict:
    """Load project configuration from .scelint.yaml (or an explicit file)."""
    config_path = config_file or project_path / CONFIG_FILENAME
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
        loaded = yaml.safe_load(content) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return loaded if isinstance(loaded, dict) else {}


def get_effective_config(
    project_path: Path,
    config_file: Optional[Path] = None,
    cli_overrides: Optional[dict] = None,
) -> dict:
    """Get the fully resolved configuration for a lint run."""
    config = copy.deepcopy(DEFAULT_CONFIG)

    project_config = load_project_config(project_path, config_file)
    if project_config:
        config = deep_merge(config, project_config)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    return config
