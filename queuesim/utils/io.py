"""IO helpers for simulation results."""

import json
from pathlib import Path
from typing import Any

import yaml


def save_json(obj: Any, file_path: str, indent: int = 2):
    """Save object as JSON."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        json.dump(obj, f, indent=indent)


def load_json(file_path: str) -> Any:
    """Load JSON file."""
    with open(file_path, 'r') as f:
        return json.load(f)


def save_yaml(obj: Any, file_path: str) -> Path:
    """Save object as YAML, creating parent directories.

    Returns:
        Path the file was written to
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        yaml.safe_dump(obj, f, default_flow_style=False, sort_keys=False)
    return path


def slugify(name: str) -> str:
    """Lower-case file-name-safe version of a scenario or stage name."""
    slug = "".join(ch if ch.isalnum() else "_" for ch in name).strip("_").lower()
    return slug or "simulation"
