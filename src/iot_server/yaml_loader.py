"""YAML configuration loader for service settings."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

CONTAINER_PATHS = (Path("/app/service.yaml"),)


def find_service_yaml(start_path: Path | None = None, *, max_depth: int = 5) -> Path | None:
    """Find service.yaml by searching up from start_path.

    Args:
        start_path: Starting directory. Defaults to the current working directory.
        max_depth: How many parent directories to inspect.

    Returns:
        Path to service.yaml if found, None otherwise.
    """
    current = Path(start_path or Path.cwd()).resolve()
    for _ in range(max_depth):
        candidate = current / "service.yaml"
        if candidate.is_file():
            return candidate
        if current.parent == current:
            break
        current = current.parent

    for path in CONTAINER_PATHS:
        if path.is_file():
            return path
    return None


def load_service_yaml(yaml_path: Path | None = None) -> dict[str, Any]:
    """Load service.yaml as a flat mapping of setting overrides.

    Returns an empty dict when no file is found. A file whose top level is
    not a mapping is rejected.
    """
    path = yaml_path if yaml_path is not None else find_service_yaml()
    if path is None or not path.exists():
        return {}
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return data
