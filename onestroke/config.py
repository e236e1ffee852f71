from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    "levels_dir": None,
    "progress_file": "~/.onestroke/progress.json",
    "generator": {
        "seed": 0,
        "grid_size": 8,
        "large_grid_size": 16,
        "large_from_level": 11,
        "min_fill": 0.35,
        "max_fill": 0.6,
        "attempts": 200,
    },
    "validation": {
        "search_limit": 200000,
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _candidate_config_paths() -> list[Path]:
    env_path = os.environ.get("ONESTROKE_CONFIG")
    paths = []
    if env_path:
        paths.append(Path(env_path))
    paths.extend([
        Path("onestroke.yaml"),
        Path.home() / ".onestroke" / "config.yaml",
    ])
    return paths


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Defaults overlaid with the first config file found.

    An explicit ``path`` takes the place of the usual search.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is not None and not Path(path).exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    candidates = [Path(path)] if path is not None else _candidate_config_paths()
    for candidate in candidates:
        if candidate.exists():
            with candidate.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            if isinstance(data, dict):
                config = _deep_merge(config, data)
            break
    return config
