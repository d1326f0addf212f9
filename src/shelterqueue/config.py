"""Configuration loading and defaults."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


DEFAULT_CONFIG = {
    "shelter": {
        "name": "Shelter",
        "categories": ["dog", "cat"],
    },
    "logging": {
        "level": "WARNING",
    },
}


class Config:
    def __init__(self, data: dict, config_dir: Path):
        self._data = data
        self.config_dir = config_dir

    @classmethod
    def load(cls, project_root: Path) -> "Config":
        config_dir = project_root / ".shelterqueue"
        config_file = config_dir / "config.toml"

        data = _deep_merge(DEFAULT_CONFIG, {})

        if config_file.exists():
            with open(config_file, "rb") as f:
                user_data = tomllib.load(f)
            data = _deep_merge(DEFAULT_CONFIG, user_data)

        return cls(data, config_dir)

    @classmethod
    def load_from_cwd(cls) -> "Config":
        root = _find_project_root(Path.cwd())
        return cls.load(root)

    # --- shelter ---
    @property
    def shelter_name(self) -> str:
        return self._data["shelter"]["name"]

    @property
    def categories(self) -> list[str]:
        return [c.lower() for c in self._data["shelter"]["categories"]]

    # --- logging ---
    @property
    def log_level(self) -> int:
        raw = self._data["logging"]["level"]
        if isinstance(raw, int):
            return raw
        level = logging.getLevelName(str(raw).upper())
        # getLevelName returns "Level X" for names it does not know
        return level if isinstance(level, int) else logging.WARNING


def _deep_merge(base: dict, override: dict) -> dict:
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _find_project_root(start: Path) -> Path:
    """Walk up to find the directory containing .shelterqueue/ or .git/."""
    current = start.resolve()
    while True:
        if (current / ".shelterqueue").exists() or (current / ".git").exists():
            return current
        parent = current.parent
        if parent == current:
            return start.resolve()
        current = parent


DEFAULT_CONFIG_TOML = """\
[shelter]
name       = "Shelter"
categories = ["dog", "cat"]

[logging]
level = "WARNING"
"""
