"""Configuration file loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..schemas.config import AppConfig, load_config


def read_config(path: str | Path) -> AppConfig:
    """Read and validate a YAML configuration file."""
    with Path(path).open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    return load_config(raw)


def load_settings(path: str | Path | None) -> dict[str, Any]:
    """Return container overrides from a YAML file, or none without one."""
    if path is None:
        return {}
    return read_config(path).to_settings()


__all__ = ["load_settings", "read_config"]
