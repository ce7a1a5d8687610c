"""Configuration loading and runtime bootstrapping."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from core.settings import AppSettings


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_diagnostics_path(root: Path, settings: AppSettings) -> Path | None:
    """Resolve the diagnostics log path relative to the project root."""
    raw = settings.paths.diagnostics_log_path
    if not raw:
        return None
    return (root / raw).resolve()


def load_effective_config(root: Path) -> dict[str, Any]:
    """Load ``config/default.yaml`` overlaid with an optional ``config/local.yaml``."""
    config_dir = root / "config"
    default_cfg = load_yaml(config_dir / "default.yaml")
    local_cfg = load_yaml(config_dir / "local.yaml")
    return merge_dicts(default_cfg, local_cfg)


def load_settings(root: Path) -> AppSettings:
    return AppSettings.from_config(load_effective_config(root))
