"""Validated runtime settings."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

DEFAULT_LATERAL_OFFSET = 15


class PlacementSettings(BaseModel):
    """Knobs for the position calculator and corrector."""

    lateral_offset: int = DEFAULT_LATERAL_OFFSET
    # Added to the monitor's left edge when a window wraps. Hosts that draw an
    # invisible resize border need a small negative value here.
    wrap_border_offset: int = 0
    max_attempts: int = Field(default=3, ge=1)


class WatcherSettings(BaseModel):
    """Polling cadence for the desktop event feed."""

    poll_interval_seconds: float = Field(default=0.25, gt=0)


class PathSettings(BaseModel):
    diagnostics_log_path: str | None = None


class AppSettings(BaseModel):
    """Top-level settings assembled from the YAML config files."""

    host: Literal["simulated", "desktop"] = "simulated"
    debug_logging: bool = False
    placement: PlacementSettings = Field(default_factory=PlacementSettings)
    watcher: WatcherSettings = Field(default_factory=WatcherSettings)
    paths: PathSettings = Field(default_factory=PathSettings)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> AppSettings:
        return cls.model_validate(config)
