"""Window, display and queue snapshot models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

WindowId = int
WindowState = Literal["normal", "minimized", "maximized", "fullscreen"]


class Geometry(BaseModel):
    """Outer rectangle of a window in desktop pixels."""

    model_config = ConfigDict(frozen=True)

    left: int
    top: int
    width: int
    height: int

    def delta_from(self, actual: Geometry) -> Geometry:
        """Per-field difference ``self - actual``."""
        return Geometry(
            left=self.left - actual.left,
            top=self.top - actual.top,
            width=self.width - actual.width,
            height=self.height - actual.height,
        )

    def shifted(self, delta: Geometry) -> Geometry:
        return Geometry(
            left=self.left + delta.left,
            top=self.top + delta.top,
            width=self.width + delta.width,
            height=self.height + delta.height,
        )

    @property
    def error(self) -> int:
        """Sum of absolute field values, zero when a delta is empty."""
        return abs(self.left) + abs(self.top) + abs(self.width) + abs(self.height)


class WindowRecord(BaseModel):
    """Snapshot of a host window. May be stale as soon as it is read."""

    model_config = ConfigDict(frozen=True)

    id: WindowId
    left: int
    top: int
    width: int
    height: int
    state: WindowState = "normal"

    @property
    def geometry(self) -> Geometry:
        return Geometry(left=self.left, top=self.top, width=self.width, height=self.height)

    def with_geometry(self, geometry: Geometry) -> WindowRecord:
        return self.model_copy(update=geometry.model_dump())


class WorkArea(BaseModel):
    """Usable rectangle of a monitor, excluding taskbars and docks."""

    model_config = ConfigDict(frozen=True)

    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    def contains(self, x: int, y: int) -> bool:
        # Half-open so a point on a shared edge belongs to exactly one monitor.
        return self.left <= x < self.right and self.top <= y < self.bottom


class Display(BaseModel):
    """One monitor as reported by the host."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    work_area: WorkArea


class QueueEntry(BaseModel):
    """A new window paired with the anchor candidate known at creation time."""

    model_config = ConfigDict(frozen=True)

    new_window_id: WindowId
    anchor_id: WindowId
    sequence: int = Field(default=0, ge=0)
