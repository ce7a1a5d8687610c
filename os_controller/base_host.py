"""Async capability interface to the host window system."""

from __future__ import annotations

from abc import ABC, abstractmethod

from world_model.window_state import Display, Geometry, WindowId, WindowRecord


class WindowHost(ABC):
    """Query and mutate primitives the placement core depends on.

    Failures are raised from :mod:`core.errors`: ``WindowNotFound`` when an id
    no longer resolves, ``UpdateRejected`` when a geometry change is refused.
    """

    @abstractmethod
    async def get_window(self, window_id: WindowId) -> WindowRecord:
        """Return a fresh snapshot of one window."""

    @abstractmethod
    async def set_window_geometry(self, window_id: WindowId, geometry: Geometry) -> WindowRecord:
        """Request new geometry and return what the host actually applied."""

    @abstractmethod
    async def list_displays(self) -> list[Display]:
        """Return current monitor topology."""

    @abstractmethod
    async def list_windows(self) -> list[WindowRecord]:
        """Return all top-level windows."""

    @abstractmethod
    async def get_last_focused(self) -> WindowRecord | None:
        """Return the focused window, if any."""
