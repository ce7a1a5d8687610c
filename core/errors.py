"""Failure taxonomy for window placement."""

from __future__ import annotations

from world_model.window_state import QueueEntry, WindowId


class PlacementError(Exception):
    """Base class for recoverable placement failures."""


class WindowNotFound(PlacementError):
    """A window id no longer resolves on the host."""

    def __init__(self, window_id: WindowId) -> None:
        super().__init__(f"Window {window_id} not found.")
        self.window_id = window_id


class UpdateRejected(PlacementError):
    """The host refused a geometry update outright."""

    def __init__(self, window_id: WindowId, reason: str = "") -> None:
        message = f"Geometry update rejected for window {window_id}"
        super().__init__(f"{message}: {reason}" if reason else f"{message}.")
        self.window_id = window_id
        self.reason = reason


class NoAnchorAvailable(PlacementError):
    """Neither the paired anchor nor a tracked fallback is alive."""

    def __init__(self, entry: QueueEntry) -> None:
        super().__init__(
            f"No anchor available for window {entry.new_window_id} "
            f"(paired anchor {entry.anchor_id} is gone)."
        )
        self.entry = entry
