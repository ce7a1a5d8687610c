"""Recency-ranked anchor candidates."""

from __future__ import annotations

from collections.abc import Iterable

from world_model.window_state import WindowId


def _is_window(window_id: WindowId | None) -> bool:
    # Hosts report "no window focused" as None or a non-positive sentinel.
    return window_id is not None and window_id > 0


class FocusTracker:
    """Keeps window ids ordered by focus recency, most recent first."""

    def __init__(self) -> None:
        self._recent: list[WindowId] = []

    def on_focus_changed(self, window_id: WindowId | None) -> bool:
        """Move ``window_id`` to the front. Returns False for the no-window sentinel."""
        if not _is_window(window_id):
            return False
        if window_id in self._recent:
            self._recent.remove(window_id)
        self._recent.insert(0, window_id)
        return True

    def on_window_closed(self, window_id: WindowId) -> None:
        if window_id in self._recent:
            self._recent.remove(window_id)

    def current_anchor(self, exclude: WindowId | None = None) -> WindowId | None:
        """Most recently focused live window, optionally skipping ``exclude``."""
        for window_id in self._recent:
            if window_id != exclude:
                return window_id
        return None

    def seed(self, window_ids: Iterable[WindowId], focused_id: WindowId | None = None) -> None:
        """Replace tracked state with the host's window list, focused window first."""
        self._recent = []
        for window_id in window_ids:
            if _is_window(window_id) and window_id not in self._recent:
                self._recent.append(window_id)
        self.on_focus_changed(focused_id)

    def snapshot(self) -> tuple[WindowId, ...]:
        return tuple(self._recent)

    def __len__(self) -> int:
        return len(self._recent)
