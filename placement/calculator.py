"""Target geometry for a new window placed beside its anchor.

Everything here is pure: the same anchor, width and display list always give
the same answer, and nothing talks to the host.
"""

from __future__ import annotations

from collections.abc import Sequence

from core.settings import DEFAULT_LATERAL_OFFSET, PlacementSettings
from world_model.window_state import Display, Geometry, WindowRecord


def find_display(x: int, y: int, displays: Sequence[Display]) -> Display | None:
    """Return the first display whose work area contains ``(x, y)``."""
    for display in displays:
        if display.work_area.contains(x, y):
            return display
    return None


def compute_final_left(
    new_width: int,
    anchor: Geometry,
    displays: Sequence[Display],
    *,
    lateral_offset: int = DEFAULT_LATERAL_OFFSET,
    wrap_border_offset: int = 0,
) -> int:
    """Compute the left edge for a new window cascaded off ``anchor``.

    The window is shifted right of the anchor by ``lateral_offset``. When that
    would push its right edge to or past the right edge of the anchor's
    monitor, it wraps to the monitor's left edge (plus ``wrap_border_offset``).
    An anchor outside every known monitor skips the wrap check.
    """
    final_left = anchor.left + lateral_offset
    display = find_display(anchor.left, anchor.top, displays)
    if display is None:
        return final_left
    if final_left + new_width >= display.work_area.right:
        final_left = display.work_area.left + wrap_border_offset
    return final_left


def goal_geometry(
    new_window: WindowRecord,
    anchor: WindowRecord,
    displays: Sequence[Display],
    settings: PlacementSettings | None = None,
) -> Geometry:
    """Full target rectangle: computed left, everything else from the anchor."""
    cfg = settings or PlacementSettings()
    final_left = compute_final_left(
        new_window.width,
        anchor.geometry,
        displays,
        lateral_offset=cfg.lateral_offset,
        wrap_border_offset=cfg.wrap_border_offset,
    )
    return Geometry(left=final_left, top=anchor.top, width=anchor.width, height=anchor.height)
