"""Deterministic in-memory window host for dry runs and tests."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from core.errors import UpdateRejected, WindowNotFound
from os_controller.base_host import WindowHost
from world_model.window_state import Display, Geometry, WindowId, WindowRecord, WorkArea


def default_displays() -> list[Display]:
    return [Display(id="primary", work_area=WorkArea(left=0, top=0, width=1920, height=1040))]


class SimulatedWindowHost(WindowHost):
    """Window host that imitates the rounding habits of a scaled desktop.

    ``skew`` is added to every requested geometry, the way fractional scaling
    shifts a request by a consistent few pixels. ``max_width``/``max_height``
    clamp the applied size, which no amount of correction can get past.
    Every geometry request is recorded in ``update_requests``.
    """

    def __init__(
        self,
        displays: Iterable[Display] | None = None,
        skew: Geometry | None = None,
        max_width: int | None = None,
        max_height: int | None = None,
    ) -> None:
        self.displays = list(displays) if displays is not None else default_displays()
        self.skew = skew
        self.max_width = max_width
        self.max_height = max_height
        self.windows: dict[WindowId, WindowRecord] = {}
        self.focused_id: WindowId | None = None
        self.update_requests: list[tuple[WindowId, Geometry]] = []
        self.rejected_ids: set[WindowId] = set()
        self._next_id = 1

    # -- scenario helpers --------------------------------------------------

    def open_window(
        self,
        left: int,
        top: int,
        width: int,
        height: int,
        state: str = "normal",
        *,
        focus: bool = False,
    ) -> WindowRecord:
        record = WindowRecord(
            id=self._next_id, left=left, top=top, width=width, height=height, state=state,
        )
        self._next_id += 1
        self.windows[record.id] = record
        if focus:
            self.focused_id = record.id
        return record

    def close_window(self, window_id: WindowId) -> None:
        self.windows.pop(window_id, None)
        if self.focused_id == window_id:
            self.focused_id = None

    def focus(self, window_id: WindowId | None) -> None:
        self.focused_id = window_id

    # -- WindowHost ----------------------------------------------------------

    async def get_window(self, window_id: WindowId) -> WindowRecord:
        await asyncio.sleep(0)
        try:
            return self.windows[window_id]
        except KeyError:
            raise WindowNotFound(window_id) from None

    async def set_window_geometry(self, window_id: WindowId, geometry: Geometry) -> WindowRecord:
        await asyncio.sleep(0)
        self.update_requests.append((window_id, geometry))
        current = self.windows.get(window_id)
        if current is None:
            raise WindowNotFound(window_id)
        if window_id in self.rejected_ids:
            raise UpdateRejected(window_id, "window is not resizable")
        applied = geometry.shifted(self.skew) if self.skew else geometry
        width = min(applied.width, self.max_width) if self.max_width else applied.width
        height = min(applied.height, self.max_height) if self.max_height else applied.height
        applied = applied.model_copy(update={"width": width, "height": height})
        updated = current.with_geometry(applied)
        self.windows[window_id] = updated
        return updated

    async def list_displays(self) -> list[Display]:
        await asyncio.sleep(0)
        return list(self.displays)

    async def list_windows(self) -> list[WindowRecord]:
        await asyncio.sleep(0)
        return list(self.windows.values())

    async def get_last_focused(self) -> WindowRecord | None:
        await asyncio.sleep(0)
        if self.focused_id is None:
            return None
        return self.windows.get(self.focused_id)
