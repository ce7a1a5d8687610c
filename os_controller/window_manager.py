"""Desktop window host backed by PyGetWindow and mss."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from core.errors import UpdateRejected, WindowNotFound
from os_controller.base_host import WindowHost
from world_model.window_state import Display, Geometry, WindowId, WindowRecord, WindowState, WorkArea

try:
    import pygetwindow as gw
except ImportError:
    gw = None

try:
    import mss
except ImportError:
    mss = None


def _window_id(window: Any) -> WindowId:
    return int(window._hWnd)


def _window_state(window: Any) -> WindowState:
    if window.isMinimized:
        return "minimized"
    if window.isMaximized:
        return "maximized"
    return "normal"


def _to_record(window: Any) -> WindowRecord:
    return WindowRecord(
        id=_window_id(window),
        left=int(window.left),
        top=int(window.top),
        width=int(window.width),
        height=int(window.height),
        state=_window_state(window),
    )


class DesktopWindowHost(WindowHost):
    """Facade over the real desktop. Blocking calls run in worker threads."""

    def __init__(self) -> None:
        self.logger = logging.getLogger("wa.window_manager")
        if not gw:
            self.logger.warning("pygetwindow is not installed.")
        if not mss:
            self.logger.warning("mss is not installed; monitor topology unavailable.")

    def _check_available(self) -> None:
        if not gw:
            raise RuntimeError("Cannot execute window operation: pygetwindow missing.")

    def _find(self, window_id: WindowId) -> Any:
        for window in gw.getAllWindows():
            try:
                if _window_id(window) == window_id:
                    return window
            except Exception as exc:
                # Handles of windows closing mid-enumeration stop resolving.
                self.logger.debug("Skipping unreadable window handle: %s", exc)
        raise WindowNotFound(window_id)

    def _read(self, window_id: WindowId) -> WindowRecord:
        window = self._find(window_id)
        try:
            return _to_record(window)
        except Exception as exc:
            raise WindowNotFound(window_id) from exc

    def _get_window(self, window_id: WindowId) -> WindowRecord:
        self._check_available()
        return self._read(window_id)

    def _set_geometry(self, window_id: WindowId, geometry: Geometry) -> WindowRecord:
        self._check_available()
        window = self._find(window_id)
        try:
            window.moveTo(geometry.left, geometry.top)
            window.resizeTo(geometry.width, geometry.height)
        except Exception as exc:
            raise UpdateRejected(window_id, str(exc)) from exc
        # Re-read: the applied geometry is frequently not the requested one.
        return self._read(window_id)

    def _list_displays(self) -> list[Display]:
        if not mss:
            raise RuntimeError("Cannot query displays: mss missing.")
        with mss.mss() as sct:
            # Index 0 is the union of all monitors.
            monitors = sct.monitors[1:]
        return [
            Display(
                id=str(index),
                work_area=WorkArea(
                    left=int(mon["left"]),
                    top=int(mon["top"]),
                    width=int(mon["width"]),
                    height=int(mon["height"]),
                ),
            )
            for index, mon in enumerate(monitors, start=1)
        ]

    def _list_windows(self) -> list[WindowRecord]:
        self._check_available()
        records: list[WindowRecord] = []
        for window in gw.getAllWindows():
            try:
                if window.title.strip():
                    records.append(_to_record(window))
            except Exception as exc:
                self.logger.debug("Skipping unreadable window: %s", exc)
        return records

    def _get_last_focused(self) -> WindowRecord | None:
        self._check_available()
        window = gw.getActiveWindow()
        if not window:
            return None
        return _to_record(window)

    async def get_window(self, window_id: WindowId) -> WindowRecord:
        return await asyncio.to_thread(self._get_window, window_id)

    async def set_window_geometry(self, window_id: WindowId, geometry: Geometry) -> WindowRecord:
        return await asyncio.to_thread(self._set_geometry, window_id, geometry)

    async def list_displays(self) -> list[Display]:
        return await asyncio.to_thread(self._list_displays)

    async def list_windows(self) -> list[WindowRecord]:
        return await asyncio.to_thread(self._list_windows)

    async def get_last_focused(self) -> WindowRecord | None:
        return await asyncio.to_thread(self._get_last_focused)
