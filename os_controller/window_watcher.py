"""Polling event feed: turns desktop snapshots into window events."""

from __future__ import annotations

import asyncio
import logging

from core.coordinator import WindowCoordinator
from core.queue_processor import EntryOutcome
from os_controller.base_host import WindowHost
from world_model.window_state import WindowId, WindowRecord

logger = logging.getLogger("wa.watcher")


class WindowWatcher:
    """Diffs successive window lists and forwards created/closed/focus events."""

    def __init__(
        self,
        host: WindowHost,
        coordinator: WindowCoordinator,
        poll_interval: float = 0.25,
    ) -> None:
        self.host = host
        self.coordinator = coordinator
        self.poll_interval = poll_interval
        self._known: dict[WindowId, WindowRecord] | None = None
        self._focused_id: WindowId | None = None
        self._drains: set[asyncio.Task[list[EntryOutcome]]] = set()

    async def poll_once(self) -> None:
        windows = {w.id: w for w in await self.host.list_windows()}
        focused = await self.host.get_last_focused()
        focused_id = focused.id if focused else None

        if self._known is None:
            # Baseline: windows open before we started are not new.
            self._known = windows
            self._focused_id = focused_id
            return

        for window_id in self._known.keys() - windows.keys():
            logger.debug("Window closed: %s", window_id)
            self.coordinator.on_window_closed(window_id)

        for window_id in sorted(windows.keys() - self._known.keys()):
            logger.debug("Window created: %s", window_id)
            self.coordinator.on_window_created(windows[window_id])

        if focused_id != self._focused_id:
            self._track(self.coordinator.on_focus_changed(focused_id))

        self._known = windows
        self._focused_id = focused_id

    def _track(self, task: asyncio.Task[list[EntryOutcome]] | None) -> None:
        if task is None:
            return
        self._drains.add(task)
        task.add_done_callback(self._drains.discard)

    async def flush(self) -> list[EntryOutcome]:
        """Wait for drains started by this watcher and return their outcomes."""
        outcomes: list[EntryOutcome] = []
        for result in await asyncio.gather(*self._drains, return_exceptions=True):
            if isinstance(result, BaseException):
                logger.warning("Drain failed: %s", result)
                continue
            outcomes.extend(result)
        return outcomes

    async def run(self, stop_event: asyncio.Event) -> None:
        """Poll until ``stop_event`` is set, then wait for in-flight drains."""
        logger.info("Watching windows every %.2fs", self.poll_interval)
        while not stop_event.is_set():
            try:
                await self.poll_once()
            except Exception as exc:
                logger.warning("Window poll failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.poll_interval)
            except TimeoutError:
                pass
        await self.flush()
        logger.info("Window watcher stopped.")
