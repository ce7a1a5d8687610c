"""Owns all placement state and routes host events to it."""

from __future__ import annotations

import asyncio
import logging

from core.event_bus import EventBus
from core.queue_processor import EntryOutcome, QueueProcessor
from core.settings import PlacementSettings
from os_controller.base_host import WindowHost
from placement.corrector import PositionCorrector
from tracking.creation_queue import CreationQueue
from tracking.focus_tracker import FocusTracker
from world_model.window_state import QueueEntry, WindowId, WindowRecord

logger = logging.getLogger("wa.coordinator")

ROOT_LOGGER_NAME = "wa"


class WindowCoordinator:
    """Single owner of the focus tracker, creation queue and drain guard.

    All handlers must be called from the event loop the coordinator runs on.
    """

    def __init__(
        self,
        host: WindowHost,
        settings: PlacementSettings | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.host = host
        self.settings = settings or PlacementSettings()
        self.event_bus = event_bus or EventBus()
        self.focus_tracker = FocusTracker()
        self.queue = CreationQueue()
        self.corrector = PositionCorrector(
            host=host,
            max_attempts=self.settings.max_attempts,
            event_bus=self.event_bus,
        )
        self.processor = QueueProcessor(
            queue=self.queue,
            focus_tracker=self.focus_tracker,
            host=host,
            corrector=self.corrector,
            settings=self.settings,
            event_bus=self.event_bus,
        )
        self.initialized = False

    async def initialize(self) -> None:
        """Seed the focus tracker from the host. Call once before feeding events."""
        windows = await self.host.list_windows()
        focused = await self.host.get_last_focused()
        focused_id = focused.id if focused else None
        self.focus_tracker.seed([w.id for w in windows], focused_id)
        self.initialized = True
        logger.debug("Initial focused window: %s", focused_id)

    def on_window_created(self, window: WindowRecord) -> QueueEntry | None:
        if not self.initialized:
            logger.debug("Ignoring creation of %s before initialization.", window.id)
            return None
        if window.state != "normal":
            return None
        anchor_id = self.focus_tracker.current_anchor(exclude=window.id)
        if anchor_id is None:
            return None
        entry = self.queue.enqueue(window.id, anchor_id)
        logger.debug("Added: %s -> %s", entry.new_window_id, entry.anchor_id)
        self.event_bus.emit("entry_enqueued", {
            "new_window_id": entry.new_window_id,
            "anchor_id": entry.anchor_id,
            "sequence": entry.sequence,
        })
        return entry

    def on_focus_changed(self, window_id: WindowId | None) -> asyncio.Task[list[EntryOutcome]] | None:
        """Record focus, then start a drain if entries are waiting."""
        if self.focus_tracker.on_focus_changed(window_id):
            logger.debug("Focused: %s", window_id)
        return self.processor.trigger()

    def on_window_closed(self, window_id: WindowId) -> None:
        self.focus_tracker.on_window_closed(window_id)

    @property
    def is_draining(self) -> bool:
        return self.processor.running

    def pending_entries(self) -> tuple[QueueEntry, ...]:
        return self.queue.snapshot()

    def describe_queue(self) -> str:
        return self.queue.describe()

    @staticmethod
    def set_debug_logging(enabled: bool) -> None:
        logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.DEBUG if enabled else logging.INFO)
