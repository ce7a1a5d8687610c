"""Sequential worker draining the creation queue.

Exactly one drain runs at a time. The guard is checked and flipped in one
synchronous step, which is enough for mutual exclusion because every caller
runs on the same event loop. Callers on other threads would need a lock
around the guard, the queue and the focus tracker.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from core.errors import NoAnchorAvailable, WindowNotFound
from core.event_bus import EventBus
from core.settings import PlacementSettings
from os_controller.base_host import WindowHost
from placement.calculator import goal_geometry
from placement.corrector import CorrectionResult, PositionCorrector
from tracking.creation_queue import CreationQueue
from tracking.focus_tracker import FocusTracker
from world_model.window_state import QueueEntry, WindowId, WindowRecord

logger = logging.getLogger("wa.queue_processor")


class ProcessorState(str, Enum):
    IDLE = "idle"
    DRAINING = "draining"


class DrainGuard:
    """Two-state machine allowing a single active drain."""

    def __init__(self) -> None:
        self.state = ProcessorState.IDLE

    def try_begin(self) -> bool:
        """Move IDLE -> DRAINING. Returns False if a drain is already active."""
        if self.state is ProcessorState.DRAINING:
            return False
        self.state = ProcessorState.DRAINING
        return True

    def finish(self) -> None:
        self.state = ProcessorState.IDLE

    @property
    def running(self) -> bool:
        return self.state is ProcessorState.DRAINING


@dataclass
class EntryOutcome:
    """What happened to one queue entry."""

    entry: QueueEntry
    status: str
    reason: str = ""
    anchor_id: WindowId | None = None
    correction: CorrectionResult | None = None

    @property
    def placed(self) -> bool:
        return self.status == "placed"


class QueueProcessor:
    """Pairs queued windows with live anchors and places them one by one."""

    def __init__(
        self,
        queue: CreationQueue,
        focus_tracker: FocusTracker,
        host: WindowHost,
        corrector: PositionCorrector,
        settings: PlacementSettings | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.queue = queue
        self.focus_tracker = focus_tracker
        self.host = host
        self.corrector = corrector
        self.settings = settings or PlacementSettings()
        self.event_bus = event_bus or EventBus()
        self.guard = DrainGuard()

    @property
    def running(self) -> bool:
        return self.guard.running

    def trigger(self) -> asyncio.Task[list[EntryOutcome]] | None:
        """Start a drain on the running loop unless one is active or nothing is queued."""
        if not self.queue:
            return None
        loop = asyncio.get_running_loop()
        if not self.guard.try_begin():
            logger.debug("Drain already active; trigger ignored.")
            return None
        return loop.create_task(self._drain())

    async def drain(self) -> list[EntryOutcome]:
        """Drain in the current task. Returns an empty list if a drain is active."""
        if not self.guard.try_begin():
            return []
        return await self._drain()

    async def _drain(self) -> list[EntryOutcome]:
        outcomes: list[EntryOutcome] = []
        logger.debug("Processing queue: STARTED (%d pending)", len(self.queue))
        self.event_bus.emit("drain_started", {"pending": len(self.queue)})
        try:
            # Re-check on every pass so entries queued mid-drain are handled too.
            while self.queue:
                entry = self.queue.dequeue_front()
                if entry is None:
                    break
                outcomes.append(await self._process_entry(entry))
        finally:
            self.guard.finish()
            logger.debug("Processing queue: STOPPED")
            self.event_bus.emit("drain_stopped", {"processed": len(outcomes)})
        return outcomes

    async def _process_entry(self, entry: QueueEntry) -> EntryOutcome:
        logger.debug("Processing entry #%d: %s -> %s", entry.sequence, entry.new_window_id, entry.anchor_id)
        try:
            new_window = await self.host.get_window(entry.new_window_id)
        except WindowNotFound as exc:
            return self._dropped(entry, str(exc))
        except Exception as exc:
            logger.warning("Query of new window %s failed: %s", entry.new_window_id, exc)
            return self._dropped(entry, str(exc))

        anchor = await self._resolve_anchor(entry)
        if anchor is None:
            return self._dropped(entry, str(NoAnchorAvailable(entry)))

        try:
            displays = await self.host.list_displays()
            goal = goal_geometry(new_window, anchor, displays, self.settings)
            correction = await self.corrector.correct(new_window.id, goal)
        except Exception as exc:
            logger.warning("Placement of window %s failed: %s", entry.new_window_id, exc)
            return self._dropped(entry, str(exc), anchor_id=anchor.id)

        self.event_bus.emit("entry_placed", {
            "new_window_id": entry.new_window_id,
            "anchor_id": anchor.id,
            "attempts": correction.attempts,
            "converged": correction.converged,
        })
        return EntryOutcome(entry=entry, status="placed", anchor_id=anchor.id, correction=correction)

    async def _resolve_anchor(self, entry: QueueEntry) -> WindowRecord | None:
        try:
            return await self.host.get_window(entry.anchor_id)
        except WindowNotFound:
            pass
        except Exception as exc:
            logger.warning("Query of anchor %s failed: %s", entry.anchor_id, exc)

        fallback_id = self.focus_tracker.current_anchor(exclude=entry.new_window_id)
        if fallback_id is None:
            return None
        logger.debug("Anchor %s gone; falling back to %s", entry.anchor_id, fallback_id)
        self.event_bus.emit("anchor_fallback", {
            "new_window_id": entry.new_window_id,
            "paired_anchor_id": entry.anchor_id,
            "fallback_anchor_id": fallback_id,
        })
        try:
            return await self.host.get_window(fallback_id)
        except WindowNotFound:
            return None
        except Exception as exc:
            logger.warning("Query of fallback anchor %s failed: %s", fallback_id, exc)
            return None

    def _dropped(self, entry: QueueEntry, reason: str, anchor_id: WindowId | None = None) -> EntryOutcome:
        logger.debug("Dropped entry #%d: %s", entry.sequence, reason)
        self.event_bus.emit("entry_dropped", {
            "new_window_id": entry.new_window_id,
            "anchor_id": entry.anchor_id,
            "reason": reason,
        })
        return EntryOutcome(entry=entry, status="dropped", reason=reason, anchor_id=anchor_id)
