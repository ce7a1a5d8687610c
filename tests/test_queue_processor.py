"""Tests for the sequential queue processor."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

from core.event_bus import EventBus
from core.queue_processor import DrainGuard, ProcessorState, QueueProcessor
from os_controller.simulated_host import SimulatedWindowHost
from placement.corrector import PositionCorrector
from tracking.creation_queue import CreationQueue
from tracking.focus_tracker import FocusTracker
from world_model.window_state import Geometry


def _processor(host: SimulatedWindowHost, bus: EventBus | None = None) -> QueueProcessor:
    bus = bus or EventBus()
    return QueueProcessor(
        queue=CreationQueue(),
        focus_tracker=FocusTracker(),
        host=host,
        corrector=PositionCorrector(host, event_bus=bus),
        event_bus=bus,
    )


def test_drain_guard_allows_a_single_drain() -> None:
    guard = DrainGuard()
    assert guard.try_begin() is True
    assert guard.try_begin() is False
    assert guard.state is ProcessorState.DRAINING
    guard.finish()
    assert guard.running is False
    assert guard.try_begin() is True


def test_entries_are_processed_in_creation_order() -> None:
    host = SimulatedWindowHost()
    anchor = host.open_window(100, 100, 800, 600)
    new_ids = [host.open_window(0, 0, 300, 300).id for _ in range(3)]
    processor = _processor(host)
    for new_id in new_ids:
        processor.queue.enqueue(new_id, anchor.id)

    outcomes = asyncio.run(processor.drain())

    assert [o.entry.new_window_id for o in outcomes] == new_ids
    assert [window_id for window_id, _ in host.update_requests] == new_ids
    assert all(o.placed for o in outcomes)
    assert processor.running is False


def test_trigger_starts_only_one_drain() -> None:
    host = SimulatedWindowHost()
    anchor = host.open_window(100, 100, 800, 600)
    new = host.open_window(0, 0, 300, 300)
    bus = EventBus()
    started: list[dict] = []
    bus.subscribe("drain_started", started.append)
    processor = _processor(host, bus)
    processor.queue.enqueue(new.id, anchor.id)

    async def _run() -> tuple:
        first = processor.trigger()
        second = processor.trigger()
        running_during = processor.running
        outcomes = await first
        return first, second, running_during, outcomes

    first, second, running_during, outcomes = asyncio.run(_run())

    assert first is not None
    assert second is None
    assert running_during is True
    assert len(outcomes) == 1
    assert len(started) == 1
    assert processor.running is False


def test_trigger_with_empty_queue_is_a_no_op() -> None:
    processor = _processor(SimulatedWindowHost())

    async def _run():
        return processor.trigger()

    assert asyncio.run(_run()) is None
    assert processor.running is False


def test_entries_added_during_drain_are_drained_too() -> None:
    host = SimulatedWindowHost()
    anchor = host.open_window(100, 100, 800, 600)
    first = host.open_window(0, 0, 300, 300)
    late = host.open_window(0, 0, 300, 300)
    processor = _processor(host)
    processor.queue.enqueue(first.id, anchor.id)

    original = host.set_window_geometry

    async def enqueue_while_running(window_id, geometry):
        if window_id == first.id and len(processor.queue) == 0 and not host.update_requests:
            processor.queue.enqueue(late.id, anchor.id)
        return await original(window_id, geometry)

    host.set_window_geometry = enqueue_while_running
    outcomes = asyncio.run(processor.drain())

    assert [o.entry.new_window_id for o in outcomes] == [first.id, late.id]
    assert not processor.queue


def test_missing_new_window_is_dropped_and_loop_continues() -> None:
    host = SimulatedWindowHost()
    anchor = host.open_window(100, 100, 800, 600)
    survivor = host.open_window(0, 0, 300, 300)
    processor = _processor(host)
    processor.queue.enqueue(404, anchor.id)
    processor.queue.enqueue(survivor.id, anchor.id)

    outcomes = asyncio.run(processor.drain())

    assert [o.status for o in outcomes] == ["dropped", "placed"]
    assert [window_id for window_id, _ in host.update_requests] == [survivor.id]


def test_falls_back_to_tracked_anchor_when_paired_anchor_is_gone() -> None:
    host = SimulatedWindowHost()
    fallback = host.open_window(200, 150, 640, 480)
    new = host.open_window(0, 0, 300, 300)
    processor = _processor(host)
    processor.focus_tracker.on_focus_changed(fallback.id)
    processor.focus_tracker.on_focus_changed(new.id)
    processor.queue.enqueue(new.id, 777)

    outcomes = asyncio.run(processor.drain())

    assert outcomes[0].placed
    assert outcomes[0].anchor_id == fallback.id
    assert host.windows[new.id].geometry == Geometry(left=215, top=150, width=640, height=480)


def test_no_geometry_call_when_no_anchor_is_available() -> None:
    host = SimulatedWindowHost()
    new = host.open_window(0, 0, 300, 300)
    processor = _processor(host)
    # Only the new window itself and an already closed window are tracked.
    processor.focus_tracker.on_focus_changed(555)
    processor.focus_tracker.on_focus_changed(new.id)
    processor.queue.enqueue(new.id, 777)

    outcomes = asyncio.run(processor.drain())

    assert outcomes[0].status == "dropped"
    assert "no anchor" in outcomes[0].reason.lower() or "not found" in outcomes[0].reason.lower()
    assert host.update_requests == []


def test_no_geometry_call_when_tracker_is_empty() -> None:
    host = SimulatedWindowHost()
    new = host.open_window(0, 0, 300, 300)
    processor = _processor(host)
    processor.queue.enqueue(new.id, 777)

    outcomes = asyncio.run(processor.drain())

    assert outcomes[0].status == "dropped"
    assert "no anchor" in outcomes[0].reason.lower()
    assert host.update_requests == []


def test_failure_during_placement_is_swallowed() -> None:
    host = SimulatedWindowHost()
    anchor = host.open_window(100, 100, 800, 600)
    first = host.open_window(0, 0, 300, 300)
    second = host.open_window(0, 0, 300, 300)
    host.list_displays = AsyncMock(side_effect=[RuntimeError("display query failed"), host.displays])
    bus = EventBus()
    dropped: list[dict] = []
    bus.subscribe("entry_dropped", dropped.append)
    processor = _processor(host, bus)
    processor.queue.enqueue(first.id, anchor.id)
    processor.queue.enqueue(second.id, anchor.id)

    outcomes = asyncio.run(processor.drain())

    assert [o.status for o in outcomes] == ["dropped", "placed"]
    assert dropped[0]["reason"] == "display query failed"
    assert processor.running is False


def test_unexpected_error_querying_new_window_drops_entry_and_loop_continues() -> None:
    host = SimulatedWindowHost()
    anchor = host.open_window(100, 100, 800, 600)
    broken = host.open_window(0, 0, 300, 300)
    survivor = host.open_window(0, 0, 300, 300)
    original = host.get_window

    async def get_window(window_id):
        if window_id == broken.id:
            raise RuntimeError("window handle invalid")
        return await original(window_id)

    host.get_window = get_window
    processor = _processor(host)
    processor.queue.enqueue(broken.id, anchor.id)
    processor.queue.enqueue(survivor.id, anchor.id)

    outcomes = asyncio.run(processor.drain())

    assert [o.status for o in outcomes] == ["dropped", "placed"]
    assert outcomes[0].reason == "window handle invalid"
    assert not processor.queue
    assert processor.running is False


def test_unexpected_error_querying_anchor_falls_back_to_tracked_anchor() -> None:
    host = SimulatedWindowHost()
    paired = host.open_window(500, 100, 800, 600)
    fallback = host.open_window(200, 150, 640, 480)
    new = host.open_window(0, 0, 300, 300)
    original = host.get_window

    async def get_window(window_id):
        if window_id == paired.id:
            raise OSError("access denied")
        return await original(window_id)

    host.get_window = get_window
    processor = _processor(host)
    processor.focus_tracker.on_focus_changed(fallback.id)
    processor.focus_tracker.on_focus_changed(new.id)
    processor.queue.enqueue(new.id, paired.id)

    outcomes = asyncio.run(processor.drain())

    assert outcomes[0].placed
    assert outcomes[0].anchor_id == fallback.id
    assert processor.running is False
