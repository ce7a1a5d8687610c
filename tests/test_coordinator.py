"""End-to-end coordinator behaviour against the simulated host."""

from __future__ import annotations

import asyncio
import logging

from core.coordinator import WindowCoordinator
from core.event_bus import EventBus
from core.settings import PlacementSettings
from os_controller.simulated_host import SimulatedWindowHost
from world_model.window_state import Geometry


def test_initialize_seeds_tracker_with_focused_window_first() -> None:
    host = SimulatedWindowHost()
    first = host.open_window(0, 0, 400, 300)
    second = host.open_window(50, 50, 400, 300, focus=True)
    coordinator = WindowCoordinator(host)

    asyncio.run(coordinator.initialize())

    assert coordinator.initialized is True
    assert coordinator.focus_tracker.snapshot() == (second.id, first.id)


def test_creation_before_initialize_is_ignored() -> None:
    host = SimulatedWindowHost()
    host.open_window(0, 0, 400, 300, focus=True)
    coordinator = WindowCoordinator(host)
    new = host.open_window(0, 0, 300, 300)

    assert coordinator.on_window_created(new) is None
    assert coordinator.pending_entries() == ()


def test_only_normal_windows_with_a_known_anchor_are_queued() -> None:
    host = SimulatedWindowHost()
    coordinator = WindowCoordinator(host)
    asyncio.run(coordinator.initialize())

    orphan = host.open_window(0, 0, 300, 300)
    assert coordinator.on_window_created(orphan) is None

    anchor = host.open_window(100, 100, 800, 600)
    coordinator.focus_tracker.on_focus_changed(anchor.id)
    minimized = host.open_window(0, 0, 300, 300, state="minimized")
    assert coordinator.on_window_created(minimized) is None

    new = host.open_window(0, 0, 300, 300)
    entry = coordinator.on_window_created(new)
    assert entry is not None
    assert (entry.new_window_id, entry.anchor_id) == (new.id, anchor.id)
    assert "-> " + str(anchor.id) in coordinator.describe_queue()


def test_new_window_is_placed_beside_its_anchor() -> None:
    host = SimulatedWindowHost()
    anchor = host.open_window(100, 80, 800, 600, focus=True)
    coordinator = WindowCoordinator(host)

    async def _run():
        await coordinator.initialize()
        new = host.open_window(0, 0, 500, 400)
        coordinator.on_window_created(new)
        host.focus(new.id)
        outcomes = await coordinator.on_focus_changed(new.id)
        return new, outcomes

    new, outcomes = asyncio.run(_run())

    assert outcomes[0].placed
    assert outcomes[0].anchor_id == anchor.id
    assert host.windows[new.id].geometry == Geometry(left=115, top=80, width=800, height=600)
    assert coordinator.is_draining is False


def test_wrap_uses_configured_border_offset() -> None:
    host = SimulatedWindowHost()
    host.open_window(1500, 80, 800, 600, focus=True)
    coordinator = WindowCoordinator(host, settings=PlacementSettings(wrap_border_offset=-7))

    async def _run():
        await coordinator.initialize()
        new = host.open_window(0, 0, 500, 400)
        coordinator.on_window_created(new)
        await coordinator.on_focus_changed(new.id)
        return new

    new = asyncio.run(_run())

    assert host.windows[new.id].left == -7


def test_repeated_focus_events_run_a_single_drain() -> None:
    host = SimulatedWindowHost()
    anchor = host.open_window(100, 80, 800, 600, focus=True)
    bus = EventBus()
    started: list[dict] = []
    bus.subscribe("drain_started", started.append)
    coordinator = WindowCoordinator(host, event_bus=bus)

    async def _run():
        await coordinator.initialize()
        for _ in range(3):
            coordinator.on_window_created(host.open_window(0, 0, 300, 300))
        tasks = [coordinator.on_focus_changed(anchor.id) for _ in range(5)]
        live = [t for t in tasks if t is not None]
        outcomes = await live[0]
        return tasks, outcomes

    tasks, outcomes = asyncio.run(_run())

    assert tasks[0] is not None
    assert tasks[1:] == [None, None, None, None]
    assert len(outcomes) == 3
    assert len(started) == 1


def test_closed_anchor_falls_back_to_previous_focus() -> None:
    host = SimulatedWindowHost()
    older = host.open_window(300, 200, 700, 500)
    anchor = host.open_window(100, 80, 800, 600, focus=True)
    coordinator = WindowCoordinator(host)

    async def _run():
        await coordinator.initialize()
        new = host.open_window(0, 0, 300, 300)
        coordinator.on_window_created(new)
        host.close_window(anchor.id)
        coordinator.on_window_closed(anchor.id)
        outcomes = await coordinator.on_focus_changed(new.id)
        return new, outcomes

    new, outcomes = asyncio.run(_run())

    assert outcomes[0].anchor_id == older.id
    assert host.windows[new.id].geometry == Geometry(left=315, top=200, width=700, height=500)


def test_set_debug_logging_toggles_root_level() -> None:
    WindowCoordinator.set_debug_logging(True)
    assert logging.getLogger("wa").level == logging.DEBUG
    WindowCoordinator.set_debug_logging(False)
    assert logging.getLogger("wa").level == logging.INFO
