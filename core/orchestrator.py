"""Top-level application orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from core.coordinator import WindowCoordinator
from core.diagnostics import DiagnosticsRecorder
from core.event_bus import EventBus
from core.policy_runtime import load_settings, resolve_diagnostics_path
from core.settings import AppSettings
from os_controller.base_host import WindowHost
from os_controller.host_factory import build_host
from os_controller.window_watcher import WindowWatcher


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    settings: AppSettings
    event_bus: EventBus
    host: WindowHost
    coordinator: WindowCoordinator
    watcher: WindowWatcher
    diagnostics: DiagnosticsRecorder | None = None


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(self, root: Path | None = None, settings: AppSettings | None = None) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()
        self.settings = settings

    def build(self, host: WindowHost | None = None) -> RuntimeBundle:
        settings = self.settings or load_settings(self.root)
        event_bus = EventBus()

        diagnostics = None
        diagnostics_path = resolve_diagnostics_path(self.root, settings)
        if diagnostics_path is not None:
            diagnostics = DiagnosticsRecorder(diagnostics_path)
            diagnostics.attach(event_bus)

        host = host or build_host(settings)
        coordinator = WindowCoordinator(
            host=host,
            settings=settings.placement,
            event_bus=event_bus,
        )
        coordinator.set_debug_logging(settings.debug_logging)
        watcher = WindowWatcher(
            host=host,
            coordinator=coordinator,
            poll_interval=settings.watcher.poll_interval_seconds,
        )
        return RuntimeBundle(
            settings=settings,
            event_bus=event_bus,
            host=host,
            coordinator=coordinator,
            watcher=watcher,
            diagnostics=diagnostics,
        )
