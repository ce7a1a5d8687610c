"""Window host factory."""

from __future__ import annotations

from core.settings import AppSettings
from os_controller.base_host import WindowHost
from os_controller.simulated_host import SimulatedWindowHost
from os_controller.window_manager import DesktopWindowHost


def build_host(settings: AppSettings) -> WindowHost:
    """Build the configured host, defaulting safely to the simulated one."""
    if settings.host == "desktop":
        return DesktopWindowHost()
    return SimulatedWindowHost()
