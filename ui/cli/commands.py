"""Typer command handlers."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer

from core.orchestrator import Orchestrator, RuntimeBundle
from core.policy_runtime import load_settings
from core.settings import AppSettings
from os_controller.simulated_host import SimulatedWindowHost
from placement.calculator import compute_final_left
from world_model.window_state import Display, Geometry, WorkArea

DEFAULT_ROOT = Path(__file__).resolve().parents[2]


def _settings(root: Path | None = None, **overrides: object) -> AppSettings:
    settings = load_settings(root or DEFAULT_ROOT)
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return settings
    return AppSettings.model_validate({**settings.model_dump(), **updates})


def _runtime(settings: AppSettings, host: SimulatedWindowHost | None = None) -> RuntimeBundle:
    return Orchestrator(root=DEFAULT_ROOT, settings=settings).build(host=host)


def parse_display(raw: str) -> Display:
    """Parse ``LEFT,TOP,WIDTH,HEIGHT`` into a display."""
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 4:
        raise typer.BadParameter(f"Display must be LEFT,TOP,WIDTH,HEIGHT: {raw!r}")
    try:
        left, top, width, height = (int(p) for p in parts)
    except ValueError as exc:
        raise typer.BadParameter(f"Display values must be integers: {raw!r}") from exc
    return Display(id=raw, work_area=WorkArea(left=left, top=top, width=width, height=height))


def run(debug: bool = False, host: str | None = None) -> None:
    """Watch the desktop and place new windows until interrupted."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = _settings(host=host, debug_logging=True if debug else None)
    bundle = _runtime(settings)

    async def _main() -> None:
        await bundle.coordinator.initialize()
        await bundle.watcher.run(asyncio.Event())

    typer.echo(f"Watching windows with the {settings.host} host. Press Ctrl-C to stop.")
    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        typer.echo("Stopped.")


def place(anchor_left: int, anchor_top: int, new_width: int, displays: list[str]) -> None:
    """Print the left edge a new window would be placed at."""
    settings = _settings()
    parsed = [parse_display(raw) for raw in displays]
    anchor = Geometry(left=anchor_left, top=anchor_top, width=0, height=0)
    final_left = compute_final_left(
        new_width,
        anchor,
        parsed,
        lateral_offset=settings.placement.lateral_offset,
        wrap_border_offset=settings.placement.wrap_border_offset,
    )
    typer.echo(str(final_left))


def simulate(skew_left: int = 0, close_anchor: bool = False, new_width: int = 800) -> None:
    """Run one creation scenario against the simulated host."""
    settings = _settings(host="simulated")
    skew = Geometry(left=skew_left, top=0, width=0, height=0) if skew_left else None
    host = SimulatedWindowHost(skew=skew)
    bundle = _runtime(settings, host=host)
    coordinator = bundle.coordinator

    async def _scenario() -> dict[str, object]:
        anchor = host.open_window(1200, 120, 900, 700, focus=True)
        other = host.open_window(40, 60, 640, 480)
        await coordinator.initialize()

        new = host.open_window(0, 0, new_width, 500)
        coordinator.on_window_created(new)
        if close_anchor:
            host.close_window(anchor.id)
            coordinator.on_window_closed(anchor.id)
        host.focus(new.id)
        task = coordinator.on_focus_changed(new.id)
        outcomes = await task if task else []

        final = host.windows[new.id].geometry.model_dump()
        return {
            "anchor_id": anchor.id,
            "fallback_candidate_id": other.id,
            "new_window_id": new.id,
            "outcomes": [
                {
                    "status": o.status,
                    "reason": o.reason,
                    "anchor_id": o.anchor_id,
                    "attempts": o.correction.attempts if o.correction else 0,
                    "converged": o.correction.converged if o.correction else False,
                }
                for o in outcomes
            ],
            "final_geometry": final,
            "geometry_requests": len(host.update_requests),
        }

    typer.echo(json.dumps(asyncio.run(_scenario()), indent=2))


def config_show() -> None:
    """Show effective runtime config."""
    typer.echo(json.dumps(_settings().model_dump(), indent=2))
