"""Update, measure, adjust loop for unreliable geometry updates.

With desktop scaling enabled the host rounds requested pixel geometry and may
land a few pixels off. The corrector re-requests with the observed error
folded into the previous request, which cancels a consistent rounding offset
in one extra step. It never raises: after ``max_attempts`` the window is left
where it is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from core.errors import PlacementError
from core.event_bus import EventBus
from os_controller.base_host import WindowHost
from world_model.window_state import Geometry, WindowId

logger = logging.getLogger("wa.corrector")

DEFAULT_MAX_ATTEMPTS = 3


@dataclass
class CorrectionResult:
    """Outcome of one correction run."""

    window_id: WindowId
    goal: Geometry
    # Geometry updates issued, including one the host failed.
    attempts: int = 0
    converged: bool = False
    final: Geometry | None = None
    reason: str = ""


class PositionCorrector:
    """Drives the host towards a goal geometry with delta feedback."""

    def __init__(
        self,
        host: WindowHost,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        event_bus: EventBus | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.host = host
        self.max_attempts = max_attempts
        self.event_bus = event_bus or EventBus()

    async def correct(self, window_id: WindowId, goal: Geometry) -> CorrectionResult:
        result = CorrectionResult(window_id=window_id, goal=goal)
        request = goal
        for attempt in range(1, self.max_attempts + 1):
            result.attempts = attempt
            try:
                applied = await self.host.set_window_geometry(window_id, request)
            except PlacementError as exc:
                result.reason = str(exc)
                logger.debug("Abandoning correction of window %s: %s", window_id, exc)
                self.event_bus.emit("correction_abandoned", {
                    "window_id": window_id, "attempt": attempt, "reason": result.reason,
                })
                return result

            result.final = applied.geometry
            delta = goal.delta_from(applied.geometry)
            self.event_bus.emit("correction_attempt", {
                "window_id": window_id,
                "attempt": attempt,
                "requested": request.model_dump(),
                "applied": applied.geometry.model_dump(),
                "error": delta.error,
            })
            if delta.error == 0:
                result.converged = True
                logger.debug("Window %s placed after %d attempt(s).", window_id, attempt)
                return result
            request = request.shifted(delta)

        result.reason = f"Not converged after {self.max_attempts} attempts."
        logger.debug("Giving up on window %s after %d attempts.", window_id, self.max_attempts)
        self.event_bus.emit("correction_gave_up", {
            "window_id": window_id, "attempts": result.attempts, "goal": goal.model_dump(),
        })
        return result
