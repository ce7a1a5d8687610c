"""Structured JSONL diagnostics recorder."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from core.event_bus import EventBus


class DiagnosticsRecorder:
    """Writes every event bus emission as one JSON line."""

    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger("wa.diagnostics")

    def attach(self, event_bus: EventBus) -> None:
        event_bus.subscribe_all(self.record)

    def record(self, event_name: str, payload: dict[str, Any]) -> None:
        """Append one JSONL diagnostic event."""
        event = {
            "timestamp": datetime.now(UTC).isoformat(),
            "event": event_name,
            **payload,
        }
        line = json.dumps(event, ensure_ascii=True, default=str)
        with self.log_path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")
        self.logger.debug(line)
