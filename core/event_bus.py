"""Simple in-process event bus for structured diagnostic events."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any

EventHandler = Callable[[dict[str, Any]], None]
WildcardHandler = Callable[[str, dict[str, Any]], None]


class EventBus:
    """Dispatches events to subscribers by event name."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._wildcard: list[WildcardHandler] = []

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Register a callback for an event."""
        self._handlers[event_name].append(handler)

    def subscribe_all(self, handler: WildcardHandler) -> None:
        """Register a callback receiving every event with its name."""
        self._wildcard.append(handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Emit an event to all subscribers."""
        for handler in self._handlers.get(event_name, []):
            handler(payload)
        for wildcard in self._wildcard:
            wildcard(event_name, payload)
