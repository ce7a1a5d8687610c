"""FIFO buffer of new windows waiting to be placed."""

from __future__ import annotations

from collections import deque

from world_model.window_state import QueueEntry, WindowId


class CreationQueue:
    """Single-consumer queue of ``(new window, anchor candidate)`` pairs."""

    def __init__(self) -> None:
        self._entries: deque[QueueEntry] = deque()
        self._sequence = 0

    def enqueue(self, new_window_id: WindowId, anchor_id: WindowId) -> QueueEntry:
        self._sequence += 1
        entry = QueueEntry(
            new_window_id=new_window_id,
            anchor_id=anchor_id,
            sequence=self._sequence,
        )
        self._entries.append(entry)
        return entry

    def dequeue_front(self) -> QueueEntry | None:
        if not self._entries:
            return None
        return self._entries.popleft()

    def snapshot(self) -> tuple[QueueEntry, ...]:
        return tuple(self._entries)

    def describe(self) -> str:
        """Human-readable dump of pending entries, oldest first."""
        lines = ["Queue:"]
        lines.extend(
            f"#{entry.sequence} {entry.new_window_id} -> {entry.anchor_id}"
            for entry in self._entries
        )
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
