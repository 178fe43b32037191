"""In-memory log buffer for TUI display."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: datetime
    level: str
    name: str
    message: str


class LogBuffer(logging.Handler):
    """Logging handler that keeps the latest records in a bounded deque.

    The terminal client shows these instead of writing to stderr, which
    would tear the full-screen UI. ``version`` increases with every record
    so the UI can tell when a redraw is due.
    """

    def __init__(self, maxlen: int = 100) -> None:
        super().__init__()
        self._entries: deque[LogEntry] = deque(maxlen=maxlen)
        self.version = 0

    def emit(self, record: logging.LogRecord) -> None:
        # Drop the package prefix to keep lines short
        name = record.name.removeprefix("gosockets.")
        self._entries.append(
            LogEntry(
                timestamp=datetime.fromtimestamp(record.created),
                level=record.levelname,
                name=name,
                message=record.getMessage(),
            )
        )
        self.version += 1

    def get_entries(self, count: int | None = None) -> list[LogEntry]:
        """Return up to ``count`` most recent entries, oldest first."""
        entries = list(self._entries)
        if count is None:
            return entries
        return entries[-count:] if count > 0 else []
