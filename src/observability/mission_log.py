"""
Mission log for the BIOMON session.

A short human-readable feed of what happened at the table (crew changes,
rolls, conditions). Newest entries come first and the log is capped, so
the oldest entries fall off the end.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional
import logging

from src.data_models import MISSION_LOG_CAP, LogEntryType, coerce_timestamp, new_id, now_ms

logger = logging.getLogger(__name__)


@dataclass
class LogEntry:
    """One line in the mission log."""

    entry_id: str
    timestamp: int
    type: LogEntryType
    message: str
    details: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.entry_id,
            "timestamp": self.timestamp,
            "type": self.type.value,
            "message": self.message,
            "details": self.details,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LogEntry":
        """Create from dictionary."""
        try:
            entry_type = LogEntryType(data.get("type", "info"))
        except ValueError:
            entry_type = LogEntryType.INFO
        return cls(
            entry_id=str(data.get("id") or new_id()),
            timestamp=coerce_timestamp(data.get("timestamp")),
            type=entry_type,
            message=str(data.get("message") or ""),
            details=data.get("details"),
        )

    def __str__(self) -> str:
        when = datetime.fromtimestamp(self.timestamp / 1000).strftime("%H:%M:%S")
        line = f"[{when}] {self.type.value.upper()} {self.message}"
        if self.details:
            line += f" ({self.details})"
        return line


class MissionLog:
    """
    Capped, newest-first list of log entries.

    Owned by the session state; there is no global instance.
    """

    def __init__(self, cap: int = MISSION_LOG_CAP, clock: Callable[[], int] = now_ms):
        self._cap = cap
        self._clock = clock
        self._entries: list[LogEntry] = []

    @property
    def cap(self) -> int:
        return self._cap

    @property
    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    def add(
        self,
        entry_type: LogEntryType,
        message: str,
        details: Optional[str] = None,
    ) -> LogEntry:
        """Add an entry at the top of the log, dropping the oldest past the cap."""
        entry = LogEntry(
            entry_id=new_id(),
            timestamp=self._clock(),
            type=LogEntryType(entry_type),
            message=message,
            details=details,
        )
        self._entries.insert(0, entry)
        if len(self._entries) > self._cap:
            del self._entries[self._cap:]
        logger.debug(f"Mission log: {entry.type.value} {message}")
        return entry

    def clear(self) -> None:
        self._entries = []

    def load(self, data: Any) -> None:
        """Replace the log with serialized entries. Non-lists load as empty."""
        items = data if isinstance(data, list) else []
        self._entries = [LogEntry.from_dict(item) for item in items if isinstance(item, dict)]
        del self._entries[self._cap:]

    def to_list(self) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries]

    def format_log(self, max_entries: Optional[int] = None) -> str:
        """
        Format the log as a human-readable string.

        Args:
            max_entries: Maximum number of (newest) entries to include

        Returns:
            Formatted log string
        """
        entries = self._entries[:max_entries] if max_entries else self._entries
        lines = ["=== Mission Log ===", f"Entries: {len(self._entries)}", ""]
        lines.extend(str(entry) for entry in entries)
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._entries)
