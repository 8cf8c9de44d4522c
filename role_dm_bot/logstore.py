from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Deque, List, Optional, Union

logger = logging.getLogger(__name__)

LOG_CAPACITY = 100
RECENT_LIMIT = 10

# Filter value meaning "every kind"
ALL = "all"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LogKind(str, Enum):
    """
    Activity log entry kind.
    Values double as the /logs filter choices.
    """

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class LogEntry:
    kind: LogKind
    message: str
    timestamp: datetime = field(default_factory=utcnow)


KindFilter = Union[LogKind, str, None]


def _resolve_kind(kind: KindFilter) -> Optional[LogKind]:
    """
    None / "all" -> None (no filtering). Anything else must be a LogKind value.
    """
    if kind is None:
        return None
    if isinstance(kind, LogKind):
        return kind
    s = str(kind).strip().lower()
    if not s or s == ALL:
        return None
    return LogKind(s)


class LogStore:
    """
    Bounded in-memory activity log (oldest first).

    Notes:
    - append() is synchronous and never awaits, so concurrent command handlers
      on the event loop can share one store without locking.
    - Entries past `capacity` are evicted from the head.
    - Every entry is mirrored to the module logger for operators.
    """

    def __init__(self, capacity: int = LOG_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, kind: Union[LogKind, str], message: str) -> LogEntry:
        entry = LogEntry(kind=LogKind(kind), message=message)
        self._entries.append(entry)

        level = logging.ERROR if entry.kind is LogKind.ERROR else logging.INFO
        logger.log(level, "[%s] %s", entry.kind.value.upper(), message)
        return entry

    def query(self, kind: KindFilter = None) -> List[LogEntry]:
        """
        Entries of one kind (or all), oldest first.
        Raises ValueError for an unknown kind.
        """
        wanted = _resolve_kind(kind)
        if wanted is None:
            return list(self._entries)
        return [e for e in self._entries if e.kind is wanted]

    def recent(self, kind: KindFilter = None, limit: int = RECENT_LIMIT) -> List[LogEntry]:
        """
        The last `limit` matching entries, most recent first.
        """
        if limit <= 0:
            return []
        matched = self.query(kind)
        return list(reversed(matched[-limit:]))


__all__ = [
    "ALL",
    "LOG_CAPACITY",
    "RECENT_LIMIT",
    "LogEntry",
    "LogKind",
    "LogStore",
]
