from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

NOT_AVAILABLE = "not available"


def format_uptime(start: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Human-readable time since `start`, largest non-zero unit first:
      90125s -> "1d 1h 2m 5s", 65s -> "1m 5s", 0s -> "0s"

    Naive datetimes are treated as UTC. Negative durations clamp to "0s".
    """
    if start is None:
        return NOT_AVAILABLE

    if now is None:
        now = datetime.now(timezone.utc)
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    total = max(0, int((now - start).total_seconds()))

    seconds = total % 60
    minutes = (total // 60) % 60
    hours = (total // 3600) % 24
    days = total // 86400

    if days > 0:
        return f"{days}d {hours}h {minutes}m {seconds}s"
    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


__all__ = ["NOT_AVAILABLE", "format_uptime"]
