from __future__ import annotations

import math
from typing import Optional

from ...logstore import LogEntry

# NOTE:
# Keep this module dependency-light (no discord import) so formatting helpers
# can be unit tested without a client.

# Discord embed description hard limit
EMBED_DESCRIPTION_LIMIT = 4096

GUILD_ONLY_MESSAGE = "❌ This command can only be used inside a server."


def truncate(s: str, limit: int = 1500) -> str:
    if not s:
        return ""
    if len(s) <= limit:
        return s
    return s[: max(0, limit - 3)] + "..."


def format_latency(latency: Optional[float]) -> str:
    """
    discord.py reports websocket latency in seconds (nan before the first heartbeat).
    """
    if latency is None or math.isnan(latency) or math.isinf(latency):
        return "n/a"
    return f"{round(latency * 1000)}ms"


def format_log_line(entry: LogEntry) -> str:
    local = entry.timestamp.astimezone()
    return f"[{local.strftime('%H:%M:%S')}] [{entry.kind.value.upper()}] {entry.message}"


__all__ = [
    "EMBED_DESCRIPTION_LIMIT",
    "GUILD_ONLY_MESSAGE",
    "format_latency",
    "format_log_line",
    "truncate",
]
