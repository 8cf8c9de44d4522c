from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, List

from ..logstore import LogKind, LogStore
from .invocation import Invocation

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "There was an error executing this command."

CommandHandler = Callable[[Invocation], Awaitable[None]]


class CommandRouter:
    """
    Name -> handler map for the bot's slash commands.

    The router is the fault boundary: a handler exception is recorded in the
    LogStore and turned into a generic ephemeral reply. Nothing propagates
    back into discord.py's interaction dispatch.
    """

    def __init__(self, log_store: LogStore) -> None:
        self.log_store = log_store
        self._handlers: Dict[str, CommandHandler] = {}

    @property
    def names(self) -> List[str]:
        return sorted(self._handlers)

    def add(self, name: str, handler: CommandHandler) -> None:
        if name in self._handlers:
            raise ValueError(f"command already registered: {name}")
        self._handlers[name] = handler

    async def route(self, name: str, invocation: Invocation) -> None:
        handler = self._handlers.get(name)
        if handler is None:
            return

        try:
            await handler(invocation)
        except Exception as exc:
            self.log_store.append(LogKind.ERROR, f"Error executing command {name}: {exc}")
            logger.exception("Error executing command %s", name)
            await reply_quietly(invocation, GENERIC_FAILURE)


async def reply_quietly(invocation: Invocation, content: str) -> None:
    """Ephemeral reply for error paths; a failed send is logged, never raised."""
    try:
        await invocation.send_or_edit(content, ephemeral=True)
    except Exception:
        # Interaction token expired or already gone; nothing left to tell the user.
        logger.exception("Failed to send error reply for command %s", invocation.command_name)


__all__ = ["CommandHandler", "CommandRouter", "GENERIC_FAILURE", "reply_quietly"]
