from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Dict, Optional

import discord
from discord import app_commands

from ..config.settings import Settings, settings
from ..dispatch import BulkDmDispatcher, Deliver, send_direct_message
from ..keepalive import start_keepalive
from ..logstore import LogKind, LogStore, utcnow
from .commands import register_all
from .commands.shared import GUILD_ONLY_MESSAGE
from .invocation import Invocation
from .members import GuildMemberDirectory
from .router import GENERIC_FAILURE, CommandRouter, reply_quietly

logger = logging.getLogger(__name__)


class RoleDmBot(discord.Client):
    """
    Discord bot that DMs every member of a role and keeps a short activity log.

    Notes:
    - One LogStore per bot; the router, dispatcher and command handlers all
      write to it.
    - The members intent must also be enabled in the Developer Portal, or
      member fetches for /dm-role will fail.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        *,
        log_store: Optional[LogStore] = None,
        directory: Optional[GuildMemberDirectory] = None,
        deliver: Deliver = send_direct_message,
    ) -> None:
        intents = discord.Intents.default()
        intents.guilds = True
        intents.members = True

        super().__init__(intents=intents)

        self.config = config if config is not None else settings
        self.tree = app_commands.CommandTree(self)
        self.tree.error(self._on_tree_error)

        self.log_store = log_store if log_store is not None else LogStore()
        self.router = CommandRouter(self.log_store)
        self.dispatcher = BulkDmDispatcher(self.log_store, deliver)
        self.directory = directory if directory is not None else GuildMemberDirectory()

        # Set on the first READY; reconnects keep the original instant.
        self.ready_at: Optional[datetime] = None

        self._broadcast_locks: Dict[int, asyncio.Lock] = {}
        self._broadcast_users: Dict[int, int] = {}

    def broadcasting(self, guild_id: int) -> bool:
        return guild_id in self._broadcast_locks

    @asynccontextmanager
    async def broadcast_slot(self, guild_id: int) -> AsyncIterator[None]:
        """
        Per-guild lock so two /dm-role runs in one server don't interleave.
        The lock is dropped once its last holder or waiter leaves.
        """
        lock = self._broadcast_locks.get(guild_id)
        if lock is None:
            lock = asyncio.Lock()
            self._broadcast_locks[guild_id] = lock
        self._broadcast_users[guild_id] = self._broadcast_users.get(guild_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._broadcast_users[guild_id] - 1
            if remaining:
                self._broadcast_users[guild_id] = remaining
            else:
                del self._broadcast_users[guild_id]
                del self._broadcast_locks[guild_id]

    async def setup_hook(self) -> None:
        register_all(self, self.tree)
        await self.sync_commands()

    async def sync_commands(self) -> None:
        """
        Push the command definitions to Discord (guild-only optional for fast iteration).
        Failure is logged; the gateway connection stays up.
        """
        try:
            guild_id = self.config.discord_guild_id
            if guild_id and self.config.discord_sync_guild_only:
                guild = discord.Object(id=guild_id)
                self.tree.copy_global_to(guild=guild)
                await self.tree.sync(guild=guild)
                logger.info("Slash commands synced to guild=%s", guild_id)
            else:
                await self.tree.sync()
                logger.info("Slash commands synced globally")
        except Exception as exc:
            self.log_store.append(LogKind.ERROR, f"Failed to register slash commands: {exc}")
            logger.exception("Slash command sync failed")
            return

        self.log_store.append(LogKind.INFO, "Slash commands registered successfully")

    async def on_ready(self) -> None:
        if self.ready_at is None:
            self.ready_at = utcnow()
        self.log_store.append(LogKind.INFO, f"Logged in as {self.user}")

    async def on_error(self, event_method: str, /, *args: Any, **kwargs: Any) -> None:
        exc = sys.exc_info()[1]
        self.log_store.append(LogKind.ERROR, f"Client error: {exc}")
        logger.exception("Unhandled error in event %s", event_method)

    async def _on_tree_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        """
        Errors raised before our router runs (checks, option transforms).
        """
        command = interaction.command
        name = command.name if command is not None else "unknown"

        invocation = Invocation.resume(interaction, name)

        if isinstance(error, app_commands.NoPrivateMessage):
            await reply_quietly(invocation, GUILD_ONLY_MESSAGE)
            return

        self.log_store.append(LogKind.ERROR, f"Error executing command {name}: {error}")
        logger.error("App command error in %s: %s", name, error)
        await reply_quietly(invocation, GENERIC_FAILURE)


# ---------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------

bot = RoleDmBot()


def run_bot() -> None:
    logging.basicConfig(level=getattr(logging, str(settings.log_level).upper(), logging.INFO))
    settings.validate_runtime()

    start_keepalive(settings.host, settings.port, settings.log_level)

    # log_handler=None: keep the basicConfig handler instead of discord.py's own.
    bot.run(settings.discord_token, log_handler=None)


if __name__ == "__main__":
    run_bot()
