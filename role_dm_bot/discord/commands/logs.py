from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands

from ...logstore import ALL, RECENT_LIMIT, LogKind, utcnow
from ..invocation import Invocation
from .shared import EMBED_DESCRIPTION_LIMIT, format_log_line, truncate

if TYPE_CHECKING:
    from ..bot import RoleDmBot

NAME = "logs"

LOGS_COLOR = 0x0099FF

FILTER_CHOICES = [
    app_commands.Choice(name="All", value=ALL),
    app_commands.Choice(name="Success", value=LogKind.SUCCESS.value),
    app_commands.Choice(name="Error", value=LogKind.ERROR.value),
    app_commands.Choice(name="Info", value=LogKind.INFO.value),
]


async def handle(bot: "RoleDmBot", invocation: Invocation) -> None:
    """
    Show the most recent log entries (newest first), optionally filtered by kind.
    """
    kind_filter = str(invocation.option("filter", ALL)).strip().lower() or ALL
    entries = bot.log_store.recent(kind_filter, RECENT_LIMIT)

    if not entries:
        await invocation.send_or_edit(f"No logs found with filter: {kind_filter}", ephemeral=True)
        return

    description = truncate("\n".join(format_log_line(e) for e in entries), EMBED_DESCRIPTION_LIMIT)
    embed = discord.Embed(title="📝 Bot Logs", description=description, color=LOGS_COLOR, timestamp=utcnow())
    await invocation.send_or_edit(embed=embed, ephemeral=True)


def register(bot: "RoleDmBot", tree: app_commands.CommandTree) -> None:
    bot.router.add(NAME, partial(handle, bot))

    @tree.command(name=NAME, description="Check the bot logs")
    @app_commands.guild_only()
    @app_commands.rename(kind="filter")
    @app_commands.describe(kind="Filter logs by type")
    @app_commands.choices(kind=FILTER_CHOICES)
    async def logs(interaction: discord.Interaction, kind: Optional[app_commands.Choice[str]] = None) -> None:
        options = {"filter": kind.value if kind is not None else ALL}
        await bot.router.route(NAME, Invocation(interaction, NAME, options))
