from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

import discord
from discord import app_commands

from ...logstore import utcnow
from ...uptime import format_uptime
from ..invocation import Invocation
from .shared import format_latency

if TYPE_CHECKING:
    from ..bot import RoleDmBot

NAME = "status"

STATUS_COLOR = 0x00FF00


def build_status_embed(bot: "RoleDmBot", guild_name: str) -> discord.Embed:
    embed = discord.Embed(title="🤖 Bot Status", color=STATUS_COLOR, timestamp=utcnow())
    embed.add_field(name="Status", value="🟢 Online", inline=True)
    embed.add_field(name="Uptime", value=format_uptime(bot.ready_at), inline=True)
    embed.add_field(name="Server", value=guild_name, inline=True)
    embed.add_field(name="Latency", value=format_latency(bot.latency), inline=True)
    return embed


async def handle(bot: "RoleDmBot", invocation: Invocation) -> None:
    guild = invocation.guild
    guild_name = guild.name if guild is not None else "Direct message"
    await invocation.send_or_edit(embed=build_status_embed(bot, guild_name), ephemeral=True)


def register(bot: "RoleDmBot", tree: app_commands.CommandTree) -> None:
    bot.router.add(NAME, partial(handle, bot))

    @tree.command(name=NAME, description="Check the bot status")
    @app_commands.guild_only()
    async def status(interaction: discord.Interaction) -> None:
        await bot.router.route(NAME, Invocation(interaction, NAME))
