from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

import discord
from discord import app_commands

from ...logstore import LogKind
from ..invocation import Invocation
from .shared import GUILD_ONLY_MESSAGE

if TYPE_CHECKING:
    from ..bot import RoleDmBot

NAME = "dm-role"


async def handle(bot: "RoleDmBot", invocation: Invocation) -> None:
    """
    Send `message` to every member of the invoking guild holding `role`.

    Deliveries are sequential; broadcasts in the same guild queue behind each
    other on the bot's per-guild lock.
    """
    guild = invocation.guild
    if guild is None:
        await invocation.send_or_edit(GUILD_ONLY_MESSAGE, ephemeral=True)
        return

    # Member fetch + DMs take a while; acknowledge before Discord's 3s deadline.
    await invocation.defer(ephemeral=True)

    role = invocation.option("role")
    message = invocation.option("message", "")
    if role is None:
        raise ValueError("role option is required")

    async def _announce(count: int) -> None:
        await invocation.send_or_edit(f"Starting to send DMs to {count} members with role {role.name}...")

    async with bot.broadcast_slot(guild.id):
        recipients = await bot.directory.members_with_role(guild, role)
        result = await bot.dispatcher.dispatch(
            recipients,
            message,
            invocation.user_label,
            audience=f"role {role.name}",
            on_start=_announce,
        )

    if result is None:
        await invocation.send_or_edit(f"No members found with the role {role.name}")
        return

    bot.log_store.append(
        LogKind.INFO,
        f"Completed DM to role {role.name}. Success: {result.success_count}, Failed: {result.failure_count}",
    )

    await invocation.send_or_edit(
        f"Completed sending DMs to members with role {role.name}.\n"
        f"✅ Successfully sent: {result.success_count}\n"
        f"❌ Failed to send: {result.failure_count}"
    )


def register(bot: "RoleDmBot", tree: app_commands.CommandTree) -> None:
    """
    /dm-role role:<role> message:<text>
    """
    bot.router.add(NAME, partial(handle, bot))

    @tree.command(name=NAME, description="Send a DM to all users with a specific role")
    @app_commands.guild_only()
    @app_commands.describe(role="The role to send DM to", message="The message to send")
    async def dm_role(interaction: discord.Interaction, role: discord.Role, message: str) -> None:
        await bot.router.route(NAME, Invocation(interaction, NAME, {"role": role, "message": message}))
