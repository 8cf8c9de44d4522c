from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

from ..dispatch import Recipient

if TYPE_CHECKING:
    import discord

logger = logging.getLogger(__name__)


class GuildMemberDirectory:
    """
    Membership lookups against the gateway.

    Always fetches the member list fresh (requires the members intent) rather
    than trusting the client cache, which is incomplete on large guilds.
    """

    async def members_with_role(self, guild: "discord.Guild", role: "discord.Role") -> List[Recipient]:
        recipients: List[Recipient] = []
        async for member in guild.fetch_members(limit=None):
            if member.get_role(role.id) is not None:
                recipients.append(Recipient.from_member(member))

        logger.debug("guild=%s role=%s members_with_role=%s", guild.id, role.id, len(recipients))
        return recipients


__all__ = ["GuildMemberDirectory"]
