from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    import discord


class ReplyState(str, Enum):
    """
    Where an interaction is in its reply lifecycle.

    Discord allows exactly one initial response per interaction; everything
    after that must edit the original response.
    """

    FRESH = "fresh"
    DEFERRED = "deferred"
    REPLIED = "replied"


class Invocation:
    """
    One inbound slash-command event.

    Handlers never touch interaction.response directly. They call defer() and
    send_or_edit(), which pick the correct transport for the current state.
    """

    def __init__(
        self,
        interaction: "discord.Interaction",
        command_name: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.interaction = interaction
        self.command_name = command_name
        self.options: Dict[str, Any] = dict(options or {})
        self.state = ReplyState.FRESH

    @classmethod
    def resume(cls, interaction: "discord.Interaction", command_name: str) -> "Invocation":
        """
        Wrap an interaction we did not track from the start (e.g. in the tree
        error handler), reading the reply state back from discord.py.
        """
        invocation = cls(interaction, command_name)
        if interaction.response.is_done():
            invocation.state = ReplyState.REPLIED
        return invocation

    @property
    def guild(self) -> Optional["discord.Guild"]:
        return getattr(self.interaction, "guild", None)

    @property
    def user_label(self) -> str:
        user = getattr(self.interaction, "user", None)
        return str(user) if user is not None else "unknown user"

    def option(self, name: str, default: Any = None) -> Any:
        value = self.options.get(name)
        return default if value is None else value

    async def defer(self, *, ephemeral: bool = True) -> None:
        if self.state is not ReplyState.FRESH:
            return
        await self.interaction.response.defer(ephemeral=ephemeral)
        self.state = ReplyState.DEFERRED

    async def send_or_edit(
        self,
        content: Optional[str] = None,
        *,
        embed: Optional["discord.Embed"] = None,
        ephemeral: bool = True,
    ) -> None:
        kwargs: Dict[str, Any] = {}
        if content is not None:
            kwargs["content"] = content
        if embed is not None:
            kwargs["embed"] = embed

        if self.state is ReplyState.FRESH:
            await self.interaction.response.send_message(ephemeral=ephemeral, **kwargs)
        else:
            await self.interaction.edit_original_response(**kwargs)
        self.state = ReplyState.REPLIED


__all__ = ["Invocation", "ReplyState"]
