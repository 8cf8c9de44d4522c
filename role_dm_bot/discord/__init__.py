"""
Discord integration package.

Design goals:
- Keep role_dm_bot.discord.bot as the stable entrypoint (RoleDmBot + run_bot).
- Commands live in role_dm_bot.discord.commands.*, one module per slash command.
"""

from .bot import RoleDmBot, run_bot  # re-export for convenience

__all__ = [
    "RoleDmBot",
    "run_bot",
]
