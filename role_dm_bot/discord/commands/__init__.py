from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List

from . import dm_role, logs, status

if TYPE_CHECKING:
    from discord import app_commands

    from ..bot import RoleDmBot

logger = logging.getLogger(__name__)

# The bot's full command set, in registration order.
# Each module exposes NAME and register(bot, tree).
MODULES = (dm_role, status, logs)

__all__ = ["register_all", "MODULES"]


def register_all(bot: "RoleDmBot", tree: "app_commands.CommandTree") -> None:
    """
    Register every command with the router and the CommandTree.

    Fail-closed: the bot must not come up with a partial command set.
    """
    results: Dict[str, str] = {}
    failed: List[str] = []

    for mod in MODULES:
        try:
            mod.register(bot, tree)
            results[mod.NAME] = "registered"
        except Exception as e:
            logger.exception("command register failed: /%s", mod.NAME)
            results[mod.NAME] = f"register failed: {e}"
            failed.append(mod.NAME)

    summary = ", ".join(f"{name}={outcome}" for name, outcome in results.items())
    logger.info("discord commands registration summary: %s", summary)

    if failed:
        msg = "Commands failed to register: " + ", ".join(failed)
        logger.error(msg)
        raise RuntimeError(msg)
