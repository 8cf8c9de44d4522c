"""
role-dm-bot: Discord bot that DMs every member of a role.
"""

__version__ = "1.0.0"
