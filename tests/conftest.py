"""Shared test fixtures and dummy classes."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

import pytest

from role_dm_bot.config.settings import Settings
from role_dm_bot.discord.bot import RoleDmBot
from role_dm_bot.logstore import LogStore


class DummyUser:
    """Dummy Discord user for testing."""

    def __init__(self, user_id: int, name: str) -> None:
        self.id = user_id
        self.name = name

    def __str__(self) -> str:
        return self.name


class DummyRole:
    """Dummy Discord role for testing."""

    def __init__(self, role_id: int, name: str) -> None:
        self.id = role_id
        self.name = name


class DummyMember(DummyUser):
    """Dummy guild member; records DMs or raises `fail` on send."""

    def __init__(
        self,
        user_id: int,
        name: str,
        roles: Iterable[DummyRole] = (),
        fail: Optional[Exception] = None,
    ) -> None:
        super().__init__(user_id, name)
        self.roles = list(roles)
        self.fail = fail
        self.dms: List[str] = []

    def get_role(self, role_id: int) -> Optional[DummyRole]:
        for role in self.roles:
            if role.id == role_id:
                return role
        return None

    async def send(self, content: str) -> None:
        if self.fail is not None:
            raise self.fail
        self.dms.append(content)


class DummyGuild:
    """Dummy guild whose fetch_members yields the given members."""

    def __init__(self, guild_id: int, name: str, members: Iterable[DummyMember] = ()) -> None:
        self.id = guild_id
        self.name = name
        self.members = list(members)
        self.fetch_calls = 0

    async def fetch_members(self, *, limit: Optional[int] = 1000):
        self.fetch_calls += 1
        for member in self.members:
            yield member


class DummyInteractionResponse:
    """Dummy interaction.response recording initial responses."""

    def __init__(self, fail: Optional[Exception] = None) -> None:
        self.messages: List[dict] = []
        self.deferred: List[bool] = []
        self.fail = fail
        self._done = False

    def is_done(self) -> bool:
        return self._done

    async def defer(self, *, ephemeral: bool = False) -> None:
        self.deferred.append(ephemeral)
        self._done = True

    async def send_message(self, content: Optional[str] = None, **kwargs: Any) -> None:
        if self.fail is not None:
            raise self.fail
        self.messages.append({"content": content, **kwargs})
        self._done = True


class DummyCommand:
    def __init__(self, name: str) -> None:
        self.name = name


class DummyInteraction:
    """Dummy slash-command interaction for testing."""

    def __init__(
        self,
        guild: Optional[DummyGuild] = None,
        user: Optional[DummyUser] = None,
        command: Optional[DummyCommand] = None,
        fail: Optional[Exception] = None,
    ) -> None:
        self.guild = guild
        self.user = user or DummyUser(1, "caller")
        self.command = command
        self.response = DummyInteractionResponse(fail=fail)
        self.edits: List[dict] = []

    async def edit_original_response(self, **kwargs: Any) -> None:
        self.edits.append(kwargs)


@pytest.fixture
def config() -> Settings:
    return Settings(_env_file=None, discord_token="test-token")


@pytest.fixture
def log_store() -> LogStore:
    return LogStore()


@pytest.fixture
def bot(config: Settings, log_store: LogStore) -> RoleDmBot:
    return RoleDmBot(config, log_store=log_store)
