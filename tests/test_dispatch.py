import asyncio
from typing import List

import pytest

from conftest import DummyMember
from role_dm_bot.dispatch import BulkDmDispatcher, Recipient, format_dm, send_direct_message
from role_dm_bot.logstore import LogKind, LogStore


def _recipients(*members: DummyMember) -> List[Recipient]:
    return [Recipient.from_member(m) for m in members]


@pytest.mark.asyncio
async def test_dispatch_counts_successes_and_failures(log_store: LogStore) -> None:
    alice = DummyMember(1, "alice")
    bob = DummyMember(2, "bob", fail=RuntimeError("Cannot send messages to this user"))
    carol = DummyMember(3, "carol")

    result = await BulkDmDispatcher(log_store).dispatch(_recipients(alice, bob, carol), "hello", "admin")

    assert result is not None
    assert result.success_count == 2
    assert result.failure_count == 1
    assert result.total == 3
    assert result.failures == [("bob", "Cannot send messages to this user")]

    assert alice.dms == ["**Message from admin**: hello"]
    assert carol.dms == ["**Message from admin**: hello"]

    entries = log_store.query()
    assert [e.kind for e in entries] == [LogKind.SUCCESS, LogKind.ERROR, LogKind.SUCCESS]
    assert entries[0].message == "Sent DM to alice"
    assert entries[1].message == "Failed to send DM to bob: Cannot send messages to this user"


@pytest.mark.asyncio
async def test_dispatch_empty_recipients_signals_distinctly(log_store: LogStore) -> None:
    started: List[int] = []

    async def on_start(count: int) -> None:
        started.append(count)

    result = await BulkDmDispatcher(log_store).dispatch([], "hello", "admin", audience="role Mods", on_start=on_start)

    assert result is None
    assert started == []
    entries = log_store.query()
    assert len(entries) == 1
    assert entries[0].kind is LogKind.INFO
    assert entries[0].message == "No members found with role Mods"


@pytest.mark.asyncio
async def test_dispatch_processes_each_recipient_once_in_order(log_store: LogStore) -> None:
    seen: List[str] = []

    async def deliver(recipient: Recipient, body: str) -> None:
        seen.append(recipient.label)

    recipients = [Recipient(id=i, label=f"user{i}") for i in (3, 1, 2, 1)]
    result = await BulkDmDispatcher(log_store, deliver=deliver).dispatch(recipients, "x", "y")

    # Duplicates are the caller's problem; each entry is processed once.
    assert seen == ["user3", "user1", "user2", "user1"]
    assert result is not None and result.success_count == 4
    assert len(log_store) == 4


@pytest.mark.asyncio
async def test_on_start_runs_once_before_first_delivery(log_store: LogStore) -> None:
    events: List[str] = []

    async def on_start(count: int) -> None:
        events.append(f"start:{count}")

    async def deliver(recipient: Recipient, body: str) -> None:
        events.append(f"dm:{recipient.label}")

    recipients = [Recipient(id=1, label="a"), Recipient(id=2, label="b")]
    await BulkDmDispatcher(log_store, deliver=deliver).dispatch(recipients, "x", "y", on_start=on_start)

    assert events == ["start:2", "dm:a", "dm:b"]


@pytest.mark.asyncio
async def test_cancellation_is_not_counted_as_failure(log_store: LogStore) -> None:
    async def deliver(recipient: Recipient, body: str) -> None:
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        await BulkDmDispatcher(log_store, deliver=deliver).dispatch([Recipient(id=1, label="a")], "x", "y")

    assert log_store.query("error") == []


@pytest.mark.asyncio
async def test_send_direct_message_requires_target() -> None:
    with pytest.raises(RuntimeError):
        await send_direct_message(Recipient(id=1, label="ghost"), "hi")


def test_recipient_equality_ignores_target() -> None:
    assert Recipient(id=1, label="a", target=object()) == Recipient(id=1, label="a")


def test_format_dm() -> None:
    assert format_dm("boss#0001", "meeting at 5") == "**Message from boss#0001**: meeting at 5"
