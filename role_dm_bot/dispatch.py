from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Tuple

from .logstore import LogKind, LogStore

logger = logging.getLogger(__name__)

DM_TEMPLATE = "**Message from {sender}**: {body}"


@dataclass(frozen=True)
class Recipient:
    """
    A member eligible to receive a DM.

    `target` is the gateway object used for delivery (a discord.Member in
    production); it is excluded from equality so recipients compare by id/label.
    """

    id: int
    label: str
    target: Any = field(default=None, compare=False, repr=False)

    @classmethod
    def from_member(cls, member: Any) -> "Recipient":
        return cls(id=int(member.id), label=str(member), target=member)


@dataclass
class DispatchResult:
    success_count: int = 0
    failure_count: int = 0
    failures: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count


Deliver = Callable[[Recipient, str], Awaitable[Any]]
OnStart = Callable[[int], Awaitable[Any]]


async def send_direct_message(recipient: Recipient, body: str) -> None:
    """
    Default delivery: DM through the recipient's gateway object.
    Raises whatever the gateway raises (discord.Forbidden for closed DMs, etc).
    """
    if recipient.target is None:
        raise RuntimeError("recipient has no delivery target")
    await recipient.target.send(body)


def format_dm(sender_label: str, message_body: str) -> str:
    return DM_TEMPLATE.format(sender=sender_label, body=message_body)


class BulkDmDispatcher:
    """
    Sends one DM per recipient, sequentially.

    Rules:
    - A failed delivery never aborts the run; it is counted and logged.
    - Exactly one LogStore entry per processed recipient (success or error).
    - An empty recipient list is reported as None, not as a 0/0 result.
    """

    def __init__(self, log_store: LogStore, deliver: Deliver = send_direct_message) -> None:
        self.log_store = log_store
        self.deliver = deliver

    async def dispatch(
        self,
        recipients: Iterable[Recipient],
        message_body: str,
        sender_label: str,
        *,
        audience: str = "the requested role",
        on_start: Optional[OnStart] = None,
    ) -> Optional[DispatchResult]:
        targets = list(recipients)

        if not targets:
            self.log_store.append(LogKind.INFO, f"No members found with {audience}")
            return None

        if on_start is not None:
            await on_start(len(targets))

        body = format_dm(sender_label, message_body)
        result = DispatchResult()

        for recipient in targets:
            try:
                await self.deliver(recipient, body)
            except Exception as exc:
                result.failure_count += 1
                result.failures.append((recipient.label, str(exc)))
                self.log_store.append(LogKind.ERROR, f"Failed to send DM to {recipient.label}: {exc}")
                continue

            result.success_count += 1
            self.log_store.append(LogKind.SUCCESS, f"Sent DM to {recipient.label}")

        logger.debug(
            "dispatch finished (audience=%s, ok=%s, failed=%s)",
            audience,
            result.success_count,
            result.failure_count,
        )
        return result


__all__ = [
    "DM_TEMPLATE",
    "BulkDmDispatcher",
    "DispatchResult",
    "Recipient",
    "format_dm",
    "send_direct_message",
]
