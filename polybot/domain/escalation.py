"""Decision side effects — reply, escalate, and batch delivery.

Only ever posts messages; nothing here edits or deletes.
"""

import sys
from typing import Optional, Sequence

from polybot.domain.models import Decision, DeliveryReport, EscalateDecision, ReplyDecision
from polybot.domain.text import split_message, truncate, user_mention
from polybot.ports.inbound import ChannelRef
from polybot.ports.outbound import MessageStorePort

MAX_REASON_LENGTH = 140
NO_QUESTION = "[Mention with no question text]"
NO_DRAFT = "[none]"


def _log(msg: str):
    print(msg, file=sys.stderr)


def format_escalation_notice(
    owner_user_id: int,
    decision: EscalateDecision,
    origin: ChannelRef,
    question: str,
    jump_url: str,
) -> str:
    return "\n".join([
        f"{user_mention(owner_user_id)} escalation from {origin.mention}",
        f"Reason: {truncate(decision.reason, MAX_REASON_LENGTH)}",
        f"Question: {question or NO_QUESTION}",
        f"Draft reply: {decision.draft or NO_DRAFT}",
        f"Jump link: {jump_url}",
    ])


async def send_chunked(
    store: MessageStorePort, channel_id: int, text: str, role_id: Optional[int] = None
) -> None:
    """Send text in order, one message per chunk; only the first pings the role."""
    for index, chunk in enumerate(split_message(text)):
        await store.send(channel_id, chunk, role_id=role_id if index == 0 else None)


async def deliver_batch(
    store: MessageStorePort, channels: Sequence[ChannelRef], body: str
) -> DeliveryReport:
    """Send `body` to each channel in turn; one failure never stops the rest.

    A channel counts as failed if any of its chunks fails, even when earlier
    chunks already landed; the log names the chunk that failed.
    """
    chunks = split_message(body)
    report = DeliveryReport()
    for channel in channels:
        sent = 0
        try:
            for chunk in chunks:
                await store.send(channel.id, chunk, role_id=channel.role_id if sent == 0 else None)
                sent += 1
        except Exception as e:
            if sent:
                _log(
                    f"[delivery] send to #{channel.name} partial: chunk {sent + 1}/{len(chunks)} "
                    f"failed after {sent} delivered: {e}"
                )
            else:
                _log(f"[delivery] send to #{channel.name} failed: {e}")
            report.failed.append(channel.name)
        else:
            report.delivered.append(channel.name)
    return report


class EscalationOrchestrator:
    """Performs the reply-or-escalate side effect for a parsed decision."""

    def __init__(self, store: MessageStorePort, owner_user_id: int):
        self._store = store
        self._owner_user_id = owner_user_id

    async def dispatch(
        self,
        decision: Decision,
        origin: ChannelRef,
        control: Optional[ChannelRef],
        question: str,
        jump_url: str,
        deflection: str,
    ) -> None:
        if isinstance(decision, ReplyDecision):
            await send_chunked(self._store, origin.id, decision.message)
            return

        await self._store.send(origin.id, deflection)

        if control is None:
            _log(f"[escalation] control channel unavailable, notice for #{origin.name} skipped")
            return

        notice = format_escalation_notice(
            self._owner_user_id, decision, origin, question, jump_url,
        )
        await send_chunked(self._store, control.id, notice)
        _log(f"[escalation] #{origin.name} escalated: {decision.reason[:80]}")
