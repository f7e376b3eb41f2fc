"""Check-in numbering — markers, history scanning and the process-wide counter."""

import asyncio
import re
import sys
from typing import Awaitable, Callable, Iterable, Optional

from polybot.ports.inbound import ChannelMessage
from polybot.ports.outbound import MessageStorePort

CHECKIN_MARKER_RE = re.compile(r"\[POLY_CHECKIN #(\d+)\]", re.IGNORECASE)
# Older summaries carried only the human-readable form
LEGACY_CHECKIN_RE = re.compile(r"Check-in #(\d+)", re.IGNORECASE)

FUN_FACTS = [
    "Fun fact: Parrots can mimic over 100 sounds.",
    "Fun fact: A group of parrots is called a pandemonium.",
    "Fun fact: Some parrots live for decades.",
    "Fun fact: Parrots use their feet like hands.",
    "Fun fact: Many parrots can solve simple puzzles.",
]


def _log(msg: str):
    print(msg, file=sys.stderr)


def format_checkin_marker(number: int) -> str:
    return f"[POLY_CHECKIN #{number}]"


def fun_fact_for(number: int) -> str:
    return FUN_FACTS[(number - 1) % len(FUN_FACTS)]


def scan_last_checkin(messages: Iterable[ChannelMessage], bot_user_id: int) -> int:
    """Highest check-in number in bot-authored messages, 0 if none."""
    highest = 0
    for msg in messages:
        if msg.author_id != bot_user_id:
            continue
        match = CHECKIN_MARKER_RE.search(msg.content) or LEGACY_CHECKIN_RE.search(msg.content)
        if match:
            highest = max(highest, int(match.group(1)))
    return highest


async def recover_last_checkin(
    store: MessageStorePort, control_channel_id: int, bot_user_id: int
) -> int:
    history = await store.fetch_all_messages(control_channel_id)
    last = scan_last_checkin(history, bot_user_id)
    _log(f"[checkin] recovered last check-in #{last} from {len(history)} control message(s)")
    return last


class CheckinCounter:
    """Monotonic check-in sequence, recovered lazily from channel history.

    Recovery and increment share one lock: two triggers in flight never
    see the same number and history is scanned at most once.
    """

    def __init__(self):
        self._value: Optional[int] = None
        self._lock = asyncio.Lock()

    @property
    def value(self) -> Optional[int]:
        """Last issued (or recovered) number; None before recovery."""
        return self._value

    async def _recover_locked(self, recover: Callable[[], Awaitable[int]]):
        if self._value is None:
            self._value = await recover()

    async def recover_if_unset(self, recover: Callable[[], Awaitable[int]]) -> int:
        async with self._lock:
            await self._recover_locked(recover)
            return self._value

    async def next(self, recover: Callable[[], Awaitable[int]]) -> int:
        async with self._lock:
            await self._recover_locked(recover)
            self._value += 1
            return self._value
