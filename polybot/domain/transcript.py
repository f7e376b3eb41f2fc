"""Transcript building — ordered, normalized channel history.

Pure Python apart from `fetch_transcript`, which only awaits the store port.
"""

import re
from typing import Iterable, List

from polybot.domain.checkin import CHECKIN_MARKER_RE
from polybot.domain.models import ChannelTranscript, TranscriptMessage
from polybot.ports.inbound import ChannelMessage, ChannelRef
from polybot.ports.outbound import MessageStorePort

_WHITESPACE_RE = re.compile(r"\s+")

EMPTY_CONTENT = "[no text]"
NO_MESSAGES = "[No messages in this channel]"
NONE_FOUND = "none found"


def clean_content(content: str) -> str:
    compact = _WHITESPACE_RE.sub(" ", content or "").strip()
    return compact or EMPTY_CONTENT


def normalize_messages(raw: Iterable[ChannelMessage]) -> List[TranscriptMessage]:
    """Clean every message and sort oldest first.

    `sorted` is stable, so messages sharing a timestamp keep fetch order.
    """
    messages = [
        TranscriptMessage(
            id=m.id,
            author_id=m.author_id,
            author_name=m.author_name,
            created_at=m.created_at,
            content=clean_content(m.content),
        )
        for m in raw
    ]
    return sorted(messages, key=lambda m: m.created_at)


def build_transcript(
    channel_id: int,
    channel_name: str,
    raw: Iterable[ChannelMessage],
    bot_user_id: int,
) -> ChannelTranscript:
    """Build a ChannelTranscript and locate the highest check-in marker."""
    messages = normalize_messages(raw)

    latest_number = None
    latest_timestamp = None
    for message in messages:
        if message.author_id != bot_user_id:
            continue
        match = CHECKIN_MARKER_RE.search(message.content)
        if not match:
            continue
        number = int(match.group(1))
        # >= so that the later of two equal markers wins
        if latest_number is None or number >= latest_number:
            latest_number = number
            latest_timestamp = message.created_at

    return ChannelTranscript(
        channel_id=channel_id,
        channel_name=channel_name,
        messages=tuple(messages),
        latest_checkin_number=latest_number,
        latest_checkin_timestamp=latest_timestamp,
    )


async def fetch_transcript(
    store: MessageStorePort, channel: ChannelRef, bot_user_id: int
) -> ChannelTranscript:
    raw = await store.fetch_all_messages(channel.id)
    return build_transcript(channel.id, channel.name, raw, bot_user_id)


def format_message_line(message: TranscriptMessage) -> str:
    return f"[{message.created_at.isoformat()}] {message.author_name}: {message.content}"


def render_transcript_for_prompt(transcript: ChannelTranscript) -> str:
    """Render a transcript as a header block followed by one line per message."""
    timestamp = transcript.latest_checkin_timestamp
    header = "\n".join([
        f"Channel: {transcript.channel_name}",
        f"Latest check-in number: "
        f"{transcript.latest_checkin_number if transcript.latest_checkin_number is not None else NONE_FOUND}",
        f"Latest check-in timestamp: {timestamp.isoformat() if timestamp else NONE_FOUND}",
        "Messages:",
    ])
    body = "\n".join(format_message_line(m) for m in transcript.messages)
    return f"{header}\n{body or NO_MESSAGES}"
