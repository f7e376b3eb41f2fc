"""Inbound port — platform-agnostic message and channel representations."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ChannelRef:
    """A text channel the bot can read from and post to."""

    id: int
    name: str
    mention: str  # e.g. "<#123>"
    role_id: Optional[int] = None  # team role pinged on broadcasts


@dataclass(frozen=True)
class ChannelMessage:
    """One stored channel message, content as posted."""

    id: int
    author_id: int
    author_name: str
    created_at: datetime
    content: str


@dataclass
class IncomingMessage:
    """Discord/Slack/CLI-agnostic inbound message."""

    message_id: int
    content: str
    channel: ChannelRef
    author_id: int
    is_bot: bool
    mentions_bot: bool
    jump_url: str = ""
