"""Domain data models — pure Python dataclasses."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple, Union


@dataclass(frozen=True)
class TranscriptMessage:
    """Normalized channel message used in transcripts."""

    id: int
    author_id: int
    author_name: str
    created_at: datetime
    content: str  # whitespace-collapsed, "[no text]" when empty


@dataclass(frozen=True)
class ChannelTranscript:
    channel_id: int
    channel_name: str
    messages: Tuple[TranscriptMessage, ...]  # oldest first
    latest_checkin_number: Optional[int] = None
    latest_checkin_timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class ReplyDecision:
    """Post `message` back into the originating channel."""

    message: str


@dataclass(frozen=True)
class EscalateDecision:
    """Deflect in the channel and notify the organizer."""

    reason: str = "Uncertain response."
    draft: str = ""


Decision = Union[ReplyDecision, EscalateDecision]


@dataclass
class DeliveryReport:
    """Outcome of a fan-out send, by channel name."""

    delivered: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.delivered) + len(self.failed)

    @property
    def all_delivered(self) -> bool:
        return not self.failed
