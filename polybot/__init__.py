"""Poly — hackathon check-in and standby assistant for Discord."""

from polybot.domain.agent import PolyBrain
from polybot.domain.checkin import CheckinCounter
from polybot.domain.decision_parser import parse_decision
from polybot.domain.models import (
    ChannelTranscript,
    DeliveryReport,
    EscalateDecision,
    ReplyDecision,
    TranscriptMessage,
)

__all__ = [
    "PolyBrain",
    "CheckinCounter",
    "parse_decision",
    "ChannelTranscript",
    "DeliveryReport",
    "EscalateDecision",
    "ReplyDecision",
    "TranscriptMessage",
]
