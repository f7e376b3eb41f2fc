"""Domain layer — pure Python, no framework dependencies."""

from polybot.domain.models import (
    ChannelTranscript,
    Decision,
    DeliveryReport,
    EscalateDecision,
    ReplyDecision,
    TranscriptMessage,
)
from polybot.domain.decision_parser import parse_decision
from polybot.domain.errors import ConfigError, DecisionServiceError, TemplateError
from polybot.domain.text import split_message

__all__ = [
    "ChannelTranscript",
    "Decision",
    "DeliveryReport",
    "EscalateDecision",
    "ReplyDecision",
    "TranscriptMessage",
    "parse_decision",
    "ConfigError",
    "DecisionServiceError",
    "TemplateError",
    "split_message",
]
