"""Port interfaces (Hexagonal Architecture)."""

from polybot.ports.inbound import ChannelMessage, ChannelRef, IncomingMessage
from polybot.ports.outbound import LLMPort, MessageStorePort

__all__ = [
    "ChannelMessage",
    "ChannelRef",
    "IncomingMessage",
    "LLMPort",
    "MessageStorePort",
]
