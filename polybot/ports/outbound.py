"""Outbound ports — interfaces for external system adapters."""

from typing import List, Optional, Protocol, runtime_checkable

from polybot.ports.inbound import ChannelMessage, ChannelRef


@runtime_checkable
class LLMPort(Protocol):
    """Interface for decision-service backends."""

    async def execute(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        session_id: Optional[str] = None,
        model: Optional[str] = None,
    ) -> str: ...


@runtime_checkable
class MessageStorePort(Protocol):
    """Interface for reading channel history and posting messages."""

    async def fetch_all_messages(self, channel_id: int) -> List[ChannelMessage]:
        """Every message in the channel exactly once, in any order."""
        ...

    async def send(self, channel_id: int, text: str, role_id: Optional[int] = None) -> None: ...

    async def list_team_channels(self) -> List[ChannelRef]: ...

    async def get_control_channel(self) -> Optional[ChannelRef]:
        """The control channel, or None if missing or not a text channel."""
        ...
