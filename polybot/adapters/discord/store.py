"""Discord message store — MessageStorePort over a discord.Client."""

import sys
from typing import List, Optional

import discord

from polybot.domain.teams import find_team_role, is_team_channel, team_number
from polybot.ports.inbound import ChannelMessage, ChannelRef

HISTORY_PAGE_SIZE = 100


def _log(msg: str):
    print(msg, file=sys.stderr)


def to_channel_message(message: discord.Message) -> ChannelMessage:
    author = message.author
    return ChannelMessage(
        id=message.id,
        author_id=author.id,
        author_name=getattr(author, "display_name", None) or author.name,
        created_at=message.created_at,
        content=message.content or "",
    )


def to_channel_ref(channel: discord.TextChannel, role_id: Optional[int] = None) -> ChannelRef:
    return ChannelRef(id=channel.id, name=channel.name, mention=channel.mention, role_id=role_id)


class DiscordMessageStore:
    """MessageStorePort implementation using discord.Client."""

    def __init__(self, client: discord.Client, guild_id: int, control_channel_id: int):
        self._client = client
        self._guild_id = guild_id
        self._control_channel_id = control_channel_id

    async def _guild(self) -> discord.Guild:
        return self._client.get_guild(self._guild_id) or await self._client.fetch_guild(self._guild_id)

    async def _text_channel(self, channel_id: int) -> Optional[discord.TextChannel]:
        channel = self._client.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self._client.fetch_channel(channel_id)
            except (discord.NotFound, discord.Forbidden):
                return None
        return channel if isinstance(channel, discord.TextChannel) else None

    async def fetch_all_messages(self, channel_id: int) -> List[ChannelMessage]:
        """Page through history newest-first until a page brings nothing new."""
        channel = await self._text_channel(channel_id)
        if channel is None:
            raise ValueError(f"Channel {channel_id} is not a reachable text channel")

        seen = set()
        messages: List[ChannelMessage] = []
        before = None
        while True:
            page = [m async for m in channel.history(limit=HISTORY_PAGE_SIZE, before=before)]
            fresh = [m for m in page if m.id not in seen]
            if not fresh:
                break
            for message in fresh:
                if message.id in seen:
                    continue
                seen.add(message.id)
                messages.append(to_channel_message(message))
            before = page[-1]
        return messages

    async def send(self, channel_id: int, text: str, role_id: Optional[int] = None) -> None:
        channel = await self._text_channel(channel_id)
        if channel is None:
            raise ValueError(f"Channel {channel_id} is not a reachable text channel")

        if role_id:
            await channel.send(
                f"<@&{role_id}> {text}",
                allowed_mentions=discord.AllowedMentions(
                    everyone=False, users=True, roles=[discord.Object(id=role_id)],
                ),
            )
        else:
            await channel.send(
                text,
                allowed_mentions=discord.AllowedMentions(everyone=False, users=True, roles=False),
            )

    async def list_team_channels(self) -> List[ChannelRef]:
        guild = await self._guild()
        channels = [
            ch for ch in await guild.fetch_channels()
            if isinstance(ch, discord.TextChannel) and is_team_channel(ch.name)
        ]
        roles = [(role.id, role.name) for role in await guild.fetch_roles()]
        channels.sort(key=lambda ch: team_number(ch.name))
        return [to_channel_ref(ch, find_team_role(ch.name, roles)) for ch in channels]

    async def get_control_channel(self) -> Optional[ChannelRef]:
        channel = await self._text_channel(self._control_channel_id)
        if channel is None:
            _log(f"[store] control channel {self._control_channel_id} missing or not a text channel")
            return None
        return to_channel_ref(channel)
