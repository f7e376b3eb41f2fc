"""Discord adapters — message store and slash-command client."""

from polybot.adapters.discord.bot import PolyBot
from polybot.adapters.discord.store import DiscordMessageStore

__all__ = ["PolyBot", "DiscordMessageStore"]
