"""Outbound text helpers — chunking, truncation, mention stripping.

Pure Python, no framework dependencies.
"""

import re
from typing import List, Optional

# Discord caps messages at 2000 characters; leave headroom for mention prefixes.
MAX_MESSAGE_LENGTH = 1900


def split_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """Split text into chunks of at most `limit` characters.

    Splits on line boundaries; a single line longer than `limit` is cut at
    character boundaries. A blank line is carried into the next chunk as a
    leading newline when it fits. Chunks are never blank: Discord rejects
    empty messages, so a blank run that fits with neither neighbour is
    dropped. Otherwise joining the chunks with "\\n" gives back the input
    whenever no line exceeds `limit`.
    """
    if not text.strip():
        return []
    if len(text) <= limit:
        return [text]

    chunks: List[str] = []
    current: Optional[str] = None
    for line in text.split("\n"):
        if current is not None and len(current) + 1 + len(line) <= limit:
            current = f"{current}\n{line}"
            continue

        if current is not None:
            if current.strip():
                chunks.append(current)
            current = None

        if len(line) > limit:
            pieces = (line[start:start + limit] for start in range(0, len(line), limit))
            chunks.extend(p for p in pieces if p.strip())
        else:
            current = line

    if current is not None and current.strip():
        chunks.append(current)
    return chunks


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Cap text at `limit` characters, appending `suffix` when cut."""
    if len(text) <= limit:
        return text
    return text[: max(limit - len(suffix), 0)].rstrip() + suffix


def strip_bot_mention(content: str, bot_user_id: int) -> str:
    """Remove <@id> / <@!id> mentions of the bot from message content."""
    return re.sub(rf"<@!?{bot_user_id}>", "", content).strip()


def user_mention(user_id: int) -> str:
    return f"<@{user_id}>"
