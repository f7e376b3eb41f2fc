"""Team channel naming rules."""

import re
from typing import Iterable, Optional, Tuple

TEAM_CHANNEL_RE = re.compile(r"^team-(\d{1,2})$", re.IGNORECASE)

# Sort key for names that somehow slip past the regex
_UNKNOWN_TEAM = 999


def is_team_channel(name: str) -> bool:
    return bool(TEAM_CHANNEL_RE.match(name))


def team_number(name: str) -> int:
    match = TEAM_CHANNEL_RE.match(name)
    return int(match.group(1)) if match else _UNKNOWN_TEAM


def _normalize(text: str) -> str:
    return re.sub(r"[^a-z0-9]", "", text.lower())


def find_team_role(channel_name: str, roles: Iterable[Tuple[int, str]]) -> Optional[int]:
    """Return the id of the role named like the team ("team3", "Team 3", "team-3")."""
    number = team_number(channel_name)
    targets = {_normalize(f"team{number}"), _normalize(f"team {number}"), _normalize(f"team-{number}")}
    for role_id, role_name in roles:
        if _normalize(role_name) in targets:
            return role_id
    return None
