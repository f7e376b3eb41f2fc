"""Shared mock ports and builders for Poly tests."""

from datetime import datetime, timedelta, timezone

import pytest

from polybot.ports.inbound import ChannelMessage, ChannelRef

BOT_USER_ID = 999
OWNER_USER_ID = 42
CONTROL_CHANNEL_ID = 500
BASE_TIME = datetime(2026, 3, 14, 9, 0, tzinfo=timezone.utc)


def make_message(msg_id, author_id, minute, content, author_name=None) -> ChannelMessage:
    return ChannelMessage(
        id=msg_id,
        author_id=author_id,
        author_name=author_name or ("Poly" if author_id == BOT_USER_ID else f"user{author_id}"),
        created_at=BASE_TIME + timedelta(minutes=minute),
        content=content,
    )


def make_team_channel(number, role=True) -> ChannelRef:
    return ChannelRef(
        id=1000 + number,
        name=f"team-{number}",
        mention=f"<#{1000 + number}>",
        role_id=2000 + number if role else None,
    )


def make_control_channel() -> ChannelRef:
    return ChannelRef(id=CONTROL_CHANNEL_ID, name="poly-control", mention=f"<#{CONTROL_CHANNEL_ID}>")


class MockStore:
    """Mock MessageStorePort implementation."""

    def __init__(self, team_channels=None, control=None, history=None, fail_on=()):
        self.team_channels = list(team_channels or [])
        self.control = control
        self.history = dict(history or {})
        self.fail_on = set(fail_on)
        self.sent = []
        self.fetch_calls = []

    async def fetch_all_messages(self, channel_id):
        self.fetch_calls.append(channel_id)
        return list(self.history.get(channel_id, []))

    async def send(self, channel_id, text, role_id=None):
        if channel_id in self.fail_on:
            raise RuntimeError("Missing Permissions")
        self.sent.append((channel_id, text, role_id))

    async def list_team_channels(self):
        return list(self.team_channels)

    async def get_control_channel(self):
        return self.control

    def texts_for(self, channel_id):
        return [text for ch, text, _ in self.sent if ch == channel_id]


class MockLLM:
    """Mock LLMPort implementation."""

    def __init__(self, response="mock response"):
        self.response = response
        self.calls = []

    async def execute(self, message, system_prompt=None, session_id=None, model=None):
        self.calls.append({
            "message": message,
            "system_prompt": system_prompt,
            "model": model,
        })
        return self.response


@pytest.fixture
def control_channel():
    return make_control_channel()
