"""Tests for domain/escalation.py — reply/escalate side effects and batch delivery."""

import pytest

from conftest import OWNER_USER_ID, MockStore, make_control_channel, make_team_channel
from polybot.domain.escalation import (
    MAX_REASON_LENGTH,
    NO_DRAFT,
    NO_QUESTION,
    EscalationOrchestrator,
    deliver_batch,
    format_escalation_notice,
    send_chunked,
)
from polybot.domain.models import EscalateDecision, ReplyDecision

JUMP = "https://discord.com/channels/1/1003/77"


class _FailOnSecondSend(MockStore):
    """Accepts the first message to one channel, then refuses the rest."""

    def __init__(self, fail_channel):
        super().__init__()
        self.fail_channel = fail_channel

    async def send(self, channel_id, text, role_id=None):
        if channel_id == self.fail_channel and self.texts_for(channel_id):
            raise RuntimeError("Service Unavailable")
        await super().send(channel_id, text, role_id=role_id)


class TestDeliverBatch:
    @pytest.mark.asyncio
    async def test_one_failure_does_not_abort_siblings(self):
        teams = [make_team_channel(1), make_team_channel(2), make_team_channel(3)]
        store = MockStore(team_channels=teams, fail_on={teams[1].id})
        report = await deliver_batch(store, teams, "hello")
        assert report.delivered == ["team-1", "team-3"]
        assert report.failed == ["team-2"]
        assert report.total == 3
        assert report.all_delivered is False

    @pytest.mark.asyncio
    async def test_partition_covers_targets_exactly(self):
        teams = [make_team_channel(n) for n in range(1, 7)]
        store = MockStore(fail_on={teams[0].id, teams[4].id})
        report = await deliver_batch(store, teams, "hi")
        names = {t.name for t in teams}
        assert set(report.delivered) | set(report.failed) == names
        assert not set(report.delivered) & set(report.failed)

    @pytest.mark.asyncio
    async def test_sends_in_channel_order_with_role(self):
        teams = [make_team_channel(2), make_team_channel(1, role=False)]
        store = MockStore()
        await deliver_batch(store, teams, "ping")
        assert store.sent == [(1002, "ping", 2002), (1001, "ping", None)]

    @pytest.mark.asyncio
    async def test_later_chunk_failure_marks_channel_failed(self, capsys):
        teams = [make_team_channel(1), make_team_channel(2)]
        store = _FailOnSecondSend(fail_channel=teams[0].id)
        body = "a" * 1000 + "\n" + "b" * 1000

        report = await deliver_batch(store, teams, body)

        assert report.failed == ["team-1"]
        assert report.delivered == ["team-2"]
        # the first part did land before the failure
        assert store.texts_for(teams[0].id) == ["a" * 1000]
        assert store.texts_for(teams[1].id) == ["a" * 1000, "b" * 1000]
        err = capsys.readouterr().err
        assert "#team-1 partial: chunk 2/2 failed after 1 delivered" in err

    @pytest.mark.asyncio
    async def test_first_chunk_failure_is_plain_failure(self, capsys):
        teams = [make_team_channel(1)]
        await deliver_batch(MockStore(fail_on={teams[0].id}), teams, "hi")
        err = capsys.readouterr().err
        assert "send to #team-1 failed" in err
        assert "partial" not in err

    @pytest.mark.asyncio
    async def test_empty_targets(self):
        report = await deliver_batch(MockStore(), [], "x")
        assert report.delivered == [] and report.failed == []


class TestSendChunked:
    @pytest.mark.asyncio
    async def test_role_only_on_first_chunk(self):
        store = MockStore()
        text = "\n".join(["a" * 1000, "b" * 1000, "c" * 1000])
        await send_chunked(store, 1, text, role_id=5)
        assert [role for _, _, role in store.sent] == [5, None, None]
        assert "\n".join(store.texts_for(1)) == text


class TestNotice:
    def test_format(self):
        notice = format_escalation_notice(
            OWNER_USER_ID, EscalateDecision("unsure", "maybe 5pm"), make_team_channel(3), "when?", JUMP,
        )
        assert notice.split("\n") == [
            f"<@{OWNER_USER_ID}> escalation from <#1003>",
            "Reason: unsure",
            "Question: when?",
            "Draft reply: maybe 5pm",
            f"Jump link: {JUMP}",
        ]

    def test_placeholders_and_reason_cap(self):
        notice = format_escalation_notice(
            OWNER_USER_ID, EscalateDecision("r" * 500, ""), make_team_channel(3), "", JUMP,
        )
        reason_line = notice.split("\n")[1]
        reason = reason_line[len("Reason: "):]
        assert len(reason) <= MAX_REASON_LENGTH
        assert reason.endswith("...")
        assert f"Question: {NO_QUESTION}" in notice
        assert f"Draft reply: {NO_DRAFT}" in notice


class TestDispatch:
    @pytest.mark.asyncio
    async def test_reply_posts_verbatim_only(self):
        store = MockStore()
        origin = make_team_channel(1)
        orch = EscalationOrchestrator(store, OWNER_USER_ID)
        await orch.dispatch(ReplyDecision("Lunch is at noon."), origin, make_control_channel(), "q", JUMP, "defl")
        assert store.sent == [(origin.id, "Lunch is at noon.", None)]

    @pytest.mark.asyncio
    async def test_escalate_deflects_and_notifies(self):
        store = MockStore()
        origin, control = make_team_channel(1), make_control_channel()
        orch = EscalationOrchestrator(store, OWNER_USER_ID)
        await orch.dispatch(EscalateDecision("unsure", "d"), origin, control, "q?", JUMP, "Asking <@42>!")
        assert store.texts_for(origin.id) == ["Asking <@42>!"]
        notices = store.texts_for(control.id)
        assert len(notices) == 1
        assert notices[0].startswith(f"<@{OWNER_USER_ID}> escalation from <#1001>")
        assert JUMP in notices[0]

    @pytest.mark.asyncio
    async def test_escalate_without_control_channel_is_degraded_not_failed(self):
        store = MockStore()
        origin = make_team_channel(1)
        orch = EscalationOrchestrator(store, OWNER_USER_ID)
        await orch.dispatch(EscalateDecision(), origin, None, "q", JUMP, "deflect")
        assert store.sent == [(origin.id, "deflect", None)]
