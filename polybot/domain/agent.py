"""PolyBrain — check-in, status, send and standby workflows, no framework dependencies.

Talks to the outside world only through MessageStorePort and LLMPort, so
every workflow is testable with mock ports.
"""

import sys
from typing import Callable, List, Optional

from polybot.domain.checkin import (
    CheckinCounter,
    format_checkin_marker,
    fun_fact_for,
    recover_last_checkin,
)
from polybot.domain.decision_parser import parse_decision
from polybot.domain.errors import ConfigError, DecisionServiceError
from polybot.domain.escalation import EscalationOrchestrator, deliver_batch
from polybot.domain.models import Decision, DeliveryReport, EscalateDecision
from polybot.domain.prompts import (
    build_standby_prompt,
    build_status_prompt,
    render_system_instructions,
    render_template,
)
from polybot.domain.teams import is_team_channel
from polybot.domain.text import split_message, strip_bot_mention, user_mention
from polybot.domain.transcript import fetch_transcript
from polybot.infrastructure.knowledge import KnowledgeDoc
from polybot.infrastructure.prompt_config import PromptConfig
from polybot.ports.inbound import IncomingMessage
from polybot.ports.outbound import LLMPort, MessageStorePort

NO_TEAM_CHANNELS = "No channels matching `team-*` were found."
NOT_OWNER = "Only the bot owner can run Poly control commands."
WRONG_CHANNEL = "Run this command in the Poly control channel only."


def _log(msg: str):
    print(msg, file=sys.stderr)


def _failed_line(report: DeliveryReport) -> str:
    return f"Failed: {', '.join(report.failed)}" if report.failed else "Failed: none"


def format_checkin_summary(number: int, report: DeliveryReport) -> str:
    # Posted in the control channel; both forms are picked up by counter recovery.
    return "\n".join([
        f"Check-in #{number} sent. {format_checkin_marker(number)}",
        f"Delivered: {len(report.delivered)}/{report.total}",
        _failed_line(report),
    ])


def format_send_summary(report: DeliveryReport) -> str:
    delivered = ", ".join(report.delivered) if report.delivered else "none"
    return "\n".join([
        f"Sent message to {len(report.delivered)}/{report.total} channels.",
        f"Delivered: {delivered}",
        _failed_line(report),
    ])


class PolyBrain:
    """Pure workflow logic for the hackathon assistant.

    Handles:
    - /poly checkin: numbered broadcast to every team channel
    - /poly status: transcript-driven status report from the decision service
    - /poly send: organizer broadcast to one or all teams
    - standby: answer-or-escalate when mentioned in a team channel
    """

    def __init__(
        self,
        store: MessageStorePort,
        executor: LLMPort,
        owner_user_id: int,
        control_channel_id: int,
        prompt_loader: Callable[[], PromptConfig],
        knowledge_loader: Callable[[], KnowledgeDoc],
        model: Optional[str] = None,
        counter: Optional[CheckinCounter] = None,
    ):
        self._store = store
        self.executor = executor
        self.owner_user_id = owner_user_id
        self.control_channel_id = control_channel_id
        self._load_prompts = prompt_loader
        self._load_knowledge = knowledge_loader
        self._model = model
        self.counter = counter or CheckinCounter()
        self._orchestrator = EscalationOrchestrator(store, owner_user_id)
        # Set by the platform adapter once logged in
        self.bot_user_id: int = 0

    def wire(self, bot_user_id: int):
        """Record the bot's own user id. Called by the adapter's on_ready."""
        self.bot_user_id = bot_user_id

    def preflight(self) -> List[str]:
        """Problems with the file-based config, reported at startup."""
        warnings = []
        try:
            self._load_prompts()
        except ConfigError as e:
            warnings.append(f"Prompt config error: {e}")
        info = self._load_knowledge()
        if not info.ready:
            warnings.append(info.reason)
        return warnings

    def check_authorized(self, user_id: int, channel_id: int) -> Optional[str]:
        """Return a refusal message, or None when the caller may run commands."""
        if user_id != self.owner_user_id:
            return NOT_OWNER
        if channel_id != self.control_channel_id:
            return WRONG_CHANNEL
        return None

    async def _ask(self, prompt: str, system_prompt: str) -> str:
        response = await self.executor.execute(prompt, system_prompt=system_prompt, model=self._model)
        text = (response or "").strip()
        if not text:
            raise DecisionServiceError("Decision service did not return output text.")
        return text

    # -- /poly checkin --

    @staticmethod
    def render_checkin(template: str, number: int) -> str:
        marker = format_checkin_marker(number)
        body = render_template(template, {
            "checkin_number": str(number),
            "fun_fact": fun_fact_for(number),
            "checkin_marker": marker,
        })
        if marker not in body:
            body = f"{body}\n{marker}"
        return body

    async def run_checkin(self) -> str:
        prompts = self._load_prompts()
        control = await self._store.get_control_channel()
        if control is None:
            raise ConfigError("Poly control channel is missing or not a text channel.")

        teams = await self._store.list_team_channels()
        if not teams:
            return NO_TEAM_CHANNELS

        # A broken template must not consume a check-in number
        self.render_checkin(prompts.checkin_template, 1)

        async def _recover() -> int:
            return await recover_last_checkin(self._store, control.id, self.bot_user_id)

        number = await self.counter.next(_recover)
        body = self.render_checkin(prompts.checkin_template, number)
        report = await deliver_batch(self._store, teams, body)
        _log(f"[Poly] check-in #{number}: {len(report.delivered)}/{report.total} delivered")
        return format_checkin_summary(number, report)

    # -- /poly status --

    async def run_status(self) -> List[str]:
        info = self._load_knowledge()
        if not info.ready:
            return [info.reason]

        prompts = self._load_prompts()
        teams = await self._store.list_team_channels()
        if not teams:
            return [NO_TEAM_CHANNELS]

        team_transcripts = []
        for channel in teams:
            team_transcripts.append(await fetch_transcript(self._store, channel, self.bot_user_id))

        control = await self._store.get_control_channel()
        control_transcript = None
        if control is not None:
            control_transcript = await fetch_transcript(self._store, control, self.bot_user_id)

        prompt = build_status_prompt(
            prompts.status_user_template, info.text, team_transcripts, control_transcript,
        )
        system_prompt = render_system_instructions(
            prompts.status_system_instructions, prompts.personality,
        )
        report = await self._ask(prompt, system_prompt)
        return split_message(report)

    # -- /poly send --

    async def run_send(self, message: str, target: str = "all") -> str:
        message = message.strip()
        if not message:
            return "Message is empty."

        teams = await self._store.list_team_channels()
        if not teams:
            return NO_TEAM_CHANNELS

        target = (target or "all").strip().lower()
        selected = teams if target == "all" else [c for c in teams if c.name.lower() == target]
        if not selected:
            return f"Target channel `{target}` was not found."

        report = await deliver_batch(self._store, selected, message)
        _log(f"[Poly] send to {target}: {len(report.delivered)}/{report.total} delivered")
        return format_send_summary(report)

    # -- standby --

    def should_handle(self, msg: IncomingMessage) -> bool:
        if not self.bot_user_id or msg.is_bot or not msg.mentions_bot:
            return False
        return is_team_channel(msg.channel.name)

    async def handle_mention(self, msg: IncomingMessage) -> Optional[Decision]:
        """Answer or escalate a mention in a team channel.

        Returns the decision acted on, or None when the message was ignored
        or the knowledge doc is not ready.
        """
        if not self.should_handle(msg):
            return None

        owner = user_mention(self.owner_user_id)
        info = self._load_knowledge()
        if not info.ready:
            await self._store.send(
                msg.channel.id,
                f"I need organizer context before I can answer reliably. {owner}",
            )
            control = await self._store.get_control_channel()
            if control is not None:
                await self._store.send(control.id, f"{owner} {info.reason}")
            return None

        prompts = self._load_prompts()
        question = strip_bot_mention(msg.content, self.bot_user_id)
        transcript = await fetch_transcript(self._store, msg.channel, self.bot_user_id)

        system_prompt = render_system_instructions(
            prompts.standby_system_instructions, prompts.personality,
        )
        prompt = build_standby_prompt(
            prompts.standby_user_template, self.owner_user_id, info.text, transcript, question,
        )
        deflection = render_template(
            prompts.standby_escalation_message, {"owner_user_id": str(self.owner_user_id)},
        )

        _log(f"[Poly] standby in #{msg.channel.name}: {question[:80]}")
        decision = parse_decision(await self._ask(prompt, system_prompt))

        control = None
        if isinstance(decision, EscalateDecision):
            control = await self._store.get_control_channel()
        await self._orchestrator.dispatch(
            decision,
            origin=msg.channel,
            control=control,
            question=question,
            jump_url=msg.jump_url,
            deflection=deflection,
        )
        return decision
