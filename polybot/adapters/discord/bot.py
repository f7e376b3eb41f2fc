"""Discord adapter — /poly slash commands and standby mentions, delegated to PolyBrain."""

import sys
from typing import Awaitable, Callable, List, Optional

import discord
from discord import app_commands

from polybot.adapters.discord.store import DiscordMessageStore, to_channel_ref
from polybot.domain.agent import PolyBrain
from polybot.domain.text import split_message
from polybot.infrastructure.knowledge import KnowledgeDoc
from polybot.infrastructure.prompt_config import PromptConfig
from polybot.ports.inbound import IncomingMessage
from polybot.ports.outbound import LLMPort

PERMISSION_ERROR = "Poly is missing Discord permissions for that action."
GENERIC_ERROR = "Something failed while running that command."
EMPTY_OUTPUT = "Done, nothing to report."

MAX_TEAMS = 12
TARGET_CHOICES = [app_commands.Choice(name="all", value="all")] + [
    app_commands.Choice(name=f"team-{i}", value=f"team-{i}") for i in range(1, MAX_TEAMS + 1)
]


def _log(msg: str):
    print(msg, file=sys.stderr)


class PolyBot(discord.Client):
    """Thin Discord client: converts events and interactions for PolyBrain."""

    def __init__(
        self,
        executor: LLMPort,
        guild_id: int,
        control_channel_id: int,
        owner_user_id: int,
        prompt_loader: Callable[[], PromptConfig],
        knowledge_loader: Callable[[], KnowledgeDoc],
        model: Optional[str] = None,
        **discord_kwargs,
    ):
        intents = discord.Intents.default()
        intents.message_content = True
        super().__init__(intents=intents, **discord_kwargs)
        self._guild = discord.Object(id=guild_id)
        self.store = DiscordMessageStore(self, guild_id, control_channel_id)
        self.brain = PolyBrain(
            store=self.store,
            executor=executor,
            owner_user_id=owner_user_id,
            control_channel_id=control_channel_id,
            prompt_loader=prompt_loader,
            knowledge_loader=knowledge_loader,
            model=model,
        )
        self.tree = app_commands.CommandTree(self)
        self.tree.add_command(self._build_poly_group(), guild=self._guild)

    def _build_poly_group(self) -> app_commands.Group:
        group = app_commands.Group(name="poly", description="Control Poly the Parrot")

        @group.command(name="checkin", description="Ask all teams for a check-in")
        async def checkin(interaction: discord.Interaction):
            await self._run_command(interaction, self._checkin)

        @group.command(name="status", description="Get a status report across all teams")
        async def status(interaction: discord.Interaction):
            await self._run_command(interaction, self.brain.run_status)

        @group.command(name="send", description="Send a message to one team channel or all team channels")
        @app_commands.describe(
            message="Message to send to the selected team channel(s)",
            target="Send to one team or all teams",
        )
        @app_commands.choices(target=TARGET_CHOICES)
        async def send(
            interaction: discord.Interaction,
            message: str,
            target: Optional[app_commands.Choice[str]] = None,
        ):
            selected = target.value if target else "all"

            async def _send() -> List[str]:
                return split_message(await self.brain.run_send(message, selected))

            await self._run_command(interaction, _send)

        return group

    async def _checkin(self) -> List[str]:
        return split_message(await self.brain.run_checkin())

    async def _run_command(
        self,
        interaction: discord.Interaction,
        handler: Callable[[], Awaitable[List[str]]],
    ):
        """Authorize, defer, run, and post the handler's chunks as follow-ups."""
        refusal = self.brain.check_authorized(interaction.user.id, interaction.channel_id)
        if refusal:
            await interaction.response.send_message(refusal, ephemeral=True)
            return

        try:
            await interaction.response.defer()
            chunks = [c for c in await handler() if c.strip()]
            # A deferred interaction needs at least one follow-up
            for chunk in chunks or [EMPTY_OUTPUT]:
                await interaction.followup.send(chunk)
        except Exception as e:
            _log(f"[Poly] /poly {interaction.command.name if interaction.command else '?'} failed: {e!r}")
            message = PERMISSION_ERROR if isinstance(e, discord.Forbidden) else GENERIC_ERROR
            if interaction.response.is_done():
                await interaction.followup.send(message, ephemeral=True)
            else:
                await interaction.response.send_message(message, ephemeral=True)

    async def setup_hook(self):
        try:
            synced = await self.tree.sync(guild=self._guild)
            _log(f"[Poly] slash commands synced ({len(synced)})")
        except discord.HTTPException as e:
            _log(f"[Poly] failed to sync slash commands: {e}")

    async def on_ready(self):
        _log(f"[Poly] online as {self.user}")
        self.brain.wire(self.user.id)
        for warning in self.brain.preflight():
            _log(f"[Poly] warning: {warning}")

    def _to_incoming(self, message: discord.Message) -> IncomingMessage:
        """Convert a Discord message to platform-agnostic IncomingMessage."""
        return IncomingMessage(
            message_id=message.id,
            content=message.content,
            channel=to_channel_ref(message.channel),
            author_id=message.author.id,
            is_bot=message.author.bot,
            mentions_bot=any(user.id == self.user.id for user in message.mentions),
            jump_url=message.jump_url,
        )

    async def on_message(self, message: discord.Message):
        # Guard: self.user can be None before on_ready fires
        if not self.user or message.author == self.user:
            return
        if message.guild is None or not isinstance(message.channel, discord.TextChannel):
            return

        try:
            await self.brain.handle_mention(self._to_incoming(message))
        except Exception as e:
            _log(f"[Poly] standby handler failed in #{message.channel.name}: {e!r}")
