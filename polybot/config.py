"""Configuration and shared state."""

__version__ = "0.1.0"

import os
import sys
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

from polybot.domain.errors import ConfigError

load_dotenv()

_stderr_print = lambda *a, **kw: print(*a, **kw, file=sys.stderr)

SUPPORTED_AI_PROVIDERS = ("openai", "claude", "codex")
AI_PROVIDER = os.getenv("AI_PROVIDER", "openai").strip().lower()
if AI_PROVIDER not in SUPPORTED_AI_PROVIDERS:
    _stderr_print(f"Unsupported AI_PROVIDER={AI_PROVIDER!r}, falling back to 'openai'")
    AI_PROVIDER = "openai"


def _env_int(name: str) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError:
        _stderr_print(f"{name}={raw!r} is not a numeric Discord ID, ignoring")
        return 0


CONFIG = {
    "ai_provider": AI_PROVIDER,
    # Discord
    "discord_bot_token": os.getenv("DISCORD_BOT_TOKEN", ""),
    "discord_guild_id": _env_int("DISCORD_GUILD_ID"),
    "control_channel_id": _env_int("POLY_CONTROL_CHANNEL_ID"),
    "owner_user_id": _env_int("OWNER_USER_ID"),
    # Decision service
    "openai_api_key": os.getenv("OPENAI_API_KEY", ""),
    # Empty means "use config/openai.json"
    "openai_model": os.getenv("OPENAI_MODEL", "").strip(),
    # File-based config, relative to the working directory
    "prompts_file": os.getenv("POLY_PROMPTS_FILE", "prompts/config.json"),
    "model_config_file": os.getenv("POLY_MODEL_CONFIG_FILE", "config/openai.json"),
    "knowledge_file": os.getenv("POLY_KNOWLEDGE_FILE", "knowledge/hackathon-info.md"),
}


# ── Typed config ────────────────────────────────────────────


@dataclass
class DiscordConfig:
    token: str = ""
    guild_id: int = 0
    control_channel_id: int = 0
    owner_user_id: int = 0


@dataclass
class FilesConfig:
    prompts_file: str = "prompts/config.json"
    model_config_file: str = "config/openai.json"
    knowledge_file: str = "knowledge/hackathon-info.md"


@dataclass
class AppConfig:
    """Typed view of CONFIG."""

    ai_provider: str = "openai"
    openai_api_key: str = ""
    openai_model: str = ""
    discord: DiscordConfig = field(default_factory=DiscordConfig)
    files: FilesConfig = field(default_factory=FilesConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create AppConfig from environment variables."""
        return cls(
            ai_provider=AI_PROVIDER,
            openai_api_key=CONFIG["openai_api_key"],
            openai_model=CONFIG["openai_model"],
            discord=DiscordConfig(
                token=CONFIG["discord_bot_token"],
                guild_id=CONFIG["discord_guild_id"],
                control_channel_id=CONFIG["control_channel_id"],
                owner_user_id=CONFIG["owner_user_id"],
            ),
            files=FilesConfig(
                prompts_file=CONFIG["prompts_file"],
                model_config_file=CONFIG["model_config_file"],
                knowledge_file=CONFIG["knowledge_file"],
            ),
        )

    def missing(self) -> List[str]:
        """Names of required environment variables that are unset."""
        required = {
            "DISCORD_BOT_TOKEN": self.discord.token,
            "DISCORD_GUILD_ID": self.discord.guild_id,
            "POLY_CONTROL_CHANNEL_ID": self.discord.control_channel_id,
            "OWNER_USER_ID": self.discord.owner_user_id,
        }
        if self.ai_provider == "openai":
            required["OPENAI_API_KEY"] = self.openai_api_key
        return [name for name, value in required.items() if not value]

    def require(self) -> "AppConfig":
        missing = self.missing()
        if missing:
            raise ConfigError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )
        return self
