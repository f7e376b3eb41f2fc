"""Launcher for the Poly Discord bot."""

import asyncio
import sys
from functools import partial

from polybot.adapters.discord.bot import PolyBot
from polybot.adapters.llm.executor import create_executor
from polybot.config import AppConfig
from polybot.domain.errors import ConfigError
from polybot.infrastructure.knowledge import load_knowledge_doc
from polybot.infrastructure.model_config import load_model_config
from polybot.infrastructure.prompt_config import load_prompt_config


def _log(msg: str):
    print(msg, file=sys.stderr)


def build_bot(config: AppConfig) -> PolyBot:
    """Wire executor, file loaders and Discord client from config."""
    model_config = load_model_config(config.files.model_config_file, env_model=config.openai_model)
    executor = create_executor(
        config.ai_provider, model_config=model_config, api_key=config.openai_api_key,
    )
    _log(f"Decision service: {config.ai_provider} ({model_config.model})")
    return PolyBot(
        executor=executor,
        guild_id=config.discord.guild_id,
        control_channel_id=config.discord.control_channel_id,
        owner_user_id=config.discord.owner_user_id,
        prompt_loader=partial(load_prompt_config, config.files.prompts_file),
        knowledge_loader=partial(load_knowledge_doc, config.files.knowledge_file),
    )


async def launch(config: AppConfig):
    bot = build_bot(config)
    async with bot:
        await bot.start(config.discord.token)


def main():
    try:
        config = AppConfig.from_env().require()
    except ConfigError as e:
        _log(str(e))
        sys.exit(1)

    try:
        asyncio.run(launch(config))
    except ConfigError as e:
        _log(f"Configuration error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
