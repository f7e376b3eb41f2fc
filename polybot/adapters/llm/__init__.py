"""Decision-service adapters — implementations of LLMPort."""

from polybot.adapters.llm.executor import (
    ClaudeExecutor,
    CodexExecutor,
    OpenAIExecutor,
    create_executor,
)

__all__ = [
    "ClaudeExecutor",
    "CodexExecutor",
    "OpenAIExecutor",
    "create_executor",
]
