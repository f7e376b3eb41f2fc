"""File-backed configuration: prompts, model settings, knowledge doc."""

from polybot.infrastructure.knowledge import KnowledgeDoc, load_knowledge_doc
from polybot.infrastructure.model_config import ModelConfig, load_model_config
from polybot.infrastructure.prompt_config import PromptConfig, load_prompt_config

__all__ = [
    "KnowledgeDoc",
    "load_knowledge_doc",
    "ModelConfig",
    "load_model_config",
    "PromptConfig",
    "load_prompt_config",
]
