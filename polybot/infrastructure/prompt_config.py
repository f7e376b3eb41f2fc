"""Prompt template configuration loaded from prompts/config.json."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from polybot.domain.errors import ConfigError

# JSON key -> PromptConfig field
_REQUIRED_KEYS = {
    "personality": "personality",
    "checkinTemplate": "checkin_template",
    "statusSystemInstructions": "status_system_instructions",
    "statusUserTemplate": "status_user_template",
    "standbySystemInstructions": "standby_system_instructions",
    "standbyUserTemplate": "standby_user_template",
    "standbyEscalationMessage": "standby_escalation_message",
}


@dataclass(frozen=True)
class PromptConfig:
    personality: str
    checkin_template: str
    status_system_instructions: str
    status_user_template: str
    standby_system_instructions: str
    standby_user_template: str
    standby_escalation_message: str


def load_prompt_config(path: Union[str, Path] = "prompts/config.json") -> PromptConfig:
    """Read and validate the prompt config. Raises ConfigError."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"Prompt config not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Prompt config {path} is not valid JSON: {e}")

    if not isinstance(raw, dict):
        raise ConfigError(f"Prompt config {path} must be a JSON object")

    values = {}
    for key, field_name in _REQUIRED_KEYS.items():
        value = raw.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f'Prompt config is missing a non-empty "{key}" in {path}')
        values[field_name] = value
    return PromptConfig(**values)
