"""Decision-service model settings loaded from config/openai.json."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from polybot.domain.errors import ConfigError

DEFAULT_MODEL = "gpt-4.1-mini"
REASONING_EFFORTS = ("none", "minimal", "low", "medium", "high", "xhigh")


@dataclass(frozen=True)
class ModelConfig:
    model: str
    reasoning_effort: Optional[str] = None  # only for reasoning models
    max_output_tokens: Optional[int] = None


def load_model_config(
    path: Union[str, Path] = "config/openai.json",
    env_model: str = "",
) -> ModelConfig:
    """Load model settings. Raises ConfigError.

    Model precedence: `env_model` (OPENAI_MODEL) when set, then the file's
    "model", then DEFAULT_MODEL. A missing file means no extra settings.
    """
    env_model = (env_model or "").strip()
    path = Path(path)
    if not path.exists():
        return ModelConfig(model=env_model or DEFAULT_MODEL)

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Model config {path} is not valid JSON: {e}")
    if not isinstance(raw, dict):
        raise ConfigError(f"Model config {path} must be a JSON object")

    model = raw.get("model")
    if model is not None and (not isinstance(model, str) or not model.strip()):
        raise ConfigError(f'If set, "model" must be a non-empty string in {path}')

    effort = raw.get("reasoningEffort")
    if effort is not None and effort not in REASONING_EFFORTS:
        raise ConfigError(
            f'If set, "reasoningEffort" must be one of {"|".join(REASONING_EFFORTS)} in {path}'
        )

    max_tokens = raw.get("maxOutputTokens")
    if max_tokens is not None and (
        isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens <= 0
    ):
        raise ConfigError(f'If set, "maxOutputTokens" must be a positive integer in {path}')

    return ModelConfig(
        model=env_model or (model.strip() if model else DEFAULT_MODEL),
        reasoning_effort=effort,
        max_output_tokens=max_tokens,
    )
