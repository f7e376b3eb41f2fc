"""Decision-service executors — OpenAI Responses API, Claude CLI, Codex CLI."""

import asyncio
import os
import tempfile
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from openai import AsyncOpenAI

from polybot.domain.errors import DecisionServiceError
from polybot.infrastructure.model_config import DEFAULT_MODEL, ModelConfig


async def _run_subprocess(cmd_args, timeout: float):
    """Run a subprocess command and return process/stdout/stderr.

    The child is killed and reaped before TimeoutError propagates.
    """
    proc = await asyncio.create_subprocess_exec(
        *cmd_args,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        if proc.returncode is None:
            proc.kill()
        await proc.wait()
        raise
    return proc, stdout, stderr


class OpenAIExecutor:
    """Single-shot completions through the OpenAI Responses API."""

    def __init__(self, model_config: ModelConfig, api_key: Optional[str] = None, client=None):
        self.model_config = model_config
        self._client = client or AsyncOpenAI(api_key=api_key)

    async def execute(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        session_id: Optional[str] = None,
        model: Optional[str] = None,
    ) -> str:
        """Execute one Responses API call and return its output text."""
        _ = session_id  # every call is standalone
        kwargs = {
            "model": model or self.model_config.model,
            "input": message,
        }
        if system_prompt:
            kwargs["instructions"] = system_prompt
        if self.model_config.reasoning_effort:
            kwargs["reasoning"] = {"effort": self.model_config.reasoning_effort}
        if self.model_config.max_output_tokens:
            kwargs["max_output_tokens"] = self.model_config.max_output_tokens

        print(f"[{datetime.now().isoformat()}] Executing with OpenAI ({kwargs['model']})")
        response = await self._client.responses.create(**kwargs)

        text = (getattr(response, "output_text", None) or "").strip()
        if not text:
            raise DecisionServiceError("OpenAI did not return output text.")
        print(f"[{datetime.now().isoformat()}] Completed")
        return text


class ClaudeExecutor:
    """Executes Claude CLI commands."""

    def __init__(self, timeout: float = 120.0):
        self.timeout = timeout

    async def execute(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        session_id: Optional[str] = None,
        model: Optional[str] = None,
    ) -> str:
        """Execute Claude CLI command."""
        print(f"[{datetime.now().isoformat()}] Executing with Claude CLI")

        args = [
            "claude",
            "--print",
            "--session-id",
            session_id or str(uuid.uuid4()),
            "--output-format",
            "text",
        ]

        if model:
            args.extend(["--model", model])

        if system_prompt:
            args.extend(["--system-prompt", system_prompt])

        args.append(message)

        try:
            proc, stdout, stderr = await _run_subprocess(args, self.timeout)
        except asyncio.TimeoutError:
            raise DecisionServiceError(f"Timeout ({self.timeout:.0f}s)")

        if proc.returncode != 0:
            raise DecisionServiceError(f"Exit code {proc.returncode}: {stderr.decode()}")

        response = stdout.decode("utf-8").strip()
        if not response:
            raise DecisionServiceError("Claude returned empty response")
        print(f"[{datetime.now().isoformat()}] Completed")
        return response


class CodexExecutor:
    """Executes Codex CLI commands."""

    def __init__(self, timeout: float = 180.0):
        self.timeout = timeout

    @staticmethod
    def _compose_prompt(message: str, system_prompt: Optional[str]) -> str:
        if not system_prompt:
            return message
        # `codex exec` has no --system-prompt flag
        return (
            "System instructions:\n"
            f"{system_prompt}\n\n"
            "User message:\n"
            f"{message}"
        )

    async def execute(
        self,
        message: str,
        system_prompt: Optional[str] = None,
        session_id: Optional[str] = None,
        model: Optional[str] = None,
    ) -> str:
        """Execute Codex CLI command via `codex exec`."""
        _ = session_id  # codex exec is stateless

        fd, output_path = tempfile.mkstemp(prefix="codex-last-", suffix=".txt")
        os.close(fd)
        out_file = Path(output_path)

        args = [
            "codex",
            "exec",
            "--color",
            "never",
            "--output-last-message",
            output_path,
        ]

        if model:
            args.extend(["--model", model])

        args.append(self._compose_prompt(message, system_prompt))
        print(f"[{datetime.now().isoformat()}] Executing with Codex CLI")

        try:
            proc, stdout, stderr = await _run_subprocess(args, self.timeout)
            if proc.returncode != 0:
                err_text = stderr.decode("utf-8").strip() or stdout.decode("utf-8").strip()
                raise DecisionServiceError(f"Exit code {proc.returncode}: {err_text}")

            response = ""
            if out_file.exists():
                response = out_file.read_text(encoding="utf-8").strip()
            if not response:
                response = stdout.decode("utf-8").strip()
            if not response:
                raise DecisionServiceError("Codex returned empty response")

            print(f"[{datetime.now().isoformat()}] Completed")
            return response
        except asyncio.TimeoutError:
            raise DecisionServiceError(f"Timeout ({self.timeout:.0f}s)")
        finally:
            out_file.unlink(missing_ok=True)


def create_executor(
    provider: str,
    model_config: Optional[ModelConfig] = None,
    api_key: Optional[str] = None,
):
    """Create an executor for the selected provider."""
    selected = (provider or "").strip().lower()
    if selected == "openai":
        return OpenAIExecutor(model_config or ModelConfig(model=DEFAULT_MODEL), api_key=api_key)
    if selected == "claude":
        return ClaudeExecutor()
    if selected == "codex":
        return CodexExecutor()
    raise ValueError(f"Unsupported provider: {selected}")
