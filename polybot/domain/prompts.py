"""Prompt assembly — fail-closed templating over transcripts and static context.

Pure Python, no framework dependencies.
"""

import re
from typing import Dict, List, Optional, Sequence

from polybot.domain.errors import TemplateError
from polybot.domain.models import ChannelTranscript
from polybot.domain.transcript import render_transcript_for_prompt

# {{ name }} with optional inner whitespace
PLACEHOLDER_RE = re.compile(r"{{\s*([a-zA-Z0-9_]+)\s*}}")

TRANSCRIPT_SEPARATOR = "\n\n---\n\n"
NO_CONTROL_TRANSCRIPT = "[No control channel transcript found]"
NO_QUESTION_TEXT = "[No extra text provided beyond mention]"


def find_placeholders(text: str) -> List[str]:
    return PLACEHOLDER_RE.findall(text)


def render_template(template: str, values: Dict[str, str]) -> str:
    """Substitute {{key}} placeholders; raise TemplateError if any remain.

    Single pass over the template; substituted values are never rescanned.
    """
    unresolved: List[str] = []

    def _replace(match):
        key = match.group(1)
        if key in values:
            return str(values[key])
        unresolved.append(key)
        return match.group(0)

    out = PLACEHOLDER_RE.sub(_replace, template)
    if unresolved:
        raise TemplateError(unresolved)
    return out


def build_status_prompt(
    template: str,
    info_doc: str,
    team_transcripts: Sequence[ChannelTranscript],
    control_transcript: Optional[ChannelTranscript],
) -> str:
    team_blocks = [render_transcript_for_prompt(t) for t in team_transcripts]
    if control_transcript is not None:
        control_block = render_transcript_for_prompt(control_transcript)
    else:
        control_block = NO_CONTROL_TRANSCRIPT
    return render_template(template, {
        "info_doc": info_doc,
        "team_transcripts": TRANSCRIPT_SEPARATOR.join(team_blocks),
        "control_transcript": control_block,
    })


def build_standby_prompt(
    template: str,
    owner_user_id: int,
    info_doc: str,
    transcript: ChannelTranscript,
    user_question: str,
) -> str:
    return render_template(template, {
        "owner_user_id": str(owner_user_id),
        "info_doc": info_doc,
        "channel_transcript": render_transcript_for_prompt(transcript),
        "user_question": user_question or NO_QUESTION_TEXT,
    })


def render_system_instructions(template: str, personality: str) -> str:
    return render_template(template, {"personality": personality})
