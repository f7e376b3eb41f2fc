"""Decision parsing — free-text model output to a typed action.

Grammar (keys case-insensitive, in any order):

    ACTION: REPLY | ESCALATE
    MESSAGE: <text to end>      (REPLY)
    REASON: <single line>       (ESCALATE)
    DRAFT: <text to end>        (ESCALATE)

`parse_decision` is total: anything it cannot read, including text carrying
both actions, becomes an escalation.
"""

import re

from polybot.domain.models import Decision, EscalateDecision, ReplyDecision

ACTION_RE = re.compile(r"ACTION:\s*(REPLY|ESCALATE)", re.IGNORECASE)
MESSAGE_RE = re.compile(r"MESSAGE:\s*(.*)", re.IGNORECASE | re.DOTALL)
REASON_RE = re.compile(r"REASON:[ \t]*([^\n]+)", re.IGNORECASE)
DRAFT_RE = re.compile(r"DRAFT:\s*(.*)", re.IGNORECASE | re.DOTALL)

DEFAULT_REASON = "Uncertain response."
PARSE_FAILURE_REASON = "Could not parse assistant decision."
MAX_FALLBACK_DRAFT = 500


def parse_decision(raw) -> Decision:
    text = raw.strip() if isinstance(raw, str) else ""

    # Conflicting ACTION lines are ambiguous and fall through to escalation
    actions = {a.upper() for a in ACTION_RE.findall(text)}
    action = actions.pop() if len(actions) == 1 else None

    if action == "REPLY":
        message_match = MESSAGE_RE.search(text)
        message = message_match.group(1).strip() if message_match else ""
        if message:
            return ReplyDecision(message=message)

    elif action == "ESCALATE":
        reason_match = REASON_RE.search(text)
        reason = reason_match.group(1).strip() if reason_match else ""
        draft_match = DRAFT_RE.search(text)
        draft = draft_match.group(1).strip() if draft_match else ""
        return EscalateDecision(reason=reason or DEFAULT_REASON, draft=draft)

    return EscalateDecision(reason=PARSE_FAILURE_REASON, draft=text[:MAX_FALLBACK_DRAFT])
