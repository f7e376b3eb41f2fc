"""Hackathon info document — the static context every prompt carries."""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

PLACEHOLDER_MARK = "[[REPLACE_WITH_HACKATHON_INFO]]"


@dataclass(frozen=True)
class KnowledgeDoc:
    ready: bool
    text: str
    reason: str = ""


def load_knowledge_doc(path: Union[str, Path] = "knowledge/hackathon-info.md") -> KnowledgeDoc:
    """Read the info doc; not ready when missing, empty, or still the template."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8").strip()
    except OSError:
        return KnowledgeDoc(
            ready=False,
            text="",
            reason=f"Missing required file {path}. Create it with your hackathon details.",
        )

    if not text or PLACEHOLDER_MARK in text:
        return KnowledgeDoc(
            ready=False,
            text=text,
            reason=f"Fill in {path} with real hackathon details first.",
        )
    return KnowledgeDoc(ready=True, text=text)
