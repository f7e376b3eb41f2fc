"""Tests for domain/prompts.py — fail-closed templating and prompt assembly."""

import pytest

from conftest import BOT_USER_ID, make_message
from polybot.domain.errors import ConfigError, TemplateError
from polybot.domain.prompts import (
    NO_CONTROL_TRANSCRIPT,
    NO_QUESTION_TEXT,
    TRANSCRIPT_SEPARATOR,
    build_standby_prompt,
    build_status_prompt,
    find_placeholders,
    render_system_instructions,
    render_template,
)
from polybot.domain.transcript import build_transcript


class TestRenderTemplate:
    def test_replaces_all_occurrences(self):
        out = render_template("{{a}} and {{a}} and {{ b }}", {"a": "x", "b": "y"})
        assert out == "x and x and y"

    def test_whitespace_inside_braces(self):
        assert render_template("Hi {{   name  }}!", {"name": "Ada"}) == "Hi Ada!"

    def test_unresolved_placeholder_raises(self):
        with pytest.raises(TemplateError) as exc:
            render_template("{{a}} {{typo}}", {"a": "x"})
        assert exc.value.unresolved == ["typo"]
        assert "typo" in str(exc.value)

    def test_template_error_is_config_error(self):
        with pytest.raises(ConfigError):
            render_template("{{missing}}", {})

    def test_extra_values_are_ignored(self):
        assert render_template("plain", {"unused": "v"}) == "plain"

    def test_values_with_backslashes_stay_literal(self):
        assert render_template("{{p}}", {"p": r"C:\new\1"}) == r"C:\new\1"

    def test_values_are_not_rescanned(self):
        assert render_template("Q: {{q}}", {"q": "what is {{this}}?"}) == "Q: what is {{this}}?"

    def test_single_braces_are_not_placeholders(self):
        assert render_template("{json: 1}", {}) == "{json: 1}"

    def test_find_placeholders(self):
        assert find_placeholders("{{a}} {{ b_2 }}") == ["a", "b_2"]


class TestStatusPrompt:
    def _transcript(self, name, content):
        return build_transcript(1, name, [make_message(1, 7, 0, content)], BOT_USER_ID)

    def test_joins_team_blocks_with_separator(self):
        template = "INFO={{info_doc}}\nTEAMS={{team_transcripts}}\nCONTROL={{control_transcript}}"
        prompt = build_status_prompt(
            template,
            "rules",
            [self._transcript("team-1", "alpha"), self._transcript("team-2", "beta")],
            self._transcript("poly-control", "ops"),
        )
        assert "INFO=rules" in prompt
        assert TRANSCRIPT_SEPARATOR + "Channel: team-2" in prompt
        assert "Channel: poly-control" in prompt

    def test_missing_control_uses_sentinel(self):
        prompt = build_status_prompt("{{control_transcript}}|{{team_transcripts}}|{{info_doc}}", "i", [], None)
        assert prompt.startswith(NO_CONTROL_TRANSCRIPT)

    def test_unknown_placeholder_fails(self):
        with pytest.raises(TemplateError):
            build_status_prompt("{{team_transcript}}", "i", [], None)


class TestStandbyPrompt:
    def test_renders_all_fields(self):
        t = build_transcript(1, "team-3", [], BOT_USER_ID)
        prompt = build_standby_prompt(
            "{{owner_user_id}}|{{info_doc}}|{{channel_transcript}}|{{user_question}}",
            42, "doc", t, "when is lunch?",
        )
        owner, doc, transcript, question = prompt.split("|")
        assert owner == "42"
        assert doc == "doc"
        assert transcript.startswith("Channel: team-3")
        assert question == "when is lunch?"

    def test_empty_question_placeholder(self):
        t = build_transcript(1, "team-3", [], BOT_USER_ID)
        prompt = build_standby_prompt(
            "{{user_question}}{{owner_user_id}}{{info_doc}}{{channel_transcript}}", 42, "", t, "",
        )
        assert prompt.startswith(NO_QUESTION_TEXT)


def test_render_system_instructions():
    assert render_system_instructions("{{personality}} Be brief.", "Parrot.") == "Parrot. Be brief."
