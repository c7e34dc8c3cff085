"""Tests for tracker_api - the tool-calling tracker loop with a mocked client."""

import json
from unittest.mock import MagicMock, patch

import pytest

from langtutor.config import Config
from langtutor.errors import AgentError
from langtutor.tracker_api import TrackerAgent, start_api_tracker


def _tool_use(block_id, name, tool_input):
    block = MagicMock()
    block.type = "tool_use"
    block.id = block_id
    block.name = name
    block.input = tool_input
    return block


def _text(text):
    block = MagicMock()
    block.type = "text"
    block.text = text
    return block


def _response(stop_reason, *blocks):
    response = MagicMock()
    response.stop_reason = stop_reason
    response.content = list(blocks)
    return response


class TestTrackerAgent:
    def test_requires_api_key(self, lang_dir):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(AgentError, match="ANTHROPIC_API_KEY"):
                TrackerAgent(lang_dir, Config())

    def test_system_prompt_names_language(self, lang_dir):
        agent = TrackerAgent(lang_dir, Config(), client=MagicMock())
        assert "Spanish language tutor" in agent.system_prompt

    def test_system_prompt_adds_new_grammar_without_marking(self, lang_dir):
        agent = TrackerAgent(lang_dir, Config(), client=MagicMock())
        assert "add_grammar only" in agent.system_prompt
        assert "do not also mark it" in agent.system_prompt

    def test_runs_tools_until_done(self, lang_dir):
        client = MagicMock()
        client.messages.create.side_effect = [
            _response(
                "tool_use",
                _text("Recording."),
                _tool_use("t1", "record_word_used", {"word": "perro", "meaning": "dog"}),
                _tool_use("t2", "add_grammar", {"rule": "tener", "description": "to have", "level": "A1"}),
            ),
            _response("end_turn", _text("DONE")),
        ]

        calls = TrackerAgent(lang_dir, Config(), client=client).run("yo tengo un perro")

        assert [c["name"] for c in calls] == ["record_word_used", "add_grammar"]
        assert calls[0]["result"] == "Added word: perro"
        words = json.loads((lang_dir / "vocabulary.json").read_text(encoding="utf-8"))["words"]
        assert words[0]["word"] == "perro"

        second_call = client.messages.create.call_args_list[1].kwargs
        results = second_call["messages"][2]["content"]
        assert [r["tool_use_id"] for r in results] == ["t1", "t2"]
        assert second_call["model"] == "claude-haiku-4-5-20251001"

    def test_tool_errors_are_returned_to_model(self, lang_dir):
        client = MagicMock()
        client.messages.create.side_effect = [
            _response("tool_use", _tool_use("t1", "mark_word_recalled", {"word": "gato", "quality": "hard"})),
            _response("end_turn", _text("DONE")),
        ]
        calls = TrackerAgent(lang_dir, Config(), client=client).run("gato?")
        assert calls[0]["result"] == "Error: Word 'gato' not found"

    def test_stops_after_max_turns(self, lang_dir):
        client = MagicMock()
        client.messages.create.side_effect = lambda **kwargs: _response(
            "tool_use", _tool_use("t", "get_vocabulary", {})
        )
        calls = TrackerAgent(lang_dir, Config(tracker_max_turns=3), client=client).run("hola")
        assert client.messages.create.call_count == 3
        assert len(calls) == 3


class TestStartApiTracker:
    def test_failures_are_swallowed(self, lang_dir):
        with patch("langtutor.tracker_api.TrackerAgent", side_effect=AgentError("no key")):
            thread = start_api_tracker(lang_dir, "hola", Config())
            thread.join(timeout=5)
        assert not thread.is_alive()

    def test_runs_agent(self, lang_dir):
        with patch("langtutor.tracker_api.TrackerAgent") as agent_cls:
            agent_cls.return_value.run.return_value = []
            thread = start_api_tracker(lang_dir, "hola", Config())
            thread.join(timeout=5)
        agent_cls.return_value.run.assert_called_once_with("hola")
