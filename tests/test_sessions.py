"""Tests for sessions module - mode session map and transcript parsing."""

import json
import os
from unittest.mock import patch

import pytest

from langtutor.errors import LanguageNotFoundError
from langtutor.models import ChatMessage, ModeSessions
from langtutor.paths import get_claude_project_dir
from langtutor.sessions import (
    extract_assistant_message,
    extract_user_message,
    find_latest_jsonl,
    get_chat_history,
    is_valid_uuid,
    parse_chat_messages,
    read_mode_sessions,
    update_session_for_mode,
    write_mode_sessions,
)

SESSION_A = "0b7c2f4e-1a2b-4c3d-8e9f-001122334455"
SESSION_B = "9f8e7d6c-5b4a-4321-a0b1-c2d3e4f5a6b7"


def _user(content):
    return {"type": "user", "message": {"role": "user", "content": content}}


def _assistant(*texts):
    return {
        "type": "assistant",
        "message": {"role": "assistant", "content": [{"type": "text", "text": t} for t in texts]},
    }


def _write_jsonl(path, records):
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [r if isinstance(r, str) else json.dumps(r, ensure_ascii=False) for r in records]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


class TestIsValidUuid:
    def test_valid(self):
        assert is_valid_uuid(SESSION_A)
        assert is_valid_uuid(SESSION_A.upper())

    @pytest.mark.parametrize("value", [
        "",
        "not-a-uuid",
        "0b7c2f4e1a2b4c3d8e9f001122334455",
        "0b7c2f4e-1a2b-4c3d-8e9f-00112233445",
        "0b7c2f4g-1a2b-4c3d-8e9f-001122334455",
        "0b7c2f4e-1a2b-4c3d-8e9f-001122334455-00",
        None,
    ])
    def test_invalid(self, value):
        assert not is_valid_uuid(value)


class TestModeSessionsFile:
    def test_missing_file(self, tmp_path):
        assert read_mode_sessions(tmp_path).sessions == {}

    def test_round_trip(self, tmp_path):
        write_mode_sessions(tmp_path, ModeSessions({"chat": SESSION_A, "story": SESSION_B}))
        assert read_mode_sessions(tmp_path).sessions == {"chat": SESSION_A, "story": SESSION_B}

    def test_corrupt_file(self, tmp_path):
        (tmp_path / "mode-sessions.json").write_text("{oops")
        assert read_mode_sessions(tmp_path).sessions == {}

    def test_wrong_shape(self, tmp_path):
        (tmp_path / "mode-sessions.json").write_text(json.dumps({"sessions": ["chat"]}))
        assert read_mode_sessions(tmp_path).sessions == {}


class TestExtractMessages:
    def test_user_string_content(self):
        assert extract_user_message(_user("hola")) == "hola"

    def test_user_tool_result_is_skipped(self):
        record = _user([{"type": "tool_result", "content": "ok"}])
        assert extract_user_message(record) is None

    def test_assistant_first_text_block(self):
        record = _assistant("¡Hola!", "segundo")
        record["message"]["content"].insert(0, {"type": "tool_use", "name": "Read"})
        assert extract_assistant_message(record) == "¡Hola!"

    def test_role_mismatch(self):
        record = {"type": "user", "message": {"role": "assistant", "content": "x"}}
        assert extract_user_message(record) is None

    def test_other_record_types(self):
        assert extract_user_message({"type": "summary"}) is None
        assert extract_assistant_message({"type": "summary"}) is None


class TestParseChatMessages:
    def test_skips_malformed_lines(self, tmp_path):
        path = tmp_path / f"{SESSION_A}.jsonl"
        _write_jsonl(path, [
            _user("hola"),
            "{this is not json",
            _assistant("¡Hola! ¿Qué tal?"),
            "",
            '"just a string"',
            _user("bien"),
        ])
        assert parse_chat_messages(path) == [
            ChatMessage("user", "hola"),
            ChatMessage("assistant", "¡Hola! ¿Qué tal?"),
            ChatMessage("user", "bien"),
        ]

    def test_strips_mode_prefix(self, tmp_path):
        path = tmp_path / "t.jsonl"
        _write_jsonl(path, [_user("[Story Mode] Write a story. <<<MSG>>> un gato")])
        assert parse_chat_messages(path) == [ChatMessage("user", "un gato")]

    def test_invalid_utf8_is_replaced(self, tmp_path):
        path = tmp_path / "t.jsonl"
        path.write_bytes(
            b'{"type":"user","message":{"role":"user","content":"hol\xff"}}\n'
            + json.dumps(_assistant("bien")).encode("utf-8") + b"\n"
        )
        messages = parse_chat_messages(path)
        assert messages[0].role == "user"
        assert "\ufffd" in messages[0].content
        assert messages[1] == ChatMessage("assistant", "bien")


class TestGetChatHistory:
    def test_unknown_language(self, data_dir, home):
        with pytest.raises(LanguageNotFoundError, match="Language 'French' not set up"):
            get_chat_history("French", "chat")

    def test_no_project_dir(self, lang_dir, home):
        assert get_chat_history("Spanish", "chat") == []

    def test_reads_mapped_session(self, lang_dir, home):
        project_dir = get_claude_project_dir(lang_dir)
        write_mode_sessions(project_dir, ModeSessions({"chat": SESSION_A, "story": SESSION_B}))
        _write_jsonl(project_dir / f"{SESSION_A}.jsonl", [_user("hola"), _assistant("¡Hola!")])
        _write_jsonl(project_dir / f"{SESSION_B}.jsonl", [_user("un cuento")])

        assert get_chat_history("Spanish", "chat") == [
            ChatMessage("user", "hola"),
            ChatMessage("assistant", "¡Hola!"),
        ]
        assert get_chat_history("Spanish", "story") == [ChatMessage("user", "un cuento")]

    def test_unmapped_mode(self, lang_dir, home):
        project_dir = get_claude_project_dir(lang_dir)
        write_mode_sessions(project_dir, ModeSessions({"chat": SESSION_A}))
        assert get_chat_history("Spanish", "think-out-loud") == []

    def test_missing_transcript(self, lang_dir, home):
        project_dir = get_claude_project_dir(lang_dir)
        write_mode_sessions(project_dir, ModeSessions({"chat": SESSION_A}))
        assert get_chat_history("Spanish", "chat") == []


class TestUpdateSessionForMode:
    def _touch(self, path, mtime):
        path.write_text("")
        os.utime(path, (mtime, mtime))

    def test_find_latest(self, tmp_path):
        self._touch(tmp_path / f"{SESSION_A}.jsonl", 1_000)
        self._touch(tmp_path / f"{SESSION_B}.jsonl", 2_000)
        self._touch(tmp_path / "notes.txt", 3_000)
        assert find_latest_jsonl(tmp_path).stem == SESSION_B

    def test_find_latest_missing_dir(self, tmp_path):
        assert find_latest_jsonl(tmp_path / "nope") is None

    def test_records_new_session(self, tmp_path):
        self._touch(tmp_path / f"{SESSION_A}.jsonl", 1_000)
        write_mode_sessions(tmp_path, ModeSessions({"story": SESSION_B}))

        assert update_session_for_mode(tmp_path, "chat", None) == SESSION_A
        assert read_mode_sessions(tmp_path).sessions == {"story": SESSION_B, "chat": SESSION_A}

    def test_same_session_is_noop(self, tmp_path):
        self._touch(tmp_path / f"{SESSION_A}.jsonl", 1_000)
        assert update_session_for_mode(tmp_path, "chat", SESSION_A) is None
        assert not (tmp_path / "mode-sessions.json").exists()

    def test_non_uuid_transcript_ignored(self, tmp_path):
        self._touch(tmp_path / "scratch.jsonl", 1_000)
        assert update_session_for_mode(tmp_path, "chat", None) is None

    def test_write_failure_is_swallowed(self, tmp_path):
        self._touch(tmp_path / f"{SESSION_A}.jsonl", 1_000)
        with patch("langtutor.sessions.write_mode_sessions", side_effect=OSError("disk full")):
            assert update_session_for_mode(tmp_path, "chat", None) is None
