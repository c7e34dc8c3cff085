"""Mode-to-conversation session map and Claude transcript parsing."""

from __future__ import annotations

import json
import re
from pathlib import Path

from loguru import logger

from .errors import LanguageNotFoundError
from .models import ChatMessage, ModeSessions
from .modes import strip_mode_prefix
from .paths import MODE_SESSIONS_FILENAME, atomic_json_write, get_claude_project_dir, get_language_dir

_UUID_PART_LENGTHS = (8, 4, 4, 4, 12)
_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


def is_valid_uuid(s: str) -> bool:
    """Check for the 8-4-4-4-12 hex layout used by Claude session ids."""
    if not isinstance(s, str):
        return False
    parts = s.split("-")
    if len(parts) != len(_UUID_PART_LENGTHS):
        return False
    return all(
        len(part) == length and bool(_HEX_RE.match(part))
        for part, length in zip(parts, _UUID_PART_LENGTHS)
    )


def read_mode_sessions(project_dir: Path) -> ModeSessions:
    """Load the session map; missing or corrupt files give an empty map."""
    path = Path(project_dir) / MODE_SESSIONS_FILENAME
    if not path.exists():
        return ModeSessions()
    try:
        with open(path, encoding="utf-8") as f:
            return ModeSessions.from_dict(json.load(f))
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"[Mode sessions] Could not read {path}: {e}")
        return ModeSessions()


def write_mode_sessions(project_dir: Path, sessions: ModeSessions) -> None:
    atomic_json_write(Path(project_dir) / MODE_SESSIONS_FILENAME, sessions.to_dict())


def find_latest_jsonl(directory: Path) -> Path | None:
    """Most recently modified transcript in a directory."""
    directory = Path(directory)
    if not directory.is_dir():
        return None
    files = [p for p in directory.iterdir() if p.is_file() and p.suffix == ".jsonl"]
    if not files:
        return None
    return max(files, key=lambda p: p.stat().st_mtime)


def find_jsonl_by_session_id(project_dir: Path, session_id: str) -> Path | None:
    path = Path(project_dir) / f"{session_id}.jsonl"
    return path if path.is_file() else None


def _message_content(record: dict, role: str):
    if record.get("type") != role:
        return None
    msg = record.get("message")
    if not isinstance(msg, dict) or msg.get("role") != role:
        return None
    return msg.get("content")


def extract_user_message(record: dict) -> str | None:
    """User text from a transcript record; tool results are skipped."""
    content = _message_content(record, "user")
    if isinstance(content, str):
        return content
    return None


def extract_assistant_message(record: dict) -> str | None:
    """First text block of an assistant transcript record."""
    content = _message_content(record, "assistant")
    if not isinstance(content, list):
        return None
    for block in content:
        if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str):
            return block["text"]
    return None


def parse_chat_messages(path: Path) -> list[ChatMessage]:
    """Read user/assistant turns from a Claude JSONL transcript."""
    messages: list[ChatMessage] = []
    with open(path, encoding="utf-8", errors="replace") as f:
        for line_no, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                logger.warning(f"[Chat history] Skipping malformed JSON line {line_no} in {path.name}")
                continue
            if not isinstance(record, dict):
                continue

            user_text = extract_user_message(record)
            if user_text:
                messages.append(ChatMessage("user", strip_mode_prefix(user_text)))

            assistant_text = extract_assistant_message(record)
            if assistant_text:
                messages.append(ChatMessage("assistant", assistant_text))

    return messages


def get_chat_history(language: str, mode: str) -> list[ChatMessage]:
    """Chat history for a language's mode, empty if none has been recorded."""
    lang_dir = get_language_dir(language)
    if not lang_dir.exists():
        raise LanguageNotFoundError(f"Language '{language}' not set up")

    project_dir = get_claude_project_dir(lang_dir)
    if not project_dir.exists():
        return []

    session_id = read_mode_sessions(project_dir).sessions.get(mode)
    if not session_id:
        return []

    path = find_jsonl_by_session_id(project_dir, session_id)
    if path is None:
        return []

    return parse_chat_messages(path)


def update_session_for_mode(project_dir: Path, mode: str, previous_id: str | None) -> str | None:
    """Point a mode at the newest transcript after a responder run.

    Returns the new session id when the map changed. Write failures are
    logged and swallowed so a reply is never lost over the map.
    """
    latest = find_latest_jsonl(project_dir)
    if latest is None:
        return None
    stem = latest.stem
    if not is_valid_uuid(stem) or stem == previous_id:
        return None

    sessions = read_mode_sessions(project_dir)
    sessions.sessions[mode] = stem
    try:
        write_mode_sessions(project_dir, sessions)
    except OSError as e:
        logger.error(f"[Mode sessions] Failed to save: {e}")
        return None
    logger.debug(f"[Mode sessions] {mode} -> {stem}")
    return stem
