"""Centralized storage paths for langtutor."""

import json
import os
import re
import tempfile
from pathlib import Path

from dotenv import load_dotenv

from .errors import InvalidLanguageError

PROJECT_ROOT = Path(__file__).parent.parent.parent

# Load .env file from current directory or project root
load_dotenv()
load_dotenv(PROJECT_ROOT / ".env")

# App state (config, debug log, input history)
STATE_DIR = PROJECT_ROOT / ".langtutor"
CONFIG_FILE = STATE_DIR / "config.json"
LOG_FILE = STATE_DIR / "langtutor-debug.log"
HISTORY_FILE = STATE_DIR / "chat_history"

# Per-language learner data, one sub-directory per language
DATA_DIR = Path(os.environ.get("LANGTUTOR_DATA_DIR") or PROJECT_ROOT / "data")

# Files inside a language directory
INSTRUCTIONS_FILENAME = "CLAUDE.md"
VOCABULARY_FILENAME = "vocabulary.json"
GRAMMAR_FILENAME = "grammar.json"
OVERRIDES_FILENAME = "user-overrides.json"
LANGUAGE_CONFIG_FILENAME = "config.json"
TRACKER_DIRNAME = ".tracker"

# Session map, stored next to the Claude CLI's own transcripts
MODE_SESSIONS_FILENAME = "mode-sessions.json"

_LANGUAGE_NAME_RE = re.compile(r"^[a-zA-Z0-9 -]+$")


def ensure_state_dir() -> None:
    """Ensure the app state directory exists."""
    STATE_DIR.mkdir(parents=True, exist_ok=True)


def get_data_dir() -> Path:
    """Root directory holding one folder per language."""
    return DATA_DIR


def validate_language_name(language: str) -> None:
    """Raise InvalidLanguageError unless the name is safe to use as a folder."""
    if not language:
        raise InvalidLanguageError("Language name cannot be empty")
    if ".." in language or "/" in language or "\\" in language:
        raise InvalidLanguageError("Language name contains invalid characters")
    if not _LANGUAGE_NAME_RE.match(language):
        raise InvalidLanguageError(
            "Language name can only contain letters, numbers, spaces, and hyphens"
        )


def get_language_dir(language: str) -> Path:
    """Validated, lower-cased directory for a language."""
    validate_language_name(language)
    return get_data_dir() / language.lower()


def get_claude_project_dir(lang_dir: Path) -> Path:
    """Folder where the Claude CLI keeps transcripts for a working directory.

    C:\\Users\\foo\\bar -> ~/.claude/projects/C--Users-foo-bar
    /home/foo/bar       -> ~/.claude/projects/-home-foo-bar
    """
    resolved = str(Path(lang_dir).resolve())
    encoded = (
        resolved.replace(":\\", "--")
        .replace("\\", "-")
        .replace("/", "-")
        .replace(" ", "-")
    )
    return Path.home() / ".claude" / "projects" / encoded


def capitalize_first(s: str) -> str:
    """Upper-case the first character only."""
    if not s:
        return s
    return s[0].upper() + s[1:]


def atomic_json_write(path: Path, data, *, indent: int = 2, ensure_ascii: bool = False) -> None:
    """Write JSON data to a file atomically.

    Writes to a temporary file in the same directory, then renames it
    to the target path. A concurrent writer can still overwrite the result.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
