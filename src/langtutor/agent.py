"""Runs the Claude CLI for each learner message.

Every message launches two agents:
  - the tracker, in the background, which updates vocabulary/grammar state
  - the responder, which produces the reply shown to the learner
Nothing orders the two. A tracker that fails or times out is only logged.
"""

from __future__ import annotations

import subprocess
import sys
import threading
from pathlib import Path

from loguru import logger

from .config import Config, load_config
from .errors import AgentError, MessageError
from .languages import require_language_dir
from .modes import get_mode_prefix
from .paths import TRACKER_DIRNAME, get_claude_project_dir
from .sessions import is_valid_uuid, read_mode_sessions, update_session_for_mode

SKIP_PERMISSIONS = "--dangerously-skip-permissions"

TRACKER_PROMPT = """[TRACKER TASK - UPDATE FILES ONLY, NO RESPONSE]

Process this learner message and update the learner's state.

Learner said: {message}

The language workspace is {lang_dir}. Read config.json there for the target language,
then read vocabulary.json and grammar.json. Change state ONLY through these commands:

  {track} record-word-used <word> <meaning>
  {track} mark-word-recalled <word> <forgot|hard|good|easy>
  {track} update-word-note <word> <note>
  {track} add-grammar <rule> <description> <A1|A2|B1|B2|C1|C2>
  {track} mark-grammar-used <rule> <true|false>
  {track} adjust-difficulty <easier|harder|auto|A1..C2> [reason]

Instructions:
1. For each TARGET LANGUAGE word the learner used correctly, run record-word-used
   (it adds new words and advances known ones). IGNORE all English words.
2. If the learner misused or could not recall a known word, run mark-word-recalled
   with forgot or hard.
3. For each grammar pattern used: if it is new, run add-grammar only (a new rule
   starts at one star; do not also mark it). If it is known, run mark-grammar-used
   with true or false.
4. If the learner asks for easier or harder material, run adjust-difficulty.
5. Output NOTHING - your only job is updating state.

CRITICAL: Only track words written in the target language's script. NEVER add English words."""


def _creation_flags() -> int:
    # No console window on Windows
    return getattr(subprocess, "CREATE_NO_WINDOW", 0) if sys.platform == "win32" else 0


def track_command(lang_dir: Path) -> str:
    """Shell prefix the tracker uses to call the state commands."""
    return f'"{sys.executable}" -m langtutor track --dir "{Path(lang_dir).resolve()}"'


def build_tracker_prompt(lang_dir: Path, message: str) -> str:
    return TRACKER_PROMPT.format(
        message=message,
        lang_dir=Path(lang_dir).resolve(),
        track=track_command(lang_dir),
    )


def validate_message(message: str, max_length: int) -> None:
    if not message.strip():
        raise MessageError("Message cannot be empty")
    if len(message) > max_length:
        raise MessageError(
            f"Message too long ({len(message)} chars). Maximum is {max_length} chars."
        )


def spawn_cli_tracker(lang_dir: Path, message: str, config: Config) -> subprocess.Popen | None:
    """Start the tracker agent without waiting for it.

    It runs in a .tracker sub-directory so its transcripts land in a
    separate Claude project and never show up in the learner's history.
    """
    tracker_dir = Path(lang_dir) / TRACKER_DIRNAME
    tracker_dir.mkdir(parents=True, exist_ok=True)
    prompt = build_tracker_prompt(lang_dir, message)

    try:
        child = subprocess.Popen(
            [config.claude_command, SKIP_PERMISSIONS, "-p", prompt],
            cwd=tracker_dir,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            creationflags=_creation_flags(),
        )
    except OSError as e:
        logger.error(f"[Tracker] Error: {e}")
        return None

    def _watch() -> None:
        try:
            code = child.wait(timeout=config.tracker_timeout)
            logger.debug(f"[Tracker] Exited with code {code}")
        except subprocess.TimeoutExpired:
            child.kill()
            child.wait()
            logger.warning(f"[Tracker] Timed out after {config.tracker_timeout:g}s")

    threading.Thread(target=_watch, name="tracker-watch", daemon=True).start()
    return child


def spawn_tracker(lang_dir: Path, message: str, config: Config) -> None:
    """Start whichever tracker backend the config selects."""
    if config.tracker_backend == "api":
        from .tracker_api import start_api_tracker
        start_api_tracker(lang_dir, message, config)
    else:
        spawn_cli_tracker(lang_dir, message, config)


def run_responder(
    lang_dir: Path,
    message: str,
    config: Config,
    session_id: str | None = None,
) -> str:
    """Run the responder agent and return its reply."""
    args = [config.claude_command, SKIP_PERMISSIONS]
    if session_id and is_valid_uuid(session_id):
        args += ["--resume", session_id]
    args += ["-p", message]

    logger.debug(f"[Responder] Starting claude with args: {args[:-1]} <message>")
    logger.debug(f"[Responder] Working directory: {lang_dir}")

    try:
        result = subprocess.run(
            args,
            cwd=lang_dir,
            stdin=subprocess.DEVNULL,  # claude waits on stdin otherwise
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=config.responder_timeout,
            creationflags=_creation_flags(),
        )
    except subprocess.TimeoutExpired as e:
        logger.error(f"[Responder] Timed out after {config.responder_timeout:g}s")
        raise AgentError(f"Claude timed out after {config.responder_timeout:g}s") from e
    except OSError as e:
        logger.error(f"[Responder] Spawn error: {e}")
        raise AgentError(f"Failed to start Claude: {e}") from e

    logger.debug(
        f"[Responder] Process closed with code: {result.returncode}, "
        f"stdout length: {len(result.stdout)}"
    )
    if result.returncode != 0:
        stderr = result.stderr.strip() or "No error output"
        raise AgentError(f"Claude exited with code {result.returncode}: {stderr}")
    return result.stdout.strip()


def send_message(
    message: str,
    language: str,
    mode: str,
    config: Config | None = None,
) -> str:
    """Send a learner message and return the tutor's reply."""
    config = config or load_config()
    logger.info(f"[send_message] language={language}, mode={mode}, length={len(message)}")

    validate_message(message, config.max_message_length)
    lang_dir = require_language_dir(language)

    # Tracker gets the raw message
    spawn_tracker(lang_dir, message, config)

    project_dir = get_claude_project_dir(lang_dir)
    session_id = read_mode_sessions(project_dir).sessions.get(mode)
    logger.debug(f"[send_message] session for {mode}: {session_id}")

    response = run_responder(lang_dir, get_mode_prefix(mode) + message, config, session_id)
    logger.debug(f"[send_message] Got response, length: {len(response)}")

    update_session_for_mode(project_dir, mode, session_id)
    return response
