"""Tracker backend that calls the Anthropic API directly with tool calling."""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path

from anthropic import Anthropic
from loguru import logger

from .config import Config, get_model_specs
from .errors import AgentError
from .paths import LANGUAGE_CONFIG_FILENAME
from .tool_handlers import execute_tool
from .tools import TRACKER_TOOLS

TRACKER_SYSTEM_PROMPT = """You are the state tracker for a {language} language tutor. You never talk to the learner.

For each message the learner sends you update their learning state with the tools:
- Every {language} word used correctly -> record_word_used
- A known word misused or forgotten -> mark_word_recalled with forgot or hard
- A grammar pattern used for the first time -> add_grammar only (it starts at one star; do not also mark it)
- A known grammar pattern -> mark_grammar_used with correct true or false
- An explicit request for easier or harder material -> adjust_difficulty

Look up existing words and rules first with get_vocabulary and get_grammar so you do not
create duplicates. Only track words written in {language}; never track English words.
When finished, reply with the single word DONE."""


def _language_name(lang_dir: Path) -> str:
    try:
        with open(Path(lang_dir) / LANGUAGE_CONFIG_FILENAME, encoding="utf-8") as f:
            return json.load(f).get("language") or Path(lang_dir).name.capitalize()
    except (json.JSONDecodeError, OSError):
        return Path(lang_dir).name.capitalize()


class TrackerAgent:
    """Runs one tracker pass over a learner message."""

    def __init__(self, lang_dir: Path, config: Config, client: Anthropic | None = None):
        if client is None:
            api_key = os.environ.get("ANTHROPIC_API_KEY")
            if not api_key:
                raise AgentError(
                    "ANTHROPIC_API_KEY environment variable not set. "
                    "It is required when tracker_backend is 'api'."
                )
            client = Anthropic(api_key=api_key, timeout=config.tracker_timeout)
        self.client = client
        self.lang_dir = Path(lang_dir)
        self.model = config.tracker_model
        self.max_turns = config.tracker_max_turns
        self.max_tokens = min(get_model_specs(self.model)["max_output_tokens"], 4096)
        self.system_prompt = TRACKER_SYSTEM_PROMPT.format(language=_language_name(self.lang_dir))

    def run(self, message: str) -> list[dict]:
        """Process a learner message.

        Returns:
            The tool calls made, each {"name", "input", "result"}.
        """
        messages: list[dict] = [{"role": "user", "content": f"Learner said: {message}"}]
        calls: list[dict] = []

        for _ in range(self.max_turns):
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=self.system_prompt,
                tools=TRACKER_TOOLS,
                messages=messages,
            )
            messages.append({"role": "assistant", "content": response.content})

            if response.stop_reason != "tool_use":
                break

            tool_results = []
            for block in response.content:
                if block.type != "tool_use":
                    continue
                result = execute_tool(self.lang_dir, block.name, block.input)
                logger.debug(f"[Tracker] {block.name} {block.input} -> {result}")
                calls.append({"name": block.name, "input": block.input, "result": result})
                tool_results.append({
                    "type": "tool_result",
                    "tool_use_id": block.id,
                    "content": result,
                })
            messages.append({"role": "user", "content": tool_results})
        else:
            logger.warning(f"[Tracker] Stopped after {self.max_turns} turns")

        return calls


def start_api_tracker(lang_dir: Path, message: str, config: Config) -> threading.Thread:
    """Run the API tracker on a background thread; failures are only logged."""

    def _run() -> None:
        try:
            calls = TrackerAgent(lang_dir, config).run(message)
            logger.debug(f"[Tracker] Finished with {len(calls)} tool call(s)")
        except Exception as e:
            logger.error(f"[Tracker] Error: {e}")

    thread = threading.Thread(target=_run, name="api-tracker", daemon=True)
    thread.start()
    return thread
