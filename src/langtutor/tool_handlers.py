"""Tool handler registry for the API tracker.

Each handler is registered with @handler("tool_name") and receives:
    lang_dir: language workspace the tracker is updating
    tool_input: dict of tool parameters
    **ctx: Additional context
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from .errors import TutorError
from .grammar import (
    add_grammar,
    format_grammar_text,
    load_grammar,
    mark_grammar_used,
    parse_correct,
)
from .overrides import adjust_difficulty
from .vocabulary import (
    add_word,
    format_vocabulary_text,
    load_vocabulary,
    mark_word_recalled,
    record_word_used,
    update_word_note,
)

HANDLERS: dict[str, Callable] = {}


def handler(name: str):
    """Decorator to register a tool handler."""
    def decorator(fn: Callable) -> Callable:
        HANDLERS[name] = fn
        return fn
    return decorator


def execute_tool(lang_dir: Path, tool_name: str, tool_input: dict, **ctx) -> str:
    """Run a tool; domain errors come back as text so the model can recover."""
    fn = HANDLERS.get(tool_name)
    if fn is None:
        return f"Error: unknown tool '{tool_name}'"
    try:
        return fn(lang_dir, tool_input, **ctx)
    except TutorError as e:
        return f"Error: {e}"
    except KeyError as e:
        return f"Error: missing parameter {e}"


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

@handler("get_vocabulary")
def handle_get_vocabulary(lang_dir: Path, tool_input: dict, **ctx) -> str:
    return format_vocabulary_text(load_vocabulary(lang_dir), limit=200)


@handler("record_word_used")
def handle_record_word_used(lang_dir: Path, tool_input: dict, **ctx) -> str:
    entry, added = record_word_used(lang_dir, tool_input["word"], tool_input.get("meaning", ""))
    if added:
        return f"Added word: {entry.word}"
    return f"'{entry.word}' used: next review {entry.next_review} (every {entry.interval}d)"


@handler("add_word")
def handle_add_word(lang_dir: Path, tool_input: dict, **ctx) -> str:
    entry, added = add_word(lang_dir, tool_input["word"], tool_input["meaning"])
    if not added:
        return f"Word '{entry.word}' already exists"
    return f"Added word: {entry.word}"


@handler("mark_word_recalled")
def handle_mark_word_recalled(lang_dir: Path, tool_input: dict, **ctx) -> str:
    entry = mark_word_recalled(lang_dir, tool_input["word"], tool_input["quality"])
    return f"Marked '{entry.word}' as {tool_input['quality']}: next review {entry.next_review}"


@handler("update_word_note")
def handle_update_word_note(lang_dir: Path, tool_input: dict, **ctx) -> str:
    entry = update_word_note(lang_dir, tool_input["word"], tool_input["note"])
    return f"Updated note for '{entry.word}'"


# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------

@handler("get_grammar")
def handle_get_grammar(lang_dir: Path, tool_input: dict, **ctx) -> str:
    return format_grammar_text(load_grammar(lang_dir))


@handler("add_grammar")
def handle_add_grammar(lang_dir: Path, tool_input: dict, **ctx) -> str:
    rule, added = add_grammar(
        lang_dir,
        tool_input["rule"],
        tool_input["description"],
        tool_input["level"],
    )
    if not added:
        return f"Rule '{rule.rule}' already exists"
    return f"Added grammar rule: {rule.rule}"


@handler("mark_grammar_used")
def handle_mark_grammar_used(lang_dir: Path, tool_input: dict, **ctx) -> str:
    correct = parse_correct(tool_input["correct"])
    rule = mark_grammar_used(lang_dir, tool_input["rule"], correct)
    result = f"Marked '{rule.rule}' as correct={str(correct).lower()}: {rule.stars} star(s)"
    if rule.permanent:
        result += " (permanent)"
    return result


# ---------------------------------------------------------------------------
# Overrides
# ---------------------------------------------------------------------------

@handler("adjust_difficulty")
def handle_adjust_difficulty(lang_dir: Path, tool_input: dict, **ctx) -> str:
    overrides = adjust_difficulty(lang_dir, tool_input["direction"], tool_input.get("reason", ""))
    return f"Adjusted difficulty to: {overrides.difficulty.level}"
