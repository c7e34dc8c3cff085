"""Learner overrides (user-overrides.json)."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date
from pathlib import Path

from .errors import InvalidValueError
from .models import DIFFICULTY_DIRECTIONS, Adjustment, UserOverrides
from .paths import OVERRIDES_FILENAME
from .store import load_document, parse_record, records, save_document


def default_overrides(language: str) -> UserOverrides:
    """Overrides written when a language is bootstrapped."""
    return UserOverrides(language=language)


def load_overrides(lang_dir: Path) -> UserOverrides:
    return parse_record(UserOverrides, load_document(lang_dir, OVERRIDES_FILENAME), OVERRIDES_FILENAME)


def parse_direction(direction: str) -> str:
    if direction not in DIFFICULTY_DIRECTIONS:
        raise InvalidValueError(
            f"Invalid direction: {direction}. Must be: {', '.join(DIFFICULTY_DIRECTIONS)}"
        )
    return direction


def adjust_difficulty(
    lang_dir: Path,
    direction: str,
    reason: str = "",
    today: date | None = None,
) -> UserOverrides:
    """Set the difficulty level and append the change to the adjustment log."""
    direction = parse_direction(direction)
    data = load_document(lang_dir, OVERRIDES_FILENAME)

    difficulty = data.get("difficulty")
    if not isinstance(difficulty, dict):
        difficulty = {}
        data["difficulty"] = difficulty
    difficulty["level"] = direction
    difficulty["notes"] = reason

    adjustment = Adjustment(
        date=(today or date.today()).isoformat(),
        direction=direction,
        reason=reason,
    )
    records(data, "adjustments").append(asdict(adjustment))

    overrides = parse_record(UserOverrides, data, OVERRIDES_FILENAME)
    save_document(lang_dir, OVERRIDES_FILENAME, data)
    return overrides
