"""Grammar proficiency tracking (grammar.json).

Every rule carries a 1-5 star rating:
  - correct use: +1 star (max 5), streak +1
  - incorrect use: -1 star (min 1), streak reset
A rule at 5 stars with a streak of 5 or more becomes permanent. Permanent
rules keep the flag even if later used incorrectly.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from .errors import InvalidValueError, RecordNotFoundError
from .models import CEFR_LEVELS, MAX_STARS, MIN_STARS, PERMANENT_STREAK, GrammarRule
from .paths import GRAMMAR_FILENAME
from .store import (
    find_record,
    load_document,
    parse_record,
    records,
    require_text,
    save_document,
)


def _rule(raw: dict) -> GrammarRule:
    return parse_record(GrammarRule, raw, GRAMMAR_FILENAME)


def parse_level(level: str) -> str:
    if level not in CEFR_LEVELS:
        raise InvalidValueError(
            f"Invalid level: {level}. Must be: {', '.join(CEFR_LEVELS)}"
        )
    return level


def parse_correct(value: str | bool) -> bool:
    """Accept a bool or the literal strings 'true'/'false'."""
    if isinstance(value, bool):
        return value
    if value == "true":
        return True
    if value == "false":
        return False
    raise InvalidValueError(f"Invalid value: {value}. Must be: true or false")


def load_grammar(lang_dir: Path) -> list[GrammarRule]:
    """All rules in grammar.json."""
    data = load_document(lang_dir, GRAMMAR_FILENAME)
    return [_rule(r) for r in records(data, "rules") if isinstance(r, dict)]


def apply_usage(rule: GrammarRule, correct: bool, today: date) -> GrammarRule:
    """Update a rule in place for one use and return it."""
    rule.last_used = today.isoformat()
    if correct:
        rule.correct_streak += 1
        rule.stars = min(rule.stars + 1, MAX_STARS)
        if rule.stars == MAX_STARS and rule.correct_streak >= PERMANENT_STREAK:
            rule.permanent = True
    else:
        rule.correct_streak = 0
        rule.stars = max(rule.stars - 1, MIN_STARS)
    return rule


def add_grammar(
    lang_dir: Path,
    rule: str,
    description: str,
    level: str,
    today: date | None = None,
) -> tuple[GrammarRule, bool]:
    """Add a grammar rule at one star.

    Returns:
        (rule, added). added is False when the rule already existed.
    """
    require_text(rule=rule, description=description)
    level = parse_level(level)
    data = load_document(lang_dir, GRAMMAR_FILENAME)
    rules = records(data, "rules")

    existing = find_record(rules, "rule", rule)
    if existing is not None:
        return _rule(existing), False

    entry = GrammarRule(
        rule=rule,
        description=description,
        level=level,
        stars=1,
        last_used=(today or date.today()).isoformat(),
        correct_streak=0,
        permanent=False,
        notes="",
    )
    rules.append(entry.to_dict())
    save_document(lang_dir, GRAMMAR_FILENAME, data)
    return entry, True


def mark_grammar_used(
    lang_dir: Path,
    rule: str,
    correct: str | bool,
    today: date | None = None,
) -> GrammarRule:
    """Record a correct or incorrect use of a rule."""
    require_text(rule=rule)
    correct = parse_correct(correct)
    data = load_document(lang_dir, GRAMMAR_FILENAME)
    raw = find_record(records(data, "rules"), "rule", rule)
    if raw is None:
        raise RecordNotFoundError(f"Rule '{rule}' not found")

    entry = apply_usage(_rule(raw), correct, today or date.today())
    raw.update(entry.to_dict())
    save_document(lang_dir, GRAMMAR_FILENAME, data)
    return entry


def rules_below(rules: list[GrammarRule], stars: int) -> list[GrammarRule]:
    """Non-permanent rules rated below the given star count."""
    return [r for r in rules if not r.permanent and r.stars < stars]


def ready_for_new_grammar(rules: list[GrammarRule], threshold: int) -> bool:
    """True when every known rule has reached the star threshold."""
    return not rules_below(rules, threshold)


def format_grammar_text(rules: list[GrammarRule]) -> str:
    """Format rules grouped by CEFR level."""
    if not rules:
        return "No grammar rules recorded yet."

    by_level: dict[str, list[GrammarRule]] = {}
    for r in rules:
        by_level.setdefault(r.level or "Unknown", []).append(r)

    lines = ["Grammar:", ""]
    for level in sorted(by_level):
        lines.append(f"  {level}:")
        for r in sorted(by_level[level], key=lambda x: x.stars, reverse=True):
            flag = " [permanent]" if r.permanent else ""
            lines.append(
                f"    {r.star_bar} {r.rule}: {r.description} "
                f"(streak {r.correct_streak}, last used {r.last_used}){flag}"
            )
        lines.append("")

    permanent = sum(1 for r in rules if r.permanent)
    lines.append(f"  Summary: {len(rules)} rule(s), {permanent} permanent")
    return "\n".join(lines)
