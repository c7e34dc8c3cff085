"""Spaced-repetition vocabulary bank (vocabulary.json).

Recall quality adjusts ease and interval the way Anki's SM-2 variant does:

  forgot: ease -0.20, interval * 0.1, repetitions reset
  hard:   ease -0.15, interval * 1.2
  good:   ease unchanged, interval * ease
  easy:   ease +0.15, interval * ease * 1.3

Ease never drops below 1.3 and the interval never below one day.
"""

from __future__ import annotations

import math
from datetime import date, timedelta
from pathlib import Path

from .errors import InvalidValueError, RecordNotFoundError
from .models import MIN_EASE, RecallQuality, VocabularyEntry
from .paths import VOCABULARY_FILENAME
from .store import (
    find_record,
    load_document,
    parse_record,
    records,
    require_text,
    save_document,
)

DEFAULT_EASE = 2.3
# Starting ease for words the tracker sees used correctly for the first time
TRACKED_EASE = 2.5


def _today(today: date | None) -> date:
    return today or date.today()


def _schedule(start: date, interval: int) -> str:
    return (start + timedelta(days=interval)).isoformat()


def _entry(raw: dict) -> VocabularyEntry:
    return parse_record(VocabularyEntry, raw, VOCABULARY_FILENAME)


def parse_quality(value: str | RecallQuality) -> RecallQuality:
    """Convert a string to RecallQuality, raising InvalidValueError."""
    try:
        return RecallQuality(value)
    except ValueError:
        allowed = ", ".join(q.value for q in RecallQuality)
        raise InvalidValueError(
            f"Invalid quality: {value}. Must be: {allowed}"
        ) from None


def load_vocabulary(lang_dir: Path) -> list[VocabularyEntry]:
    """All entries in vocabulary.json."""
    data = load_document(lang_dir, VOCABULARY_FILENAME)
    return [_entry(w) for w in records(data, "words") if isinstance(w, dict)]


def apply_recall(entry: VocabularyEntry, quality: RecallQuality, today: date) -> VocabularyEntry:
    """Update an entry in place for one recall and return it."""
    if quality is RecallQuality.FORGOT:
        entry.ease = max(entry.ease - 0.20, MIN_EASE)
        entry.interval = max(math.floor(entry.interval * 0.1), 1)
        entry.repetitions = 0
    elif quality is RecallQuality.HARD:
        entry.ease = max(entry.ease - 0.15, MIN_EASE)
        entry.interval = math.floor(entry.interval * 1.2)
        entry.repetitions += 1
    elif quality is RecallQuality.GOOD:
        entry.interval = math.floor(entry.interval * entry.ease)
        entry.repetitions += 1
    elif quality is RecallQuality.EASY:
        entry.ease = entry.ease + 0.15
        entry.interval = math.floor(entry.interval * entry.ease * 1.3)
        entry.repetitions += 1

    # Two decimals keeps repeated +/- steps from drifting
    entry.ease = round(entry.ease, 2)
    entry.interval = max(entry.interval, 1)
    entry.next_review = _schedule(today, entry.interval)
    return entry


def add_word(
    lang_dir: Path,
    word: str,
    meaning: str,
    today: date | None = None,
) -> tuple[VocabularyEntry, bool]:
    """Add a word with default scheduling.

    Returns:
        (entry, added). added is False when the word already existed,
        in which case the file is left untouched.
    """
    require_text(word=word, meaning=meaning)
    data = load_document(lang_dir, VOCABULARY_FILENAME)
    words = records(data, "words")

    existing = find_record(words, "word", word)
    if existing is not None:
        return _entry(existing), False

    entry = VocabularyEntry(
        word=word,
        meaning=meaning,
        ease=DEFAULT_EASE,
        interval=1,
        repetitions=0,
        next_review=_today(today).isoformat(),
        notes="",
    )
    words.append(entry.to_dict())
    save_document(lang_dir, VOCABULARY_FILENAME, data)
    return entry, True


def mark_word_recalled(
    lang_dir: Path,
    word: str,
    quality: str | RecallQuality,
    today: date | None = None,
) -> VocabularyEntry:
    """Record how well the learner recalled a word and reschedule it."""
    require_text(word=word)
    quality = parse_quality(quality)
    data = load_document(lang_dir, VOCABULARY_FILENAME)
    raw = find_record(records(data, "words"), "word", word)
    if raw is None:
        raise RecordNotFoundError(f"Word '{word}' not found")

    entry = apply_recall(_entry(raw), quality, _today(today))
    raw.update(entry.to_dict())
    save_document(lang_dir, VOCABULARY_FILENAME, data)
    return entry


def record_word_used(
    lang_dir: Path,
    word: str,
    meaning: str = "",
    today: date | None = None,
) -> tuple[VocabularyEntry, bool]:
    """Credit a correct use of a word, adding it if unseen.

    Classic SM-2 progression: the first repetition schedules 1 day,
    the second 6 days, later ones round(interval * ease).

    Returns:
        (entry, added)
    """
    require_text(word=word)
    today = _today(today)
    data = load_document(lang_dir, VOCABULARY_FILENAME)
    words = records(data, "words")
    raw = find_record(words, "word", word)

    if raw is None:
        entry = VocabularyEntry(
            word=word,
            meaning=meaning,
            ease=TRACKED_EASE,
            interval=1,
            repetitions=1,
            next_review=_schedule(today, 1),
        )
        words.append(entry.to_dict())
        save_document(lang_dir, VOCABULARY_FILENAME, data)
        return entry, True

    entry = _entry(raw)
    entry.repetitions += 1
    if entry.repetitions == 1:
        entry.interval = 1
    elif entry.repetitions == 2:
        entry.interval = 6
    else:
        entry.interval = max(round(entry.interval * entry.ease), 1)
    if meaning and not entry.meaning:
        entry.meaning = meaning
    entry.next_review = _schedule(today, entry.interval)
    raw.update(entry.to_dict())
    save_document(lang_dir, VOCABULARY_FILENAME, data)
    return entry, False


def update_word_note(lang_dir: Path, word: str, note: str) -> VocabularyEntry:
    """Replace the notes field of a word."""
    require_text(word=word, note=note)
    data = load_document(lang_dir, VOCABULARY_FILENAME)
    raw = find_record(records(data, "words"), "word", word)
    if raw is None:
        raise RecordNotFoundError(f"Word '{word}' not found")

    entry = _entry(raw)
    entry.notes = note
    raw["notes"] = note
    save_document(lang_dir, VOCABULARY_FILENAME, data)
    return entry


def due_words(entries: list[VocabularyEntry], today: date | None = None) -> list[VocabularyEntry]:
    """Entries whose next review is today or earlier, most overdue first."""
    cutoff = _today(today).isoformat()
    due = [e for e in entries if not e.next_review or e.next_review <= cutoff]
    due.sort(key=lambda e: e.next_review)
    return due


def format_vocabulary_text(entries: list[VocabularyEntry], limit: int = 50) -> str:
    """Format vocabulary entries as plain text for tool results."""
    if not entries:
        return "No words recorded yet."

    lines = [f"Vocabulary - {len(entries)} word(s):"]
    for e in entries[:limit]:
        line = (
            f"  {e.word} = {e.meaning} "
            f"(ease {e.ease:.2f}, every {e.interval}d, reps {e.repetitions}, next {e.next_review})"
        )
        if e.notes:
            line += f" - {e.notes}"
        lines.append(line)
    if len(entries) > limit:
        lines.append(f"  ... and {len(entries) - limit} more")
    return "\n".join(lines)
