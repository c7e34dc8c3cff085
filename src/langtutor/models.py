"""Data models for langtutor learner state."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from enum import Enum

CEFR_LEVELS = ("A1", "A2", "B1", "B2", "C1", "C2")
DIFFICULTY_DIRECTIONS = ("easier", "harder", "auto") + CEFR_LEVELS
OVERRIDE_MODES = ("learning", "practicing", "fluent")

MIN_EASE = 1.3
MAX_STARS = 5
MIN_STARS = 1
PERMANENT_STREAK = 5


class RecallQuality(str, Enum):
    FORGOT = "forgot"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


@dataclass
class VocabularyEntry:
    """A word in the learner's spaced-repetition bank."""

    word: str
    meaning: str = ""
    ease: float = 2.3
    interval: int = 1
    repetitions: int = 0
    next_review: str = ""
    notes: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> VocabularyEntry:
        return cls(
            word=data.get("word", ""),
            meaning=data.get("meaning", ""),
            ease=float(data.get("ease", 2.3)),
            interval=int(data.get("interval", 1)),
            repetitions=int(data.get("repetitions", 0)),
            next_review=data.get("next_review", ""),
            notes=data.get("notes", ""),
        )


@dataclass
class GrammarRule:
    """A grammar construct with a 1-5 star proficiency rating."""

    rule: str
    description: str = ""
    level: str = "A1"
    stars: int = 1
    last_used: str = ""
    correct_streak: int = 0
    permanent: bool = False
    notes: str = ""

    @property
    def star_bar(self) -> str:
        return "★" * self.stars + "☆" * (MAX_STARS - self.stars)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> GrammarRule:
        return cls(
            rule=data.get("rule", ""),
            description=data.get("description", ""),
            level=data.get("level", "A1"),
            stars=int(data.get("stars", 1)),
            last_used=data.get("last_used", ""),
            correct_streak=int(data.get("correct_streak", 0)),
            permanent=bool(data.get("permanent", False)),
            notes=data.get("notes", ""),
        )


@dataclass
class Difficulty:
    level: str = "auto"
    notes: str = ""


@dataclass
class Preferences:
    new_vocab_per_exchange: int = 2
    new_grammar_threshold: int = 3
    show_romanization: bool = True


@dataclass
class Adjustment:
    """One entry in the append-only difficulty log."""

    date: str
    direction: str
    reason: str = ""


@dataclass
class UserOverrides:
    """Learner preferences and difficulty overrides for one language."""

    language: str = ""
    mode: str = "learning"
    difficulty: Difficulty = field(default_factory=Difficulty)
    preferences: Preferences = field(default_factory=Preferences)
    adjustments: list[Adjustment] = field(default_factory=list)
    notes: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> UserOverrides:
        difficulty = data.get("difficulty") or {}
        prefs = data.get("preferences") or {}
        defaults = Preferences()
        return cls(
            language=data.get("language", ""),
            mode=data.get("mode", "learning"),
            difficulty=Difficulty(
                level=difficulty.get("level", "auto"),
                notes=difficulty.get("notes", ""),
            ),
            preferences=Preferences(
                new_vocab_per_exchange=prefs.get(
                    "new_vocab_per_exchange", defaults.new_vocab_per_exchange
                ),
                new_grammar_threshold=prefs.get(
                    "new_grammar_threshold", defaults.new_grammar_threshold
                ),
                show_romanization=prefs.get("show_romanization", defaults.show_romanization),
            ),
            adjustments=[
                Adjustment(
                    date=a.get("date", ""),
                    direction=a.get("direction", ""),
                    reason=a.get("reason", ""),
                )
                for a in data.get("adjustments", [])
            ],
            notes=data.get("notes", ""),
        )


@dataclass
class ModeSessions:
    """Mapping of learning mode to Claude conversation id."""

    sessions: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"sessions": dict(self.sessions)}

    @classmethod
    def from_dict(cls, data: dict) -> ModeSessions:
        sessions = data.get("sessions") if isinstance(data, dict) else None
        if not isinstance(sessions, dict):
            return cls()
        return cls(sessions={k: v for k, v in sessions.items() if isinstance(v, str)})


@dataclass
class LanguageConfig:
    """Contents of a language's config.json."""

    language: str
    native_script: str
    romanization: str
    started: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ChatMessage:
    role: str  # "user" or "assistant"
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}
