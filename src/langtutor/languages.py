"""Creating, listing and removing per-language workspaces."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from datetime import date

from loguru import logger

from .errors import LanguageExistsError, LanguageNotFoundError
from .models import LanguageConfig
from .overrides import default_overrides
from .paths import (
    GRAMMAR_FILENAME,
    INSTRUCTIONS_FILENAME,
    LANGUAGE_CONFIG_FILENAME,
    OVERRIDES_FILENAME,
    VOCABULARY_FILENAME,
    atomic_json_write,
    capitalize_first,
    get_data_dir,
    get_language_dir,
)

TUTOR_TEMPLATE = """# {language} Language Tutor

You are an immersive {language} language tutor helping a learner acquire the language naturally.
Native script: {native_script}. Romanization: {romanization}.

---

## Your Role: RESPOND ONLY

A separate tracker agent updates the learner's files. Your ONLY job is to reply to the learner.
Do NOT edit vocabulary.json, grammar.json or user-overrides.json.

You MAY read those files to understand the learner's current level.

---

## The Big Picture

Teach the way a child learns a first language: immersion, repetition and gradual expansion.
The learner should think IN {language}, not translate from English.

---

## How to Respond

### Check the mode (user-overrides.json -> mode)

**learning** (default):
- Read vocabulary.json to see which words the learner knows
- Reply with mostly known words plus about `preferences.new_vocab_per_exchange` new ones
- Mirror their structures and extend slightly

**practicing**:
- The learner has intermediate knowledge
- Reply naturally while staying near their level

**fluent**:
- Converse naturally in {language}; no need to restrict vocabulary

### Difficulty (user-overrides.json -> difficulty.level)

`auto` means judge from the files. `easier`/`harder` shift one step from your judgement.
A CEFR level (A1-C2) pins the level.

### Scaffolding

When the learner says something:
1. **Correct** - restate it in proper {language}
2. **Acknowledge** - react to what they said
3. **Extend** - add 1-2 new WORDS using grammar they already know

Do NOT introduce grammar the learner has not seen (check grammar.json). Only introduce new
grammar once every known rule has at least `preferences.new_grammar_threshold` stars.

---

## Key Principles

**Immersion:** Stay in {language}. No English explanations.

**Natural:** Sound like a patient native speaker, not a textbook.

**Cold start:** If vocabulary.json is empty, open with a simple greeting and an emoji.

---

## Language-Specific Notes

{notes}

---

## Summary

1. You are the RESPONDER - do not update files
2. Check the mode and difficulty
3. Correct -> acknowledge -> extend
4. Stay immersive
"""

GENERIC_NOTES = """## Language-Specific Considerations

- Research and add language-specific grammar patterns as you encounter them
- Pay attention to any unique features of this language
- Adapt greeting and teaching style to cultural norms
- Start with the simplest possible greeting and self-introduction"""


@dataclass(frozen=True)
class LanguageInfo:
    native_script: str
    romanization: str
    notes: str


DEFAULT_LANGUAGE_INFO = LanguageInfo("Native Script", "none", GENERIC_NOTES)

_CHINESE = LanguageInfo(
    "汉字",
    "pinyin",
    """## Chinese-Specific Considerations

- **Tones**: Watch tone usage in the learner's pinyin (if provided)
- **Characters vs Pinyin**: Track whether the learner writes characters or pinyin
- **Measure words (量词)**: Track these as grammar constructs
- **Common structures**: 是...的, 把-sentences, 被-passive, 了/过/着 aspects
- **Cold start**: "👋 你好 (nǐ hǎo)" - one word with emoji and pinyin""",
)

LANGUAGE_INFO: dict[str, LanguageInfo] = {
    "chinese": _CHINESE,
    "mandarin": _CHINESE,
    "korean": LanguageInfo(
        "한글",
        "none",
        """## Korean-Specific Considerations

- **Speech levels**: Track which levels the learner knows (합쇼체, 해요체, 해체)
- **Particles**: Track 은/는, 이/가, 을/를 and others as grammar
- **Verb conjugation**: Track tense and politeness endings
- **Honorifics**: Note when honorific forms are used or needed
- **Cold start**: "👋 안녕 (annyeong)" - one word with emoji and romanization""",
    ),
    "japanese": LanguageInfo(
        "日本語",
        "romaji",
        """## Japanese-Specific Considerations

- **Politeness**: Track です/ます versus casual forms
- **Particles**: Track は, が, を, に, で and others as grammar
- **Verb groups**: Note which conjugation patterns the learner knows
- **Kanji vs Kana**: Track which kanji the learner knows
- **Cold start**: "👋 こんにちは (konnichiwa)" - one word with emoji and romaji""",
    ),
    "spanish": LanguageInfo(
        "Español",
        "none",
        """## Spanish-Specific Considerations

- **Verb conjugation**: Track known tenses and moods
- **Ser vs Estar**: Track as separate grammar constructs
- **Subjunctive**: Introduce gradually
- **Gender agreement**: Track as a grammar construct
- **Cold start**: "👋 Hola" - one word with emoji""",
    ),
    "french": LanguageInfo(
        "Français",
        "none",
        """## French-Specific Considerations

- **Verb conjugation**: Track known tenses and moods
- **Gender and articles**: Track as grammar constructs
- **Liaisons**: Note pronunciation patterns
- **tu/vous**: Track which form the learner uses
- **Cold start**: "👋 Bonjour" - one word with emoji""",
    ),
    "german": LanguageInfo(
        "Deutsch",
        "none",
        """## German-Specific Considerations

- **Cases**: Track nominative, accusative, dative and genitive separately
- **Word order**: Track the V2 rule and subordinate clause order
- **Gender and articles**: Track der/die/das patterns
- **Sie/du**: Track which form the learner uses
- **Cold start**: "👋 Hallo" - one word with emoji""",
    ),
}


def get_language_info(language: str) -> LanguageInfo:
    return LANGUAGE_INFO.get(language.lower(), DEFAULT_LANGUAGE_INFO)


def render_instructions(language: str, info: LanguageInfo) -> str:
    """Render CLAUDE.md for a language."""
    return TUTOR_TEMPLATE.format(
        language=language,
        native_script=info.native_script,
        romanization=info.romanization,
        notes=info.notes,
    )


def bootstrap_language(language: str, today: date | None = None) -> str:
    """Create the workspace for a new language."""
    lang_dir = get_language_dir(language)
    if lang_dir.exists():
        raise LanguageExistsError(f"Language '{language}' already exists")

    lang_dir.mkdir(parents=True)
    info = get_language_info(language)

    (lang_dir / INSTRUCTIONS_FILENAME).write_text(
        render_instructions(language, info), encoding="utf-8"
    )
    atomic_json_write(lang_dir / VOCABULARY_FILENAME, {"language": language, "words": []})
    atomic_json_write(lang_dir / GRAMMAR_FILENAME, {"language": language, "rules": []})
    atomic_json_write(lang_dir / OVERRIDES_FILENAME, default_overrides(language).to_dict())

    config = LanguageConfig(
        language=language,
        native_script=info.native_script,
        romanization=info.romanization,
        started=(today or date.today()).isoformat(),
    )
    atomic_json_write(lang_dir / LANGUAGE_CONFIG_FILENAME, config.to_dict())

    logger.info(f"Bootstrapped {language} at {lang_dir}")
    return f"Successfully bootstrapped {language}"


def list_languages() -> list[str]:
    """Names of all bootstrapped languages."""
    data_dir = get_data_dir()
    if not data_dir.exists():
        return []
    return sorted(
        capitalize_first(entry.name)
        for entry in data_dir.iterdir()
        if entry.is_dir() and not entry.name.startswith(".")
    )


def delete_language(language: str) -> str:
    lang_dir = get_language_dir(language)
    if not lang_dir.exists():
        raise LanguageNotFoundError(f"Language '{language}' does not exist")
    shutil.rmtree(lang_dir)
    logger.info(f"Deleted {language}")
    return f"Deleted {language}"


def require_language_dir(language: str):
    """Language directory, raising if it has not been bootstrapped."""
    lang_dir = get_language_dir(language)
    if not lang_dir.exists():
        raise LanguageNotFoundError(
            f"Language '{language}' not set up. Please bootstrap it first."
        )
    return lang_dir


def _read_language_file(language: str, filename: str) -> str:
    path = get_language_dir(language) / filename
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise LanguageNotFoundError(f"Failed to read {filename}: {e}") from e


def get_vocabulary(language: str) -> str:
    """Raw vocabulary.json text."""
    return _read_language_file(language, VOCABULARY_FILENAME)


def get_grammar(language: str) -> str:
    """Raw grammar.json text."""
    return _read_language_file(language, GRAMMAR_FILENAME)
