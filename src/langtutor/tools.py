"""Tool definitions for the API tracker backend."""

from .models import CEFR_LEVELS, DIFFICULTY_DIRECTIONS, RecallQuality

TRACKER_TOOLS = [
    {
        "name": "get_vocabulary",
        "description": "List the words the learner has seen, with their spaced-repetition state.",
        "input_schema": {
            "type": "object",
            "properties": {},
            "required": []
        }
    },
    {
        "name": "get_grammar",
        "description": "List the grammar rules the learner has seen, with star ratings and streaks.",
        "input_schema": {
            "type": "object",
            "properties": {},
            "required": []
        }
    },
    {
        "name": "record_word_used",
        "description": "Credit a correct use of a TARGET LANGUAGE word. Adds the word if it is new, otherwise advances its review schedule. Never use for English words.",
        "input_schema": {
            "type": "object",
            "properties": {
                "word": {
                    "type": "string",
                    "description": "The word in the target language's script"
                },
                "meaning": {
                    "type": "string",
                    "description": "Short English meaning"
                }
            },
            "required": ["word", "meaning"]
        }
    },
    {
        "name": "add_word",
        "description": "Add a word the learner has just been exposed to but not yet used. No-op if it already exists.",
        "input_schema": {
            "type": "object",
            "properties": {
                "word": {"type": "string"},
                "meaning": {"type": "string"}
            },
            "required": ["word", "meaning"]
        }
    },
    {
        "name": "mark_word_recalled",
        "description": "Record how well the learner recalled a known word. Use 'forgot' or 'hard' when they struggled or misused it.",
        "input_schema": {
            "type": "object",
            "properties": {
                "word": {"type": "string"},
                "quality": {
                    "type": "string",
                    "enum": [q.value for q in RecallQuality]
                }
            },
            "required": ["word", "quality"]
        }
    },
    {
        "name": "update_word_note",
        "description": "Replace the note attached to a known word (usage hints, common mistakes).",
        "input_schema": {
            "type": "object",
            "properties": {
                "word": {"type": "string"},
                "note": {"type": "string"}
            },
            "required": ["word", "note"]
        }
    },
    {
        "name": "add_grammar",
        "description": "Add a grammar rule the learner has used for the first time. No-op if it already exists.",
        "input_schema": {
            "type": "object",
            "properties": {
                "rule": {
                    "type": "string",
                    "description": "Short unique name for the construct"
                },
                "description": {"type": "string"},
                "level": {
                    "type": "string",
                    "enum": list(CEFR_LEVELS)
                }
            },
            "required": ["rule", "description", "level"]
        }
    },
    {
        "name": "mark_grammar_used",
        "description": "Record whether the learner used a known grammar rule correctly.",
        "input_schema": {
            "type": "object",
            "properties": {
                "rule": {"type": "string"},
                "correct": {"type": "boolean"}
            },
            "required": ["rule", "correct"]
        }
    },
    {
        "name": "adjust_difficulty",
        "description": "Change the difficulty when the learner explicitly asks for easier or harder material.",
        "input_schema": {
            "type": "object",
            "properties": {
                "direction": {
                    "type": "string",
                    "enum": list(DIFFICULTY_DIRECTIONS)
                },
                "reason": {"type": "string"}
            },
            "required": ["direction"]
        }
    },
]
