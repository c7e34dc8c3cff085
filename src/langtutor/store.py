"""Read-modify-write helpers for per-language JSON documents.

Each state file is rewritten whole through atomic_json_write. There is no
locking: two writers racing on the same file can lose an update.
"""

import json
from pathlib import Path

from .errors import CorruptStateError, InvalidValueError, StateFileMissingError
from .paths import atomic_json_write


def load_document(lang_dir: Path, filename: str) -> dict:
    """Load a state file, raising if it is missing or unreadable."""
    path = Path(lang_dir) / filename
    if not path.is_file():
        raise StateFileMissingError(f"Error: ./{filename} not found")
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CorruptStateError(f"Error: ./{filename} is not valid JSON ({e})") from e
    if not isinstance(data, dict):
        raise CorruptStateError(f"Error: ./{filename} must contain a JSON object")
    return data


def save_document(lang_dir: Path, filename: str, data: dict) -> None:
    """Replace a state file with new contents."""
    atomic_json_write(Path(lang_dir) / filename, data)


def records(data: dict, key: str) -> list[dict]:
    """Return the record list stored under key, creating it if absent."""
    items = data.get(key)
    if not isinstance(items, list):
        items = []
        data[key] = items
    return items


def find_record(items: list[dict], field: str, value: str) -> dict | None:
    """First record whose field equals value."""
    for item in items:
        if isinstance(item, dict) and item.get(field) == value:
            return item
    return None


def require_text(**fields: str) -> None:
    """Raise InvalidValueError for any blank argument."""
    for name, value in fields.items():
        if not isinstance(value, str) or not value.strip():
            raise InvalidValueError(f"Error: {name} cannot be empty")


def parse_record(model, raw: dict, filename: str):
    """Build a model from a stored dict; wrongly typed fields raise CorruptStateError."""
    try:
        return model.from_dict(raw)
    except (TypeError, ValueError, AttributeError) as e:
        raise CorruptStateError(f"Error: ./{filename} contains an invalid record ({e})") from e
