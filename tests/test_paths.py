"""Tests for paths module - path definitions and language name validation."""

import json
from pathlib import Path

import pytest

from langtutor.errors import InvalidLanguageError
from langtutor.paths import (
    CONFIG_FILE,
    HISTORY_FILE,
    LOG_FILE,
    STATE_DIR,
    atomic_json_write,
    capitalize_first,
    get_claude_project_dir,
    get_language_dir,
    validate_language_name,
)


class TestPathDefinitions:
    def test_state_files_in_state_dir(self):
        assert CONFIG_FILE.parent == STATE_DIR
        assert LOG_FILE.parent == STATE_DIR
        assert HISTORY_FILE.parent == STATE_DIR


class TestValidateLanguageName:
    @pytest.mark.parametrize("name", ["Spanish", "old-norse", "Brazilian Portuguese", "Esperanto2"])
    def test_valid(self, name):
        validate_language_name(name)

    def test_empty(self):
        with pytest.raises(InvalidLanguageError, match="cannot be empty"):
            validate_language_name("")

    @pytest.mark.parametrize("name", ["../etc", "a/b", "a\\b"])
    def test_path_characters(self, name):
        with pytest.raises(InvalidLanguageError, match="invalid characters"):
            validate_language_name(name)

    def test_other_characters(self):
        with pytest.raises(InvalidLanguageError, match="letters, numbers, spaces, and hyphens"):
            validate_language_name("français")


class TestGetLanguageDir:
    def test_lower_cased(self, data_dir):
        assert get_language_dir("Spanish") == data_dir / "spanish"

    def test_rejects_bad_names(self, data_dir):
        with pytest.raises(InvalidLanguageError):
            get_language_dir("..")


class TestClaudeProjectDir:
    def test_posix_path(self, home, tmp_path):
        lang = tmp_path / "my data" / "spanish"
        encoded = str(lang.resolve()).replace("/", "-").replace(" ", "-")
        assert get_claude_project_dir(lang) == home / ".claude" / "projects" / encoded

    def test_no_separators_left(self, home, tmp_path):
        name = get_claude_project_dir(tmp_path / "x y").name
        assert "/" not in name
        assert " " not in name


class TestCapitalizeFirst:
    def test_only_first_letter(self):
        assert capitalize_first("spanish") == "Spanish"
        assert capitalize_first("old norse") == "Old norse"
        assert capitalize_first("") == ""


class TestAtomicJsonWrite:
    def test_writes_unicode_unescaped(self, tmp_path):
        path = tmp_path / "nested" / "out.json"
        atomic_json_write(path, {"script": "汉字"})
        text = path.read_text(encoding="utf-8")
        assert "汉字" in text
        assert json.loads(text) == {"script": "汉字"}

    def test_no_temp_files_left(self, tmp_path):
        atomic_json_write(tmp_path / "out.json", {"a": 1})
        atomic_json_write(tmp_path / "out.json", {"a": 2})
        assert [p.name for p in tmp_path.iterdir()] == ["out.json"]

    def test_failed_write_keeps_original(self, tmp_path):
        path = tmp_path / "out.json"
        atomic_json_write(path, {"a": 1})
        with pytest.raises(TypeError):
            atomic_json_write(path, {"a": object()})
        assert json.loads(path.read_text()) == {"a": 1}
        assert list(Path(tmp_path).glob("*.tmp")) == []
