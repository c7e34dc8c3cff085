"""Shared fixtures: every test gets its own data, state and home folders."""

from datetime import date
from unittest.mock import patch

import pytest
from loguru import logger

from langtutor.languages import bootstrap_language

TODAY = date(2025, 3, 10)


@pytest.fixture
def data_dir(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    with patch("langtutor.paths.DATA_DIR", data):
        yield data


@pytest.fixture
def state_dir(tmp_path):
    state = tmp_path / ".langtutor"
    with patch("langtutor.paths.STATE_DIR", state), \
         patch("langtutor.config.CONFIG_FILE", state / "config.json"), \
         patch("langtutor.log.LOG_FILE", state / "langtutor-debug.log"):
        yield state
    logger.remove()


@pytest.fixture
def home(tmp_path):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    with patch("pathlib.Path.home", return_value=home_dir):
        yield home_dir


@pytest.fixture
def lang_dir(data_dir):
    bootstrap_language("Spanish", today=TODAY)
    return data_dir / "spanish"
