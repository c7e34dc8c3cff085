"""Front-end facing operations, one method per UI action."""

from __future__ import annotations

from .agent import send_message
from .config import Config, load_config
from .languages import (
    bootstrap_language,
    delete_language,
    get_grammar,
    get_vocabulary,
    list_languages,
)
from .models import ChatMessage
from .modes import DEFAULT_MODE
from .sessions import get_chat_history


class TutorService:
    """Fixed operation surface used by the chat front end."""

    def __init__(self, config: Config | None = None):
        self.config = config or load_config()

    def bootstrap_language(self, language: str) -> str:
        return bootstrap_language(language)

    def list_languages(self) -> list[str]:
        return list_languages()

    def delete_language(self, language: str) -> str:
        return delete_language(language)

    def send_message(self, message: str, language: str, mode: str = DEFAULT_MODE) -> str:
        return send_message(message, language, mode, self.config)

    def get_chat_history(self, language: str, mode: str = DEFAULT_MODE) -> list[ChatMessage]:
        return get_chat_history(language, mode)

    def get_vocabulary(self, language: str) -> str:
        return get_vocabulary(language)

    def get_grammar(self, language: str) -> str:
        return get_grammar(language)
