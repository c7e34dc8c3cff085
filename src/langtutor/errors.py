"""Exceptions raised by langtutor."""


class TutorError(Exception):
    """Base exception for langtutor errors."""
    pass


class InvalidLanguageError(TutorError):
    """Language name failed validation."""
    pass


class LanguageNotFoundError(TutorError):
    """Language directory does not exist."""
    pass


class LanguageExistsError(TutorError):
    """Language directory already exists."""
    pass


class MessageError(TutorError):
    """Learner message is empty or too long."""
    pass


class AgentError(TutorError):
    """The external Claude process failed or timed out."""
    pass


class StateFileMissingError(TutorError):
    """A per-language JSON state file is missing."""
    pass


class RecordNotFoundError(TutorError):
    """A word or grammar rule is not present in its state file."""
    pass


class InvalidValueError(TutorError):
    """An argument is outside its allowed set of values."""
    pass


class CorruptStateError(TutorError):
    """A per-language JSON state file could not be parsed."""
    pass
