"""
Exception hierarchy for the quiz application.
"""
from typing import Any


class QuizError(Exception):
    """Base exception carrying a user-facing message and log context."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class NotFoundError(QuizError):
    """Raised when a question or glossary term id does not resolve."""


class ValidationFailure(QuizError):
    """Raised when a submission is malformed."""


class StorageError(QuizError):
    """Raised when a JSON document cannot be read or written."""


class GlossaryUnavailableError(StorageError):
    """Raised when the glossary document cannot be loaded."""


class ApiUnavailableError(QuizError):
    """Raised client-side when the quiz API cannot be reached."""
