"""
AI Service Exceptions

Kept apart from service.py so providers.py can raise them without a circular import.
"""


class TranslationError(Exception):
    """The translation collaborator failed; code and details describe why."""

    def __init__(self, message: str, code: str = "translation_error", details: dict = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}
