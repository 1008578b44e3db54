"""Exceptions raised inside the chunking package."""

from typing import Optional

from ..core.exceptions import CodePlagError


class ChunkingError(CodePlagError):
    """Base exception for all chunking-related errors."""
    pass


class LanguageNotSupportedError(ChunkingError):
    """Raised when no chunking strategy is registered for a language."""

    def __init__(self, language: Optional[str]):
        message = f"Language '{language}' is not supported for chunking"
        super().__init__(message, {"language": language})
        self.language = language
