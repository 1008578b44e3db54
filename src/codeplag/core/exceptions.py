"""Exception hierarchy for codeplag."""

from typing import Optional


class CodePlagError(Exception):
    """Base exception for all codeplag errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class EmbeddingError(CodePlagError):
    """Base exception for embedding collaborator errors."""
    pass


class EmbeddingServiceError(EmbeddingError):
    """Raised when the embedding service cannot produce a vector."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, {"status_code": status_code})
        self.status_code = status_code


class InvalidEmbeddingError(EmbeddingError):
    """Raised when a produced vector is unusable as a similarity signal."""

    def __init__(self, message: str, reason: str, dimensions: Optional[int] = None):
        super().__init__(message, {"reason": reason, "dimensions": dimensions})
        self.reason = reason
        self.dimensions = dimensions


class VectorIndexError(CodePlagError):
    """Raised when the vector index rejects an operation."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message, {"operation": operation})
        self.operation = operation


class ExternalComparisonError(CodePlagError):
    """Raised when the external comparison service returns an unusable payload."""
    pass
