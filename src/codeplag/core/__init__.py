"""Core models, configuration and language handling."""

from .exceptions import (
    CodePlagError,
    EmbeddingError,
    EmbeddingServiceError,
    InvalidEmbeddingError,
    VectorIndexError,
    ExternalComparisonError,
)
from .languages import SupportedLanguage, LanguageFamily, resolve_language, language_family
from .models import (
    DetectionMethod,
    ConfidenceLevel,
    PlagiarismType,
    PlagiarismSeverity,
    OutputFormat,
    LocalSignal,
    ToolMatch,
    ToolComparison,
    CounterpartSummary,
    ExternalSignals,
    StructuralInputs,
    MethodScore,
    ScoreBreakdown,
    Classification,
    PlagiarismReport,
)

__all__ = [
    # Exceptions
    "CodePlagError",
    "EmbeddingError",
    "EmbeddingServiceError",
    "InvalidEmbeddingError",
    "VectorIndexError",
    "ExternalComparisonError",

    # Languages
    "SupportedLanguage",
    "LanguageFamily",
    "resolve_language",
    "language_family",

    # Models
    "DetectionMethod",
    "ConfidenceLevel",
    "PlagiarismType",
    "PlagiarismSeverity",
    "OutputFormat",
    "LocalSignal",
    "ToolMatch",
    "ToolComparison",
    "CounterpartSummary",
    "ExternalSignals",
    "StructuralInputs",
    "MethodScore",
    "ScoreBreakdown",
    "Classification",
    "PlagiarismReport",
]
