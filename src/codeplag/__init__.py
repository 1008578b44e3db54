"""
codeplag: multi-signal source code plagiarism detection.

This package splits submissions into function-level chunks, normalizes away
cosmetic differences, and fuses embedding similarity with external
structural comparison tools into one explainable plagiarism score.
"""

__version__ = "0.1.0"

from .core.models import PlagiarismReport, ScoreBreakdown, LocalSignal, ExternalSignals
from .core.config import Config
from .core.checker import SimilarityChecker
from .chunking import extract_code_chunks
from .normalization import normalize_code
from .scoring import ScoringEngine

# For convenient imports
from .cli.main import main as cli_main

__all__ = [
    "PlagiarismReport",
    "ScoreBreakdown",
    "LocalSignal",
    "ExternalSignals",
    "Config",
    "SimilarityChecker",
    "extract_code_chunks",
    "normalize_code",
    "ScoringEngine",
    "cli_main",
]
