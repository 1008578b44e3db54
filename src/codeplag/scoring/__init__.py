"""Score fusion, classification and reporting."""

from .engine import (
    ScoringEngine,
    calculate_confidence,
    method_for_tool,
    STRUCTURAL_DIFFERENCE_THRESHOLD,
)
from .config import ScoringConfig, DEFAULT_WEIGHTS

__all__ = [
    "ScoringEngine",
    "ScoringConfig",
    "DEFAULT_WEIGHTS",
    "calculate_confidence",
    "method_for_tool",
    "STRUCTURAL_DIFFERENCE_THRESHOLD",
]
