"""Code normalization and structural comparison."""

from .normalizer import (
    CodeNormalizer,
    normalize_code,
    prepare_dual_code,
    create_semantic_signature,
    analyze_structure,
    calculate_structural_penalty,
    penalty_factor_for,
)
from .models import NormalizedCode, StructuralStats, StructuralPenalty

__all__ = [
    "CodeNormalizer",
    "normalize_code",
    "prepare_dual_code",
    "create_semantic_signature",
    "analyze_structure",
    "calculate_structural_penalty",
    "penalty_factor_for",
    "NormalizedCode",
    "StructuralStats",
    "StructuralPenalty",
]
