"""Configuration for score fusion."""

from typing import Dict
from pydantic import BaseModel, Field, field_validator

from ..core.models import DetectionMethod


# AST similarity dominates; embeddings alone over-credit independent solutions
DEFAULT_WEIGHTS: Dict[DetectionMethod, float] = {
    DetectionMethod.SEMANTIC_EMBEDDINGS: 0.20,
    DetectionMethod.COPYDETECT: 0.20,
    DetectionMethod.TREESITTER: 0.40,
    DetectionMethod.DIFFLIB: 0.20,
}

WEIGHT_SUM_TOLERANCE = 1e-6


class ScoringConfig(BaseModel):
    """Method weights and the thresholds used around a similarity check."""

    weights: Dict[DetectionMethod, float] = Field(default_factory=lambda: dict(DEFAULT_WEIGHTS))

    # Report threshold
    default_threshold: float = Field(default=0.75, ge=0.0, le=1.0)

    # Nearest-neighbour search
    chunk_threshold: float = Field(default=0.75, ge=0.0, le=1.0)
    submission_min_similarity: float = Field(default=0.3, ge=0.0, le=1.0)
    max_results: int = Field(default=5, ge=1, le=100)
    chunk_matches_per_chunk: int = Field(default=5, ge=1, le=100)

    @field_validator('weights')
    @classmethod
    def validate_weights(cls, v: Dict[DetectionMethod, float]) -> Dict[DetectionMethod, float]:
        missing = set(DetectionMethod) - set(v)
        if missing:
            names = ", ".join(sorted(m.value for m in missing))
            raise ValueError(f"Weights missing for: {names}")

        if any(w < 0 for w in v.values()):
            raise ValueError("Weights must be non-negative")

        total = sum(v.values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Weights must sum to 1.0, got {total:.4f}")
        return v
