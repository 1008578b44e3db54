"""Embedding vector validation and similarity helpers."""

from typing import List, Optional, Sequence

import numpy as np

from ..core.exceptions import InvalidEmbeddingError


# Vectors shorter than this cannot be normalized meaningfully
MIN_MAGNITUDE = 1e-8


def validate_embedding(embedding: Sequence[float], dimensions: Optional[int] = None) -> List[float]:
    """
    Check that a vector is usable as a similarity signal.

    Rejects wrong length, non-numeric or non-finite values, all-zero vectors
    and vectors with near-zero magnitude. Returns the vector as plain floats.

    Raises:
        InvalidEmbeddingError: with ``reason`` naming the failed check
    """
    try:
        vector = np.asarray(embedding, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidEmbeddingError(f"Embedding is not numeric: {e}", reason="not_numeric")

    if vector.ndim != 1 or vector.size == 0:
        raise InvalidEmbeddingError("Embedding must be a non-empty flat vector", reason="shape")

    size = int(vector.size)

    if dimensions is not None and size != dimensions:
        raise InvalidEmbeddingError(
            f"Expected {dimensions} dimensions, got {size}",
            reason="dimensions",
            dimensions=size,
        )

    if not np.all(np.isfinite(vector)):
        raise InvalidEmbeddingError("Embedding contains non-finite values", reason="non_finite", dimensions=size)

    if not np.any(vector):
        raise InvalidEmbeddingError("Embedding is all zeros", reason="all_zero", dimensions=size)

    magnitude = float(np.linalg.norm(vector))
    if magnitude < MIN_MAGNITUDE:
        raise InvalidEmbeddingError(
            f"Embedding magnitude {magnitude:.3e} is too small",
            reason="magnitude",
            dimensions=size,
        )

    return vector.tolist()


def is_valid_embedding(embedding: Sequence[float], dimensions: Optional[int] = None) -> bool:
    try:
        validate_embedding(embedding, dimensions)
    except InvalidEmbeddingError:
        return False
    return True


def cosine_similarity(embedding1: Sequence[float], embedding2: Sequence[float]) -> float:
    """Cosine similarity of two vectors; 0.0 when either has zero norm."""
    a = np.asarray(embedding1, dtype=np.float64)
    b = np.asarray(embedding2, dtype=np.float64)

    if a.shape != b.shape:
        raise ValueError("Embeddings must have the same dimensions")

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(a, b) / (norm_a * norm_b))
