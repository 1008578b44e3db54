"""Nearest-neighbour storage for submission and chunk embeddings."""

from .base import (
    BaseVectorIndex,
    IndexPoint,
    VectorMatch,
    PointKind,
    build_submission_points,
    MAX_PAYLOAD_CODE_CHARS,
)
from .memory import InMemoryVectorIndex
from .qdrant import QdrantVectorIndex
from ..core.config import VectorIndexConfig


def create_vector_index(config: VectorIndexConfig, vector_size: int = 1536) -> BaseVectorIndex:
    """Build the index backend named in the configuration."""
    if config.backend == "memory":
        return InMemoryVectorIndex(top_k=config.search_top_k)
    return QdrantVectorIndex(config, vector_size=vector_size)


__all__ = [
    "BaseVectorIndex",
    "IndexPoint",
    "VectorMatch",
    "PointKind",
    "build_submission_points",
    "MAX_PAYLOAD_CODE_CHARS",
    "InMemoryVectorIndex",
    "QdrantVectorIndex",
    "create_vector_index",
]
