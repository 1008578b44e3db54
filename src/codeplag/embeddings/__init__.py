"""Embedding service client, retry policy and vector validation."""

from .client import EmbeddingClient, ChunkEmbedding, prepare_text, code_context
from .retry import RetryPolicy, is_transient_error
from .validation import validate_embedding, is_valid_embedding, cosine_similarity

__all__ = [
    "EmbeddingClient",
    "ChunkEmbedding",
    "prepare_text",
    "code_context",
    "RetryPolicy",
    "is_transient_error",
    "validate_embedding",
    "is_valid_embedding",
    "cosine_similarity",
]
