"""Embedding generation against an OpenAI-compatible embeddings endpoint."""

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx
from pydantic import BaseModel

from ..chunking.models import CodeChunk
from ..core.config import EmbeddingConfig
from ..core.exceptions import EmbeddingServiceError
from .retry import RetryPolicy
from .validation import is_valid_embedding, validate_embedding


logger = logging.getLogger(__name__)

WHITESPACE = re.compile(r'\s+')


class ChunkEmbedding(BaseModel):
    """A chunk's text paired with its vector."""

    index: int
    text: str
    embedding: List[float]


def prepare_text(text: str) -> str:
    """Collapse whitespace runs into single spaces."""
    return WHITESPACE.sub(' ', text.strip())


def code_context(code: str, language: str) -> str:
    """Tell the model the text is code in a given language."""
    return f"{language} code:\n{code}"


class EmbeddingClient:
    """Client for generating code embeddings."""

    def __init__(self,
                 config: Optional[EmbeddingConfig] = None,
                 retry_policy: Optional[RetryPolicy] = None,
                 http_client: Optional[httpx.Client] = None,
                 api_key: Optional[str] = None):
        self.config = config or EmbeddingConfig()

        self.api_key = api_key or self.config.api_key
        if not self.api_key:
            raise EmbeddingServiceError("Embedding API key not provided")

        dimensions = self.config.dimensions
        base_policy = retry_policy or RetryPolicy.from_config(self.config.retry)
        if base_policy.is_valid is None:
            # Invalid vectors get retried before they are reported
            base_policy = base_policy.with_validity(
                lambda vectors: all(is_valid_embedding(v, dimensions) for v in vectors)
            )
        self.retry_policy = base_policy

        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
        )

    def with_api_key(self, api_key: Optional[str]) -> "EmbeddingClient":
        """Per-request copy using a caller-supplied key; shares the HTTP client."""
        if not api_key:
            return self
        return EmbeddingClient(
            config=self.config,
            retry_policy=self.retry_policy,
            http_client=self._http,
            api_key=api_key,
        )

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "EmbeddingClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def embed(self, text: str) -> List[float]:
        """Generate the embedding for a single text."""
        prepared = prepare_text(text)
        if not prepared:
            raise ValueError("Cannot generate embedding for empty text")

        logger.debug(f"Generating embedding for text ({len(prepared)} chars)")

        vectors = self.retry_policy.call(self._request, [prepared])
        return validate_embedding(vectors[0], self.config.dimensions)

    def embed_batch(self, texts: Sequence[str]) -> List[List[float]]:
        """
        Generate embeddings for several texts.

        Empty and whitespace-only texts are skipped, so the result can be
        shorter than the input.
        """
        prepared = [prepare_text(t) for t in texts if t and t.strip()]
        if not prepared:
            return []

        logger.info(f"Generating {len(prepared)} embeddings in batch")

        embeddings: List[List[float]] = []
        batch_size = self.config.batch_size
        for start in range(0, len(prepared), batch_size):
            batch = prepared[start:start + batch_size]
            vectors = self.retry_policy.call(self._request, batch)
            embeddings.extend(validate_embedding(v, self.config.dimensions) for v in vectors)

        return embeddings

    def embed_code(self, code: str, language: str = "javascript") -> List[float]:
        """Embed code with a language hint prefix."""
        return self.embed(code_context(code, language))

    def embed_chunks(self,
                     chunks: Sequence[CodeChunk],
                     language: str = "javascript",
                     transform: Optional[Callable[[str], str]] = None) -> List[ChunkEmbedding]:
        """
        Embed chunks in one pass; results follow the order of ``chunks``.

        ``transform`` rewrites each chunk before embedding (e.g. normalization);
        the returned ChunkEmbedding keeps the original text.
        """
        if not chunks:
            return []

        logger.info(f"Generating embeddings for {len(chunks)} chunks")

        texts = [transform(chunk.text) if transform else chunk.text for chunk in chunks]
        embeddings = self.embed_batch([code_context(text, language) for text in texts])
        if len(embeddings) != len(chunks):
            raise EmbeddingServiceError(
                f"Expected {len(chunks)} chunk embeddings, got {len(embeddings)}"
            )

        return [
            ChunkEmbedding(index=chunk.index, text=chunk.text, embedding=embedding)
            for chunk, embedding in zip(chunks, embeddings)
        ]

    def _request(self, inputs: List[str]) -> List[List[float]]:
        """POST one batch to /embeddings, returning vectors in input order."""
        payload: Dict[str, Any] = {
            "model": self.config.model,
            "input": inputs,
            "encoding_format": "float",
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            response = self._http.post("/embeddings", json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise EmbeddingServiceError(f"Embedding request timed out: {e}")
        except httpx.HTTPError as e:
            raise EmbeddingServiceError(f"Embedding request failed: {e}")

        if response.status_code >= 400:
            raise EmbeddingServiceError(
                f"Embedding service returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            items = response.json()["data"]
            # The service may list vectors out of order
            ordered = sorted(items, key=lambda item: item["index"])
            vectors = [item["embedding"] for item in ordered]
        except (ValueError, KeyError, TypeError) as e:
            raise EmbeddingServiceError(f"Malformed embedding response: {e}", status_code=response.status_code)

        if len(vectors) != len(inputs):
            raise EmbeddingServiceError(
                f"Expected {len(inputs)} embeddings, got {len(vectors)}",
                status_code=response.status_code,
            )

        return vectors
