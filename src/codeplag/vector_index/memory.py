"""In-process vector index using numpy cosine similarity."""

import threading
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..core.exceptions import VectorIndexError
from .base import BaseVectorIndex, IndexPoint, VectorMatch


class InMemoryVectorIndex(BaseVectorIndex):
    """Keeps every point in a dict; suitable for tests and small batches."""

    def __init__(self, top_k: int = 100):
        super().__init__(top_k=top_k)
        self._points: Dict[str, IndexPoint] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._points)

    def upsert(self, points: Sequence[IndexPoint]) -> int:
        with self._lock:
            for point in points:
                self._points[point.identifier] = point
        return len(points)

    def get(self, identifier: str) -> Optional[IndexPoint]:
        return self._points.get(identifier)

    def query(self,
              query_vector: Sequence[float],
              filters: Dict[str, Any],
              top_k: int) -> List[VectorMatch]:
        with self._lock:
            candidates = [
                p for p in self._points.values()
                if all(p.payload.get(key) == value for key, value in filters.items())
            ]

        if not candidates:
            return []

        query = np.asarray(query_vector, dtype=np.float64)
        matrix = np.asarray([p.vector for p in candidates], dtype=np.float64)
        if matrix.shape[1] != query.shape[0]:
            raise VectorIndexError(
                f"Query has {query.shape[0]} dimensions, index has {matrix.shape[1]}",
                operation="query",
            )

        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        with np.errstate(divide='ignore', invalid='ignore'):
            scores = np.where(norms > 0, matrix @ query / norms, 0.0)

        order = np.argsort(-scores, kind='stable')[:top_k]
        return [
            VectorMatch(
                identifier=candidates[i].identifier,
                score=float(scores[i]),
                payload=dict(candidates[i].payload),
            )
            for i in order
        ]
