"""Qdrant-backed vector index."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from qdrant_client import QdrantClient
from qdrant_client.http import models

from ..core.config import VectorIndexConfig
from ..core.exceptions import VectorIndexError
from .base import BaseVectorIndex, IndexPoint, VectorMatch, point_uuid


logger = logging.getLogger(__name__)

# Original identifier, kept because Qdrant ids must be UUIDs or integers
IDENTIFIER_KEY = "point_id"


class QdrantVectorIndex(BaseVectorIndex):
    """Stores points in one Qdrant collection using cosine distance."""

    def __init__(self,
                 config: Optional[VectorIndexConfig] = None,
                 vector_size: int = 1536,
                 client: Optional[QdrantClient] = None):
        self.config = config or VectorIndexConfig()
        super().__init__(top_k=self.config.search_top_k)

        if client is None:
            if not self.config.url:
                raise VectorIndexError("Qdrant URL not configured", operation="connect")
            client = QdrantClient(url=self.config.url, api_key=self.config.api_key)

        self.client = client
        self.collection_name = self.config.collection_name
        self.vector_size = vector_size
        self._ensure_collection()

    def _ensure_collection(self) -> None:
        """Create collection if it doesn't exist."""
        try:
            if self.client.collection_exists(self.collection_name):
                logger.debug(f"Collection {self.collection_name} already exists")
                return

            logger.info(f"Creating collection: {self.collection_name}")
            self.client.create_collection(
                collection_name=self.collection_name,
                vectors_config=models.VectorParams(
                    size=self.vector_size,
                    distance=models.Distance.COSINE,
                ),
            )
        except Exception as e:
            raise VectorIndexError(f"Error ensuring collection: {e}", operation="create_collection")

    def upsert(self, points: Sequence[IndexPoint]) -> int:
        structs = [
            models.PointStruct(
                id=point_uuid(point.identifier),
                vector=point.vector,
                payload={**point.payload, IDENTIFIER_KEY: point.identifier},
            )
            for point in points
        ]

        try:
            self.client.upsert(collection_name=self.collection_name, points=structs, wait=True)
        except Exception as e:
            raise VectorIndexError(f"Error upserting points: {e}", operation="upsert")

        logger.debug(f"Upserted {len(structs)} points to Qdrant")
        return len(structs)

    def query(self,
              query_vector: Sequence[float],
              filters: Dict[str, Any],
              top_k: int) -> List[VectorMatch]:
        query_filter = None
        if filters:
            query_filter = models.Filter(
                must=[
                    models.FieldCondition(key=key, match=models.MatchValue(value=value))
                    for key, value in filters.items()
                ]
            )

        try:
            hits = self.client.query_points(
                collection_name=self.collection_name,
                query=list(query_vector),
                query_filter=query_filter,
                limit=top_k,
                with_payload=True,
            ).points
        except Exception as e:
            raise VectorIndexError(f"Error searching points: {e}", operation="query")

        return [self._to_match(hit) for hit in hits]

    def get(self, identifier: str) -> Optional[IndexPoint]:
        try:
            records = self.client.retrieve(
                collection_name=self.collection_name,
                ids=[point_uuid(identifier)],
                with_payload=True,
                with_vectors=True,
            )
        except Exception as e:
            raise VectorIndexError(f"Error fetching point {identifier}: {e}", operation="retrieve")

        if not records:
            return None

        record = records[0]
        payload = dict(record.payload or {})
        payload.pop(IDENTIFIER_KEY, None)
        vector = record.vector if isinstance(record.vector, list) else []
        return IndexPoint(identifier=identifier, vector=vector, payload=payload)

    @staticmethod
    def _to_match(hit: models.ScoredPoint) -> VectorMatch:
        payload = dict(hit.payload or {})
        identifier = payload.pop(IDENTIFIER_KEY, str(hit.id))
        return VectorMatch(identifier=identifier, score=hit.score, payload=payload)
