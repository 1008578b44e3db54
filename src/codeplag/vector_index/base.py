"""Base class and data models for nearest-neighbour indexes."""

import logging
import time
import uuid
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from ..embeddings.client import ChunkEmbedding


logger = logging.getLogger(__name__)

# Cap on stored chunk text
MAX_PAYLOAD_CODE_CHARS = 1000


class PointKind(str, Enum):
    """What an indexed vector represents."""

    SUBMISSION = "submission"
    CHUNK = "chunk"


class IndexPoint(BaseModel):
    """A vector with its payload, ready to store."""

    identifier: str
    vector: List[float]
    payload: Dict[str, Any] = Field(default_factory=dict)


class VectorMatch(BaseModel):
    """A ranked search hit."""

    identifier: str
    score: float
    payload: Dict[str, Any] = Field(default_factory=dict)


def submission_point_id(submission_id: str) -> str:
    return f"sub_{submission_id}"


def chunk_point_id(submission_id: str, chunk_index: int) -> str:
    return f"sub_{submission_id}_chunk_{chunk_index}"


def point_uuid(identifier: str) -> str:
    """Stable UUID for stores that only accept UUID or integer ids."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, identifier))


def build_submission_points(submission_id: str,
                            student_id: str,
                            question_id: str,
                            code: str,
                            embedding: Sequence[float],
                            chunks: Sequence[ChunkEmbedding] = ()) -> List[IndexPoint]:
    """One submission point plus one point per chunk."""
    timestamp = int(time.time() * 1000)

    points = [
        IndexPoint(
            identifier=submission_point_id(submission_id),
            vector=list(embedding),
            payload={
                "kind": PointKind.SUBMISSION.value,
                "submission_id": submission_id,
                "student_id": student_id,
                "question_id": question_id,
                "code": code,
                "code_length": len(code),
                "timestamp": timestamp,
            },
        )
    ]

    for position, chunk in enumerate(chunks):
        points.append(
            IndexPoint(
                identifier=chunk_point_id(submission_id, position),
                vector=list(chunk.embedding),
                payload={
                    "kind": PointKind.CHUNK.value,
                    "submission_id": submission_id,
                    "student_id": student_id,
                    "question_id": question_id,
                    "chunk_index": position,
                    "chunk_text": chunk.text[:MAX_PAYLOAD_CODE_CHARS],
                    "timestamp": timestamp,
                },
            )
        )

    return points


class BaseVectorIndex(ABC):
    """Stores submission and chunk vectors scoped by question."""

    def __init__(self, top_k: int = 100):
        self.top_k = top_k

    @abstractmethod
    def upsert(self, points: Sequence[IndexPoint]) -> int:
        """Insert or replace points; returns how many were written."""
        pass

    @abstractmethod
    def query(self,
              query_vector: Sequence[float],
              filters: Dict[str, Any],
              top_k: int) -> List[VectorMatch]:
        """Nearest neighbours matching every payload filter, best first."""
        pass

    @abstractmethod
    def get(self, identifier: str) -> Optional[IndexPoint]:
        """Fetch a stored point by identifier."""
        pass

    def upsert_submission(self,
                          submission_id: str,
                          student_id: str,
                          question_id: str,
                          code: str,
                          embedding: Sequence[float],
                          chunks: Sequence[ChunkEmbedding] = ()) -> int:
        """Store a submission vector and its chunk vectors."""
        points = build_submission_points(submission_id, student_id, question_id, code, embedding, chunks)
        count = self.upsert(points)
        logger.info(f"Saved submission {submission_id} with {len(chunks)} chunks")
        return count

    def search(self,
               query_vector: Sequence[float],
               scope: str,
               limit: int = 5,
               min_score: float = 0.0,
               kind: PointKind = PointKind.SUBMISSION) -> List[VectorMatch]:
        """
        Ranked matches of one kind within a scope.

        Fetches ``top_k`` candidates, keeps those scoring at least
        ``min_score`` and returns at most ``limit`` of them.
        """
        filters = {"kind": PointKind(kind).value, "question_id": scope}
        candidates = self.query(query_vector, filters, self.top_k)

        results = [m for m in candidates if m.score >= min_score][:limit]

        logger.debug(f"Found {len(results)} {PointKind(kind).value} matches (min score: {min_score})")
        return results

    def get_submission(self, submission_id: str) -> Optional[Dict[str, Any]]:
        """Payload of a stored submission, or None."""
        point = self.get(submission_point_id(submission_id))
        return point.payload if point is not None else None
