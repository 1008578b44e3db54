"""Submission storage and similarity checks over the full detection pipeline."""

import logging
import uuid
from functools import partial
from typing import List, Optional

from pydantic import BaseModel, Field

from .config import Config
from .languages import resolve_language
from .models import (
    ExternalSignals,
    LocalSignal,
    PlagiarismReport,
    StructuralInputs,
)
from ..chunking import ChunkExtractor, ChunkStats
from ..embeddings import EmbeddingClient
from ..external import CodeSample, ExternalComparisonClient
from ..external.client import DEFAULT_MAIN_ID
from ..normalization import CodeNormalizer
from ..scoring import ScoringEngine
from ..vector_index import BaseVectorIndex, PointKind, VectorMatch


logger = logging.getLogger(__name__)

# Summary buckets for matched submissions
HIGH_SIMILARITY = 0.85
MODERATE_SIMILARITY = 0.75


class SubmissionResult(BaseModel):
    """Outcome of storing a submission."""

    submission_id: str
    chunk_count: int
    chunk_stats: ChunkStats


class SimilarSubmission(BaseModel):
    """A stored submission close to the checked code."""

    submission_id: str
    student_id: Optional[str] = None
    similarity: float
    code: str = ""
    code_length: int = 0

    @property
    def is_truncated(self) -> bool:
        """Stored code is shorter than what was submitted."""
        return self.code_length > len(self.code)


class SimilarChunk(BaseModel):
    """A stored chunk close to one chunk of the checked code."""

    submission_id: str
    student_id: Optional[str] = None
    similarity: float
    query_chunk_index: int
    query_chunk_text: str
    matched_chunk_index: Optional[int] = None
    matched_chunk_text: str = ""


class CheckSummary(BaseModel):
    """Counts over the local nearest-neighbour matches."""

    total_matched_submissions: int = 0
    high_similarity: int = 0
    moderate_similarity: int = 0
    matched_chunks: int = 0
    max_similarity: float = 0.0
    threshold: float


class CheckResult(BaseModel):
    """Everything a similarity check produced."""

    summary: CheckSummary
    similar_submissions: List[SimilarSubmission] = Field(default_factory=list)
    similar_chunks: List[SimilarChunk] = Field(default_factory=list)
    external: ExternalSignals
    report: PlagiarismReport


def _canonical_language(language: str) -> str:
    resolved = resolve_language(language)
    return resolved.value if resolved is not None else language


class SimilarityChecker:
    """
    Orchestrates chunking, normalization, embedding, search and scoring.

    Collaborators are passed in explicitly; nothing here holds global state,
    so one checker can serve many requests.
    """

    def __init__(self,
                 config: Config,
                 embedder: EmbeddingClient,
                 index: BaseVectorIndex,
                 external: Optional[ExternalComparisonClient] = None,
                 engine: Optional[ScoringEngine] = None,
                 extractor: Optional[ChunkExtractor] = None,
                 normalizer: Optional[CodeNormalizer] = None):
        self.config = config
        self.embedder = embedder
        self.index = index
        self.external = external
        self.normalizer = normalizer or CodeNormalizer()
        self.engine = engine or ScoringEngine(config.scoring, self.normalizer)
        self.extractor = extractor or ChunkExtractor(config.chunking)

    def submit(self,
               code: str,
               student_id: str,
               question_id: str,
               language: str = "javascript",
               submission_id: Optional[str] = None,
               api_key: Optional[str] = None) -> SubmissionResult:
        """Embed a submission and its chunks and store them in the index."""
        self._validate_request(code, question_id)
        if not student_id:
            raise ValueError("Missing required field: student_id")

        submission_id = submission_id or str(uuid.uuid4())
        embedder = self.embedder.with_api_key(api_key)
        normalize = partial(self.normalizer.normalize, language=language)

        logger.info(f"Storing submission {submission_id} for question {question_id}")

        embedding = embedder.embed_code(normalize(code), language)

        chunks = self.extractor.extract(code, language)
        chunk_embeddings = embedder.embed_chunks(chunks, language, transform=normalize)

        self.index.upsert_submission(
            submission_id=submission_id,
            student_id=student_id,
            question_id=question_id,
            code=code,
            embedding=embedding,
            chunks=chunk_embeddings,
        )

        return SubmissionResult(
            submission_id=submission_id,
            chunk_count=len(chunks),
            chunk_stats=ChunkStats.from_chunks(chunks),
        )

    def check(self,
              code: str,
              question_id: str,
              language: str = "javascript",
              threshold: Optional[float] = None,
              max_results: Optional[int] = None,
              api_key: Optional[str] = None) -> CheckResult:
        """Compare code against stored submissions for the same question."""
        self._validate_request(code, question_id)

        scoring = self.config.scoring
        if threshold is None:
            threshold = scoring.default_threshold
        if max_results is None:
            max_results = scoring.max_results

        embedder = self.embedder.with_api_key(api_key)
        normalize = partial(self.normalizer.normalize, language=language)

        logger.info(f"Checking similarity for question {question_id}")

        # Whole-submission matches
        embedding = embedder.embed_code(normalize(code), language)
        submission_matches = self.index.search(
            embedding,
            scope=question_id,
            limit=max_results,
            min_score=scoring.submission_min_similarity,
            kind=PointKind.SUBMISSION,
        )
        similar_submissions = [self._to_submission(m) for m in submission_matches]
        logger.info(f"Found {len(similar_submissions)} similar submissions")

        # Chunk matches
        chunks = self.extractor.extract(code, language)
        logger.debug(f"Extracted {len(chunks)} chunks from query code")

        similar_chunks: List[SimilarChunk] = []
        for chunk in embedder.embed_chunks(chunks, language, transform=normalize):
            matches = self.index.search(
                chunk.embedding,
                scope=question_id,
                limit=scoring.chunk_matches_per_chunk,
                min_score=scoring.chunk_threshold,
                kind=PointKind.CHUNK,
            )
            similar_chunks.extend(
                self._to_chunk(m, chunk.index, chunk.text) for m in matches
            )
        similar_chunks.sort(key=lambda c: c.similarity, reverse=True)
        logger.info(f"Found {len(similar_chunks)} similar chunks")

        summary = self._summarize(similar_submissions, similar_chunks, threshold)

        external = self._compare_externally(code, language, similar_submissions)

        local = LocalSignal(
            max_similarity=similar_submissions[0].similarity if similar_submissions else None,
            has_matches=bool(similar_submissions),
        )

        structural = None
        top = similar_submissions[0] if similar_submissions else None
        if top is not None and top.is_truncated:
            logger.debug(f"Stored code for {top.submission_id} is truncated, skipping structural penalty")
        elif top is not None:
            structural = StructuralInputs(
                current_code=code,
                compared_code=top.code,
                language=language,
            )

        report = self.engine.report(local, external, threshold, structural)

        return CheckResult(
            summary=summary,
            similar_submissions=similar_submissions,
            similar_chunks=similar_chunks,
            external=external,
            report=report,
        )

    def _compare_externally(self,
                            code: str,
                            language: str,
                            similar_submissions: List[SimilarSubmission]) -> ExternalSignals:
        if not similar_submissions:
            logger.info("No local matches found, skipping external comparison")
            return ExternalSignals.unavailable(error="No local matches to verify")

        if self.external is None:
            return ExternalSignals.unavailable(error="External comparison not configured")

        counterparts = similar_submissions[:self.config.external_tools.max_counterparts]
        others = [
            CodeSample(id=s.student_id or s.submission_id, code=s.code)
            for s in counterparts
        ]
        return self.external.compare(
            CodeSample(id=DEFAULT_MAIN_ID, code=code),
            others,
            language=_canonical_language(language),
        )

    @staticmethod
    def _summarize(similar_submissions: List[SimilarSubmission],
                   similar_chunks: List[SimilarChunk],
                   threshold: float) -> CheckSummary:
        matched_ids = {s.submission_id for s in similar_submissions}
        matched_ids.update(c.submission_id for c in similar_chunks)

        return CheckSummary(
            total_matched_submissions=len(matched_ids),
            high_similarity=sum(1 for s in similar_submissions if s.similarity >= HIGH_SIMILARITY),
            moderate_similarity=sum(
                1 for s in similar_submissions
                if MODERATE_SIMILARITY <= s.similarity < HIGH_SIMILARITY
            ),
            matched_chunks=len(similar_chunks),
            max_similarity=similar_submissions[0].similarity if similar_submissions else 0.0,
            threshold=threshold,
        )

    @staticmethod
    def _to_submission(match: VectorMatch) -> SimilarSubmission:
        payload = match.payload
        return SimilarSubmission(
            submission_id=str(payload.get("submission_id", match.identifier)),
            student_id=payload.get("student_id"),
            similarity=match.score,
            code=payload.get("code", ""),
            code_length=payload.get("code_length", 0),
        )

    @staticmethod
    def _to_chunk(match: VectorMatch, query_index: int, query_text: str) -> SimilarChunk:
        payload = match.payload
        return SimilarChunk(
            submission_id=str(payload.get("submission_id", match.identifier)),
            student_id=payload.get("student_id"),
            similarity=match.score,
            query_chunk_index=query_index,
            query_chunk_text=query_text,
            matched_chunk_index=payload.get("chunk_index"),
            matched_chunk_text=payload.get("chunk_text", ""),
        )

    @staticmethod
    def _validate_request(code: str, question_id: str) -> None:
        if not code or not question_id:
            raise ValueError("Missing required fields: code, question_id")
        if not code.strip():
            raise ValueError("Code cannot be empty")
