"""Core data models for code chunks."""

from typing import Dict, List
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, computed_field


class ChunkType(str, Enum):
    """Types of code chunks."""

    FUNCTION = "function"
    CLASS = "class"
    WHOLE = "whole"
    WINDOW = "window"


class CodeChunk(BaseModel):
    """A contiguous, named slice of source lines.

    ``start_line`` and ``end_line`` are zero-based and inclusive, so ``text``
    equals ``"\\n".join(lines[start_line:end_line + 1])`` of the source.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    text: str
    chunk_type: ChunkType = ChunkType.FUNCTION
    name: str = "anonymous"
    start_line: int = Field(default=0, ge=0)
    end_line: int = Field(default=0, ge=0)

    @computed_field
    @property
    def line_count(self) -> int:
        """Number of source lines spanned by this chunk."""
        return self.end_line - self.start_line + 1

    def reindexed(self, index: int) -> "CodeChunk":
        """Return a copy of this chunk carrying a new index."""
        return self.model_copy(update={"index": index})


class ChunkStats(BaseModel):
    """Summary statistics over a list of chunks, used for logging and responses."""

    count: int = 0
    total_chars: int = 0
    avg_chars: int = 0
    avg_lines: int = 0
    types: Dict[ChunkType, int] = Field(default_factory=dict)

    @classmethod
    def from_chunks(cls, chunks: List[CodeChunk]) -> "ChunkStats":
        """Compute statistics for the given chunks."""
        if not chunks:
            return cls()

        total_chars = sum(len(chunk.text) for chunk in chunks)
        total_lines = sum(len(chunk.text.split('\n')) for chunk in chunks)

        types: Dict[ChunkType, int] = {}
        for chunk in chunks:
            types[chunk.chunk_type] = types.get(chunk.chunk_type, 0) + 1

        return cls(
            count=len(chunks),
            total_chars=total_chars,
            avg_chars=round(total_chars / len(chunks)),
            avg_lines=round(total_lines / len(chunks)),
            types=types,
        )
