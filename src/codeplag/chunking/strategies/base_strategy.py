"""Base strategy interface for code chunk extraction."""

from abc import ABC, abstractmethod
from typing import List

from ..config import ChunkingConfig
from ..models import CodeChunk, ChunkType


class ChunkingStrategy(ABC):
    """Abstract base class for chunking strategies.

    Strategies return raw, unfiltered units in source order. Filtering and
    final indexing are done by the extractor.
    """

    def __init__(self, config: ChunkingConfig):
        self.config = config
        self.strategy_name = self.__class__.__name__

    @abstractmethod
    def extract_units(self, code: str) -> List[CodeChunk]:
        """Split code into raw units."""
        pass

    @staticmethod
    def _make_chunk(index: int,
                    lines: List[str],
                    start_line: int,
                    end_line: int,
                    name: str,
                    chunk_type: ChunkType) -> CodeChunk:
        """Build a chunk from an inclusive line range."""
        return CodeChunk(
            index=index,
            text='\n'.join(lines[start_line:end_line + 1]),
            chunk_type=chunk_type,
            name=name,
            start_line=start_line,
            end_line=end_line,
        )


class WholeFileStrategy(ChunkingStrategy):
    """Treat the entire input as a single unit."""

    def extract_units(self, code: str) -> List[CodeChunk]:
        lines = code.split('\n')
        return [
            CodeChunk(
                index=0,
                text=code,
                chunk_type=ChunkType.WHOLE,
                name="main",
                start_line=0,
                end_line=len(lines) - 1,
            )
        ]
