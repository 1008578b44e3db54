"""Sliding-window chunking for input where unit detection does not help."""

from typing import List, Optional

from .base_strategy import ChunkingStrategy
from ..config import ChunkingConfig
from ..models import CodeChunk, ChunkType


class SlidingWindowStrategy(ChunkingStrategy):
    """Fixed-size overlapping line windows."""

    def __init__(self,
                 config: ChunkingConfig,
                 lines_per_chunk: Optional[int] = None,
                 overlap_lines: Optional[int] = None):
        super().__init__(config)
        self.lines_per_chunk = lines_per_chunk if lines_per_chunk is not None else config.window_lines
        self.overlap_lines = overlap_lines if overlap_lines is not None else config.window_overlap
        self.strategy_name = "sliding_window"

        if self.lines_per_chunk < 1:
            raise ValueError("lines_per_chunk must be positive")
        if not 0 <= self.overlap_lines < self.lines_per_chunk:
            raise ValueError(
                f"overlap_lines ({self.overlap_lines}) must be in [0, {self.lines_per_chunk})"
            )

    def extract_units(self, code: str) -> List[CodeChunk]:
        lines = code.split('\n')
        step = self.lines_per_chunk - self.overlap_lines
        chunks: List[CodeChunk] = []

        for start in range(0, len(lines), step):
            end = min(start + self.lines_per_chunk - 1, len(lines) - 1)
            index = len(chunks)
            chunks.append(self._make_chunk(
                index, lines, start, end, f"window_{index}", ChunkType.WINDOW
            ))

        return chunks
