"""Chunk extraction entry point."""

import logging
from typing import List, Optional

from .config import ChunkingConfig
from .exceptions import LanguageNotSupportedError
from .language_registry import LanguageRegistry
from .models import CodeChunk, ChunkStats
from .patterns import BOILERPLATE_PATTERNS
from .strategies import WholeFileStrategy, SlidingWindowStrategy


logger = logging.getLogger(__name__)


class ChunkExtractor:
    """Splits one source file into an ordered sequence of comparison units."""

    def __init__(self,
                 config: Optional[ChunkingConfig] = None,
                 registry: Optional[LanguageRegistry] = None):
        self.config = config or ChunkingConfig()
        self.registry = registry or LanguageRegistry(self.config)
        self._whole_file = WholeFileStrategy(self.config)

    def extract(self, code: str, language: Optional[str] = "javascript") -> List[CodeChunk]:
        """
        Extract function/class level chunks from code.

        Unsupported languages, and supported ones where no unit was found,
        fall back to a single whole-file chunk. Trivial chunks are dropped
        and the survivors are reindexed from zero in source order.
        """
        if not code or not code.strip():
            return []

        try:
            strategy = self.registry.get_strategy(language)
            chunks = strategy.extract_units(code)
        except LanguageNotSupportedError:
            logger.debug(f"No chunking strategy for '{language}', using whole file")
            chunks = []

        if not chunks:
            chunks = self._whole_file.extract_units(code)

        filtered = self.filter_trivial_chunks(chunks)

        if len(filtered) < len(chunks):
            logger.debug(f"Dropped {len(chunks) - len(filtered)} trivial chunks")

        return [chunk.reindexed(i) for i, chunk in enumerate(filtered)]

    def extract_windows(self,
                        code: str,
                        lines_per_chunk: Optional[int] = None,
                        overlap_lines: Optional[int] = None) -> List[CodeChunk]:
        """Split code into overlapping fixed-size line windows."""
        if not code:
            return []
        strategy = SlidingWindowStrategy(self.config, lines_per_chunk, overlap_lines)
        return strategy.extract_units(code)

    def filter_trivial_chunks(self, chunks: List[CodeChunk]) -> List[CodeChunk]:
        """Drop chunks too small or too boilerplate to be worth comparing."""
        return [chunk for chunk in chunks if not self.is_trivial(chunk)]

    def is_trivial(self, chunk: CodeChunk) -> bool:
        """Check a chunk against the size and boilerplate rules."""
        line_count = sum(1 for line in chunk.text.split('\n') if line.strip())
        char_count = len(chunk.text.strip())

        if line_count < self.config.min_lines or char_count < self.config.min_chars:
            return True

        if self.config.filter_boilerplate:
            compact = ''.join(chunk.text.split())
            if any(pattern.match(compact) for pattern in BOILERPLATE_PATTERNS):
                return True

        return False


def extract_code_chunks(code: str,
                        language: Optional[str] = "javascript",
                        config: Optional[ChunkingConfig] = None) -> List[CodeChunk]:
    """Quick extraction for simple use cases."""
    return ChunkExtractor(config).extract(code, language)


def chunk_stats(chunks: List[CodeChunk]) -> ChunkStats:
    """Get chunk statistics for logging and responses."""
    return ChunkStats.from_chunks(chunks)
