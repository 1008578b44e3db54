"""Brace-depth chunking for C-like languages."""

import logging
from typing import List, Optional

from .base_strategy import ChunkingStrategy
from ..config import ChunkingConfig
from ..models import CodeChunk, ChunkType
from ..patterns import ChunkPatternTable


logger = logging.getLogger(__name__)


def brace_delta(line: str) -> int:
    """Net brace depth change of a line.

    Braces inside string or regex literals are counted like any other brace.
    """
    return line.count('{') - line.count('}')


class BraceStrategy(ChunkingStrategy):
    """
    Line-scanning extractor for brace-delimited languages.

    A unit opens on a line matching one of the language's function-start
    patterns and closes on the first line where the running brace depth
    drops to zero or below. The depth is seeded from the opening line alone
    and is not checked until the next line, so a unit always spans at least
    two lines unless it runs into end-of-input.
    """

    def __init__(self, config: ChunkingConfig, patterns: ChunkPatternTable):
        super().__init__(config)
        self.patterns = patterns
        self.strategy_name = f"brace_{patterns.language.value}"

    def extract_units(self, code: str) -> List[CodeChunk]:
        lines = code.split('\n')
        chunks: List[CodeChunk] = []

        start_line: Optional[int] = None
        name = "anonymous"
        depth = 0

        for i, line in enumerate(lines):
            if start_line is None:
                trimmed = line.strip()
                if not trimmed or self._is_comment(trimmed):
                    continue

                matched_name = self._match_start(line)
                if matched_name is not None:
                    start_line = i
                    name = matched_name
                    depth = brace_delta(line)
            else:
                depth += brace_delta(line)

                if depth <= 0:
                    chunks.append(self._make_chunk(
                        len(chunks), lines, start_line, i, name, ChunkType.FUNCTION
                    ))
                    start_line = None
                    depth = 0

        # Unbalanced input: keep what we have
        if start_line is not None:
            logger.debug(f"Unterminated unit '{name}' flushed at end of input")
            chunks.append(self._make_chunk(
                len(chunks), lines, start_line, len(lines) - 1, name, ChunkType.FUNCTION
            ))

        return chunks

    def _is_comment(self, trimmed: str) -> bool:
        return trimmed.startswith(self.patterns.comment_prefixes)

    def _match_start(self, line: str) -> Optional[str]:
        """Return the unit name if the line opens a unit, else None."""
        for pattern in self.patterns.function_patterns:
            match = pattern.search(line)
            if match:
                return match.group(1) or "anonymous"
        return None
