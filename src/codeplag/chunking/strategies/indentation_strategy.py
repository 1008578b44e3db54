"""Indentation-based chunking for Python."""

from typing import List, Optional

from .base_strategy import ChunkingStrategy
from ..config import ChunkingConfig
from ..models import CodeChunk, ChunkType
from ..patterns import PYTHON_TOP_LEVEL_PATTERN, PYTHON_COMMENT_PREFIX


class IndentationStrategy(ChunkingStrategy):
    """
    Extracts top-level ``def`` and ``class`` blocks.

    A block runs from its definition line until the next non-blank,
    non-comment line at indentation zero. That line is not part of the
    block; if it is itself a definition it opens the next one. Decorators
    and other module-level statements are never chunked.
    """

    def __init__(self, config: ChunkingConfig):
        super().__init__(config)
        self.strategy_name = "indentation_python"

    def extract_units(self, code: str) -> List[CodeChunk]:
        lines = code.split('\n')
        chunks: List[CodeChunk] = []

        start_line: Optional[int] = None
        name = ""
        chunk_type = ChunkType.FUNCTION

        def flush(up_to: int) -> None:
            nonlocal start_line
            if start_line is None:
                return
            end_line = up_to
            while end_line > start_line and not lines[end_line].strip():
                end_line -= 1
            chunks.append(self._make_chunk(
                len(chunks), lines, start_line, end_line, name, chunk_type
            ))
            start_line = None

        for i, line in enumerate(lines):
            trimmed = line.strip()
            at_top_level = bool(trimmed) and not line[0].isspace()

            definition = PYTHON_TOP_LEVEL_PATTERN.match(trimmed) if at_top_level else None

            if definition:
                flush(i - 1)
                start_line = i
                name = definition.group(2)
                chunk_type = ChunkType.CLASS if definition.group(1) == "class" else ChunkType.FUNCTION
            elif start_line is not None and at_top_level and not trimmed.startswith(PYTHON_COMMENT_PREFIX):
                flush(i - 1)

        flush(len(lines) - 1)

        return chunks
