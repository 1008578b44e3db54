"""Function/class level code chunk extraction."""

from .extractor import ChunkExtractor, extract_code_chunks, chunk_stats
from .config import ChunkingConfig
from .models import CodeChunk, ChunkType, ChunkStats
from .language_registry import LanguageRegistry
from .strategies import (
    ChunkingStrategy, WholeFileStrategy, BraceStrategy, IndentationStrategy,
    SlidingWindowStrategy
)
from .exceptions import ChunkingError, LanguageNotSupportedError

__all__ = [
    # Extraction
    "ChunkExtractor",
    "extract_code_chunks",
    "chunk_stats",

    # Configuration
    "ChunkingConfig",

    # Data models
    "CodeChunk",
    "ChunkType",
    "ChunkStats",

    # Strategies
    "LanguageRegistry",
    "ChunkingStrategy",
    "WholeFileStrategy",
    "BraceStrategy",
    "IndentationStrategy",
    "SlidingWindowStrategy",

    # Exceptions
    "ChunkingError",
    "LanguageNotSupportedError",
]
