"""Chunking strategies, one per language family."""

from .base_strategy import ChunkingStrategy, WholeFileStrategy
from .brace_strategy import BraceStrategy, brace_delta
from .indentation_strategy import IndentationStrategy
from .window_strategy import SlidingWindowStrategy

__all__ = [
    "ChunkingStrategy",
    "WholeFileStrategy",
    "BraceStrategy",
    "brace_delta",
    "IndentationStrategy",
    "SlidingWindowStrategy",
]
