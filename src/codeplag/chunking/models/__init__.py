"""Data models for code chunk extraction."""

from .chunk import ChunkType, CodeChunk, ChunkStats

__all__ = [
    "ChunkType",
    "CodeChunk",
    "ChunkStats",
]
