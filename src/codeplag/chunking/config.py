"""Configuration for code chunk extraction."""

from pydantic import BaseModel, Field, field_validator


class ChunkingConfig(BaseModel):
    """Thresholds for trivial-chunk filtering and sliding windows."""

    # Trivial chunk filtering
    min_lines: int = Field(default=3, ge=1, le=50)
    min_chars: int = Field(default=50, ge=0, le=2000)
    filter_boilerplate: bool = True

    # Sliding window fallback
    window_lines: int = Field(default=20, ge=2, le=500)
    window_overlap: int = Field(default=5, ge=0, le=499)

    @field_validator('window_overlap')
    @classmethod
    def validate_overlap(cls, v: int, info) -> int:
        if 'window_lines' in info.data:
            window_lines = info.data['window_lines']
            if v >= window_lines:
                raise ValueError(f"Window overlap ({v}) must be less than window size ({window_lines})")
        return v
