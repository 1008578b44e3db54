"""Data models produced by the code normalizer."""

from pydantic import BaseModel, ConfigDict, Field


class NormalizedCode(BaseModel):
    """Original code alongside its canonical form and structural digest."""

    model_config = ConfigDict(frozen=True)

    original: str
    normalized: str
    semantic_signature: str


class StructuralStats(BaseModel):
    """Raw structural counts derived from non-normalized code."""

    model_config = ConfigDict(frozen=True)

    lines: int = 0
    conditionals: int = 0
    loops: int = 0
    returns: int = 0
    functions: int = 0
    classes: int = 0


class StructuralPenalty(BaseModel):
    """Multiplicative discount for differing function decomposition."""

    model_config = ConfigDict(frozen=True)

    penalty_factor: float = Field(ge=0.0, le=1.0)
    func_diff: int = Field(ge=0)
    struct1: StructuralStats
    struct2: StructuralStats

    @property
    def applied(self) -> bool:
        """Whether this penalty lowers a score at all."""
        return self.penalty_factor < 1.0
