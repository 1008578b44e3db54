"""Core data models for codeplag."""

from enum import Enum
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..normalization.models import StructuralPenalty


class DetectionMethod(str, Enum):
    """Scoring methods fused into one plagiarism score."""

    SEMANTIC_EMBEDDINGS = "semantic_embeddings"
    COPYDETECT = "copydetect"
    TREESITTER = "treesitter"
    DIFFLIB = "difflib"

    @property
    def label(self) -> str:
        """Name reported in a report's detection method list."""
        if self is DetectionMethod.TREESITTER:
            return "treesitter_ast"
        return self.value


class ConfidenceLevel(str, Enum):
    """Confidence levels for a fused score."""

    VERY_HIGH = "very_high"  # >= 0.90 with 3+ methods
    HIGH = "high"            # >= 0.75
    MEDIUM = "medium"        # 0.65-0.74
    LOW = "low"              # 0.50-0.64
    VERY_LOW = "very_low"    # below 0.50


class PlagiarismType(str, Enum):
    """Explanatory category for a score pattern."""

    EXACT_COPY = "exact_copy"
    VARIABLE_RENAME = "variable_rename"
    STRUCTURAL_SIMILARITY = "structural_similarity"
    DIFFERENT_IMPLEMENTATION = "different_implementation"
    TEMPLATE_CODE = "template_code"
    LOGIC_TRANSFORMATION = "logic_transformation"
    MODERATE_SIMILARITY = "moderate_similarity"


class PlagiarismSeverity(str, Enum):
    """Severity attached to a classification."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class OutputFormat(str, Enum):
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"
    MARKDOWN = "markdown"


# Signal inputs

class LocalSignal(BaseModel):
    """
    Result of the local embedding comparison.

    ``max_similarity=None`` with ``has_matches=False`` means the comparison ran
    and found nothing, which still counts as a valid zero score.
    """

    max_similarity: Optional[float] = None
    has_matches: Optional[bool] = None


class ToolMatch(BaseModel):
    """Similarity between the checked code and one counterpart."""

    counterpart_id: Optional[str] = None
    similarity: Optional[float] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class ToolComparison(BaseModel):
    """Per-tool output of the external comparison service."""

    tool: str
    available: bool = False
    results: List[ToolMatch] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def max_similarity(self) -> float:
        """Highest reported similarity; a missing value counts as 0."""
        return max((r.similarity or 0.0 for r in self.results), default=0.0)


class CounterpartSummary(BaseModel):
    """Average similarity of one counterpart across all tools."""

    counterpart_id: Optional[str] = None
    avg_similarity: Optional[float] = None
    tool_count: int = 0


class ExternalSignals(BaseModel):
    """Aggregated external structural comparison results."""

    available: bool = False
    main_student_id: Optional[str] = None
    summary: List[CounterpartSummary] = Field(default_factory=list)
    comparisons: List[ToolComparison] = Field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def unavailable(cls, error: Optional[str] = None) -> "ExternalSignals":
        return cls(available=False, error=error)


class StructuralInputs(BaseModel):
    """The two code samples the structural penalty compares."""

    current_code: Optional[str] = None
    compared_code: Optional[str] = None
    language: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.current_code and self.compared_code and self.language)


# Scoring outputs

class MethodScore(BaseModel):
    """Score of one detection method and its share of the total."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(default=0.0, ge=0.0, le=1.0)
    weight: float = Field(ge=0.0, le=1.0)
    contribution: float = 0.0
    available: bool = False


class ScoreBreakdown(BaseModel):
    """Fused score with its per-method breakdown."""

    model_config = ConfigDict(frozen=True)

    methods: Dict[DetectionMethod, MethodScore]
    overall_score: float = Field(ge=0.0, le=1.0)
    method_count: int = Field(ge=0)
    confidence: ConfidenceLevel
    structural_penalty: float = 1.0
    penalty_details: Optional[StructuralPenalty] = None

    @field_validator('methods')
    @classmethod
    def validate_methods(cls, v):
        missing = set(DetectionMethod) - set(v)
        if missing:
            names = ", ".join(sorted(m.value for m in missing))
            raise ValueError(f"Missing detection methods: {names}")
        return v

    def score_of(self, method: DetectionMethod) -> float:
        return self.methods[method].score

    def available_methods(self) -> List[DetectionMethod]:
        """Available methods in fixed table order."""
        return [m for m in DetectionMethod if self.methods[m].available]


class Classification(BaseModel):
    """Why a score looks the way it does."""

    model_config = ConfigDict(frozen=True)

    plagiarism_type: PlagiarismType
    severity: PlagiarismSeverity
    explanation: str


class PlagiarismReport(BaseModel):
    """Final report combining score, classification and threshold context."""

    model_config = ConfigDict(frozen=True)

    plagiarism_detected: bool
    overall_score: float = Field(ge=0.0, le=1.0)
    overall_percentage: str

    plagiarism_type: PlagiarismType
    severity: PlagiarismSeverity
    explanation: str

    confidence: ConfidenceLevel
    method_count: int
    score_breakdown: Dict[DetectionMethod, MethodScore]

    detection_methods: List[str] = Field(default_factory=list)
    reasoning: List[str] = Field(default_factory=list)

    threshold: float
    is_above_threshold: bool

    structural_penalty: float = 1.0
    structural_penalty_applied: bool = False

    display_message: str
