"""
Multi-method plagiarism scoring.

Fuses the local embedding similarity with the external copy detection, AST
and text diff tools into one weighted score. Only methods that actually
produced a signal take part in the weighting, so a missing tool never drags
the score towards zero.
"""

import logging
from typing import Dict, Optional

from ..core.models import (
    Classification,
    ConfidenceLevel,
    DetectionMethod,
    ExternalSignals,
    LocalSignal,
    MethodScore,
    PlagiarismReport,
    PlagiarismSeverity,
    PlagiarismType,
    ScoreBreakdown,
    StructuralInputs,
)
from ..normalization import CodeNormalizer, StructuralPenalty
from .config import ScoringConfig


logger = logging.getLogger(__name__)

# Penalty factors below this mean the two samples are organized differently
STRUCTURAL_DIFFERENCE_THRESHOLD = 0.85

# Below this a non-detected report says nothing was found at all
NEGLIGIBLE_SCORE = 0.01

REASONING_LABELS: Dict[DetectionMethod, str] = {
    DetectionMethod.SEMANTIC_EMBEDDINGS: "Semantic similarity",
    DetectionMethod.COPYDETECT: "Copy detection",
    DetectionMethod.TREESITTER: "AST similarity",
    DetectionMethod.DIFFLIB: "Text similarity",
}


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def format_percentage(value: float, digits: int = 1) -> str:
    return f"{value * 100:.{digits}f}%"


def method_for_tool(tool: str) -> Optional[DetectionMethod]:
    """Map an external tool name onto its detection method, if any."""
    if tool == "copydetect":
        return DetectionMethod.COPYDETECT
    if tool.startswith("treesitter"):
        return DetectionMethod.TREESITTER
    if tool == "difflib":
        return DetectionMethod.DIFFLIB
    return None


def calculate_confidence(score: float, method_count: int) -> ConfidenceLevel:
    """Confidence from score and method agreement; first matching tier wins."""
    if score >= 0.90 and method_count >= 3:
        return ConfidenceLevel.VERY_HIGH
    if score >= 0.85 and method_count >= 2:
        return ConfidenceLevel.HIGH
    if score >= 0.75:
        return ConfidenceLevel.HIGH
    if score >= 0.65:
        return ConfidenceLevel.MEDIUM
    if score >= 0.50:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.VERY_LOW


class ScoringEngine:
    """Weighted score fusion, classification and report generation."""

    def __init__(self,
                 config: Optional[ScoringConfig] = None,
                 normalizer: Optional[CodeNormalizer] = None):
        self.config = config or ScoringConfig()
        self.normalizer = normalizer or CodeNormalizer()

    def score(self,
              local: Optional[LocalSignal],
              external: Optional[ExternalSignals],
              structural: Optional[StructuralInputs] = None) -> ScoreBreakdown:
        """Calculate the weighted score with a per-method breakdown."""
        scores: Dict[DetectionMethod, float] = {}

        embedding_score = self._embedding_score(local)
        if embedding_score is not None:
            scores[DetectionMethod.SEMANTIC_EMBEDDINGS] = embedding_score

        scores.update(self._tool_scores(external))

        weights = self.config.weights
        total_weight = sum(weights[method] for method in scores)

        overall = 0.0
        if total_weight > 0:
            # Shares of the available weight, so one method keeps its own score
            overall = sum(score * (weights[method] / total_weight) for method, score in scores.items())

        penalty_factor = 1.0
        penalty_details = None
        if structural is not None and structural.is_complete:
            penalty_details = self._structural_penalty(structural)
            if penalty_details is not None:
                penalty_factor = penalty_details.penalty_factor
                overall *= penalty_factor

        overall = clamp(overall)
        method_count = len(scores)

        methods = {
            method: MethodScore(
                score=scores.get(method, 0.0),
                weight=weights[method],
                contribution=scores[method] * weights[method] if method in scores else 0.0,
                available=method in scores,
            )
            for method in DetectionMethod
        }

        logger.debug(f"Fused {method_count} methods into overall score {overall:.4f}")

        return ScoreBreakdown(
            methods=methods,
            overall_score=overall,
            method_count=method_count,
            confidence=calculate_confidence(overall, method_count),
            structural_penalty=penalty_factor,
            penalty_details=penalty_details,
        )

    def classify(self, breakdown: ScoreBreakdown) -> Classification:
        """Explain a score pattern; rules are checked in order."""
        embedding = breakdown.score_of(DetectionMethod.SEMANTIC_EMBEDDINGS)
        copy = breakdown.score_of(DetectionMethod.COPYDETECT)
        ast = breakdown.score_of(DetectionMethod.TREESITTER)
        diff = breakdown.score_of(DetectionMethod.DIFFLIB)

        has_structural_difference = breakdown.structural_penalty < STRUCTURAL_DIFFERENCE_THRESHOLD

        if copy >= 0.95 and ast >= 0.95 and diff >= 0.90:
            return Classification(
                plagiarism_type=PlagiarismType.EXACT_COPY,
                severity=PlagiarismSeverity.CRITICAL,
                explanation="Nearly identical code detected across all checks",
            )

        if ast >= 0.90 and copy >= 0.80 and diff < 0.70:
            return Classification(
                plagiarism_type=PlagiarismType.VARIABLE_RENAME,
                severity=PlagiarismSeverity.HIGH,
                explanation="Same structure and logic, different variable names",
            )

        if ast >= 0.80 and embedding >= 0.75 and copy < 0.70:
            return Classification(
                plagiarism_type=PlagiarismType.STRUCTURAL_SIMILARITY,
                severity=PlagiarismSeverity.MEDIUM,
                explanation="Similar algorithmic approach and structure",
            )

        if has_structural_difference and embedding >= 0.70:
            return Classification(
                plagiarism_type=PlagiarismType.DIFFERENT_IMPLEMENTATION,
                severity=PlagiarismSeverity.LOW,
                explanation="Similar logic but different code organization (function decomposition, structure)",
            )

        if embedding >= 0.85 and ast < 0.60 and copy < 0.60:
            return Classification(
                plagiarism_type=PlagiarismType.TEMPLATE_CODE,
                severity=PlagiarismSeverity.LOW,
                explanation="High semantic similarity but different implementation (likely template/starter code)",
            )

        if embedding >= 0.70 and ast < 0.65 and (copy < 0.60 or diff < 0.60):
            return Classification(
                plagiarism_type=PlagiarismType.LOGIC_TRANSFORMATION,
                severity=PlagiarismSeverity.MEDIUM,
                explanation="Same logic with different control flow (e.g., recursive vs iterative)",
            )

        if breakdown.overall_score < 0.50:
            return Classification(
                plagiarism_type=PlagiarismType.DIFFERENT_IMPLEMENTATION,
                severity=PlagiarismSeverity.NONE,
                explanation="Different implementations with minimal similarity",
            )

        return Classification(
            plagiarism_type=PlagiarismType.MODERATE_SIMILARITY,
            severity=PlagiarismSeverity.MEDIUM,
            explanation="Some similarity detected across multiple checks",
        )

    def report(self,
               local: Optional[LocalSignal],
               external: Optional[ExternalSignals],
               threshold: Optional[float] = None,
               structural: Optional[StructuralInputs] = None) -> PlagiarismReport:
        """Score, classify and render a report against a detection threshold."""
        if threshold is None:
            threshold = self.config.default_threshold

        breakdown = self.score(local, external, structural)
        classification = self.classify(breakdown)

        overall = breakdown.overall_score
        detected = overall >= threshold

        detection_methods = []
        reasoning = []
        for method in breakdown.available_methods():
            detection_methods.append(method.label)
            reasoning.append(f"{REASONING_LABELS[method]}: {format_percentage(breakdown.score_of(method))}")

        plagiarism_type = classification.plagiarism_type.value
        if detected:
            display_message = f"Plagiarism detected with {format_percentage(overall)} similarity ({plagiarism_type})"
        elif overall > NEGLIGIBLE_SCORE:
            display_message = (
                f"Low similarity: {format_percentage(overall)} ({plagiarism_type}) - "
                f"Below {format_percentage(threshold, 0)} threshold"
            )
        else:
            display_message = "No significant similarity detected"

        logger.info(f"Report: {display_message}")

        return PlagiarismReport(
            plagiarism_detected=detected,
            overall_score=overall,
            overall_percentage=format_percentage(overall),
            plagiarism_type=classification.plagiarism_type,
            severity=classification.severity,
            explanation=classification.explanation,
            confidence=breakdown.confidence,
            method_count=breakdown.method_count,
            score_breakdown=breakdown.methods,
            detection_methods=detection_methods,
            reasoning=reasoning,
            threshold=threshold,
            is_above_threshold=detected,
            structural_penalty=breakdown.structural_penalty,
            structural_penalty_applied=breakdown.structural_penalty < 1.0,
            display_message=display_message,
        )

    def _embedding_score(self, local: Optional[LocalSignal]) -> Optional[float]:
        """Embedding score, or None when the comparison did not run."""
        if local is None:
            return None
        if local.max_similarity is not None:
            return clamp(local.max_similarity)
        if local.has_matches is False:
            # Ran but found nothing above threshold
            return 0.0
        return None

    def _tool_scores(self, external: Optional[ExternalSignals]) -> Dict[DetectionMethod, float]:
        scores: Dict[DetectionMethod, float] = {}
        if external is None:
            return scores

        for comparison in external.comparisons:
            if not comparison.available or not comparison.results:
                continue

            method = method_for_tool(comparison.tool)
            if method is None:
                logger.warning(f"Ignoring unknown comparison tool: {comparison.tool}")
                continue

            score = clamp(comparison.max_similarity)
            scores[method] = max(score, scores.get(method, 0.0))

        return scores

    def _structural_penalty(self, structural: StructuralInputs) -> Optional[StructuralPenalty]:
        try:
            penalty = self.normalizer.structural_penalty(
                structural.current_code,
                structural.compared_code,
                structural.language,
            )
        except Exception as e:
            logger.warning(f"Structural analysis failed, skipping penalty: {e}")
            return None

        logger.info(
            f"Structural penalty: {penalty.penalty_factor:.0%} multiplier "
            f"(funcDiff={penalty.func_diff}, {penalty.struct1.functions} vs "
            f"{penalty.struct2.functions} functions)"
        )
        return penalty
