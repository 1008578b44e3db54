"""Output formatting utilities."""

import json
from typing import List
from datetime import datetime

from ..chunking.models import CodeChunk
from ..core.config import OutputConfig
from ..core.models import DetectionMethod, OutputFormat, PlagiarismReport
from ..normalization.models import StructuralPenalty


METHOD_TITLES = {
    DetectionMethod.SEMANTIC_EMBEDDINGS: "Semantic embeddings",
    DetectionMethod.COPYDETECT: "Copy detection",
    DetectionMethod.TREESITTER: "AST (tree-sitter)",
    DetectionMethod.DIFFLIB: "Text diff",
}


class ReportFormatter:
    """Formats reports and chunk listings for different output formats."""

    def __init__(self, config: OutputConfig):
        self.config = config

    def format_report(self, report: PlagiarismReport) -> str:
        """Format a plagiarism report according to configuration."""
        if self.config.format == OutputFormat.JSON:
            return self._format_json(report)
        elif self.config.format == OutputFormat.MARKDOWN:
            return self._format_markdown(report)
        else:  # Default to table
            return self._format_table(report)

    def format_chunks(self, chunks: List[CodeChunk]) -> str:
        """Format extracted chunks."""
        if self.config.format == OutputFormat.JSON:
            return json.dumps([chunk.model_dump(mode='json') for chunk in chunks], indent=2)

        if not chunks:
            return "No chunks extracted."

        output = [f"{'#':>3}  {'Type':<8}  {'Name':<24}  Lines"]
        output.append("-" * 50)
        for chunk in chunks:
            output.append(
                f"{chunk.index:>3}  {chunk.chunk_type.value:<8}  {chunk.name:<24}  "
                f"{chunk.start_line}-{chunk.end_line}"
            )
            if self.config.verbose:
                for line in chunk.text.split('\n')[:5]:
                    output.append(f"       {line}")
        return "\n".join(output)

    def format_penalty(self, penalty: StructuralPenalty) -> str:
        """Format a structural comparison of two files."""
        if self.config.format == OutputFormat.JSON:
            return json.dumps(penalty.model_dump(mode='json'), indent=2)

        s1, s2 = penalty.struct1, penalty.struct2
        output = [
            f"{'':<14}{'A':>6}{'B':>6}",
            f"{'Lines':<14}{s1.lines:>6}{s2.lines:>6}",
            f"{'Functions':<14}{s1.functions:>6}{s2.functions:>6}",
            f"{'Classes':<14}{s1.classes:>6}{s2.classes:>6}",
            f"{'Conditionals':<14}{s1.conditionals:>6}{s2.conditionals:>6}",
            f"{'Loops':<14}{s1.loops:>6}{s2.loops:>6}",
            f"{'Returns':<14}{s1.returns:>6}{s2.returns:>6}",
            "",
            f"Function difference: {penalty.func_diff}",
            f"Penalty factor: {penalty.penalty_factor:.2f}",
        ]
        return "\n".join(output)

    def _format_table(self, report: PlagiarismReport) -> str:
        """Format as a human-readable table."""
        output = []

        # Header
        output.append("codeplag Similarity Report")
        output.append("=" * 50)
        output.append("")

        output.append(report.display_message)
        output.append("")

        # Summary
        output.append(f"Overall score: {report.overall_percentage}")
        output.append(f"Threshold: {report.threshold * 100:.0f}%")
        output.append(f"Type: {report.plagiarism_type.value}")
        output.append(f"Severity: {report.severity.value.upper()}")
        output.append(f"Confidence: {report.confidence.value} ({report.method_count} methods)")
        if report.structural_penalty_applied:
            output.append(f"Structural penalty: x{report.structural_penalty:.2f}")
        output.append("")

        # Breakdown
        output.append("Method Breakdown:")
        output.append("-" * 20)
        for method in DetectionMethod:
            score = report.score_breakdown[method]
            if score.available:
                output.append(
                    f"  {METHOD_TITLES[method]:<20} {score.score * 100:>6.1f}%  "
                    f"(weight {score.weight:.2f})"
                )
            else:
                output.append(f"  {METHOD_TITLES[method]:<20} {'n/a':>7}")

        if self.config.verbose:
            output.append("")
            output.append(report.explanation)

        return "\n".join(output)

    def _format_json(self, report: PlagiarismReport) -> str:
        """Format as JSON."""
        return json.dumps(report.model_dump(mode='json'), indent=2)

    def _format_markdown(self, report: PlagiarismReport) -> str:
        """Format as Markdown."""
        output = []

        # Header
        output.append("# codeplag Similarity Report")
        output.append("")
        output.append(f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        output.append(f"**Result:** {report.display_message}")
        output.append("")

        output.append("## Summary")
        output.append("")
        output.append(f"- **Overall score:** {report.overall_percentage}")
        output.append(f"- **Type:** {report.plagiarism_type.value}")
        output.append(f"- **Severity:** {report.severity.value.upper()}")
        output.append(f"- **Confidence:** {report.confidence.value}")
        output.append(f"- **Structural penalty:** {report.structural_penalty:.2f}")
        output.append("")
        output.append(report.explanation)
        output.append("")

        # Breakdown
        output.append("## Methods")
        output.append("")
        output.append("| Method | Score | Weight | Available |")
        output.append("|--------|-------|--------|-----------|")
        for method in DetectionMethod:
            score = report.score_breakdown[method]
            available = "yes" if score.available else "no"
            output.append(
                f"| {METHOD_TITLES[method]} | {score.score * 100:.1f}% | {score.weight:.2f} | {available} |"
            )

        if report.reasoning:
            output.append("")
            output.append("## Reasoning")
            output.append("")
            for reason in report.reasoning:
                output.append(f"- {reason}")

        return "\n".join(output)
