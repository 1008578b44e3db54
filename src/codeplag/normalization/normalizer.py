"""Code normalization and structural analysis.

Normalization reduces the impact of naming and cosmetic differences so that
embeddings focus on logic and structure. Structural analysis counts control
flow and definitions on the raw code and feeds the structural penalty used by
the scoring engine.
"""

import logging
import re
from typing import Dict, Optional

from .models import NormalizedCode, StructuralStats, StructuralPenalty
from .patterns import (
    CONDITIONAL_PATTERN,
    DOUBLE_QUOTED_STRING,
    EXCESS_BLANK_LINES,
    LOOP_PATTERN,
    RETURN_PATTERN,
    SIGNATURE_CONTROL_PATTERNS,
    SINGLE_QUOTED_STRING,
    STRING_PLACEHOLDER,
    table_for,
)


logger = logging.getLogger(__name__)

TAB_REPLACEMENT = "  "

# (minimum function count difference, penalty factor), checked in order
PENALTY_TIERS = (
    (3, 0.3),
    (2, 0.5),
    (1, 0.75),
)
NO_PENALTY = 1.0


def penalty_factor_for(func_diff: int) -> float:
    """Map a function count difference onto the penalty step function."""
    for min_diff, factor in PENALTY_TIERS:
        if func_diff >= min_diff:
            return factor
    return NO_PENALTY


def _count_non_blank_lines(code: str) -> int:
    return sum(1 for line in code.split('\n') if line.strip())


class CodeNormalizer:
    """Stateless normalizer; safe to share across threads and requests."""

    def normalize(self, code: str, language: Optional[str] = "javascript") -> str:
        """
        Canonicalize code for embedding.

        Steps run in a fixed order: whitespace, blank lines, comments, string
        literals, then identifiers. Identifier renaming must come last so
        names inside comments and strings never enter the mapping.
        """
        try:
            normalized = code.strip()
            normalized = normalized.replace('\r\n', '\n')
            normalized = normalized.replace('\t', TAB_REPLACEMENT)

            normalized = EXCESS_BLANK_LINES.sub('\n\n', normalized)

            normalized = self.remove_comments(normalized, language)

            normalized = DOUBLE_QUOTED_STRING.sub(f'"{STRING_PLACEHOLDER}"', normalized)
            normalized = SINGLE_QUOTED_STRING.sub(f"'{STRING_PLACEHOLDER}'", normalized)

            return self.normalize_identifiers(normalized, language)
        except Exception as e:
            logger.warning(f"Code normalization failed, keeping original text: {e}")
            return code

    def remove_comments(self, code: str, language: Optional[str] = "javascript") -> str:
        """Strip comments (and Python docstrings) using the language's rules."""
        result = code
        for pattern in table_for(language).comment_patterns:
            result = pattern.sub('', result)
        return result

    def normalize_identifiers(self, code: str, language: Optional[str] = "javascript") -> str:
        """Rename introduced identifiers to var0, var1, ... in first-seen order."""
        try:
            table = table_for(language)
            mapping: Dict[str, str] = {}

            for pattern in table.identifier_patterns:
                for match in pattern.finditer(code):
                    name = match.group(1)
                    if name in table.keywords or name in mapping:
                        continue
                    mapping[name] = f"var{len(mapping)}"

            if not mapping:
                return code

            # Longest first so a name never matches inside a longer one
            ordered = sorted(mapping, key=len, reverse=True)
            replacer = re.compile(r'\b(?:' + '|'.join(re.escape(name) for name in ordered) + r')\b')

            return replacer.sub(lambda m: mapping[m.group(0)], code)
        except Exception as e:
            logger.warning(f"Identifier normalization failed, keeping original text: {e}")
            return code

    def prepare_dual_code(self, code: str, language: Optional[str] = "javascript") -> NormalizedCode:
        """Bundle the original code with its normalized form and signature."""
        return NormalizedCode(
            original=code,
            normalized=self.normalize(code, language),
            semantic_signature=self.semantic_signature(code, language),
        )

    def semantic_signature(self, code: str, language: Optional[str] = "javascript") -> str:
        """Compact structural digest, e.g. ``control:if=2,for=1,while=0,return=3 functions:2 lines:14``."""
        try:
            control = ",".join(
                f"{name}={len(pattern.findall(code))}"
                for name, pattern in SIGNATURE_CONTROL_PATTERNS
            )
            functions = len(table_for(language).function_pattern.findall(code))
            lines = _count_non_blank_lines(code)

            return f"control:{control} functions:{functions} lines:{lines}"
        except Exception as e:
            logger.warning(f"Semantic signature failed: {e}")
            return ""

    def analyze_structure(self, code: str, language: Optional[str] = "javascript") -> StructuralStats:
        """Count structural features of raw (non-normalized) code."""
        table = table_for(language)

        return StructuralStats(
            lines=_count_non_blank_lines(code),
            conditionals=len(CONDITIONAL_PATTERN.findall(code)),
            loops=len(LOOP_PATTERN.findall(code)),
            returns=len(RETURN_PATTERN.findall(code)),
            functions=len(table.function_pattern.findall(code)),
            classes=len(table.class_pattern.findall(code)),
        )

    def structural_penalty(self,
                           code_a: str,
                           code_b: str,
                           language: Optional[str] = "javascript") -> StructuralPenalty:
        """
        Penalize differing function decomposition between two samples.

        Uses the absolute difference of function counts, so the result does
        not depend on argument order:

        - 0 -> 1.0 (no penalty)
        - 1 -> 0.75
        - 2 -> 0.5
        - 3 or more -> 0.3 (e.g. modular vs monolithic)
        """
        struct1 = self.analyze_structure(code_a, language)
        struct2 = self.analyze_structure(code_b, language)

        func_diff = abs(struct1.functions - struct2.functions)

        return StructuralPenalty(
            penalty_factor=penalty_factor_for(func_diff),
            func_diff=func_diff,
            struct1=struct1,
            struct2=struct2,
        )


_normalizer = CodeNormalizer()


def normalize_code(code: str, language: Optional[str] = "javascript") -> str:
    """Normalize code with the default normalizer."""
    return _normalizer.normalize(code, language)


def prepare_dual_code(code: str, language: Optional[str] = "javascript") -> NormalizedCode:
    """Original, normalized and signature forms of code."""
    return _normalizer.prepare_dual_code(code, language)


def create_semantic_signature(code: str, language: Optional[str] = "javascript") -> str:
    return _normalizer.semantic_signature(code, language)


def analyze_structure(code: str, language: Optional[str] = "javascript") -> StructuralStats:
    return _normalizer.analyze_structure(code, language)


def calculate_structural_penalty(code_a: str,
                                 code_b: str,
                                 language: Optional[str] = "javascript") -> StructuralPenalty:
    return _normalizer.structural_penalty(code_a, code_b, language)
