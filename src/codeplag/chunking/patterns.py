"""Static per-language pattern tables for unit detection."""

import re
from dataclasses import dataclass
from typing import Dict, Pattern, Tuple

from ..core.languages import SupportedLanguage


@dataclass(frozen=True)
class ChunkPatternTable:
    """Patterns used to find the start of a top-level unit in one language."""

    language: SupportedLanguage
    comment_prefixes: Tuple[str, ...]
    function_patterns: Tuple[Pattern[str], ...]


# Ordered, first match wins. Group 1 captures the unit name.
JAVASCRIPT_FUNCTION_PATTERNS: Tuple[Pattern[str], ...] = (
    # function foo() {
    re.compile(r'^\s*function\s+(\w+)\s*\('),
    # const foo = (a, b) => {
    re.compile(r'^\s*(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s*)?\([^)]*\)\s*=>'),
    # const foo = x => {
    re.compile(r'^\s*(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s*)?(\w+)\s*=>'),
    # const foo = function() {
    re.compile(r'^\s*(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s*)?function\s*\('),
    # methodName() {
    re.compile(r'^\s*(?:async\s+)?(\w+)\s*\([^)]*\)\s*{'),
    # export function foo() {
    re.compile(r'^\s*export\s+(?:async\s+)?function\s+(\w+)\s*\('),
    # export const foo = () => {
    re.compile(r'^\s*export\s+const\s+(\w+)\s*=\s*(?:async\s*)?\([^)]*\)\s*=>'),
)

JAVA_METHOD_PATTERNS: Tuple[Pattern[str], ...] = (
    # modifiers, return type, name, (
    re.compile(
        r'^\s*(?:(?:public|private|protected|static|final|abstract|synchronized)\s+)*'
        r'[\w<>\[\]\s,?]+\s+(\w+)\s*\('
    ),
)

C_CPP_FUNCTION_PATTERNS: Tuple[Pattern[str], ...] = (
    # return type tokens, name, parameter list, optional {
    re.compile(r'^\s*[\w:*&<>\[\]\s]+\s(\w+)\s*\([^)]*\)\s*\{?'),
)

C_STYLE_COMMENT_PREFIXES = ('//', '/*', '*')

CHUNK_PATTERN_TABLES: Dict[SupportedLanguage, ChunkPatternTable] = {
    SupportedLanguage.JAVASCRIPT: ChunkPatternTable(
        language=SupportedLanguage.JAVASCRIPT,
        comment_prefixes=('//',),
        function_patterns=JAVASCRIPT_FUNCTION_PATTERNS,
    ),
    SupportedLanguage.JAVA: ChunkPatternTable(
        language=SupportedLanguage.JAVA,
        comment_prefixes=C_STYLE_COMMENT_PREFIXES,
        function_patterns=JAVA_METHOD_PATTERNS,
    ),
    SupportedLanguage.C: ChunkPatternTable(
        language=SupportedLanguage.C,
        comment_prefixes=C_STYLE_COMMENT_PREFIXES,
        function_patterns=C_CPP_FUNCTION_PATTERNS,
    ),
    SupportedLanguage.CPP: ChunkPatternTable(
        language=SupportedLanguage.CPP,
        comment_prefixes=C_STYLE_COMMENT_PREFIXES,
        function_patterns=C_CPP_FUNCTION_PATTERNS,
    ),
}

# Indentation-delimited top-level definitions
PYTHON_TOP_LEVEL_PATTERN = re.compile(r'^(def|class)\s+(\w+)')
PYTHON_COMMENT_PREFIX = '#'

# Matched against chunk text with all whitespace removed
BOILERPLATE_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r'^(const|let|var)\w+=\(\)=>{}$'),
    re.compile(r'^function\w+\([^)]*\){}$'),
    re.compile(r'^def\w+\([^)]*\):pass$'),
)
