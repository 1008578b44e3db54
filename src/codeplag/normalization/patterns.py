"""Static per-language tables for code normalization and structure counts."""

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Pattern, Tuple

from ..core.languages import SupportedLanguage, resolve_language


@dataclass(frozen=True)
class NormalizationTable:
    """Everything the normalizer needs to know about one language."""

    name: str
    comment_patterns: Tuple[Pattern[str], ...]
    identifier_patterns: Tuple[Pattern[str], ...]
    keywords: FrozenSet[str]
    function_pattern: Pattern[str]
    class_pattern: Pattern[str]


STRING_PLACEHOLDER = "STRING"

DOUBLE_QUOTED_STRING = re.compile(r'"[^"]*"')
SINGLE_QUOTED_STRING = re.compile(r"'[^']*'")

EXCESS_BLANK_LINES = re.compile(r'\n{3,}')

# Shared structure counters
CONDITIONAL_PATTERN = re.compile(r'\b(?:if|elif|else|switch|case)\b')
LOOP_PATTERN = re.compile(r'\b(?:for|while|do)\b')
RETURN_PATTERN = re.compile(r'\breturn\b')

# Semantic signature control counters
SIGNATURE_CONTROL_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("if", re.compile(r'\bif\b')),
    ("for", re.compile(r'\bfor\b')),
    ("while", re.compile(r'\bwhile\b')),
    ("return", re.compile(r'\breturn\b')),
)

CLASS_PATTERN = re.compile(r'\bclass\s+\w+')

HASH_COMMENTS: Tuple[Pattern[str], ...] = (
    re.compile(r'#[^\n]*'),
    re.compile(r'"""[\s\S]*?"""'),
    re.compile(r"'''[\s\S]*?'''"),
)

C_STYLE_COMMENTS: Tuple[Pattern[str], ...] = (
    re.compile(r'//[^\n]*'),
    re.compile(r'/\*[\s\S]*?\*/'),
)

# Identifier-introducing constructs, applied in order. Group 1 is the name.
PYTHON_IDENTIFIERS: Tuple[Pattern[str], ...] = (
    re.compile(r'def\s+([a-z_][a-z0-9_]*)\s*\(', re.IGNORECASE),
    re.compile(r'for\s+([a-z_][a-z0-9_]*)\s+in\b', re.IGNORECASE),
    re.compile(r'\b([a-z_][a-z0-9_]*)\s*=(?!=)', re.IGNORECASE),
    re.compile(r'\(([a-z_][a-z0-9_]*)\s*[,)]', re.IGNORECASE),
)

JAVASCRIPT_IDENTIFIERS: Tuple[Pattern[str], ...] = (
    re.compile(r'\b(?:const|let|var)\s+([a-z_$][a-z0-9_$]*)', re.IGNORECASE),
    re.compile(r'function\s+([a-z_$][a-z0-9_$]*)\s*\(', re.IGNORECASE),
    re.compile(r'\(([a-z_$][a-z0-9_$]*)\s*(?:,|\))', re.IGNORECASE),
)

JAVA_IDENTIFIERS: Tuple[Pattern[str], ...] = (
    re.compile(
        r'\b(?:public|private|protected|static|final)\s+[\w<>\[\]\s,?]+\s+([a-z_][a-z0-9_]*)\s*\(',
        re.IGNORECASE,
    ),
    re.compile(
        r'\b(?:int|long|short|byte|char|String|boolean|double|float)\s+([a-z_][a-z0-9_]*)',
        re.IGNORECASE,
    ),
    re.compile(r'\b(?:List|Map|Set|ArrayList|HashMap|HashSet)\s*<[^>]*>\s+([a-z_][a-z0-9_]*)', re.IGNORECASE),
    re.compile(r'\b([a-z_][a-z0-9_]*)\s*=(?!=)', re.IGNORECASE),
    re.compile(r'\(([a-z_][a-z0-9_]*)\s*[,)]', re.IGNORECASE),
)

CPP_IDENTIFIERS: Tuple[Pattern[str], ...] = (
    re.compile(
        r'\b(?:int|long|short|char|unsigned|size_t|string|bool|double|float|auto|void)\s+([a-z_][a-z0-9_]*)',
        re.IGNORECASE,
    ),
    re.compile(r'\b(?:vector|map|set|unordered_map)\s*<[^>]*>\s+([a-z_][a-z0-9_]*)', re.IGNORECASE),
    re.compile(r'\b([a-z_][a-z0-9_]*)\s*=(?!=)', re.IGNORECASE),
    re.compile(r'\(([a-z_][a-z0-9_]*)\s*[,)]', re.IGNORECASE),
)

PYTHON_KEYWORDS = frozenset({
    'def', 'class', 'if', 'else', 'elif', 'for', 'while', 'return', 'import', 'from',
    'True', 'False', 'None', 'print', 'len', 'range', 'str', 'int', 'float', 'list',
    'dict', 'set',
})

JAVASCRIPT_KEYWORDS = frozenset({
    'function', 'const', 'let', 'var', 'if', 'else', 'for', 'while', 'return', 'import',
    'export', 'class', 'true', 'false', 'null', 'undefined', 'console', 'log',
})

JAVA_KEYWORDS = frozenset({
    'public', 'private', 'protected', 'class', 'interface', 'void', 'static', 'final',
    'return', 'if', 'else', 'for', 'while', 'true', 'false', 'null', 'System', 'out',
    'println', 'new', 'this', 'super', 'extends', 'implements', 'try', 'catch', 'throw',
    'throws',
})

CPP_KEYWORDS = frozenset({
    'class', 'public', 'private', 'return', 'if', 'else', 'for', 'while', 'true', 'false',
    'nullptr', 'std', 'cout', 'cin', 'include', 'using', 'namespace', 'struct', 'template',
    'typename',
})

PYTHON_TABLE = NormalizationTable(
    name="python",
    comment_patterns=HASH_COMMENTS,
    identifier_patterns=PYTHON_IDENTIFIERS,
    keywords=PYTHON_KEYWORDS,
    function_pattern=re.compile(r'\bdef\s+\w+\s*\('),
    class_pattern=CLASS_PATTERN,
)

JAVASCRIPT_TABLE = NormalizationTable(
    name="javascript",
    comment_patterns=C_STYLE_COMMENTS,
    identifier_patterns=JAVASCRIPT_IDENTIFIERS,
    keywords=JAVASCRIPT_KEYWORDS,
    function_pattern=re.compile(
        r'\bfunction\s+\w+\s*\(|\w+\s*:\s*function\s*\(|\w+\s*=\s*function\s*\(|=>\s*{'
    ),
    class_pattern=CLASS_PATTERN,
)

JAVA_TABLE = NormalizationTable(
    name="java",
    comment_patterns=C_STYLE_COMMENTS,
    identifier_patterns=JAVA_IDENTIFIERS,
    keywords=JAVA_KEYWORDS,
    function_pattern=re.compile(
        r'\b(?:public|private|protected|static|final|abstract|synchronized)\s+'
        r'[\w<>\[\]\s,?]+\s+\w+\s*\('
    ),
    class_pattern=CLASS_PATTERN,
)

CPP_TABLE = NormalizationTable(
    name="cpp",
    comment_patterns=C_STYLE_COMMENTS,
    identifier_patterns=CPP_IDENTIFIERS,
    keywords=CPP_KEYWORDS,
    function_pattern=re.compile(r'(?:^|\n)\s*[\w:*&<>\[\]\s]+\s\w+\s*\([^)]*\)\s*\{'),
    class_pattern=CLASS_PATTERN,
)

NORMALIZATION_TABLES: Dict[SupportedLanguage, NormalizationTable] = {
    SupportedLanguage.PYTHON: PYTHON_TABLE,
    SupportedLanguage.JAVASCRIPT: JAVASCRIPT_TABLE,
    SupportedLanguage.JAVA: JAVA_TABLE,
    SupportedLanguage.C: CPP_TABLE,
    SupportedLanguage.CPP: CPP_TABLE,
}


def table_for(language: Optional[str]) -> NormalizationTable:
    """Get the table for a language tag; unknown tags use the javascript table."""
    resolved = resolve_language(language)
    if resolved is None:
        return JAVASCRIPT_TABLE
    return NORMALIZATION_TABLES[resolved]
