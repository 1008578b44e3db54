"""Language canonicalization shared by chunking and normalization."""

from enum import Enum
from typing import Dict, Optional


class SupportedLanguage(str, Enum):
    """Languages with dedicated chunking and normalization tables."""

    PYTHON = "python"
    JAVASCRIPT = "javascript"
    JAVA = "java"
    C = "c"
    CPP = "cpp"


class LanguageFamily(str, Enum):
    """How a language delimits its top-level units."""

    BRACE = "brace"              # C-like, blocks delimited by { }
    INDENTATION = "indentation"  # blocks delimited by indentation
    OPAQUE = "opaque"            # no unit detection, whole-file only


LANGUAGE_ALIASES: Dict[str, SupportedLanguage] = {
    "python": SupportedLanguage.PYTHON,
    "py": SupportedLanguage.PYTHON,
    "javascript": SupportedLanguage.JAVASCRIPT,
    "js": SupportedLanguage.JAVASCRIPT,
    "jsx": SupportedLanguage.JAVASCRIPT,
    "ts": SupportedLanguage.JAVASCRIPT,
    "tsx": SupportedLanguage.JAVASCRIPT,
    "typescript": SupportedLanguage.JAVASCRIPT,
    "java": SupportedLanguage.JAVA,
    "c": SupportedLanguage.C,
    "cpp": SupportedLanguage.CPP,
    "c++": SupportedLanguage.CPP,
    "cc": SupportedLanguage.CPP,
    "cxx": SupportedLanguage.CPP,
}

LANGUAGE_FAMILIES: Dict[SupportedLanguage, LanguageFamily] = {
    SupportedLanguage.PYTHON: LanguageFamily.INDENTATION,
    SupportedLanguage.JAVASCRIPT: LanguageFamily.BRACE,
    SupportedLanguage.JAVA: LanguageFamily.BRACE,
    SupportedLanguage.C: LanguageFamily.BRACE,
    SupportedLanguage.CPP: LanguageFamily.BRACE,
}


def resolve_language(language: Optional[str]) -> Optional[SupportedLanguage]:
    """Resolve a language tag or alias to a supported language.

    Returns None for tags outside the supported set; callers treat those as
    opaque text.
    """
    if not language:
        return None
    return LANGUAGE_ALIASES.get(language.strip().lower())


def language_family(language: Optional[str]) -> LanguageFamily:
    """Get the family of a language tag, OPAQUE when unsupported."""
    resolved = resolve_language(language)
    if resolved is None:
        return LanguageFamily.OPAQUE
    return LANGUAGE_FAMILIES[resolved]
