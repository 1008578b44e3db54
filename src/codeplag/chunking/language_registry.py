"""Registry mapping languages to chunking strategies."""

import logging
from typing import Dict, List, Optional

from .config import ChunkingConfig
from .exceptions import LanguageNotSupportedError
from .patterns import CHUNK_PATTERN_TABLES
from .strategies import ChunkingStrategy, BraceStrategy, IndentationStrategy
from ..core.languages import LanguageFamily, SupportedLanguage, LANGUAGE_FAMILIES, resolve_language


logger = logging.getLogger(__name__)


class LanguageRegistry:
    """Registry for managing per-language chunking strategies."""

    def __init__(self, config: Optional[ChunkingConfig] = None):
        self.config = config or ChunkingConfig()
        self._strategies: Dict[SupportedLanguage, ChunkingStrategy] = {}

        self._register_default_strategies()

    def _register_default_strategies(self) -> None:
        """Register one strategy per supported language, chosen by family."""
        for language, family in LANGUAGE_FAMILIES.items():
            if family == LanguageFamily.BRACE:
                self.register_strategy(language, BraceStrategy(self.config, CHUNK_PATTERN_TABLES[language]))
            elif family == LanguageFamily.INDENTATION:
                self.register_strategy(language, IndentationStrategy(self.config))

    def register_strategy(self, language: SupportedLanguage, strategy: ChunkingStrategy) -> None:
        """Register a strategy for a language, replacing any previous one."""
        self._strategies[language] = strategy
        logger.debug(f"Registered {strategy.strategy_name} for {language.value}")

    def get_strategy(self, language: Optional[str]) -> ChunkingStrategy:
        """Get the strategy for a language tag or alias."""
        resolved = resolve_language(language)
        if resolved is None or resolved not in self._strategies:
            raise LanguageNotSupportedError(language)
        return self._strategies[resolved]

    def is_language_supported(self, language: Optional[str]) -> bool:
        """Check if a language tag resolves to a registered strategy."""
        resolved = resolve_language(language)
        return resolved is not None and resolved in self._strategies

    def get_supported_languages(self) -> List[str]:
        """Get list of supported languages."""
        return [language.value for language in self._strategies]
