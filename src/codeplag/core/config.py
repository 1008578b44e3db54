"""Configuration management for codeplag."""

import os
import tomllib
import yaml
from pathlib import Path
from typing import Dict, List, Optional, Any
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from .models import OutputFormat
from ..chunking.config import ChunkingConfig
from ..scoring.config import ScoringConfig


class RetryConfig(BaseModel):
    """Retry with exponential backoff around collaborator calls."""

    max_attempts: int = Field(default=3, ge=1, le=10)
    backoff_multiplier: float = Field(default=1.0, gt=0)
    backoff_min: float = Field(default=1.0, ge=0)
    backoff_max: float = Field(default=10.0, ge=0)

    @field_validator('backoff_max')
    @classmethod
    def validate_backoff_max(cls, v: float, info) -> float:
        if 'backoff_min' in info.data and v < info.data['backoff_min']:
            raise ValueError('backoff_max must be >= backoff_min')
        return v


class EmbeddingConfig(BaseModel):
    """Configuration for the embedding service."""

    # Provider settings
    base_url: str = "https://api.openai.com/v1"
    model: str = "text-embedding-3-small"
    dimensions: int = Field(default=1536, gt=0)
    api_key: Optional[str] = Field(default=None, validate_default=True)

    # Request configuration
    timeout_seconds: float = Field(default=30.0, gt=0)
    batch_size: int = Field(default=64, ge=1, le=2048)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    @field_validator('api_key', mode='before')
    @classmethod
    def load_api_key(cls, v):
        """Load API key from environment if not provided."""
        if v is None:
            return os.getenv('OPENAI_API_KEY')
        return v


class VectorIndexConfig(BaseModel):
    """Configuration for the nearest-neighbour index."""

    backend: str = "qdrant"
    url: Optional[str] = Field(default=None, validate_default=True)
    api_key: Optional[str] = Field(default=None, validate_default=True)
    collection_name: str = "code-submissions"
    search_top_k: int = Field(default=100, ge=1, le=10000)

    @field_validator('backend')
    @classmethod
    def validate_backend(cls, v: str) -> str:
        if v not in ("qdrant", "memory"):
            raise ValueError(f"Unknown vector index backend: {v}")
        return v

    @field_validator('url', mode='before')
    @classmethod
    def load_url(cls, v):
        if v is None:
            return os.getenv('QDRANT_URL')
        return v

    @field_validator('api_key', mode='before')
    @classmethod
    def load_api_key(cls, v):
        if v is None:
            return os.getenv('QDRANT_API_KEY')
        return v


class ExternalToolsConfig(BaseModel):
    """Configuration for the external structural comparison service."""

    enabled: bool = True
    api_url: Optional[str] = Field(default=None, validate_default=True)
    timeout_seconds: float = Field(default=30.0, gt=0)
    # "{language}" is filled in per request
    tools: List[str] = Field(default_factory=lambda: ["copydetect", "difflib", "treesitter_{language}"])
    max_counterparts: int = Field(default=5, ge=1, le=50)

    @field_validator('api_url', mode='before')
    @classmethod
    def load_api_url(cls, v):
        if v is None:
            return os.getenv('EXTERNAL_PLAGIARISM_API_URL')
        return v

    def tools_for(self, language: str) -> List[str]:
        """Tool names with the language placeholder resolved."""
        return [tool.format(language=language) for tool in self.tools]


class OutputConfig(BaseModel):
    """Configuration for output formatting."""

    format: OutputFormat = OutputFormat.TABLE
    output_file: Optional[Path] = None

    # Verbosity
    verbose: bool = False
    quiet: bool = False


class Config(BaseModel):
    """Main configuration class for codeplag."""

    # Sub-configurations
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    vector_index: VectorIndexConfig = Field(default_factory=VectorIndexConfig)
    external_tools: ExternalToolsConfig = Field(default_factory=ExternalToolsConfig)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    # Global settings
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def load_from_file(cls, config_path: Path) -> "Config":
        """Load configuration from YAML file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.name == "pyproject.toml":
            return cls.load_from_pyproject(config_path)

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    @classmethod
    def load_from_dict(cls, config_dict: Dict[str, Any]) -> "Config":
        """Load configuration from dictionary."""
        return cls(**config_dict)

    @classmethod
    def get_default_config(cls) -> "Config":
        """Get default configuration."""
        # Load environment variables
        load_dotenv()
        return cls()

    @classmethod
    def find_config_file(cls, start_path: Optional[Path] = None) -> Optional[Path]:
        """Find configuration file in current directory or parent directories."""
        if start_path is None:
            start_path = Path.cwd()

        config_names = [
            ".codeplag.yaml",
            ".codeplag.yml",
            "codeplag.yaml",
            "codeplag.yml",
            "pyproject.toml"  # Look for [tool.codeplag] section
        ]

        current_path = start_path.resolve()

        # Search up the directory tree
        while current_path != current_path.parent:
            for config_name in config_names:
                config_file = current_path / config_name
                if config_file.exists():
                    if config_name == "pyproject.toml":
                        if cls._has_codeplag_config(config_file):
                            return config_file
                    else:
                        return config_file
            current_path = current_path.parent

        return None

    @classmethod
    def _has_codeplag_config(cls, pyproject_path: Path) -> bool:
        """Check if pyproject.toml has a [tool.codeplag] section."""
        try:
            with open(pyproject_path, 'rb') as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            return False
        return "tool" in data and "codeplag" in data["tool"]

    @classmethod
    def load_from_pyproject(cls, pyproject_path: Path) -> "Config":
        """Load configuration from pyproject.toml file."""
        with open(pyproject_path, 'rb') as f:
            data = tomllib.load(f)

        if "tool" not in data or "codeplag" not in data["tool"]:
            raise ValueError("No [tool.codeplag] section found in pyproject.toml")

        return cls(**data["tool"]["codeplag"])

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        # Enums, paths and enum-keyed weights become plain YAML values;
        # credentials stay in the environment
        config_dict = self.model_dump(
            mode='json',
            exclude={"embedding": {"api_key"}, "vector_index": {"api_key"}},
        )

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, indent=2, sort_keys=False)

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of issues."""
        issues = []

        # Collaborator credentials
        if self.embedding.api_key is None:
            issues.append("Embedding API key not configured")

        if self.vector_index.backend == "qdrant" and not self.vector_index.url:
            issues.append("Qdrant URL not configured")

        if self.external_tools.enabled and not self.external_tools.api_url:
            issues.append("External comparison API URL not configured")

        # Search thresholds
        if self.scoring.chunk_threshold < self.scoring.submission_min_similarity:
            issues.append("Chunk threshold is below the submission minimum similarity")

        # Validate output configuration
        if self.output.output_file and self.output.output_file.parent:
            if not self.output.output_file.parent.exists():
                issues.append(f"Output directory does not exist: {self.output.output_file.parent}")

        if self.output.verbose and self.output.quiet:
            issues.append("Output cannot be both verbose and quiet")

        return issues

    def merge_with_cli_args(self, **cli_args) -> "Config":
        """Merge configuration with CLI arguments."""
        config_dict = self.model_dump()

        # Map CLI arguments to config structure
        cli_mapping = {
            'verbose': 'output.verbose',
            'quiet': 'output.quiet',
            'format': 'output.format',
            'output': 'output.output_file',
            'threshold': 'scoring.default_threshold',
            'max_results': 'scoring.max_results',
            'log_level': 'log_level',
        }

        for cli_key, cli_value in cli_args.items():
            if cli_value is not None and cli_key in cli_mapping:
                config_path = cli_mapping[cli_key].split('.')
                current = config_dict

                # Navigate to the right location in config dict
                for path_part in config_path[:-1]:
                    current = current[path_part]

                current[config_path[-1]] = cli_value

        return Config(**config_dict)
