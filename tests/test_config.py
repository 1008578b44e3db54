"""Test configuration management."""

import pytest
from pathlib import Path
from pydantic import ValidationError

from codeplag.chunking import ChunkingConfig
from codeplag.core.config import (
    Config, EmbeddingConfig, VectorIndexConfig, ExternalToolsConfig, RetryConfig
)
from codeplag.core.models import DetectionMethod, OutputFormat
from codeplag.scoring import ScoringConfig


class TestConfig:
    """Test configuration management."""

    def test_default_config_creation(self):
        """Test creating default configuration."""
        config = Config.get_default_config()

        assert isinstance(config.embedding, EmbeddingConfig)
        assert isinstance(config.chunking, ChunkingConfig)
        assert isinstance(config.scoring, ScoringConfig)
        assert config.embedding.model == "text-embedding-3-small"
        assert config.embedding.dimensions == 1536
        assert config.vector_index.search_top_k == 100
        assert config.scoring.default_threshold == 0.75
        assert config.output.format == OutputFormat.TABLE

    def test_default_weights(self):
        """AST similarity carries the largest weight."""
        weights = ScoringConfig().weights

        assert weights[DetectionMethod.TREESITTER] == 0.40
        assert weights[DetectionMethod.SEMANTIC_EMBEDDINGS] == 0.20
        assert sum(weights.values()) == pytest.approx(1.0)

    def test_config_from_dict(self):
        """Test creating config from dictionary."""
        config_dict = {
            'chunking': {
                'min_lines': 5,
                'min_chars': 80,
            },
            'embedding': {
                'model': 'test-model',
                'dimensions': 8,
            },
            'scoring': {
                'weights': {
                    'semantic_embeddings': 0.25,
                    'copydetect': 0.25,
                    'treesitter': 0.25,
                    'difflib': 0.25,
                },
            },
        }

        config = Config.load_from_dict(config_dict)

        assert config.chunking.min_lines == 5
        assert config.chunking.min_chars == 80
        assert config.embedding.model == 'test-model'
        assert config.scoring.weights[DetectionMethod.DIFFLIB] == 0.25

    def test_weights_must_sum_to_one(self):
        """Weights that do not add up are rejected."""
        with pytest.raises(ValidationError):
            ScoringConfig(weights={
                'semantic_embeddings': 0.5,
                'copydetect': 0.5,
                'treesitter': 0.5,
                'difflib': 0.5,
            })

    def test_weights_must_cover_every_method(self):
        with pytest.raises(ValidationError):
            ScoringConfig(weights={'semantic_embeddings': 0.5, 'treesitter': 0.5})

    def test_window_overlap_must_be_smaller_than_window(self):
        with pytest.raises(ValidationError):
            ChunkingConfig(window_lines=10, window_overlap=10)

    def test_retry_backoff_bounds(self):
        with pytest.raises(ValidationError):
            RetryConfig(backoff_min=5, backoff_max=1)

    def test_unknown_vector_backend(self):
        with pytest.raises(ValidationError):
            VectorIndexConfig(backend="pinecone")

    def test_credentials_from_environment(self, monkeypatch):
        """Missing credentials fall back to environment variables."""
        monkeypatch.setenv('OPENAI_API_KEY', 'env-key')
        monkeypatch.setenv('QDRANT_URL', 'http://qdrant.test:6333')
        monkeypatch.setenv('EXTERNAL_PLAGIARISM_API_URL', 'http://compare.test/api/detect')

        config = Config()

        assert config.embedding.api_key == 'env-key'
        assert config.vector_index.url == 'http://qdrant.test:6333'
        assert config.external_tools.api_url == 'http://compare.test/api/detect'

    def test_explicit_credentials_win(self, monkeypatch):
        monkeypatch.setenv('OPENAI_API_KEY', 'env-key')

        assert EmbeddingConfig(api_key='explicit').api_key == 'explicit'

    def test_tools_for_language(self):
        tools = ExternalToolsConfig().tools_for("python")

        assert tools == ["copydetect", "difflib", "treesitter_python"]

    def test_config_save_and_load(self, temp_dir, clean_env):
        """Test saving and loading configuration."""
        config = Config.get_default_config()
        config.embedding.model = 'test-model'
        config.chunking.min_lines = 4

        config_file = temp_dir / 'test_config.yaml'
        config.save_to_file(config_file)

        assert config_file.exists()

        # Load and verify
        loaded_config = Config.load_from_file(config_file)
        assert loaded_config.embedding.model == 'test-model'
        assert loaded_config.chunking.min_lines == 4
        assert loaded_config.scoring.weights == config.scoring.weights

    def test_saved_config_omits_api_keys(self, temp_dir):
        config = Config(embedding={'api_key': 'sk-secret'})
        config_file = temp_dir / 'codeplag.yaml'

        config.save_to_file(config_file)

        assert 'sk-secret' not in config_file.read_text()

    def test_load_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            Config.load_from_file(temp_dir / 'missing.yaml')

    def test_find_config_file_walks_up(self, temp_dir):
        """Config files in parent directories are found."""
        config_file = temp_dir / '.codeplag.yaml'
        config_file.write_text('log_level: DEBUG\n')
        nested = temp_dir / 'a' / 'b'
        nested.mkdir(parents=True)

        assert Config.find_config_file(nested) == config_file.resolve()

    def test_pyproject_config(self, temp_dir):
        """A [tool.codeplag] section in pyproject.toml is used."""
        pyproject = temp_dir / 'pyproject.toml'
        pyproject.write_text(
            '[project]\nname = "demo"\n\n'
            '[tool.codeplag]\nlog_level = "WARNING"\n\n'
            '[tool.codeplag.scoring]\ndefault_threshold = 0.6\n'
        )

        assert Config.find_config_file(temp_dir) == pyproject.resolve()

        config = Config.load_from_file(pyproject)
        assert config.log_level == 'WARNING'
        assert config.scoring.default_threshold == 0.6

    def test_pyproject_without_section_is_skipped(self, temp_dir):
        pyproject = temp_dir / 'pyproject.toml'
        pyproject.write_text('[project]\nname = "demo"\n')

        with pytest.raises(ValueError):
            Config.load_from_pyproject(pyproject)

    def test_config_validation(self, clean_env):
        """Test configuration validation."""
        config = Config.get_default_config()

        issues = config.validate_config()

        # Credentials are not set in the test environment
        assert any('API key' in issue for issue in issues)
        assert any('Qdrant URL' in issue for issue in issues)
        assert any('comparison API URL' in issue for issue in issues)

    def test_config_validation_output_directory(self, clean_env):
        config = Config(output={'output_file': Path('/nonexistent/dir/report.json')})

        issues = config.validate_config()

        assert any('Output directory does not exist' in issue for issue in issues)

    def test_merge_with_cli_args(self):
        """Test merging config with CLI arguments."""
        config = Config.get_default_config()

        merged = config.merge_with_cli_args(
            verbose=True,
            format='json',
            threshold=0.8,
            max_results=3,
        )

        assert merged.output.verbose is True
        assert merged.output.format == OutputFormat.JSON
        assert merged.scoring.default_threshold == 0.8
        assert merged.scoring.max_results == 3

    def test_merge_ignores_none_and_unknown(self):
        config = Config.get_default_config()

        merged = config.merge_with_cli_args(format=None, unknown_flag=True)

        assert merged.output.format == OutputFormat.TABLE
