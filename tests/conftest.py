"""Test configuration."""

import tempfile
from pathlib import Path

import pytest

from codeplag.core.config import EmbeddingConfig, RetryConfig


# Test fixtures
@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def javascript_code():
    """Two functions and a class whose methods are too small to keep."""
    return '''// Array helpers
function sumArray(values) {
  let total = 0;
  for (const value of values) {
    total += value;
  }
  return total;
}

const average = (values) => {
  if (values.length === 0) {
    return 0;
  }
  return sumArray(values) / values.length;
};

class Counter {
  constructor() {
    this.count = 0;
  }
  increment() {
    this.count += 1;
  }
}
'''


@pytest.fixture
def python_code():
    """A function and a class separated by top-level statements."""
    return '''import math


def area(radius):
    """Area of a circle."""
    if radius < 0:
        raise ValueError("negative radius")
    return math.pi * radius ** 2


class Shape:
    def __init__(self, name):
        self.name = name

    def describe(self):
        return f"Shape {self.name}"


print(area(2))
'''


@pytest.fixture
def sample_source_file(temp_dir, javascript_code):
    """Write the javascript sample to disk."""
    file_path = temp_dir / "sample.js"
    file_path.write_text(javascript_code)
    return file_path


@pytest.fixture
def clean_env(monkeypatch):
    """Remove collaborator credentials from the environment."""
    for name in ("OPENAI_API_KEY", "QDRANT_URL", "QDRANT_API_KEY", "EXTERNAL_PLAGIARISM_API_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fast_embedding_config():
    """Small vectors and no backoff sleeps."""
    return EmbeddingConfig(
        api_key="test-key",
        dimensions=4,
        batch_size=8,
        retry=RetryConfig(max_attempts=3, backoff_multiplier=1.0, backoff_min=0, backoff_max=0),
    )

