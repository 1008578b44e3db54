"""Test the embedding client, retry policy and vector validation."""

import json
import math

import httpx
import pytest

from codeplag.chunking import CodeChunk
from codeplag.core.config import EmbeddingConfig
from codeplag.core.exceptions import EmbeddingServiceError, InvalidEmbeddingError
from codeplag.embeddings import (
    EmbeddingClient, RetryPolicy, cosine_similarity, is_transient_error, is_valid_embedding,
    prepare_text, validate_embedding
)

from helpers import RecordingTransport, embeddings_response


BASE_URL = "https://embeddings.test/v1"
NO_WAIT = RetryPolicy(max_attempts=3, backoff_min=0, backoff_max=0)


def vector_for(text):
    """Deterministic, non-zero 4-dimensional vector."""
    return [1.0, float(len(text)), 0.5, -0.25]


def echo_handler(request):
    inputs = json.loads(request.content)["input"]
    return httpx.Response(200, json=embeddings_response([vector_for(t) for t in inputs]))


def make_client(handler, config, **kwargs):
    transport = RecordingTransport(handler)
    http = httpx.Client(transport=transport, base_url=BASE_URL)
    return EmbeddingClient(config, http_client=http, **kwargs), transport


class TestValidation:
    """Test embedding validation."""

    def test_valid_vector(self):
        assert validate_embedding([0.1, 0.2, 0.3], dimensions=3) == [0.1, 0.2, 0.3]

    @pytest.mark.parametrize("vector, reason", [
        ([0.1, 0.2], "dimensions"),
        ([0.1, math.nan, 0.3], "non_finite"),
        ([0.1, math.inf, 0.3], "non_finite"),
        ([0.0, 0.0, 0.0], "all_zero"),
        ([1e-12, 0.0, 0.0], "magnitude"),
        (["a", "b", "c"], "not_numeric"),
        ([], "shape"),
    ])
    def test_invalid_vectors(self, vector, reason):
        with pytest.raises(InvalidEmbeddingError) as exc_info:
            validate_embedding(vector, dimensions=3 if vector else None)

        assert exc_info.value.reason == reason

    def test_is_valid_embedding(self):
        assert is_valid_embedding([1.0, 0.0])
        assert not is_valid_embedding([0.0, 0.0])

    def test_cosine_similarity(self):
        assert cosine_similarity([1.0, 0.0], [1.0, 0.0]) == pytest.approx(1.0)
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
        assert cosine_similarity([1.0, 0.0], [0.0, 0.0]) == 0.0

        with pytest.raises(ValueError):
            cosine_similarity([1.0], [1.0, 0.0])


class TestRetryPolicy:
    """Test retry behavior."""

    def test_transient_errors(self):
        assert is_transient_error(EmbeddingServiceError("network", status_code=None))
        assert is_transient_error(EmbeddingServiceError("rate limited", status_code=429))
        assert is_transient_error(EmbeddingServiceError("server", status_code=503))
        assert not is_transient_error(EmbeddingServiceError("bad request", status_code=400))
        assert not is_transient_error(EmbeddingServiceError("unauthorized", status_code=401))
        assert is_transient_error(ConnectionError())
        assert not is_transient_error(ValueError())

    def test_retries_until_success(self):
        calls = []

        def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise ConnectionError("reset")
            return "ok"

        assert NO_WAIT.call(flaky) == "ok"
        assert len(calls) == 3

    def test_gives_up_after_max_attempts(self):
        calls = []

        def always_down():
            calls.append(1)
            raise EmbeddingServiceError("down", status_code=502)

        with pytest.raises(EmbeddingServiceError):
            NO_WAIT.call(always_down)
        assert len(calls) == 3

    def test_permanent_errors_are_not_retried(self):
        calls = []

        def rejected():
            calls.append(1)
            raise EmbeddingServiceError("bad request", status_code=400)

        with pytest.raises(EmbeddingServiceError):
            NO_WAIT.call(rejected)
        assert len(calls) == 1

    def test_invalid_results_are_retried(self):
        results = iter([0, 0, 5])
        policy = NO_WAIT.with_validity(lambda value: value > 0)

        assert policy.call(lambda: next(results)) == 5

    def test_last_invalid_result_is_returned(self):
        calls = []

        def zero():
            calls.append(1)
            return 0

        policy = NO_WAIT.with_validity(lambda value: value > 0)

        assert policy.call(zero) == 0
        assert len(calls) == 3


class TestEmbeddingClient:
    """Test the embedding client against a mocked service."""

    def test_requires_api_key(self, clean_env):
        with pytest.raises(EmbeddingServiceError):
            EmbeddingClient(EmbeddingConfig(api_key=None))

    def test_embed(self, fast_embedding_config):
        client, transport = make_client(echo_handler, fast_embedding_config)

        vector = client.embed("  let   x =\n 1;  ")

        assert vector == vector_for("let x = 1;")
        body = transport.json_bodies()[0]
        assert body["input"] == ["let x = 1;"]
        assert body["model"] == "text-embedding-3-small"
        assert transport.requests[0].headers["Authorization"] == "Bearer test-key"
        assert transport.requests[0].url.path == "/v1/embeddings"

    def test_embed_empty_text(self, fast_embedding_config):
        client, transport = make_client(echo_handler, fast_embedding_config)

        with pytest.raises(ValueError):
            client.embed("   \n ")
        assert transport.requests == []

    def test_embed_code_adds_language_hint(self, fast_embedding_config):
        client, transport = make_client(echo_handler, fast_embedding_config)

        client.embed_code("x = 1", "python")

        assert transport.json_bodies()[0]["input"] == ["python code: x = 1"]

    def test_batches_and_skips_empty_texts(self, fast_embedding_config):
        config = fast_embedding_config.model_copy(update={"batch_size": 2})
        client, transport = make_client(echo_handler, config)

        vectors = client.embed_batch(["a", "", "bb", "   ", "ccc"])

        assert vectors == [vector_for("a"), vector_for("bb"), vector_for("ccc")]
        assert [body["input"] for body in transport.json_bodies()] == [["a", "bb"], ["ccc"]]

    def test_empty_batch_makes_no_request(self, fast_embedding_config):
        client, transport = make_client(echo_handler, fast_embedding_config)

        assert client.embed_batch(["", "  "]) == []
        assert transport.requests == []

    def test_out_of_order_response(self, fast_embedding_config):
        """Vectors are matched to inputs by index, not by list position."""
        def reversed_handler(request):
            inputs = json.loads(request.content)["input"]
            data = embeddings_response([vector_for(t) for t in inputs])
            data["data"].reverse()
            return httpx.Response(200, json=data)

        client, _ = make_client(reversed_handler, fast_embedding_config)

        assert client.embed_batch(["a", "bb", "ccc"]) == [vector_for("a"), vector_for("bb"), vector_for("ccc")]

    def test_embed_chunks_keeps_order_and_original_text(self, fast_embedding_config):
        client, transport = make_client(echo_handler, fast_embedding_config)
        chunks = [
            CodeChunk(index=0, text="function a() {}"),
            CodeChunk(index=1, text="function b() {}"),
        ]

        results = client.embed_chunks(chunks, "javascript", transform=str.upper)

        assert [r.index for r in results] == [0, 1]
        assert [r.text for r in results] == ["function a() {}", "function b() {}"]
        assert transport.json_bodies()[0]["input"] == [
            "javascript code: FUNCTION A() {}",
            "javascript code: FUNCTION B() {}",
        ]

    def test_server_errors_are_retried(self, fast_embedding_config):
        attempts = []

        def flaky_handler(request):
            attempts.append(1)
            if len(attempts) < 3:
                return httpx.Response(503, text="unavailable")
            return echo_handler(request)

        client, transport = make_client(flaky_handler, fast_embedding_config)

        assert client.embed("x") == vector_for("x")
        assert len(transport.requests) == 3

    def test_client_errors_are_not_retried(self, fast_embedding_config):
        client, transport = make_client(lambda request: httpx.Response(401, text="bad key"), fast_embedding_config)

        with pytest.raises(EmbeddingServiceError) as exc_info:
            client.embed("x")

        assert exc_info.value.status_code == 401
        assert len(transport.requests) == 1

    def test_network_failure(self, fast_embedding_config):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        client, transport = make_client(unreachable, fast_embedding_config)

        with pytest.raises(EmbeddingServiceError):
            client.embed("x")
        assert len(transport.requests) == 3

    def test_malformed_response(self, fast_embedding_config):
        client, _ = make_client(lambda request: httpx.Response(200, json={"error": "?"}), fast_embedding_config)

        with pytest.raises(EmbeddingServiceError):
            client.embed("x")

    def test_invalid_vector_is_retried_then_reported(self, fast_embedding_config):
        client, transport = make_client(
            lambda request: httpx.Response(200, json=embeddings_response([[0.0, 0.0, 0.0, 0.0]])),
            fast_embedding_config,
        )

        with pytest.raises(InvalidEmbeddingError) as exc_info:
            client.embed("x")

        assert exc_info.value.reason == "all_zero"
        assert len(transport.requests) == 3

    def test_wrong_dimensions(self, fast_embedding_config):
        client, _ = make_client(
            lambda request: httpx.Response(200, json=embeddings_response([[1.0, 2.0]])),
            fast_embedding_config,
        )

        with pytest.raises(InvalidEmbeddingError) as exc_info:
            client.embed("x")

        assert exc_info.value.reason == "dimensions"

    def test_with_api_key(self, fast_embedding_config):
        client, transport = make_client(echo_handler, fast_embedding_config)

        client.with_api_key("caller-key").embed("x")

        assert transport.requests[0].headers["Authorization"] == "Bearer caller-key"
        assert client.with_api_key(None) is client

    def test_prepare_text(self):
        assert prepare_text("  a \n\t b  ") == "a b"
