"""Shared helpers for mocking HTTP collaborators."""

import json

import httpx


def embeddings_response(vectors):
    """Build an OpenAI-style embeddings response body."""
    return {
        "object": "list",
        "data": [
            {"object": "embedding", "index": i, "embedding": vector}
            for i, vector in enumerate(vectors)
        ],
        "model": "text-embedding-3-small",
    }


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it sees."""

    def __init__(self, handler):
        self.requests = []

        def recording_handler(request):
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)

    def json_bodies(self):
        return [json.loads(request.content) for request in self.requests]
