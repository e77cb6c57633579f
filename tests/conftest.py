"""Pytest configuration and fixtures for testing."""

from __future__ import annotations

import json
from typing import Any, AsyncIterator, List, Optional

import pytest
from fastapi.testclient import TestClient

from llama_gateway.api.app import create_app
from llama_gateway.config import config
from llama_gateway.core.generation import (
    GenerationFailure,
    GenerationOptions,
    GenerationResult,
    GenerationService,
    GenerationSuccess,
    ResponseChunk,
    StreamItem,
)


class StubGenerationService(GenerationService):
    """In-memory generation backend recording every call."""

    def __init__(
        self,
        text: str = "hello",
        chunks: Optional[List[str]] = None,
        failure: Optional[str] = None,
        raise_error: Optional[Exception] = None,
        stream_failure: Optional[str] = None,
        stream_error: Optional[Exception] = None,
    ):
        self.text = text
        self.chunks = chunks if chunks is not None else ["Hel", "lo"]
        self.failure = failure
        self.raise_error = raise_error
        self.stream_failure = stream_failure
        self.stream_error = stream_error
        self.prompts: List[str] = []
        self.options: List[GenerationOptions] = []
        self.stream_closed = False

    async def generate(self, prompt: str, options: GenerationOptions) -> GenerationResult:
        self.prompts.append(prompt)
        self.options.append(options)
        if self.raise_error is not None:
            raise self.raise_error
        if self.failure is not None:
            return GenerationFailure(self.failure)
        return GenerationSuccess(self.text)

    async def generate_stream(
        self, prompt: str, options: GenerationOptions
    ) -> AsyncIterator[StreamItem]:
        self.prompts.append(prompt)
        self.options.append(options)
        try:
            for chunk in self.chunks:
                yield ResponseChunk(chunk)
            if self.stream_error is not None:
                raise self.stream_error
            if self.stream_failure is not None:
                yield GenerationFailure(self.stream_failure)
        finally:
            self.stream_closed = True


def parse_sse(body: str) -> List[Any]:
    """Split an SSE body into decoded payloads; the sentinel stays a string."""
    frames = []
    for block in body.split("\n\n"):
        if not block:
            continue
        assert block.startswith("data: ")
        data = block[len("data: "):]
        frames.append(data if data == "[DONE]" else json.loads(data))
    return frames


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    """Run every test with authentication disabled unless a test enables it."""
    monkeypatch.setattr(config, "API_KEY", None)


@pytest.fixture
def stub_service() -> StubGenerationService:
    return StubGenerationService()


@pytest.fixture
def client(stub_service):
    with TestClient(create_app(generation_service=stub_service)) as test_client:
        yield test_client
