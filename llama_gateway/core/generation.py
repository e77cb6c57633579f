"""Contract between the protocol adapters and the text generation backend."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator, Union


@dataclass(frozen=True)
class GenerationOptions:
    """Sampling parameters for one request."""

    max_tokens: int
    temperature: float


@dataclass(frozen=True)
class ResponseChunk:
    """An incremental piece of generated text."""

    text: str


@dataclass(frozen=True)
class GenerationSuccess:
    """Complete generated text."""

    text: str


@dataclass(frozen=True)
class GenerationFailure:
    """Generation could not complete; ``reason`` is shown to the caller."""

    reason: str


GenerationResult = Union[GenerationSuccess, GenerationFailure]
StreamItem = Union[ResponseChunk, GenerationFailure]


class GenerationService(ABC):
    """
    Text generation capability shared by every adapter.

    Implementations hold the loaded model as a read-only handle and create
    all mutable generation state per call, so concurrent requests never
    share a session.
    """

    @abstractmethod
    async def generate(self, prompt: str, options: GenerationOptions) -> GenerationResult:
        """Generate the full completion for ``prompt``."""

    @abstractmethod
    def generate_stream(
        self, prompt: str, options: GenerationOptions
    ) -> AsyncIterator[StreamItem]:
        """
        Generate the completion for ``prompt`` incrementally.

        Returns a lazy, finite, non-restartable async iterator of
        ResponseChunk in production order. A failure after partial output
        is reported as a single trailing GenerationFailure. Closing the
        iterator early releases the request's generation session.
        """
