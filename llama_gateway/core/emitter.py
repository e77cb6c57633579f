"""
Response emitters for the OpenAI and Claude wire formats.

An emitter turns generated text into the caller's protocol shape, either
as one JSON body or as a sequence of Server-Sent-Events frames.

Token counts in every response are estimates computed as
``ceil(characters / 4)``, not tokenizer counts. They must not be used for
billing.
"""

import asyncio
import json
import math
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, AsyncIterator, Dict

from pydantic import BaseModel

from ..models.requests import Message
from ..models.responses import (
    ChatCompletionChunk,
    ChatCompletionResponse,
    Choice,
    ContentBlockDeltaEvent,
    MessageDeltaEvent,
    MessageResponse,
    MessageUsage,
    OutputUsage,
    StopDelta,
    StreamChoice,
    TextBlock,
    TextDelta,
    Usage,
)
from ..utils.logging import get_logger
from .generation import GenerationFailure, StreamItem

logger = get_logger(__name__)

DONE_FRAME = "data: [DONE]\n\n"


class Protocol(str, Enum):
    """Wire protocols the gateway speaks."""

    OPENAI = "openai"
    CLAUDE = "claude"


def estimate_tokens(text: str) -> int:
    """Approximate token count of ``text`` as ceil(len / 4)."""
    return math.ceil(len(text) / 4)


def sse_frame(payload: Any) -> str:
    """Wrap a payload into one ``data:`` SSE frame."""
    if isinstance(payload, BaseModel):
        data = payload.model_dump_json()
    else:
        data = json.dumps(payload)
    return f"data: {data}\n\n"


def error_frame(message: str) -> str:
    """SSE frame reporting a mid-stream failure."""
    return sse_frame({"error": message})


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


class ResponseEmitter(ABC):
    """
    Base class for protocol emitters.

    One emitter is created per request. It fixes the response id, creation
    time and model name shared by every frame of that response.
    """

    protocol: Protocol

    def __init__(self, model: str):
        self.model = model
        self.created = int(time.time())
        self.response_id = self._new_id()

    @abstractmethod
    def _new_id(self) -> str:
        """Protocol-specific response id."""

    @abstractmethod
    def completion(self, prompt: str, text: str) -> BaseModel:
        """Full non-streaming response body."""

    @abstractmethod
    def delta_event(self, text: str) -> BaseModel:
        """Streaming frame payload for one chunk."""

    @abstractmethod
    def terminal_event(self, full_text: str) -> BaseModel:
        """Streaming frame payload signalling normal completion."""

    def emit_final(self, prompt: str, text: str) -> Dict[str, Any]:
        """
        Build the JSON-serializable non-streaming response.

        Args:
            prompt: Prompt sent to the model, used for the usage estimate
            text: Complete generated text

        Returns:
            Response body as a plain dict
        """
        return self.completion(prompt, text).model_dump()

    async def emit_stream(self, items: AsyncIterator[StreamItem]) -> AsyncIterator[str]:
        """
        Translate a chunk stream into SSE frames.

        Exactly one frame is produced per chunk, in arrival order, before the
        next chunk is pulled. Normal exhaustion ends with the protocol's
        terminal frame and the ``[DONE]`` sentinel. A failure ends the stream
        with a single error frame; frames already sent are not retracted.
        If the consumer goes away the source is closed and nothing more is
        written.

        Args:
            items: Chunks from the generation service

        Yields:
            Server-sent event formatted frames
        """
        parts = []
        try:
            async for item in items:
                if isinstance(item, GenerationFailure):
                    logger.error(f"Streaming generation failed: {item.reason}")
                    yield error_frame(item.reason)
                    return
                parts.append(item.text)
                yield sse_frame(self.delta_event(item.text))
        except (asyncio.CancelledError, GeneratorExit):
            logger.info(
                f"Client disconnected from {self.response_id} after {len(parts)} chunks"
            )
            raise
        except Exception as e:
            logger.error(f"Streaming error: {e}", exc_info=True)
            yield error_frame(str(e))
            return
        finally:
            aclose = getattr(items, "aclose", None)
            if aclose is not None:
                await aclose()

        full_text = "".join(parts)
        yield sse_frame(self.terminal_event(full_text))
        yield DONE_FRAME
        logger.debug(
            f"Stream {self.response_id} complete: {len(parts)} chunks, "
            f"~{estimate_tokens(full_text)} tokens"
        )


class OpenAIEmitter(ResponseEmitter):
    """Chat Completions format (``chat.completion`` / ``chat.completion.chunk``)."""

    protocol = Protocol.OPENAI

    def _new_id(self) -> str:
        return f"chatcmpl-{_timestamp_ms()}"

    def completion(self, prompt: str, text: str) -> ChatCompletionResponse:
        return ChatCompletionResponse(
            id=self.response_id,
            created=self.created,
            model=self.model,
            choices=[
                Choice(
                    message=Message(role="assistant", content=text),
                    index=0,
                    finish_reason="stop",
                )
            ],
            usage=Usage(
                prompt_tokens=estimate_tokens(prompt),
                completion_tokens=estimate_tokens(text),
                total_tokens=estimate_tokens(prompt + text),
            ),
        )

    def delta_event(self, text: str) -> ChatCompletionChunk:
        return ChatCompletionChunk(
            id=self.response_id,
            created=int(time.time()),
            model=self.model,
            choices=[StreamChoice(delta={"content": text}, index=0, finish_reason=None)],
        )

    def terminal_event(self, full_text: str) -> ChatCompletionChunk:
        return ChatCompletionChunk(
            id=self.response_id,
            created=int(time.time()),
            model=self.model,
            choices=[StreamChoice(delta={}, index=0, finish_reason="stop")],
        )


class ClaudeEmitter(ResponseEmitter):
    """Messages API format (``message`` / ``content_block_delta``)."""

    protocol = Protocol.CLAUDE

    def _new_id(self) -> str:
        return f"msg_{_timestamp_ms()}"

    def completion(self, prompt: str, text: str) -> MessageResponse:
        return MessageResponse(
            id=self.response_id,
            content=[TextBlock(text=text)],
            model=self.model,
            stop_reason="end_turn",
            stop_sequence=None,
            usage=MessageUsage(
                input_tokens=estimate_tokens(prompt),
                output_tokens=estimate_tokens(text),
            ),
        )

    def delta_event(self, text: str) -> ContentBlockDeltaEvent:
        return ContentBlockDeltaEvent(delta=TextDelta(text=text), index=0)

    def terminal_event(self, full_text: str) -> MessageDeltaEvent:
        return MessageDeltaEvent(
            delta=StopDelta(stop_reason="end_turn", stop_sequence=None),
            usage=OutputUsage(output_tokens=estimate_tokens(full_text)),
        )


EMITTERS = {emitter.protocol: emitter for emitter in (OpenAIEmitter, ClaudeEmitter)}


def create_emitter(protocol: Protocol, model: str) -> ResponseEmitter:
    """Create the emitter for ``protocol`` bound to one response."""
    return EMITTERS[Protocol(protocol)](model)
