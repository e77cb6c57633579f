"""Response models for the API."""

from typing import Dict, List, Optional
from pydantic import BaseModel

from .requests import Message


# OpenAI compatible


class Usage(BaseModel):
    """Estimated token usage information."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class Choice(BaseModel):
    """A single completion choice."""

    message: Message
    index: int = 0
    finish_reason: str = "stop"


class ChatCompletionResponse(BaseModel):
    """Response for chat completion."""

    id: str
    object: str = "chat.completion"
    created: int
    model: str
    choices: List[Choice]
    usage: Usage


class StreamChoice(BaseModel):
    """A single streaming completion choice."""

    delta: Dict[str, str]
    index: int = 0
    finish_reason: Optional[str] = None


class ChatCompletionChunk(BaseModel):
    """A chunk of streaming chat completion."""

    id: str
    object: str = "chat.completion.chunk"
    created: int
    model: str
    choices: List[StreamChoice]


class ModelInfo(BaseModel):
    """Information about a model."""

    id: str
    object: str = "model"
    created: int
    owned_by: str = "local"


class ModelListResponse(BaseModel):
    """List of available models."""

    object: str = "list"
    data: List[ModelInfo]


# Claude compatible


class TextBlock(BaseModel):
    """A text content block."""

    type: str = "text"
    text: str


class MessageUsage(BaseModel):
    """Estimated token usage for the Messages API."""

    input_tokens: int
    output_tokens: int


class MessageResponse(BaseModel):
    """Response for the Messages API."""

    id: str
    type: str = "message"
    role: str = "assistant"
    content: List[TextBlock]
    model: str
    stop_reason: str = "end_turn"
    stop_sequence: Optional[str] = None
    usage: MessageUsage


class TextDelta(BaseModel):
    """Incremental text inside a content block."""

    type: str = "text_delta"
    text: str


class ContentBlockDeltaEvent(BaseModel):
    """Streaming event carrying one text chunk."""

    type: str = "content_block_delta"
    delta: TextDelta
    index: int = 0


class StopDelta(BaseModel):
    """Final stop information of a streamed message."""

    stop_reason: str = "end_turn"
    stop_sequence: Optional[str] = None


class OutputUsage(BaseModel):
    """Output-only usage reported at the end of a stream."""

    output_tokens: int


class MessageDeltaEvent(BaseModel):
    """Terminal streaming event of a message."""

    type: str = "message_delta"
    delta: StopDelta
    usage: OutputUsage
