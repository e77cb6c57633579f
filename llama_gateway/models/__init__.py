"""Pydantic models for API requests and responses."""

from .requests import (
    Message,
    ChatCompletionRequest,
    ClaudeMessageRequest,
)
from .responses import (
    Usage,
    Choice,
    ChatCompletionResponse,
    StreamChoice,
    ChatCompletionChunk,
    ModelInfo,
    ModelListResponse,
    TextBlock,
    MessageUsage,
    MessageResponse,
    TextDelta,
    ContentBlockDeltaEvent,
    StopDelta,
    OutputUsage,
    MessageDeltaEvent,
)

__all__ = [
    "Message",
    "ChatCompletionRequest",
    "ClaudeMessageRequest",
    "Usage",
    "Choice",
    "ChatCompletionResponse",
    "StreamChoice",
    "ChatCompletionChunk",
    "ModelInfo",
    "ModelListResponse",
    "TextBlock",
    "MessageUsage",
    "MessageResponse",
    "TextDelta",
    "ContentBlockDeltaEvent",
    "StopDelta",
    "OutputUsage",
    "MessageDeltaEvent",
]
