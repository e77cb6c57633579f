"""Core request translation, generation and response emission."""

from .generation import (
    GenerationFailure,
    GenerationOptions,
    GenerationResult,
    GenerationService,
    GenerationSuccess,
    ResponseChunk,
)
from .normalizer import normalize
from .prompt import render_prompt
from .emitter import Protocol, ResponseEmitter, OpenAIEmitter, ClaudeEmitter, create_emitter
from .adapters import ProtocolAdapter, OpenAIAdapter, ClaudeAdapter
from .model_manager import ModelManager
from .inference_engine import InferenceEngine

__all__ = [
    "GenerationFailure",
    "GenerationOptions",
    "GenerationResult",
    "GenerationService",
    "GenerationSuccess",
    "ResponseChunk",
    "normalize",
    "render_prompt",
    "Protocol",
    "ResponseEmitter",
    "OpenAIEmitter",
    "ClaudeEmitter",
    "create_emitter",
    "ProtocolAdapter",
    "OpenAIAdapter",
    "ClaudeAdapter",
    "ModelManager",
    "InferenceEngine",
]
