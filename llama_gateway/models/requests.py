"""Request models for the API."""

from typing import Any, List, Optional, Union
from pydantic import BaseModel, Field, field_validator


def flatten_content(value: Any) -> Any:
    """
    Collapse a list of content blocks into plain text.

    Both providers accept ``content`` as either a string or a list of
    ``{"type": "text", "text": ...}`` blocks. Non-text blocks are dropped.
    """
    if isinstance(value, list):
        parts = []
        for block in value:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(str(block.get("text", "")))
        return "".join(parts)
    return value


class Message(BaseModel):
    """A chat message with role and content."""

    model_config = {"frozen": True}

    role: str = Field(min_length=1)
    content: str = ""

    @field_validator("content", mode="before")
    @classmethod
    def _flatten_content(cls, value: Any) -> Any:
        if value is None:
            return ""
        return flatten_content(value)


class ChatCompletionRequest(BaseModel):
    """Request for chat completion (OpenAI compatible)."""

    model: Optional[str] = None
    messages: List[Message] = Field(min_length=1)
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    max_tokens: Optional[int] = Field(default=None, ge=1)
    stream: bool = False


class ClaudeMessageRequest(ChatCompletionRequest):
    """Request for the Messages API (Claude compatible)."""

    system: Optional[Union[str, List[Any]]] = None

    def system_prompt(self) -> Optional[str]:
        """Top-level system prompt as plain text, if one was sent."""
        if self.system is None:
            return None
        return flatten_content(self.system) or None
