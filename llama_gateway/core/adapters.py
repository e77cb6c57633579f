"""Protocol adapters translating provider requests into generation calls."""

from typing import Any, AsyncIterator, Dict, List, Optional, Type, Union

from fastapi import HTTPException
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from ..config import config
from ..models.requests import ChatCompletionRequest, ClaudeMessageRequest, Message
from ..utils.logging import get_logger
from .emitter import Protocol, create_emitter
from .generation import GenerationFailure, GenerationOptions, GenerationService, StreamItem
from .normalizer import normalize
from .prompt import render_prompt

logger = get_logger(__name__)

MESSAGES_REQUIRED = "Messages array is required"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def _describe_validation_error(error: ValidationError) -> str:
    """Flatten pydantic errors into one readable line."""
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        problems.append(f"{location}: {item.get('msg')}" if location else item.get("msg", ""))
    return "; ".join(problems) or "Invalid request"


class ProtocolAdapter:
    """
    Composes normalization, templating, generation and emission for one protocol.

    Subclasses only pick the request schema and the protocol tag.
    """

    protocol: Protocol
    request_model: Type[ChatCompletionRequest] = ChatCompletionRequest

    def __init__(
        self,
        generation_service: GenerationService,
        default_max_tokens: Optional[int] = None,
        default_temperature: Optional[float] = None,
        default_model: Optional[str] = None,
    ):
        """
        Initialize the adapter.

        Args:
            generation_service: Backend used for every request
            default_max_tokens: Used when a request omits max_tokens
            default_temperature: Used when a request omits temperature
            default_model: Model name echoed when a request omits model
        """
        self.generation_service = generation_service
        self.default_max_tokens = default_max_tokens or config.DEFAULT_MAX_TOKENS
        self.default_temperature = (
            config.DEFAULT_TEMPERATURE if default_temperature is None else default_temperature
        )
        self.default_model = default_model or config.MODEL_NAME

    def parse(self, body: Any) -> ChatCompletionRequest:
        """
        Validate a raw JSON body.

        Raises:
            HTTPException: 400 when messages are missing or the body is invalid
        """
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail=MESSAGES_REQUIRED)

        messages = body.get("messages")
        if not isinstance(messages, list) or not messages:
            raise HTTPException(status_code=400, detail=MESSAGES_REQUIRED)

        try:
            return self.request_model.model_validate(body)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=_describe_validation_error(e))

    def conversation(self, request: ChatCompletionRequest) -> List[Message]:
        """Canonical message list for ``request``."""
        return normalize(request.messages)

    def options(self, request: ChatCompletionRequest) -> GenerationOptions:
        """Sampling options with configured defaults filled in."""
        return GenerationOptions(
            max_tokens=request.max_tokens or self.default_max_tokens,
            temperature=(
                self.default_temperature if request.temperature is None else request.temperature
            ),
        )

    async def handle(self, body: Any) -> Union[Dict[str, Any], StreamingResponse]:
        """
        Serve one request.

        Args:
            body: Decoded JSON request body

        Returns:
            Response body dict, or a StreamingResponse when ``stream`` is set

        Raises:
            HTTPException: 400 for invalid requests, 500 when generation fails
        """
        request = self.parse(body)
        prompt = render_prompt(self.conversation(request))
        options = self.options(request)
        emitter = create_emitter(self.protocol, request.model or self.default_model)

        logger.info(
            f"{emitter.protocol.value} request {emitter.response_id}: "
            f"messages={len(request.messages)}, stream={request.stream}, "
            f"max_tokens={options.max_tokens}, temperature={options.temperature}"
        )

        if request.stream:
            return StreamingResponse(
                emitter.emit_stream(self._stream(prompt, options)),
                media_type="text/event-stream",
                headers=SSE_HEADERS,
            )

        try:
            result = await self.generation_service.generate(prompt, options)
        except Exception as e:
            logger.error(f"Generation failed: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=str(e))

        if isinstance(result, GenerationFailure):
            logger.error(f"Generation failed for {emitter.response_id}: {result.reason}")
            raise HTTPException(status_code=500, detail=result.reason)

        return emitter.emit_final(prompt, result.text)

    async def _stream(self, prompt: str, options: GenerationOptions) -> AsyncIterator[StreamItem]:
        # Opening the stream lazily routes start-up failures to the error frame too
        stream = self.generation_service.generate_stream(prompt, options)
        try:
            async for item in stream:
                yield item
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()


class OpenAIAdapter(ProtocolAdapter):
    """``POST /v1/chat/completions``."""

    protocol = Protocol.OPENAI
    request_model = ChatCompletionRequest


class ClaudeAdapter(ProtocolAdapter):
    """``POST /v1/messages``."""

    protocol = Protocol.CLAUDE
    request_model = ClaudeMessageRequest

    def conversation(self, request: ClaudeMessageRequest) -> List[Message]:
        # The Messages API carries the system prompt outside the message list
        messages = normalize(request.messages)
        system = request.system_prompt()
        if system:
            messages.insert(0, Message(role="system", content=system))
        return messages
