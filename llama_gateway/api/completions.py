"""Generation endpoints for both wire protocols."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request

from ..core.adapters import ClaudeAdapter, OpenAIAdapter
from .middleware.auth import verify_api_key


async def read_json_body(request: Request) -> Any:
    """Decode the request body, rejecting malformed JSON with a 400."""
    try:
        return await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be valid JSON")


def create_completions_router(
    openai_adapter: OpenAIAdapter, claude_adapter: ClaudeAdapter
) -> APIRouter:
    """
    Create completions router with adapter dependencies.

    Args:
        openai_adapter: Adapter for the Chat Completions protocol
        claude_adapter: Adapter for the Messages protocol

    Returns:
        APIRouter with completion endpoints
    """
    router = APIRouter()

    @router.post("/v1/chat/completions")
    async def chat_completions(
        request: Request,
        auth: Dict[str, Any] = Depends(verify_api_key),
    ):
        """Chat completions endpoint (OpenAI compatible)."""
        return await openai_adapter.handle(await read_json_body(request))

    @router.post("/v1/messages")
    async def messages(
        request: Request,
        auth: Dict[str, Any] = Depends(verify_api_key),
    ):
        """Messages endpoint (Claude compatible); accepts the ``human`` role."""
        return await claude_adapter.handle(await read_json_body(request))

    return router
