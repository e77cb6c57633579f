"""Health check and info endpoints."""

import time
from fastapi import APIRouter

from ..models.responses import ModelListResponse, ModelInfo


def create_health_router(model_path: str, model_name: str) -> APIRouter:
    """
    Create health check router.

    Args:
        model_path: Path the model was loaded from
        model_name: Model id advertised to clients

    Returns:
        APIRouter with health endpoints
    """
    router = APIRouter()

    @router.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "model": model_path}

    @router.get("/v1/models", response_model=ModelListResponse)
    async def list_models():
        """List the served model (OpenAI compatible)."""
        return ModelListResponse(
            data=[ModelInfo(id=model_name, created=int(time.time()), owned_by="local")]
        )

    return router
