"""FastAPI application factory and setup."""

from contextlib import asynccontextmanager
from typing import Optional

import torch
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config import config
from ..core.adapters import ClaudeAdapter, OpenAIAdapter
from ..core.generation import GenerationService
from ..core.inference_engine import InferenceEngine
from ..core.model_manager import ModelManager
from ..utils.logging import setup_logging, get_logger
from .health import create_health_router
from .completions import create_completions_router

# Setup logging
setup_logging()
logger = get_logger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as ``{"error": <message>}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report any other failure as a 500 with its message."""
    # The server logs the traceback once the error propagates
    logger.warning(f"Error processing request {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc) or "Unknown error"})


def create_app(
    generation_service: Optional[GenerationService] = None,
    model_manager: Optional[ModelManager] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        generation_service: Backend to serve with. Defaults to an
            InferenceEngine whose model is loaded during startup.
        model_manager: Model manager for the default backend

    Returns:
        Configured FastAPI application
    """
    # Initialize core components
    if generation_service is None:
        model_manager = model_manager or ModelManager()
        generation_service = InferenceEngine(model_manager)

    openai_adapter = OpenAIAdapter(generation_service)
    claude_adapter = ClaudeAdapter(generation_service)
    model_path = model_manager.model_path if model_manager else config.MODEL_PATH

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        logger.info("Starting llama gateway...")
        logger.info(f"Device: {config.DEVICE}")
        logger.info(f"Dtype: {config.TORCH_DTYPE}")
        logger.info(f"CUDA available: {torch.cuda.is_available()}")
        if torch.cuda.is_available():
            logger.info(f"GPU: {torch.cuda.get_device_name(0)}")
        logger.info(f"Model path: {model_path}")
        logger.info(f"API key required: {bool(config.API_KEY)}")

        # A model that fails to load is fatal: the exception aborts startup
        if model_manager is not None:
            await model_manager.load()

        logger.info(f"Llama gateway ready on port {config.PORT}")
        yield
        logger.info("Shutting down llama gateway...")
        if model_manager is not None:
            model_manager.unload()

    # Create FastAPI app
    app = FastAPI(
        title="Llama Gateway",
        description="OpenAI and Claude compatible API for a local model",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Register routers
    health_router = create_health_router(model_path, config.MODEL_NAME)
    completions_router = create_completions_router(openai_adapter, claude_adapter)

    app.include_router(health_router, tags=["Health"])
    app.include_router(completions_router, tags=["Completions"])

    return app
