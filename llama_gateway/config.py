"""
Configuration management for the gateway.

Loads configuration from environment variables with sensible defaults.
"""

import os
import torch
from dotenv import load_dotenv

# Load environment variables from .env file for local development
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Server Configuration
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3000"))
    REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "300"))
    CORS_ORIGINS = [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
    ]
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Model Configuration
    # Either a transformers checkpoint directory or a single .gguf file
    MODEL_PATH = os.getenv("MODEL_PATH", os.path.join("models", "llama-2-7b-chat"))
    MODEL_NAME = os.getenv("MODEL_NAME", "llama-local")
    DEFAULT_MAX_TOKENS = int(os.getenv("DEFAULT_MAX_TOKENS", "2048"))
    DEFAULT_TEMPERATURE = float(os.getenv("DEFAULT_TEMPERATURE", "0.7"))

    # Authentication Configuration
    # When unset, every route is open
    API_KEY = os.getenv("API_KEY") or None

    # GPU/Device Configuration
    if os.getenv("DEVICE"):
        DEVICE = os.getenv("DEVICE")
        TORCH_DTYPE = torch.bfloat16 if DEVICE == "cuda" and torch.cuda.is_available() and torch.cuda.is_bf16_supported() else torch.float32
    elif torch.backends.mps.is_available() and torch.backends.mps.is_built():
        DEVICE = "mps"
        TORCH_DTYPE = torch.float32  # MPS has numerical issues with fp16, use fp32
    elif torch.cuda.is_available():
        DEVICE = "cuda"
        # bfloat16 keeps the fp16 footprint with the fp32 exponent range
        if torch.cuda.is_bf16_supported():
            TORCH_DTYPE = torch.bfloat16
        else:
            TORCH_DTYPE = torch.float32
    else:
        DEVICE = "cpu"
        TORCH_DTYPE = torch.float32


# Global config instance
config = Config()
