"""Model loading for the single locally hosted model."""

import asyncio
import os
from typing import Optional, Tuple

import torch
from transformers import AutoModelForCausalLM, AutoTokenizer

from ..config import config
from ..utils.logging import get_logger

logger = get_logger(__name__)


class ModelManager:
    """
    Owns the process-wide model and tokenizer.

    The model is loaded once at startup and afterwards only read. Nothing
    request-specific is stored here.
    """

    def __init__(self, model_path: Optional[str] = None):
        """
        Initialize the model manager.

        Args:
            model_path: Checkpoint directory or .gguf file, defaults to MODEL_PATH
        """
        self.model_path = model_path or config.MODEL_PATH
        self.model = None
        self.tokenizer = None

    @property
    def is_loaded(self) -> bool:
        return self.model is not None and self.tokenizer is not None

    def _resolve_source(self) -> Tuple[str, Optional[str]]:
        """
        Split MODEL_PATH into a from_pretrained source and optional gguf file.

        Returns:
            (directory, gguf_file) where gguf_file is None for regular checkpoints

        Raises:
            FileNotFoundError: If the path does not exist
        """
        path = os.path.abspath(self.model_path)
        if not os.path.exists(path):
            raise FileNotFoundError(f"Model path does not exist: {path}")

        if os.path.isfile(path) and path.endswith(".gguf"):
            return os.path.dirname(path), os.path.basename(path)
        return path, None

    def _configure_tokenizer(self, tokenizer):
        """Ensure the tokenizer has a pad token (required by generate)."""
        if tokenizer.pad_token is None:
            tokenizer.pad_token = tokenizer.eos_token
            logger.info("Set pad_token to eos_token")

    def _load_model_to_device(self, source: str, gguf_file: Optional[str]) -> torch.nn.Module:
        """
        Load model to the configured device.

        Args:
            source: Local directory holding the checkpoint
            gguf_file: File name inside ``source`` for gguf checkpoints

        Returns:
            Loaded model in eval mode
        """
        load_kwargs = {
            "local_files_only": True,
            "low_cpu_mem_usage": True,
            "torch_dtype": config.TORCH_DTYPE,
        }
        if gguf_file:
            load_kwargs["gguf_file"] = gguf_file

        if config.DEVICE == "cuda":
            load_kwargs["device_map"] = "auto"

        model = AutoModelForCausalLM.from_pretrained(source, **load_kwargs)
        if "device_map" not in load_kwargs:
            model = model.to(config.DEVICE)

        model.eval()
        return model

    def _load_sync(self) -> None:
        source, gguf_file = self._resolve_source()

        tokenizer_kwargs = {"local_files_only": True}
        if gguf_file:
            tokenizer_kwargs["gguf_file"] = gguf_file
        tokenizer = AutoTokenizer.from_pretrained(source, **tokenizer_kwargs)
        self._configure_tokenizer(tokenizer)

        model = self._load_model_to_device(source, gguf_file)

        self.tokenizer = tokenizer
        self.model = model

    async def load(self) -> None:
        """
        Load model and tokenizer without blocking the event loop.

        Raises:
            RuntimeError: If loading fails; the service must not start
        """
        if self.is_loaded:
            return

        logger.info(f"Loading model from {self.model_path} on {config.DEVICE} ({config.TORCH_DTYPE})")
        try:
            await asyncio.to_thread(self._load_sync)
        except Exception as e:
            logger.error(f"Failed to load model: {e}", exc_info=True)
            raise RuntimeError(f"Failed to load model from {self.model_path}: {e}") from e

        logger.info("Model loaded successfully")

    def unload(self) -> None:
        """Drop the model and release accelerator memory."""
        self.model = None
        self.tokenizer = None
        if torch.cuda.is_available():
            torch.cuda.empty_cache()
        logger.info("Model unloaded")
