"""Inference engine backed by a transformers causal language model."""

import asyncio
from threading import Event, Thread
from typing import AsyncIterator

import torch
from transformers import AsyncTextIteratorStreamer, StoppingCriteriaList

from ..utils.stopping_criteria import StopOnCancel
from ..utils.logging import get_logger
from .generation import (
    GenerationFailure,
    GenerationOptions,
    GenerationResult,
    GenerationService,
    GenerationSuccess,
    ResponseChunk,
    StreamItem,
)
from .model_manager import ModelManager

logger = get_logger(__name__)

# Seconds to wait for the generation thread after the stream ends
THREAD_JOIN_TIMEOUT = 5.0


class InferenceEngine(GenerationService):
    """
    Runs generation on the shared model.

    Every call tokenizes its own inputs and owns its own streamer and worker
    thread; the model itself is only read.
    """

    def __init__(self, model_manager: ModelManager):
        """
        Initialize the inference engine.

        Args:
            model_manager: Model manager holding the loaded model
        """
        self.model_manager = model_manager

    def _tokenize(self, prompt: str):
        model = self.model_manager.model
        tokenizer = self.model_manager.tokenizer
        # The prompt already carries its own <s> markers
        return tokenizer(prompt, return_tensors="pt", add_special_tokens=False).to(model.device)

    async def _create_session(self, prompt: str):
        """Tokenize ``prompt`` off the event loop."""
        if not self.model_manager.is_loaded:
            raise RuntimeError("Model is not loaded")
        return await asyncio.to_thread(self._tokenize, prompt)

    def _prepare_generation_kwargs(
        self, inputs, options: GenerationOptions, tokenizer, stopping_criteria=None
    ) -> dict:
        """
        Prepare kwargs for model.generate().

        Args:
            inputs: Tokenized inputs
            options: Sampling options of the request
            tokenizer: Tokenizer
            stopping_criteria: Optional StoppingCriteriaList

        Returns:
            Dictionary of generation kwargs
        """
        gen_kwargs = {
            "input_ids": inputs.input_ids,
            "attention_mask": inputs.attention_mask,
            "max_new_tokens": options.max_tokens,
            "pad_token_id": tokenizer.pad_token_id or tokenizer.eos_token_id,
            "eos_token_id": tokenizer.eos_token_id,
            "use_cache": True,
        }

        if stopping_criteria is not None:
            gen_kwargs["stopping_criteria"] = stopping_criteria

        if options.temperature > 0:
            gen_kwargs["do_sample"] = True
            gen_kwargs["temperature"] = max(options.temperature, 0.1)
            gen_kwargs["top_k"] = 40
            gen_kwargs["repetition_penalty"] = 1.15
            gen_kwargs["renormalize_logits"] = True
        else:
            # Temperature 0 means greedy decoding
            gen_kwargs["do_sample"] = False
            gen_kwargs["repetition_penalty"] = 1.1

        return gen_kwargs

    def _handle_cuda_error(self, error: Exception) -> None:
        """Clear the CUDA cache after a CUDA failure so later requests can run."""
        if "cuda" not in str(error).lower() or not torch.cuda.is_available():
            return
        logger.error("CUDA error detected - cleaning up GPU memory")
        try:
            torch.cuda.empty_cache()
            torch.cuda.synchronize()
        except RuntimeError as e:
            logger.error(f"Error during CUDA cleanup: {e}")

    def _generate_sync(self, inputs, options: GenerationOptions) -> str:
        model = self.model_manager.model
        tokenizer = self.model_manager.tokenizer

        gen_kwargs = self._prepare_generation_kwargs(inputs, options, tokenizer)
        with torch.no_grad():
            outputs = model.generate(**gen_kwargs)

        generated_ids = outputs[0][inputs.input_ids.shape[1] :]
        return tokenizer.decode(generated_ids, skip_special_tokens=True)

    async def generate(self, prompt: str, options: GenerationOptions) -> GenerationResult:
        """
        Generate a full completion.

        Args:
            prompt: Formatted prompt
            options: Sampling options

        Returns:
            GenerationSuccess with the decoded text, or GenerationFailure
        """
        try:
            inputs = await self._create_session(prompt)
            text = await asyncio.to_thread(self._generate_sync, inputs, options)
        except Exception as e:
            logger.error(f"Generation failed: {e}", exc_info=True)
            self._handle_cuda_error(e)
            return GenerationFailure(str(e))

        return GenerationSuccess(text)

    async def generate_stream(
        self, prompt: str, options: GenerationOptions
    ) -> AsyncIterator[StreamItem]:
        """
        Generate a completion incrementally.

        Generation runs in a worker thread feeding an async streamer. When
        the consumer closes this iterator early the worker is told to stop
        at the next token.

        Args:
            prompt: Formatted prompt
            options: Sampling options

        Yields:
            ResponseChunk per decoded piece of text, then a GenerationFailure
            if the worker failed
        """
        try:
            inputs = await self._create_session(prompt)
        except Exception as e:
            logger.error(f"Failed to start generation: {e}", exc_info=True)
            yield GenerationFailure(str(e))
            return

        model = self.model_manager.model
        tokenizer = self.model_manager.tokenizer

        streamer = AsyncTextIteratorStreamer(tokenizer, skip_prompt=True, skip_special_tokens=True)
        cancelled = Event()
        gen_kwargs = self._prepare_generation_kwargs(
            inputs, options, tokenizer, StoppingCriteriaList([StopOnCancel(cancelled)])
        )
        gen_kwargs["streamer"] = streamer

        generation_error = []  # Store any exception from the thread

        def generate_with_error_handling():
            """Wrapper to catch exceptions in generation thread."""
            try:
                with torch.no_grad():
                    model.generate(**gen_kwargs)
            except Exception as e:
                generation_error.append(e)
                logger.error(f"Generation thread error: {e}", exc_info=True)
                # Signal streamer to stop
                streamer.end()

        thread = Thread(target=generate_with_error_handling, daemon=True)
        thread.start()

        try:
            async for text in streamer:
                if text:
                    yield ResponseChunk(text)

            if generation_error:
                error = generation_error[0]
                self._handle_cuda_error(error)
                yield GenerationFailure(str(error))
        finally:
            cancelled.set()
            await asyncio.to_thread(thread.join, THREAD_JOIN_TIMEOUT)
            if thread.is_alive():
                logger.error("Generation thread did not stop - possible hang")
