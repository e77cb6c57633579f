"""Custom stopping criteria for text generation."""

import threading
import torch
from transformers import StoppingCriteria


class StopOnCancel(StoppingCriteria):
    """Stops generation once the owning request has been cancelled."""

    def __init__(self, cancel_event: threading.Event):
        """
        Initialize the stopping criteria.

        Args:
            cancel_event: Event set by the request when its consumer goes away
        """
        self.cancel_event = cancel_event

    def __call__(self, input_ids: torch.LongTensor, scores: torch.FloatTensor, **kwargs) -> bool:
        """
        Check whether generation should stop.

        Args:
            input_ids: Generated token IDs
            scores: Token scores
            **kwargs: Additional arguments

        Returns:
            Per-sequence flags, all True once the request was cancelled
        """
        return torch.full(
            (input_ids.shape[0],),
            self.cancel_event.is_set(),
            dtype=torch.bool,
            device=input_ids.device,
        )
