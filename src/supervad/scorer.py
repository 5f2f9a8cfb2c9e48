"""Speech probability scorers.

A scorer maps one inference window (``token_size * window_tokens`` float32
samples) to a speech probability in [0, 1]. The engine only depends on
the ``Scorer`` protocol; ``TorchScorer`` adapts an already-loaded model.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import numpy as np
import torch

from supervad.logging import get_logger, logged

logger = get_logger(__name__)


class Scorer(Protocol):
    async def score(self, window: np.ndarray) -> float: ...


class TorchScorer:
    """Runs a model taking a ``[1, window]`` float32 tensor."""

    def __init__(self, model: torch.nn.Module, window_size: int) -> None:
        self._model = model
        self._model.eval()
        self._window_size = window_size

    @classmethod
    def from_file(cls, path: str | Path, window_size: int) -> TorchScorer:
        """Load a TorchScript model from ``path``."""
        model = torch.jit.load(str(path), map_location="cpu")
        logger.info("Scorer model loaded", path=str(path), window=window_size)
        return cls(model, window_size)

    @logged(slow_ms=20)
    async def score(self, window: np.ndarray) -> float:
        if window.shape != (self._window_size,):
            raise ValueError(
                f"Scorer expects {self._window_size} samples, got {window.shape}"
            )
        tensor = torch.from_numpy(np.ascontiguousarray(window, dtype=np.float32))
        with torch.inference_mode():
            output = self._model(tensor.unsqueeze(0))
        prob = float(output.flatten()[0])
        return min(1.0, max(0.0, prob))
