import numpy as np
import pytest

from supervad.config import VADParams

TOKEN = 4


def tok(value: float, size: int = TOKEN) -> np.ndarray:
    """A token whose samples all equal ``value`` so it is easy to trace."""
    return np.full(size, value, dtype=np.float32)


class ScriptedScorer:
    """Returns queued probabilities in order and records every window."""

    def __init__(self, probabilities=(), default: float = 0.0):
        self._queue = list(probabilities)
        self.default = default
        self.windows: list[np.ndarray] = []

    def extend(self, probabilities) -> None:
        self._queue.extend(probabilities)

    async def score(self, window: np.ndarray) -> float:
        self.windows.append(window)
        if self._queue:
            return self._queue.pop(0)
        return self.default


@pytest.fixture
def params():
    return VADParams(
        activation_threshold=0.8,
        activation_tokens=3,
        deactivation_threshold=0.3,
        deactivation_tokens=2,
        prebuffer_tokens=2,
        token_size=TOKEN,
        window_tokens=3,
    )


@pytest.fixture
def scorer():
    return ScriptedScorer()
