import numpy as np

from supervad.errors import InvalidTokenLength


class Framer:
    """Fixed-capacity sliding window over the most recent tokens."""

    def __init__(self, token_size: int, window_tokens: int) -> None:
        self._token_size = token_size
        self._buffer = np.zeros(token_size * window_tokens, dtype=np.float32)

    @property
    def token_size(self) -> int:
        return self._token_size

    @property
    def window_size(self) -> int:
        return self._buffer.shape[0]

    def submit(self, token: np.ndarray) -> np.ndarray:
        """Shift the window left by one token and append ``token`` at the tail.

        Returns a copy of the window so callers never alias the buffer.
        Raises InvalidTokenLength before touching the window.
        """
        token = np.asarray(token, dtype=np.float32)
        if token.ndim != 1 or token.shape[0] != self._token_size:
            raise InvalidTokenLength(self._token_size, token.size, token.shape)
        n = self._token_size
        self._buffer[:-n] = self._buffer[n:]
        self._buffer[-n:] = token
        return self._buffer.copy()
