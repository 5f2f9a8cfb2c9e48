"""Error taxonomy for the streaming VAD engine."""

from __future__ import annotations


class VADError(Exception):
    """Base class for all supervad errors."""


class InvalidTokenLength(VADError, ValueError):
    """Token does not match the configured token size. Caller must re-chunk."""

    def __init__(self, expected: int, actual: int, shape: tuple[int, ...] | None = None) -> None:
        self.expected = expected
        self.actual = actual
        self.shape = shape
        if shape is not None and len(shape) != 1:
            msg = f"Invalid token shape, expected ({expected},), got {shape}"
        else:
            msg = f"Invalid token length, expected {expected} samples, got {actual}"
        super().__init__(msg)


class InvalidConfiguration(VADError, ValueError):
    """Parameter outside its valid range. Raised at construction only."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"Invalid {field}: {message}")
