from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real

from pydantic_settings import BaseSettings

from supervad.errors import InvalidConfiguration

TOKEN_SIZE = 320  # 20ms at 16kHz
WINDOW_TOKENS = 10


def _check_threshold(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidConfiguration(name, f"expected a number, got {value!r}")
    if math.isnan(value) or not (0.0 <= value <= 1.0):
        raise InvalidConfiguration(name, f"must be in [0, 1], got {value!r}")


def _check_count(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(name, f"expected an integer, got {value!r}")
    if value < 1:
        raise InvalidConfiguration(name, f"must be >= 1, got {value}")


@dataclass(frozen=True)
class VADParams:
    """Hysteresis parameters for one engine instance.

    ``token_size`` and ``window_tokens`` describe the scorer's inference
    window (window = token_size * window_tokens samples) and are not tuning
    knobs; they only change together with the model.
    """

    activation_threshold: float
    activation_tokens: int
    deactivation_threshold: float
    deactivation_tokens: int
    prebuffer_tokens: int
    token_size: int = TOKEN_SIZE
    window_tokens: int = WINDOW_TOKENS

    def __post_init__(self) -> None:
        _check_threshold("activation_threshold", self.activation_threshold)
        _check_threshold("deactivation_threshold", self.deactivation_threshold)
        _check_count("activation_tokens", self.activation_tokens)
        _check_count("deactivation_tokens", self.deactivation_tokens)
        _check_count("prebuffer_tokens", self.prebuffer_tokens)
        _check_count("token_size", self.token_size)
        _check_count("window_tokens", self.window_tokens)

    @property
    def window_size(self) -> int:
        return self.token_size * self.window_tokens

    @property
    def prebuffer_size(self) -> int:
        return self.token_size * self.prebuffer_tokens


def optimal_parameters() -> VADParams:
    """Recommended defaults: ~60ms to activate, 500ms of silence to complete."""
    return VADParams(
        activation_threshold=0.5,
        activation_tokens=3,
        deactivation_threshold=0.3,
        deactivation_tokens=25,
        prebuffer_tokens=25,
    )


class Settings(BaseSettings):
    # Audio
    mic_device_index: int | None = None
    sample_rate: int = 16000
    chunk_size: int = 2048

    # VAD
    vad_activation_threshold: float = 0.5
    vad_activation_tokens: int = 3
    vad_deactivation_threshold: float = 0.3
    vad_deactivation_tokens: int = 25
    vad_prebuffer_tokens: int = 25

    # Scorer
    model_path: str | None = None

    # Segments
    segment_dir: str | None = None

    # Logging
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}

    def vad_params(self) -> VADParams:
        """Build validated engine parameters. Raises InvalidConfiguration."""
        return VADParams(
            activation_threshold=self.vad_activation_threshold,
            activation_tokens=self.vad_activation_tokens,
            deactivation_threshold=self.vad_deactivation_threshold,
            deactivation_tokens=self.vad_deactivation_tokens,
            prebuffer_tokens=self.vad_prebuffer_tokens,
            token_size=TOKEN_SIZE,
        )


settings = Settings()
