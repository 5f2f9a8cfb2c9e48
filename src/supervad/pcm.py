"""Sample format conversion between float32 and 16-bit PCM."""

from __future__ import annotations

import numpy as np


def pcm16_to_float32(data: bytes) -> np.ndarray:
    """Little-endian int16 PCM bytes -> float32 samples in [-1, 1)."""
    if len(data) % 2:
        raise ValueError(f"PCM16 data must have an even byte count, got {len(data)}")
    raw = np.frombuffer(data, dtype="<i2")
    return raw.astype(np.float32) / 32768.0


def float32_to_pcm16(samples: np.ndarray) -> bytes:
    """Clip to [-1, 1]; negatives scale by 0x8000, positives by 0x7FFF."""
    s = np.clip(np.asarray(samples, dtype=np.float32), -1.0, 1.0)
    scaled = np.where(s < 0, s * 0x8000, s * 0x7FFF)
    return scaled.astype("<i2").tobytes()
