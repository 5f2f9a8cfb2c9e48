"""Segment sinks: downstream consumers of completed speech segments."""

from __future__ import annotations

import asyncio
import io
import wave
from pathlib import Path
from typing import Protocol

import numpy as np

from supervad.logging import get_logger
from supervad.pcm import float32_to_pcm16

logger = get_logger(__name__)


class SegmentSink(Protocol):
    async def on_segment(self, segment: np.ndarray) -> None: ...


def encode_wav(samples: np.ndarray, sample_rate: int) -> bytes:
    """Encode mono float32 samples as a 16-bit PCM WAV file."""
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(float32_to_pcm16(samples))
    return buf.getvalue()


class SegmentCollector:
    """Keeps completed segments in memory, oldest first."""

    def __init__(self, max_segments: int | None = None) -> None:
        self._max = max_segments
        self.segments: list[np.ndarray] = []

    async def on_segment(self, segment: np.ndarray) -> None:
        self.segments.append(segment)
        if self._max is not None and len(self.segments) > self._max:
            del self.segments[: len(self.segments) - self._max]


class WavSegmentWriter:
    """Writes each segment to ``segment-<n>.wav`` under ``directory``."""

    def __init__(self, directory: Path | str, sample_rate: int = 16000) -> None:
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._sample_rate = sample_rate
        self._count = 0
        self.paths: list[Path] = []

    async def on_segment(self, segment: np.ndarray) -> None:
        self._count += 1
        path = self._dir / f"segment-{self._count:04d}.wav"
        data = encode_wav(segment, self._sample_rate)
        await asyncio.to_thread(path.write_bytes, data)
        self.paths.append(path)
        logger.info("Segment written", path=str(path), samples=segment.shape[0])
