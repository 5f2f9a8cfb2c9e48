"""Session: one audio stream wired through feeder, engine and sinks."""

from __future__ import annotations

import asyncio

from supervad.config import Settings, VADParams
from supervad.engine import StreamEngine
from supervad.feeder import TokenFeeder
from supervad.logging import get_logger
from supervad.scorer import Scorer, TorchScorer
from supervad.sink import SegmentCollector, WavSegmentWriter

logger = get_logger(__name__)


class Session:
    """Owns the engine for a single audio source. Dropped with the stream."""

    def __init__(
        self,
        scorer: Scorer,
        params: VADParams,
        sample_rate: int = 16000,
        segment_dir: str | None = None,
        max_segments: int | None = 100,
    ) -> None:
        self._sample_rate = sample_rate
        self._engine = StreamEngine(scorer, params, sample_rate=sample_rate)
        self._collector = SegmentCollector(max_segments=max_segments)
        self._writer = WavSegmentWriter(segment_dir, sample_rate) if segment_dir else None
        sinks = [self._collector] if self._writer is None else [self._collector, self._writer]
        self._feeder = TokenFeeder(self._engine, sinks=sinks)

    @classmethod
    def from_settings(cls, settings: Settings) -> Session:
        """Build a session from settings. Requires ``model_path``."""
        params = settings.vad_params()
        if not settings.model_path:
            raise RuntimeError("model_path is not configured")
        scorer = TorchScorer.from_file(settings.model_path, params.window_size)
        return cls(
            scorer,
            params,
            sample_rate=settings.sample_rate,
            segment_dir=settings.segment_dir,
        )

    @property
    def engine(self) -> StreamEngine:
        return self._engine

    @property
    def feeder(self) -> TokenFeeder:
        return self._feeder

    @property
    def segments(self) -> list:
        return self._collector.segments

    async def startup(self) -> None:
        """Bind the feeder to the running loop so capture threads can feed it."""
        self._feeder.bind_loop(asyncio.get_running_loop())
        logger.info("Session started", params=self._engine.params)

    def on_audio_chunk(self, samples) -> None:
        self._feeder.on_audio_chunk(samples)

    def segment_summary(self) -> list[dict]:
        return [
            {"samples": s.shape[0], "duration_s": round(s.shape[0] / self._sample_rate, 3)}
            for s in self._collector.segments
        ]

    def diagnostics(self) -> dict:
        """Return runtime diagnostics for monitoring."""
        return {
            "state": self._engine.state.value,
            "tokens_processed": self._engine.tokens_processed,
            "segments_completed": self._engine.segments_completed,
            "pending_samples": self._feeder.pending_samples,
            "open_segment_samples": self._engine.machine.active_samples,
        }

    async def shutdown(self) -> None:
        """Stop accepting audio. An open segment is left as is, never flushed."""
        self._feeder.bind_loop(None)
        logger.info(
            "Session stopped",
            state=self._engine.state.value,
            segments=self._engine.segments_completed,
        )
