"""Token feeder: re-chunks raw audio into tokens and drains them in order.

Audio arrives in arbitrary chunk sizes, sometimes from a foreign thread.
Every drain runs under one ``asyncio.Lock`` so tokens from overlapping
chunks are never interleaved, and a partial token is carried over to the
next call.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable, Sequence

import numpy as np

from supervad.engine import StreamEngine
from supervad.logging import get_logger, logged
from supervad.pcm import pcm16_to_float32
from supervad.sink import SegmentSink
from supervad.state import Event

logger = get_logger(__name__)


class TokenFeeder:
    def __init__(
        self,
        engine: StreamEngine,
        sinks: Iterable[SegmentSink] = (),
    ) -> None:
        self._engine = engine
        self._token_size = engine.params.token_size
        self._sinks: list[SegmentSink] = list(sinks)
        self._pending = np.zeros(0, dtype=np.float32)
        self._lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def engine(self) -> StreamEngine:
        return self._engine

    @property
    def pending_samples(self) -> int:
        return self._pending.shape[0]

    def add_sink(self, sink: SegmentSink) -> None:
        self._sinks.append(sink)

    async def feed(self, samples: np.ndarray | Sequence[float]) -> AsyncIterator[Event]:
        """Append ``samples`` and yield one event per full token drained.

        The lock is held until the generator is exhausted or closed; wrap
        early exits in ``contextlib.aclosing`` so later feeds are not blocked.
        """
        chunk = np.asarray(samples, dtype=np.float32).reshape(-1)
        async with self._lock:
            self._pending = np.concatenate((self._pending, chunk))
            n = self._token_size
            while self._pending.shape[0] >= n:
                event = await self._engine.process(self._pending[:n])
                self._pending = self._pending[n:]
                if event.is_complete:
                    await self._dispatch(event.segment)
                yield event

    @logged()
    async def push(self, samples: np.ndarray | Sequence[float]) -> list[Event]:
        """Drain ``samples`` completely and return the events produced."""
        return [event async for event in self.feed(samples)]

    async def push_pcm16(self, data: bytes) -> list[Event]:
        return await self.push(pcm16_to_float32(data))

    def bind_loop(self, loop: asyncio.AbstractEventLoop | None) -> None:
        """Loop that ``on_audio_chunk`` schedules drains onto; None detaches."""
        self._loop = loop

    def on_audio_chunk(self, samples: np.ndarray) -> None:
        """Sync callback for capture threads; schedules a drain on the bound loop."""
        if self._loop is None:
            return
        try:
            asyncio.run_coroutine_threadsafe(self._drain(samples), self._loop)
        except RuntimeError:
            logger.debug("Event loop unavailable, audio chunk dropped", samples=len(samples))

    async def _drain(self, samples: np.ndarray) -> None:
        try:
            await self.push(samples)
        except Exception:
            logger.exception("Error draining audio chunk")

    async def _dispatch(self, segment: np.ndarray) -> None:
        for sink in self._sinks:
            try:
                await sink.on_segment(segment)
            except Exception:
                logger.exception("Segment sink failed", sink=type(sink).__name__)
