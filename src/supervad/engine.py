"""Streaming VAD engine: Framer -> Scorer -> hysteresis reducer."""

from __future__ import annotations

import numpy as np

from supervad.config import VADParams
from supervad.errors import InvalidTokenLength
from supervad.framer import Framer
from supervad.logging import SegmentTimer, get_logger
from supervad.scorer import Scorer
from supervad.state import Event, EventKind, MachineState, VADState, step

logger = get_logger(__name__)


class StreamEngine:
    """One engine per audio stream. Not reentrant: callers serialize ``process``."""

    def __init__(self, scorer: Scorer, params: VADParams, sample_rate: int = 16000) -> None:
        self._scorer = scorer
        self._params = params
        self._sample_rate = sample_rate
        self._framer = Framer(params.token_size, params.window_tokens)
        self._machine = MachineState()
        self.tokens_processed = 0
        self.segments_completed = 0
        self.timer = SegmentTimer()
        self._log = logger.bind(timer=self.timer)

    @property
    def params(self) -> VADParams:
        return self._params

    @property
    def machine(self) -> MachineState:
        return self._machine

    @property
    def state(self) -> VADState:
        return self._machine.state

    async def process(self, token: np.ndarray) -> Event:
        """Score one token and advance the state machine.

        Raises InvalidTokenLength with framer, state and buffers untouched.
        """
        token = np.array(token, dtype=np.float32)
        token.setflags(write=False)
        try:
            window = self._framer.submit(token)
        except InvalidTokenLength as e:
            self._log.warning("Invalid token", expected=e.expected, actual=e.actual)
            raise

        probability = await self._scorer.score(window)
        previous = self._machine.state
        self._machine, event = step(self._machine, self._params, token, probability)
        self.tokens_processed += 1

        if event.kind is not EventKind.UNCHANGED:
            self._log_event(previous, event, probability)
        return event

    def _log_event(self, previous: VADState, event: Event, probability: float) -> None:
        if event.kind in (EventKind.ACTIVATING, EventKind.ACTIVE) and previous is VADState.DEACTIVATED:
            self.timer.start()
        self._log.debug(
            "Transition",
            src=previous.value,
            dst=self._machine.state.value,
            event=event.kind.value,
            prob=f"{probability:.2f}",
        )
        if event.kind is EventKind.ACTIVATION_CANCELED:
            self.timer.reset()
        elif event.kind is EventKind.COMPLETE:
            self.segments_completed += 1
            samples = event.segment.shape[0]
            self._log.info(
                "Segment complete",
                samples=samples,
                dur=f"{samples / self._sample_rate:.2f}s",
            )
            self.timer.reset()
