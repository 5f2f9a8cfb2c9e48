"""StructuredLogger with bound context and a per-stream segment clock."""

from __future__ import annotations

import logging
import sys
import time


class SegmentTimer:
    """Tracks the open speech segment of one stream.

    Owned by a single engine, so concurrent streams never share a clock.
    ``segment_id`` counts segments started on this stream, 1-based.
    """

    __slots__ = ("_t0", "segment_id")

    def __init__(self) -> None:
        self._t0: float | None = None
        self.segment_id = 0

    @property
    def running(self) -> bool:
        return self._t0 is not None

    def start(self) -> None:
        self._t0 = time.monotonic()
        self.segment_id += 1

    def elapsed_ms(self) -> int | None:
        if self._t0 is None:
            return None
        return int((time.monotonic() - self._t0) * 1000)

    def reset(self) -> None:
        self._t0 = None


class StructuredLogger:
    """Logger wrapper: **kwargs and bound context become k=v pairs.

    A logger bound to a ``SegmentTimer`` stamps ``elapsed_ms`` and the
    segment number on every record written while a segment is open.
    """

    __slots__ = ("_logger", "_context", "_timer")

    def __init__(
        self,
        logger: logging.Logger,
        context: dict | None = None,
        timer: SegmentTimer | None = None,
    ) -> None:
        self._logger = logger
        self._context = context or {}
        self._timer = timer

    @property
    def name(self) -> str:
        return self._logger.name

    def bind(self, timer: SegmentTimer | None = None, **context) -> StructuredLogger:
        """Child logger sharing the stdlib logger, with extra fixed fields."""
        return StructuredLogger(
            self._logger,
            {**self._context, **context},
            timer or self._timer,
        )

    def _log(self, level: int, msg: str, args: tuple, kwargs: dict) -> None:
        if not self._logger.isEnabledFor(level):
            return
        exc_info = kwargs.pop("exc_info", None)
        if exc_info is True:
            exc_info = sys.exc_info()
        extra_data = {**self._context, **kwargs}
        if self._timer is not None and self._timer.running:
            extra_data.setdefault("seg", self._timer.segment_id)
        record = self._logger.makeRecord(
            self._logger.name, level, "", 0, msg, args,
            exc_info=exc_info, extra={"extra_data": extra_data},
        )
        if self._timer is not None:
            ms = self._timer.elapsed_ms()
            if ms is not None:
                record.elapsed_ms = ms
        self._logger.handle(record)

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.INFO, msg, args, kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.WARNING, msg, args, kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.ERROR, msg, args, kwargs)

    def exception(self, msg: str, *args, **kwargs) -> None:
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, args, kwargs)

    def isEnabledFor(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)


_loggers: dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Module-level logger, cached by name. Use ``bind()`` for per-stream context."""
    try:
        return _loggers[name]
    except KeyError:
        return _loggers.setdefault(name, StructuredLogger(logging.getLogger(name)))
