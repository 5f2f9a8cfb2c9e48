"""Logging setup: configure root logger with console + async file handlers."""

from __future__ import annotations

import atexit
import logging
import os
from pathlib import Path

from supervad.logging.formatters import SmartFormatter, PlainFormatter, JsonFormatter
from supervad.logging.handlers import create_async_handler, create_error_handler

_listeners: list = []


def setup_logging(
    level: str | None = None,
    log_dir: str = "logs",
) -> None:
    """Configure root logger with console + async file handlers.

    Level resolution: explicit arg > LOG_LEVEL env > config default.
    """
    from supervad.config import settings

    resolved = level or os.environ.get("LOG_LEVEL") or settings.log_level
    log_dir = os.environ.get("LOG_DIR", log_dir)
    root = logging.getLogger()
    root.setLevel(getattr(logging, resolved.upper(), logging.INFO))

    # Re-init must not duplicate handlers
    root.handlers.clear()
    _shutdown_listeners()

    console = logging.StreamHandler()
    console.setFormatter(SmartFormatter())
    root.addHandler(console)

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    file_handler, file_listener = create_async_handler(
        str(log_path / "supervad.log"),
        formatter=PlainFormatter(),
    )
    error_handler, error_listener = create_error_handler(
        str(log_path / "supervad_error.log"),
        formatter=PlainFormatter(),
    )
    pairs = [(file_handler, file_listener), (error_handler, error_listener)]

    if os.environ.get("LOG_JSON", "").lower() in ("1", "true", "yes"):
        pairs.append(create_async_handler(
            str(log_path / "supervad.jsonl"),
            formatter=JsonFormatter(),
        ))

    for handler, listener in pairs:
        root.addHandler(handler)
        listener.start()
        _listeners.append(listener)

    atexit.register(_shutdown_listeners)


def _shutdown_listeners() -> None:
    for listener in _listeners:
        try:
            listener.stop()
        except Exception:
            pass
    _listeners.clear()
