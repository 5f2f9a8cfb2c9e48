"""supervad structured logging package.

Public API:
    get_logger      - Get a StructuredLogger for a module
    setup_logging   - Configure root logger (call once at startup)
    SegmentTimer    - Per-stream segment clock for bound loggers
    logged          - Async tracing decorator with slow-call warnings
    StructuredLogger, SmartFormatter, PlainFormatter, JsonFormatter
"""

from supervad.logging.structured_logger import (
    StructuredLogger,
    get_logger,
    SegmentTimer,
)
from supervad.logging.formatters import SmartFormatter, PlainFormatter, JsonFormatter
from supervad.logging.tracing import logged
from supervad.logging.setup import setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "SegmentTimer",
    "logged",
    "StructuredLogger",
    "SmartFormatter",
    "PlainFormatter",
    "JsonFormatter",
]
