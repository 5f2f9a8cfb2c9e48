"""@logged() tracing decorator with call-depth indentation and slow-call warnings."""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import time
from contextvars import ContextVar
from typing import Any

import numpy as np

from supervad.logging.structured_logger import get_logger

_call_depth: ContextVar[int] = ContextVar("call_depth", default=0)

_MAX_VAL_LEN = 80


def _fmt_val(value: Any) -> str:
    """Format a value for log output; buffers are summarized by length."""
    if isinstance(value, np.ndarray):
        return f"<ndarray len={value.size}>"
    if isinstance(value, bytes):
        return f"<bytes len={len(value)}>"
    if isinstance(value, (list, tuple)):
        return f"<{type(value).__name__} len={len(value)}>"
    s = repr(value)
    if len(s) > _MAX_VAL_LEN:
        return s[: _MAX_VAL_LEN - 3] + "..."
    return s


def _fmt_args(func: Any, args: tuple, kwargs: dict) -> str:
    """Format call arguments, skipping self/cls."""
    params = list(inspect.signature(func).parameters)
    if params and params[0] in ("self", "cls"):
        args = args[1:]
        params = params[1:]

    parts = [
        f"{params[i] if i < len(params) else f'arg{i}'}={_fmt_val(val)}"
        for i, val in enumerate(args)
    ]
    parts.extend(f"{name}={_fmt_val(val)}" for name, val in kwargs.items())
    return ", ".join(parts)


def _fmt_time(elapsed_s: float) -> str:
    ms = elapsed_s * 1000
    if ms >= 1000:
        return f"+{ms / 1000:.1f}s"
    return f"+{ms:.1f}ms"


def _log_entry(logger, level, name, depth, log_args, func, args, kwargs) -> None:
    msg = f"-> {name}"
    if log_args:
        msg += f"({_fmt_args(func, args, kwargs)})"
    logger._log(level, msg, (), {"_depth": depth, "_trace_dir": "entry"})


def _log_exit(logger, level, name, depth, elapsed: float, slow_ms: float) -> None:
    extra = {"_depth": depth, "_elapsed": _fmt_time(elapsed)}
    if slow_ms and elapsed * 1000 > slow_ms:
        logger._log(logging.WARNING, f"!! {name} SLOW", (), {**extra, "_trace_dir": "slow"})
    else:
        logger._log(level, f"<- {name}", (), {**extra, "_trace_dir": "exit"})


def _log_error(logger, name, depth, elapsed: float) -> None:
    logger._log(
        logging.ERROR, f"!! {name} FAILED", (),
        {"_depth": depth, "_trace_dir": "error", "_elapsed": _fmt_time(elapsed)},
    )


def _trace_async(func, logger, level, log_args, slow_ms):
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not logger.isEnabledFor(level) and not slow_ms:
            return await func(*args, **kwargs)

        depth = _call_depth.get()
        _call_depth.set(depth + 1)
        name = func.__qualname__
        _log_entry(logger, level, name, depth, log_args, func, args, kwargs)

        t0 = time.perf_counter()
        try:
            result = await func(*args, **kwargs)
            _log_exit(logger, level, name, depth, time.perf_counter() - t0, slow_ms)
            return result
        except Exception:
            _log_error(logger, name, depth, time.perf_counter() - t0)
            raise
        finally:
            _call_depth.set(depth)

    return wrapper


def _trace_async_gen(func, logger, level, log_args, slow_ms):
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any):
        if not logger.isEnabledFor(level) and not slow_ms:
            async for item in func(*args, **kwargs):
                yield item
            return

        depth = _call_depth.get()
        _call_depth.set(depth + 1)
        name = func.__qualname__
        _log_entry(logger, level, name, depth, log_args, func, args, kwargs)

        t0 = time.perf_counter()
        try:
            async for item in func(*args, **kwargs):
                yield item
            _log_exit(logger, level, name, depth, time.perf_counter() - t0, slow_ms)
        except Exception:
            _log_error(logger, name, depth, time.perf_counter() - t0)
            raise
        finally:
            _call_depth.set(depth)

    return wrapper


def logged(
    *,
    level: int = logging.DEBUG,
    log_args: bool = False,
    slow_ms: float = 0,
):
    """Trace entry/exit of an async function or async generator.

    When ``level`` is disabled and no ``slow_ms`` is set the wrapped
    function is called directly. With ``slow_ms`` set, calls slower than
    the threshold are reported at WARNING even if ``level`` is disabled.
    """

    def decorator(func):
        logger = get_logger(getattr(func, "__module__", None) or __name__)

        if inspect.isasyncgenfunction(func):
            return _trace_async_gen(func, logger, level, log_args, slow_ms)
        if asyncio.iscoroutinefunction(func):
            return _trace_async(func, logger, level, log_args, slow_ms)
        raise TypeError(
            f"@logged() only supports async functions and async generators, "
            f"got sync function: {func.__qualname__}"
        )

    return decorator
