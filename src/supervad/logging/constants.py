"""Logging constants: module map, colors, abbreviations."""

from __future__ import annotations

import os
import re

# ---------------------------------------------------------------------------
# Module color / abbreviation map
# ---------------------------------------------------------------------------

MODULE_MAP: dict[str, tuple[str, str]] = {
    "engine":   ("ENG", "\033[96m"),
    "framer":   ("FRM", "\033[94m"),
    "state":    ("HSM", "\033[92m"),
    "scorer":   ("SCR", "\033[38;5;208m"),
    "feeder":   ("FED", "\033[93m"),
    "sink":     ("SNK", "\033[95m"),
    "session":  ("SES", "\033[38;5;39m"),
    "audio":    ("AUD", "\033[97m"),
    "app":      ("APP", "\033[96m"),
    "config":   ("CFG", "\033[90m"),
}

RESET = "\033[0m"
DIM = "\033[2m"

LEVEL_COLORS: dict[str, str] = {
    "DEBUG":    "\033[37m",
    "INFO":     "\033[97m",
    "WARNING":  "\033[93m",
    "ERROR":    "\033[91m",
    "CRITICAL": "\033[91;1m",
}

# ---------------------------------------------------------------------------
# Abbreviation dictionary
# ---------------------------------------------------------------------------

ABBREVIATIONS: dict[str, str] = {
    # Audio
    "segment": "seg", "samples": "smp", "probability": "prob",
    "activation": "act", "deactivation": "deact", "window": "win",
    "token": "tok", "tokens": "tok", "prebuffer": "pre",
    "microphone": "mic", "device": "dev",
    # General
    "error": "err", "config": "cfg", "session": "sess",
    "milliseconds": "ms", "seconds": "sec", "count": "cnt",
    "length": "len", "duration": "dur", "latency": "lat",
    # Actions
    "received": "recv", "canceled": "cxl", "completed": "done",
    "started": "start", "finished": "fin", "dropped": "drop",
}

_ABBREV_PATTERN: re.Pattern | None = None


def _get_abbrev_pattern() -> re.Pattern:
    global _ABBREV_PATTERN
    if _ABBREV_PATTERN is None:
        escaped = [re.escape(k) for k in sorted(ABBREVIATIONS, key=len, reverse=True)]
        _ABBREV_PATTERN = re.compile(
            r"\b(" + "|".join(escaped) + r")\b", re.IGNORECASE
        )
    return _ABBREV_PATTERN


def abbreviate(msg: str) -> str:
    """Replace known words with abbreviations. Disabled by NO_ABBREV=1."""
    if not msg or os.environ.get("NO_ABBREV"):
        return msg
    return _get_abbrev_pattern().sub(
        lambda m: ABBREVIATIONS[m.group(0).lower()], msg
    )


def module_key(name: str) -> str:
    """Extract last dotted segment: 'supervad.engine' -> 'engine'."""
    return name.rsplit(".", 1)[-1]
