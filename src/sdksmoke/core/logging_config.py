"""Central logging configuration utilities.

`configure_logging` is called once by the composition root. It installs two
root sinks: DEBUG/INFO records on stdout, WARNING and above on stderr. Every
record is tagged with the id of the smoke run in progress (``-`` outside a
run). Adapters and core code only emit, via `LoggingPort` or module loggers.

The per-step status lines are printed directly and do not pass through
logging, so the log level never hides them.
"""

from __future__ import annotations

import contextvars
import logging
import sys
from typing import Optional, TextIO

# Set by SmokeTestRunner for the duration of a run
run_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "run_id", default="-"
)

DEFAULT_FORMAT = "[%(asctime)s] %(levelname)s %(name)s %(run_id)s: %(message)s"

# Loggers of the vendor SDK, held at WARNING unless asked otherwise
SDK_LOGGERS = ("couchbase",)


def coerce_level(level: int | str | None) -> int:
    """Numeric level for an int, a level name (any case) or None (INFO)."""
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    # unknown names come back as the string "Level <name>"
    return resolved if isinstance(resolved, int) else logging.INFO


class _LevelBandFilter(logging.Filter):
    """Accept records within [low, high] and stamp them with the run id."""

    def __init__(self, low: int, high: int = logging.CRITICAL):
        super().__init__()
        self.low = low
        self.high = high

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.low <= record.levelno <= self.high:
            return False
        record.run_id = run_id_var.get()
        return True


def _sink(stream: TextIO, band: _LevelBandFilter, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(stream=stream)
    handler.addFilter(band)
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    level: int | str | None = None,
    fmt: Optional[str] = None,
    quiet_sdk: bool = True,
) -> None:
    """(Re)install the stdout/stderr root sinks at ``level``.

    Existing root handlers are replaced, so repeated calls do not stack
    output.
    """
    numeric_level = coerce_level(level)
    formatter = logging.Formatter(fmt or DEFAULT_FORMAT)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers[:] = [
        _sink(sys.stdout, _LevelBandFilter(logging.NOTSET, logging.INFO), formatter),
        _sink(sys.stderr, _LevelBandFilter(logging.WARNING), formatter),
    ]

    if quiet_sdk:
        for name in SDK_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("sdksmoke").debug(
        "Logging configured level=%s quiet_sdk=%s", numeric_level, quiet_sdk
    )
