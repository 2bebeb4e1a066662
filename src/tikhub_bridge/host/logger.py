"""Fallback logger for running the bridge without a host logger.

Writes to stderr so that stdout stays free for whatever protocol stream
the embedding process uses. Messages already carry ``LOG_PREFIX``; the
logger only adds the level tag.
"""

from __future__ import annotations

import sys
from typing import TextIO

LOG_PREFIX = "[TikHub]"


class StderrLogger:
    """Leveled logger that writes level-tagged lines to stderr."""

    def __init__(self, stream: TextIO | None = None, debug: bool = False) -> None:
        """Initialize the logger.

        Args:
            stream: Log stream (defaults to sys.stderr).
            debug: Whether debug messages are written.
        """
        self._stream = stream or sys.stderr
        self._debug = debug

    def _write(self, level: str, message: str) -> None:
        self._stream.write(f"{level}: {message}\n")
        self._stream.flush()

    def debug(self, message: str) -> None:
        if self._debug:
            self._write("DEBUG", message)

    def info(self, message: str) -> None:
        self._write("INFO", message)

    def warn(self, message: str) -> None:
        self._write("WARN", message)

    def error(self, message: str) -> None:
        self._write("ERROR", message)


def log_debug(log, message: str) -> None:
    """Write a debug message if the host logger supports debug output."""
    debug = getattr(log, "debug", None)
    if callable(debug):
        debug(message)
