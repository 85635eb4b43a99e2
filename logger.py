"""Simple logger abstraction shared by the CLI and the batch runner."""

from __future__ import annotations

import sys
import threading
from typing import TextIO


_LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}


class Logger:
    """Minimal level-filtered logger that is safe to call from worker threads."""

    def __init__(self, level: str = "INFO", stream: TextIO | None = None) -> None:
        self._level = _LEVELS.get(level.upper(), _LEVELS["INFO"])
        self._stream = stream
        self._lock = threading.Lock()

    def set_stream(self, stream: TextIO | None) -> None:
        self._stream = stream

    def set_level(self, level: str) -> None:
        self._level = _LEVELS.get(level.upper(), _LEVELS["INFO"])

    def _write(self, message: str) -> None:
        stream = self._stream or sys.stdout
        # Workers share one stream; keep lines whole.
        with self._lock:
            print(message, file=stream)

    def debug(self, message: str) -> None:
        if self._level <= _LEVELS["DEBUG"]:
            self._write(message)

    def info(self, message: str) -> None:
        if self._level <= _LEVELS["INFO"]:
            self._write(message)

    def warn(self, message: str) -> None:
        if self._level <= _LEVELS["WARN"]:
            self._write(message)

    def error(self, message: str) -> None:
        if self._level <= _LEVELS["ERROR"]:
            self._write(message)


_LOGGER = Logger()


def get_logger() -> Logger:
    """Return the shared logger instance."""
    return _LOGGER
