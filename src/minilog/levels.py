"""Log level tokens and their mapping onto stdlib level numbers."""

from __future__ import annotations

import logging
from enum import Enum

from .errors import InvalidLevelError


class Level(str, Enum):
    """Recognized minimum levels.

    ``dpanic``, ``panic`` and ``fatal`` are accepted for compatibility with
    configs written for other structured loggers; all three filter at the
    critical threshold.
    """

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    DPANIC = "dpanic"
    PANIC = "panic"
    FATAL = "fatal"

    @classmethod
    def parse(cls, text: str) -> Level:
        """Parse a level token, case-insensitive.

        The empty string means ``info``. Surrounding whitespace and aliases
        such as ``warning`` are rejected.

        Raises:
            InvalidLevelError: if ``text`` is not a recognized token.
        """
        token = text.lower()
        if token == "":
            return cls.INFO
        try:
            return cls(token)
        except ValueError:
            raise InvalidLevelError(text, tuple(m.value for m in cls)) from None

    @property
    def stdlib_level(self) -> int:
        return _STDLIB_LEVELS[self]


_STDLIB_LEVELS = {
    Level.DEBUG: logging.DEBUG,
    Level.INFO: logging.INFO,
    Level.WARN: logging.WARNING,
    Level.ERROR: logging.ERROR,
    Level.DPANIC: logging.CRITICAL,
    Level.PANIC: logging.CRITICAL,
    Level.FATAL: logging.CRITICAL,
}
