"""Exceptions raised while constructing loggers.

Flush failures are not wrapped: ``Logger.sync()`` lets the underlying
``OSError`` or ``ValueError`` propagate unchanged.
"""

from __future__ import annotations


class LoggerError(Exception):
    """Base class for logger construction failures."""


class InvalidLevelError(ValueError):
    """A level string did not match any recognized level token."""

    def __init__(self, text: str, choices: tuple[str, ...]) -> None:
        self.text = text
        super().__init__(
            f"Invalid level {text!r}. Must be one of: {', '.join(choices)}"
        )


class LoggerConfigError(LoggerError, ValueError):
    """The logger configuration could not be translated to an engine config."""


class LoggerBuildError(LoggerError):
    """The engine could not be built from a valid configuration."""
