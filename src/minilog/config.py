"""Logger configuration and its translation into an engine configuration.

``LoggerConfig`` is the small record callers fill in. ``to_engine_config``
overlays it onto ``BASELINE_ENGINE_CONFIG``, an immutable constant, so every
translation starts from the same baseline and nothing process-wide is
mutated.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from .levels import Level

STDOUT = "stdout"
STDERR = "stderr"

ENCODINGS = ("json", "console")


@dataclass
class LoggerConfig:
    """Configuration accepted by ``minilog.new()``.

    Tests should construct this directly; ``from_env`` is a convenience
    for processes configured through environment variables.
    """

    encoding: str = "json"
    """Output encoding, ``json`` or ``console``."""

    output_paths: list[str] = field(default_factory=lambda: [STDOUT])
    """File paths or the ``stdout``/``stderr`` sentinels."""

    level: str = "info"
    """Minimum level token, see ``Level.parse``."""

    initial_fields: dict[str, Any] = field(default_factory=dict)
    """Fields attached to every record. Copied at translation time."""

    name: str = ""
    """Logger name emitted under the ``logger`` key when non-empty."""

    def validate(self) -> list[str]:
        """Return a list of configuration problems. Empty means valid."""
        errors: list[str] = []
        try:
            Level.parse(self.level)
        except ValueError as exc:
            errors.append(str(exc))
        if self.encoding not in ENCODINGS:
            errors.append(
                f"Invalid encoding {self.encoding!r}. "
                f"Must be one of: {', '.join(ENCODINGS)}"
            )
        if any(not path for path in self.output_paths):
            errors.append("output_paths must not contain empty entries")
        return errors

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> LoggerConfig:
        """Build a config from ``LOG_LEVEL``, ``LOG_FORMAT``, ``LOG_OUTPUT`` and ``LOG_NAME``."""
        if env is None:
            env = os.environ

        outputs_raw = env.get("LOG_OUTPUT", "")
        outputs = [o.strip() for o in outputs_raw.split(",") if o.strip()]

        return cls(
            encoding=env.get("LOG_FORMAT", "json").strip().lower(),
            output_paths=outputs or [STDOUT],
            level=env.get("LOG_LEVEL", "info"),
            name=env.get("LOG_NAME", ""),
        )


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Native configuration of the structlog-backed engine.

    An empty key disables the corresponding field.
    """

    encoding: str = "json"
    output_paths: tuple[str, ...] = ()
    level: Level = Level.INFO
    initial_fields: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )
    name: str = ""

    message_key: str = "message"
    level_key: str = "level"
    time_key: str = "time"
    name_key: str = "logger"
    caller_key: str = "caller"
    stacktrace_key: str = ""

    time_format: str | None = "iso"
    """``"iso"`` for ISO-8601 strings, ``None`` for float epoch seconds."""

    full_caller: bool = True
    """Full source path in ``caller``; otherwise only ``dir/file``."""


BASELINE_ENGINE_CONFIG = EngineConfig()

# Preset used by new_by_default().
PRODUCTION_ENGINE_CONFIG = EngineConfig(
    encoding="json",
    output_paths=(STDERR,),
    level=Level.INFO,
    message_key="msg",
    time_key="ts",
    stacktrace_key="stacktrace",
    time_format=None,
    full_caller=False,
)


def to_engine_config(conf: LoggerConfig) -> EngineConfig:
    """Overlay ``conf`` onto the baseline engine configuration.

    Raises:
        InvalidLevelError: if ``conf.level`` is not a recognized level token.
    """
    return replace(
        BASELINE_ENGINE_CONFIG,
        encoding=conf.encoding,
        output_paths=tuple(conf.output_paths),
        level=Level.parse(conf.level),
        initial_fields=MappingProxyType(dict(conf.initial_fields)),
        name=conf.name,
    )
