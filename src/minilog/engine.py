"""structlog-backed logging engine.

An ``Engine`` owns the output sinks and a root bound logger built from an
``EngineConfig``. Each engine builds its own wrapper class and processor
chain instead of going through ``structlog.configure()``, so loggers with
different configurations can live in the same process.
"""

from __future__ import annotations

import os
import sys
import threading
import traceback
from typing import IO, Any, Sequence

import structlog
from structlog.typing import EventDict, FilteringBoundLogger, Processor, WrappedLogger

from .config import STDERR, STDOUT, EngineConfig

# Modules skipped when resolving the caller of a log call.
_IGNORED_FRAMES = ["minilog."]

_STACKTRACE_METHODS = frozenset({"error", "err", "exception", "critical", "fatal"})


class Sink:
    """Writes each record to every configured stream.

    Streams opened by the sink are closed by ``close()``; ``stdout`` and
    ``stderr`` are never closed.
    """

    def __init__(self, streams: Sequence[IO[str]], owned: Sequence[IO[str]] = ()) -> None:
        self._streams = tuple(streams)
        self._owned = tuple(owned)
        self._lock = threading.Lock()

    @classmethod
    def open(cls, paths: Sequence[str]) -> Sink:
        """Open every output path.

        Raises:
            OSError: if a path cannot be opened. Streams already opened
                are closed first.
        """
        streams: list[IO[str]] = []
        owned: list[IO[str]] = []
        try:
            for path in paths:
                if path == STDOUT:
                    streams.append(sys.stdout)
                elif path == STDERR:
                    streams.append(sys.stderr)
                else:
                    stream = open(os.path.expanduser(path), "a", encoding="utf-8")
                    streams.append(stream)
                    owned.append(stream)
        except OSError:
            for stream in owned:
                stream.close()
            raise
        return cls(streams, owned)

    def write(self, text: str) -> None:
        with self._lock:
            for stream in self._streams:
                stream.write(text)

    def flush(self) -> None:
        with self._lock:
            for stream in self._streams:
                stream.flush()

    def close(self) -> None:
        with self._lock:
            for stream in self._owned:
                stream.close()


class _RenameKey:
    """Move a value from one event-dict key to another."""

    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        if self.source in event_dict:
            event_dict[self.target] = event_dict.pop(self.source)
        return event_dict


class _CallerFormatter:
    """Collapse the callsite pathname and line number into one ``path:line`` field."""

    def __init__(self, key: str, full: bool) -> None:
        self.key = key
        self.full = full

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        pathname = event_dict.pop("pathname", None)
        lineno = event_dict.pop("lineno", None)
        if pathname is None:
            return event_dict
        if not self.full:
            head, tail = os.path.split(pathname)
            pathname = os.path.join(os.path.basename(head), tail) if head else tail
        event_dict[self.key] = f"{pathname}:{lineno}"
        return event_dict


class _StacktraceAdder:
    """Attach the current stack to records at error level and above."""

    def __init__(self, key: str) -> None:
        self.key = key

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        if method_name in _STACKTRACE_METHODS:
            event_dict[self.key] = "".join(traceback.format_stack())
        return event_dict


def _renderer(config: EngineConfig) -> Processor:
    if config.encoding == "json":
        return structlog.processors.JSONRenderer()
    if config.encoding == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    raise ValueError(f"no encoder registered for name {config.encoding!r}")


def build_processors(config: EngineConfig) -> list[Processor]:
    """Translate the key and format settings of ``config`` into a processor chain."""
    processors: list[Processor] = []

    if config.level_key:
        processors.append(structlog.processors.add_log_level)
        if config.level_key != "level":
            processors.append(_RenameKey("level", config.level_key))
    if config.time_key:
        processors.append(
            structlog.processors.TimeStamper(
                fmt=config.time_format, utc=True, key=config.time_key,
            )
        )
    if config.caller_key:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.PATHNAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ],
                additional_ignores=_IGNORED_FRAMES,
            )
        )
        processors.append(_CallerFormatter(config.caller_key, config.full_caller))
    if config.stacktrace_key:
        processors.append(_StacktraceAdder(config.stacktrace_key))
    processors.append(structlog.processors.format_exc_info)

    renderer = _renderer(config)
    # The console renderer expects the message under "event".
    if config.message_key and config.encoding == "json":
        processors.append(structlog.processors.EventRenamer(config.message_key))
    processors.append(renderer)
    return processors


class Engine:
    """A built structlog logger together with the sinks it writes to."""

    def __init__(
        self,
        logger: FilteringBoundLogger,
        sink: Sink,
        config: EngineConfig,
    ) -> None:
        self._logger = logger
        self._sink = sink
        self._config = config

    @classmethod
    def build(cls, config: EngineConfig) -> Engine:
        """Build an engine from a native configuration.

        Raises:
            ValueError: if the encoding is unknown.
            OSError: if an output path cannot be opened.
        """
        processors = build_processors(config)
        sink = Sink.open(config.output_paths)

        context: dict[str, Any] = {}
        if config.name and config.name_key:
            context[config.name_key] = config.name
        context.update(config.initial_fields)

        wrapper_class = structlog.make_filtering_bound_logger(config.level.stdlib_level)
        logger = wrapper_class(structlog.WriteLogger(sink), processors, context)
        return cls(logger, sink, config)

    @property
    def logger(self) -> FilteringBoundLogger:
        """Root bound logger carrying only the configured initial fields."""
        return self._logger

    @property
    def config(self) -> EngineConfig:
        """The configuration this engine was built from."""
        return self._config

    def sync(self) -> None:
        """Flush every sink. Errors propagate unchanged."""
        self._sink.flush()

    def close(self) -> None:
        """Close the files this engine opened."""
        self._sink.close()


def pairs_to_fields(args: Sequence[Any]) -> tuple[dict[str, Any], list[Any], list[Any]]:
    """Consume ``args`` as alternating name/value pairs.

    Returns:
        A tuple of the valid fields, the pairs whose name was not a string,
        and a trailing name that had no value (empty when the pairs are complete).
    """
    fields: dict[str, Any] = {}
    invalid: list[Any] = []
    dangling: list[Any] = []

    pairs = len(args) // 2
    for i in range(pairs):
        key, value = args[2 * i], args[2 * i + 1]
        if isinstance(key, str):
            fields[key] = value
        else:
            invalid.append((key, value))
    if len(args) % 2:
        dangling.append(args[-1])
    return fields, invalid, dangling
