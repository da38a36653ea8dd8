"""Logger facade over the structlog engine.

Usage::

    import minilog

    log = minilog.new(minilog.LoggerConfig(level="debug"))
    ctx = minilog.with_request(None, request)
    log.with_context(ctx, "user", user_id).info("loaded", len(items), "items")
"""

from __future__ import annotations

from contextvars import Context
from typing import Any

from structlog.typing import FilteringBoundLogger

from .config import PRODUCTION_ENGINE_CONFIG, LoggerConfig, to_engine_config
from .context import correlation_id_from, request_id_from
from .engine import Engine, pairs_to_fields
from .errors import LoggerBuildError, LoggerConfigError

REQUEST_ID_FIELD = "RequestID"
CORRELATION_ID_FIELD = "CorrelationID"


def _join(args: tuple[Any, ...]) -> str:
    return " ".join(str(a) for a in args)


def _format(template: str, args: tuple[Any, ...]) -> str:
    return template % args if args else template


class Logger:
    """A structured logger carrying a fixed set of fields.

    Instances are immutable. ``with_context`` returns a new logger and
    leaves the receiver untouched, so a logger may be shared across
    threads and requests.
    """

    __slots__ = ("_bound", "_engine")

    def __init__(self, bound: FilteringBoundLogger, engine: Engine) -> None:
        self._bound = bound
        self._engine = engine

    def debug(self, *args: Any) -> None:
        """Join ``args`` print-style and log at DEBUG level."""
        self._bound.debug(_join(args))

    def info(self, *args: Any) -> None:
        """Join ``args`` print-style and log at INFO level."""
        self._bound.info(_join(args))

    def error(self, *args: Any) -> None:
        """Join ``args`` print-style and log at ERROR level."""
        self._bound.error(_join(args))

    def debugf(self, template: str, *args: Any) -> None:
        """Format ``template % args`` and log at DEBUG level."""
        self._bound.debug(_format(template, args))

    def infof(self, template: str, *args: Any) -> None:
        """Format ``template % args`` and log at INFO level."""
        self._bound.info(_format(template, args))

    def errorf(self, template: str, *args: Any) -> None:
        """Format ``template % args`` and log at ERROR level."""
        self._bound.error(_format(template, args))

    # print and printf serve callers that expect a generic print-style
    # logger. They always log at DEBUG, never INFO.
    def print(self, *args: Any) -> None:
        self.debug(*args)

    def printf(self, template: str, *args: Any) -> None:
        self.debugf(template, *args)

    def sync(self) -> None:
        """Flush buffered records.

        Raises:
            OSError, ValueError: whatever the underlying streams raise,
                for instance when a destination has been closed.
        """
        self._engine.sync()

    @property
    def engine(self) -> Engine:
        """The raw engine, for direct structlog access and flushing."""
        return self._engine

    def with_context(self, ctx: Context | None = None, *args: Any, **fields: Any) -> Logger:
        """Return a logger decorated with the IDs in ``ctx`` and the given fields.

        ``args`` is a sequence of alternating name/value pairs; ``fields``
        are already-named pairs. When ``ctx`` holds a request ID or
        correlation ID set by ``with_request``, it is added as
        ``RequestID``/``CorrelationID``. Values of any other type stored
        under those keys are ignored.

        When there is nothing to add, the receiver itself is returned.
        """
        ids: dict[str, str] = {}
        if ctx is not None:
            request_id = request_id_from(ctx)
            if request_id is not None:
                ids[REQUEST_ID_FIELD] = request_id
            correlation_id = correlation_id_from(ctx)
            if correlation_id is not None:
                ids[CORRELATION_ID_FIELD] = correlation_id

        if not args and not fields and not ids:
            return self

        # Malformed caller pairs never displace the context IDs.
        pairs, invalid, dangling = pairs_to_fields(args)
        if invalid:
            self._bound.error(
                "Ignored key-value pairs with non-string keys.",
                invalid=[f"{k!r}={v!r}" for k, v in invalid],
            )
        if dangling:
            self._bound.error("Ignored key without a value.", ignored=dangling[0])
        pairs.update(fields)
        pairs.update(ids)

        return Logger(self._bound.bind(**pairs), self._engine)


def new(config: LoggerConfig) -> Logger:
    """Build a root logger from ``config``.

    Raises:
        LoggerConfigError: if ``config`` cannot be translated, for
            instance because its level is not recognized.
        LoggerBuildError: if the engine cannot be built from the
            translated configuration.
    """
    try:
        engine_config = to_engine_config(config)
    except ValueError as exc:
        raise LoggerConfigError(
            f"could not convert configuration {config!r}: {exc}"
        ) from exc

    try:
        engine = Engine.build(engine_config)
    except (OSError, ValueError) as exc:
        raise LoggerBuildError(
            f"could not build logger from configuration {engine_config!r}: {exc}"
        ) from exc

    logger = new_with_engine(engine)
    logger.info("Logger construction succeeded")
    return logger


def new_by_default() -> Logger:
    """Build a root logger from the production preset (JSON on stderr, INFO)."""
    return new_with_engine(Engine.build(PRODUCTION_ENGINE_CONFIG))


def new_with_engine(engine: Engine) -> Logger:
    """Wrap an already built engine."""
    return Logger(engine.logger, engine)
