"""Structured logging facade with request and correlation ID propagation.

Quick start::

    import minilog

    log = minilog.new(minilog.LoggerConfig.from_env())
    ctx = minilog.with_request(None, request)
    log.with_context(ctx, "path", request.url.path).info("handling request")
"""

from .config import (
    BASELINE_ENGINE_CONFIG,
    PRODUCTION_ENGINE_CONFIG,
    EngineConfig,
    LoggerConfig,
    to_engine_config,
)
from .context import (
    CORRELATION_ID_HEADER,
    REQUEST_ID_HEADER,
    correlation_id_from,
    generate_request_id,
    request_id_from,
    with_request,
)
from .engine import Engine
from .errors import InvalidLevelError, LoggerBuildError, LoggerConfigError, LoggerError
from .levels import Level
from .logger import Logger, new, new_by_default, new_with_engine

__all__ = [
    "BASELINE_ENGINE_CONFIG",
    "CORRELATION_ID_HEADER",
    "Engine",
    "EngineConfig",
    "InvalidLevelError",
    "Level",
    "Logger",
    "LoggerBuildError",
    "LoggerConfig",
    "LoggerConfigError",
    "LoggerError",
    "PRODUCTION_ENGINE_CONFIG",
    "REQUEST_ID_HEADER",
    "correlation_id_from",
    "generate_request_id",
    "new",
    "new_by_default",
    "new_with_engine",
    "request_id_from",
    "to_engine_config",
    "with_request",
]
