"""Starlette middleware attaching a logging context to every request.

Usage::

    app.add_middleware(RequestContextMiddleware)

    @app.get("/items")
    async def items(request: Request):
        log = root_logger.with_context(get_log_context(request))
        log.info("listing items")
"""

from __future__ import annotations

from contextvars import Context

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from .context import (
    CORRELATION_ID_HEADER,
    REQUEST_ID_HEADER,
    correlation_id_from,
    request_id_from,
    with_request,
)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Derive a context from the request headers and echo the IDs back.

    The context is stored on ``request.state.log_context``. The response
    carries ``X-Request-ID`` and, when the caller sent one,
    ``X-Correlation-ID``.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        ctx = with_request(None, request)
        request.state.log_context = ctx

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id_from(ctx)
        correlation_id = correlation_id_from(ctx)
        if correlation_id:
            response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response


def get_log_context(request: Request) -> Context:
    """Return the logging context of ``request``.

    Falls back to deriving one from the headers when
    ``RequestContextMiddleware`` is not installed.
    """
    ctx = getattr(request.state, "log_context", None)
    if ctx is None:
        ctx = with_request(None, request)
        request.state.log_context = ctx
    return ctx
