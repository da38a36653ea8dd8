"""Request and correlation ID propagation through ``contextvars.Context``.

``with_request`` never touches the caller's context: it copies it and sets
the IDs only in the copy. The two keys are private ``ContextVar`` objects,
so no other code can read or overwrite them by name.
"""

from __future__ import annotations

import contextvars
import uuid
from contextvars import Context, ContextVar
from typing import Any

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_ID_HEADER = "X-Correlation-ID"

_request_id: ContextVar[str] = ContextVar("minilog_request_id")
_correlation_id: ContextVar[str] = ContextVar("minilog_correlation_id")


def generate_request_id() -> str:
    """Generate a new unique request ID (UUID4)."""
    return str(uuid.uuid4())


def with_request(ctx: Context | None, request: Any) -> Context:
    """Return a context holding the request and correlation IDs of ``request``.

    Args:
        ctx: Context to derive from. ``None`` derives from the current one.
        request: Anything with a case-insensitive ``headers`` mapping,
            e.g. a starlette ``Request``.

    Returns:
        A new context. The request ID is always set, generated when the
        ``X-Request-ID`` header is missing or empty. The correlation ID is
        only set when ``X-Correlation-ID`` is present and non-empty.
    """
    derived = ctx.copy() if ctx is not None else contextvars.copy_context()

    request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
    derived.run(_request_id.set, request_id)

    correlation_id = request.headers.get(CORRELATION_ID_HEADER)
    if correlation_id:
        derived.run(_correlation_id.set, correlation_id)
    return derived


def request_id_from(ctx: Context) -> str | None:
    """Return the request ID stored in ``ctx``, or None."""
    value = ctx.get(_request_id)
    return value if isinstance(value, str) else None


def correlation_id_from(ctx: Context) -> str | None:
    """Return the correlation ID stored in ``ctx``, or None."""
    value = ctx.get(_correlation_id)
    return value if isinstance(value, str) else None
