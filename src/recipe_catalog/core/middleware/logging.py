"""Access logging for the catalog API."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from recipe_catalog.observability.logging import bind_context, get_logger


if TYPE_CHECKING:
    from collections.abc import Iterable

    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

logger = get_logger(__name__)


def client_ip(request: Request) -> str:
    """First hop of ``X-Forwarded-For``, then ``X-Real-IP``, then the peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",", 1)[0].strip()
    if real_ip := request.headers.get("x-real-ip"):
        return real_ip
    return request.client.host if request.client else "unknown"


def completion_level(status_code: int) -> str:
    if status_code >= 500:
        return "ERROR"
    if status_code >= 400:
        return "WARNING"
    return "INFO"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request on arrival and on completion.

    Paths starting with one of ``quiet_prefixes`` (probes, image files) are
    passed through without logging.
    """

    def __init__(self, app: ASGIApp, *, quiet_prefixes: Iterable[str] = ()) -> None:
        super().__init__(app)
        self.quiet_prefixes = tuple(quiet_prefixes)

    def is_quiet(self, path: str) -> bool:
        return bool(self.quiet_prefixes) and path.startswith(self.quiet_prefixes)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        if self.is_quiet(path):
            return await call_next(request)

        bind_context(method=request.method, path=path, client_ip=client_ip(request))
        logger.info(
            "Request started",
            query=str(request.query_params) if request.query_params else None,
        )

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.log(
            completion_level(response.status_code),
            "Request completed",
            status_code=response.status_code,
            duration_ms=round(elapsed_ms, 2),
        )
        return response
