"""
Request Context Middleware.

Gives every request a correlation id and binds it, with the calling
frontend and the route, into structlog contextvars for the lifetime of the
request. Responses carry X-Request-ID and X-Response-Time.

The caller identity (x-user-id) is not bound here. It is resolved per route
by the principal dependency, so /health and registration stay anonymous.
"""

import time
import uuid
from collections.abc import Mapping

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notelens.backend.core.logging import get_logger
from notelens.backend.core.utils import utc_now

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
FRONTEND_HEADER = "X-Frontend-ID"

# The web UI sends "web"; NotelensClient sends "api"; run.py sends "cli".
KNOWN_FRONTENDS = frozenset({"web", "cli", "api", "internal"})


def resolve_frontend(headers: Mapping[str, str]) -> str:
    """Lowercased X-Frontend-ID, or "unknown" when absent or unrecognised."""
    frontend = (headers.get(FRONTEND_HEADER) or "").strip().lower()
    return frontend if frontend in KNOWN_FRONTENDS else "unknown"


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Bind request_id, frontend, method and path for every log line of a request.

    Also stored on request.state (request_id, frontend, start_time) so the
    exception handlers can echo the id in the error envelope.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        frontend = resolve_frontend(request.headers)

        request.state.request_id = request_id
        request.state.frontend = frontend
        request.state.start_time = utc_now()
        started = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )
        logger.debug(
            "Request started",
            extra={"client_host": request.client.host if request.client else None},
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={"duration_ms": _elapsed_ms(started), "error_type": type(exc).__name__},
            )
            raise
        else:
            duration_ms = _elapsed_ms(started)
            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"
            logger.debug(
                "Request completed",
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()
