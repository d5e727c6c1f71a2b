"""Request logging middleware."""

import json
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("gibbername.requests")

MAX_LOGGED_DETAIL = 500

# Polled by load balancers; only logged at debug level
QUIET_PATHS = frozenset({"/health"})


def describe_failure(body: bytes) -> str:
    """Summarise an error body as ``CODE: detail`` when it is a tagged failure."""
    text = body.decode("utf-8", errors="replace")
    try:
        payload = json.loads(text)
    except ValueError:
        payload = None

    if isinstance(payload, dict) and "detail" in payload:
        detail = str(payload["detail"])
        if "code" in payload:
            detail = f"{payload['code']}: {detail}"
    else:
        detail = text

    if len(detail) > MAX_LOGGED_DETAIL:
        detail = detail[:MAX_LOGGED_DETAIL] + "..."
    return detail


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with method, path, status, and duration.

    Failed resolutions also log the failure code and detail from the response
    body, e.g. ``GET /api/v1/names/biri-ko -> 410 (3ms) DELETED: ...``.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000

        status = response.status_code
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"

        if status < 400 or not hasattr(response, "body_iterator"):
            log = logger.debug if request.url.path in QUIET_PATHS else logger.info
            log("%s %s -> %d (%.0fms)", request.method, target, status, duration_ms)
            return response

        # The body can only be read once, so rebuild the response afterwards
        chunks = [
            chunk.encode("utf-8") if isinstance(chunk, str) else chunk
            async for chunk in response.body_iterator
        ]
        body = b"".join(chunks)

        log = logger.warning if status < 500 else logger.error
        log(
            "%s %s -> %d (%.0fms) %s",
            request.method,
            target,
            status,
            duration_ms,
            describe_failure(body),
        )
        return Response(
            content=body,
            status_code=status,
            headers=dict(response.headers),
            media_type=response.media_type,
        )
