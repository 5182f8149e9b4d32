"""HTTP middleware applied to every request.

- ``request_id_middleware``: accepts the incoming X-Request-ID header or
  generates a UUID, binds it to the logging context for the duration of the
  request and echoes it (with the elapsed time) on the response.
- ``security_headers_middleware``: sets the browser hardening headers.
- ``body_size_limit_middleware``: rejects requests whose declared body is
  larger than ``APP_MAX_BODY_BYTES`` with 413.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from bodymetrics.core.config import settings
from bodymetrics.core.logging import clear_request_id, get_request_id, set_request_id

logger = logging.getLogger(__name__)

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}


async def request_id_middleware(request: Request, call_next) -> Response:
    """Propagate a correlation id through logs and back to the client.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response with ``X-Request-ID`` and ``X-Request-Duration-ms`` headers.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


async def security_headers_middleware(request: Request, call_next) -> Response:
    response: Response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


async def body_size_limit_middleware(request: Request, call_next) -> Response:
    """Reject oversized payloads based on the Content-Length header.

    Only the declared length is checked. A chunked request that omits
    Content-Length is passed through; deployments that accept chunked uploads
    must cap body size at the reverse proxy.
    """

    max_bytes = settings.app.max_body_bytes
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > max_bytes:
        logger.warning(
            "request.body_too_large",
            extra={"content_length": int(declared), "max_bytes": max_bytes},
        )
        return JSONResponse(
            status_code=413,
            content={
                "error": "request body too large",
                "code": "request_too_large",
                "request_id": get_request_id(),
            },
        )
    return await call_next(request)
