"""
Request ID middleware for request correlation.

- Generates or accepts X-Request-ID header
- Stores in request.state and response headers
- Sets context vars so request_id (and later profile_id) appear in logs
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ecolearn.logging_config import get_logger, profile_id_var, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
SLOW_REQUEST_MS = 500


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Assign a unique request ID to each request for correlation across logs.

    - Accepts X-Request-ID from client if present
    - Otherwise generates a new UUID
    - Clears any profile id left in context; progression routes set their own
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER)
        request_id = incoming if incoming else str(uuid.uuid4())
        request.state.request_id = request_id

        request_token = request_id_var.set(request_id)
        profile_token = profile_id_var.set(None)

        try:
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000

            response.headers[REQUEST_ID_HEADER] = request_id

            log = logger.warning if duration_ms > SLOW_REQUEST_MS else logger.debug
            log(
                "%s %s -> %s",
                request.method,
                request.url.path,
                response.status_code,
                extra={"duration_ms": round(duration_ms, 1)},
            )
            return response
        finally:
            profile_id_var.reset(profile_token)
            request_id_var.reset(request_token)
