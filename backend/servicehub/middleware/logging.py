"""
ServiceHub Backend — Request Logging Middleware
=================================================

What:  One access-log line per HTTP request with status and duration.
How:   Times the downstream call and logs at a level picked by status class.
Who:   Applied to every request via Starlette middleware.
When:  Inside RequestIDMiddleware, so the request id is already set.

What we log vs what we DON'T log (privacy):
    Log:        method, path, status, duration, client IP, request id, tenant header
    Don't log:  request bodies (customer PII), authorization headers
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from servicehub.config import settings
from servicehub.middleware.request_id import request_id_var

logger = logging.getLogger("servicehub.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status code and duration for each request.

    Level by status:
        5xx → ERROR, 4xx → WARNING, everything else → INFO
    Health checks are not logged (probes run every few seconds).
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        tenant = request.headers.get(settings.tenant_header, "-")
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] tenant=%s from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            tenant,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
