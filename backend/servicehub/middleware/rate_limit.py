"""
ServiceHub Backend — Rate Limiting Middleware
===============================================

What:  Per-caller sliding window rate limiter.
How:   Tracks request timestamps per caller key in memory. The key is the
       tenant header when the gateway supplied one, else the client IP, so
       tenants behind the same proxy are counted separately.
Who:   Applied to every request via Starlette middleware.

Algorithm: Sliding Window Counter
    1. Each key gets a list of request timestamps
    2. On each request, drop timestamps older than the window
    3. If the remaining count >= limit, reject with 429 + Retry-After
    4. Otherwise record the timestamp and pass through

    In-memory state is per process. Multi-worker deployments need a shared
    store (Redis) to enforce a global limit.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from servicehub.config import settings
from servicehub.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Configuration (from settings):
        rate_limit_requests: Max requests per window (default: 1000)
        rate_limit_window: Window duration in seconds (default: 3600)

    Excluded paths:
        /health and the API docs are always reachable.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._requests: Dict[str, List[float]] = defaultdict(list)

    @staticmethod
    def caller_key(request: Request) -> str:
        tenant = request.headers.get(settings.tenant_header)
        if tenant:
            return f"tenant:{tenant.strip()}"
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        return f"ip:{client_ip}"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        key = self.caller_key(request)
        now = time.time()
        window_start = now - settings.rate_limit_window

        # ── Sliding Window: Clean old entries ─────────────────────────────
        self._requests[key] = [ts for ts in self._requests[key] if ts > window_start]

        # ── Check rate limit ──────────────────────────────────────────────
        if len(self._requests[key]) >= settings.rate_limit_requests:
            oldest = self._requests[key][0]
            retry_after = int(oldest + settings.rate_limit_window - now) + 1
            error = RateLimitExceededError(retry_after=retry_after, context={"key": key})

            logger.warning(
                "Rate limit exceeded for %s: %d requests in %ds window",
                key,
                len(self._requests[key]),
                settings.rate_limit_window,
            )

            return JSONResponse(
                status_code=error.status_code,
                content={
                    "success": False,
                    "data": None,
                    "message": error.message,
                    "errors": [error.message],
                },
                headers={"Retry-After": str(retry_after)},
            )

        # ── Record this request ───────────────────────────────────────────
        self._requests[key].append(now)

        # Every ~1000 tracked timestamps, drop keys with no activity in the window
        if sum(len(v) for v in self._requests.values()) % 1000 == 0:
            self._cleanup_inactive_keys(window_start)

        return await call_next(request)

    def _cleanup_inactive_keys(self, window_start: float) -> None:
        inactive = [
            key for key, timestamps in self._requests.items()
            if not timestamps or max(timestamps) < window_start
        ]
        for key in inactive:
            del self._requests[key]

        if inactive:
            logger.debug("Cleaned up %d inactive rate-limit keys", len(inactive))
