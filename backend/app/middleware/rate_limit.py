"""
Murmur Backend — Rate Limiting Middleware
===========================================

What:  Per-IP sliding window limiter.
How:   Keeps the timestamps of each client's recent requests in memory.
       A request is rejected with 429 when the client already made
       `rate_limit_requests` requests within the last `rate_limit_window`
       seconds.

    Sliding window:
        1. Drop timestamps older than now - window
        2. If the remaining count >= limit → 429 with Retry-After
        3. Otherwise record now and continue

State is per process. With several workers each one enforces its own
quota; a shared store is needed to enforce a global one.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings
from app.exceptions import RateLimitExceededError
from app.middleware.request_id import REQUEST_ID_HEADER, new_request_id

logger = logging.getLogger(__name__)

# Sweep idle clients after this many recorded requests
CLEANUP_EVERY = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Args:
        max_requests: Requests allowed per window (default settings.rate_limit_requests)
        window_seconds: Window length (default settings.rate_limit_window)

    Excluded paths: /health and the API docs.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ):
        super().__init__(app)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._recorded = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"

        now = time.time()
        window_start = now - self.window_seconds

        recent = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = recent

        if len(recent) >= self.max_requests:
            retry_after = int(recent[0] + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(recent),
                self.window_seconds,
            )
            # Exception handlers do not see errors raised in middleware
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.message},
                headers={
                    "Retry-After": str(exc.retry_after),
                    # Rejected before RequestIDMiddleware runs
                    REQUEST_ID_HEADER: request.headers.get(REQUEST_ID_HEADER) or new_request_id(),
                },
            )

        recent.append(now)
        self._recorded += 1
        if self._recorded % CLEANUP_EVERY == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Forget clients with no request inside the current window."""
        inactive = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for ip in inactive:
            del self._requests[ip]

        if inactive:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive))
