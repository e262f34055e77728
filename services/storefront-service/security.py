"""Rate limiting for public write endpoints."""
import logging
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from monitoring import rate_limit_exceeded_counter

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Per-client sliding window rate limiting for selected paths.

    Each limited path has its own budget per client IP, so heavy catalog
    browsing never eats into the checkout or login allowance. Windows are kept
    in process memory and reset on restart.
    """

    def __init__(
        self,
        app,
        limits: Dict[str, int],
        window_seconds: int = 600,
        trust_proxy_headers: bool = False,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize rate limiter.

        Args:
            app: FastAPI application
            limits: Maximum requests per window, keyed by exact request path
            window_seconds: Sliding window size in seconds
            trust_proxy_headers: Key clients on the first X-Forwarded-For hop.
                Only safe behind a proxy that overwrites the header.
            clock: Monotonic time source
        """
        super().__init__(app)
        self.limits = dict(limits)
        self.window_seconds = window_seconds
        self.trust_proxy_headers = trust_proxy_headers
        self.clock = clock
        self.request_log: Dict[str, Deque[float]] = defaultdict(deque)
        self._last_sweep = clock()

    def _client_ip(self, request: Request) -> str:
        if self.trust_proxy_headers:
            forwarded = request.headers.get("x-forwarded-for")
            if forwarded:
                return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _limit_for(self, request: Request) -> Optional[int]:
        return self.limits.get(request.url.path)

    def _expire(self, timestamps: Deque[float], current_time: float) -> None:
        while timestamps and current_time - timestamps[0] >= self.window_seconds:
            timestamps.popleft()

    def _sweep(self, current_time: float) -> None:
        """Forget clients with no requests left inside the window."""
        for key in list(self.request_log):
            self._expire(self.request_log[key], current_time)
            if not self.request_log[key]:
                del self.request_log[key]
        self._last_sweep = current_time

    async def dispatch(self, request: Request, call_next):
        """
        Process request with per-path rate limiting.

        Args:
            request: Incoming request
            call_next: Next middleware in chain

        Returns:
            Response or 429 if rate limited
        """
        limit = self._limit_for(request)
        if limit is None:
            return await call_next(request)

        current_time = self.clock()
        if current_time - self._last_sweep >= self.window_seconds:
            self._sweep(current_time)

        client_ip = self._client_ip(request)
        key = f"{request.url.path}:{client_ip}"

        timestamps = self.request_log[key]
        self._expire(timestamps, current_time)

        if len(timestamps) >= limit:
            rate_limit_exceeded_counter.add(1, {
                "endpoint": request.url.path
            })
            logger.warning("Rate limit exceeded", extra={
                "client_ip": client_ip,
                "endpoint": request.url.path,
                "requests_in_window": len(timestamps),
                "limit": limit
            })
            retry_after = max(1, int(self.window_seconds - (current_time - timestamps[0])))
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests, please try again later."},
                headers={"Retry-After": str(retry_after)}
            )

        timestamps.append(current_time)
        return await call_next(request)
