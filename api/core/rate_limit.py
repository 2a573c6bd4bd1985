"""
Per-client request rate limiting.

A fixed window shared by all clients: every `window_seconds` the counters are
cleared, and each client key may make at most `max_requests` requests in
between. State is in-process, so each worker counts on its own.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from threading import Lock

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from . import settings

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


class FixedWindowRateLimiter:
    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests <= 0:
            raise ValueError("max_requests must be positive.")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive.")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._counts: dict[str, int] = {}
        self._window_start: float | None = None
        self._lock = Lock()

    def _roll_window(self, now: float) -> None:
        if self._window_start is None or now - self._window_start >= self.window_seconds:
            self._window_start = now
            self._counts.clear()

    def hit(self, key: str) -> bool:
        """
        Count one request for `key`; return False once the window is full.
        """
        with self._lock:
            self._roll_window(self._clock())
            count = self._counts.get(key, 0)
            if count >= self.max_requests:
                return False
            self._counts[key] = count + 1
            return True

    def retry_after(self, key: str) -> int:
        with self._lock:
            now = self._clock()
            self._roll_window(now)
            if key not in self._counts:
                return 0
            remaining = self.window_seconds - (now - self._window_start)
            return max(0, int(remaining)) + 1

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._counts)


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        limiter: FixedWindowRateLimiter | None = None,
        exclude_paths: list[str] | None = None,
        enabled: bool | None = None,
        trust_proxy: bool | None = None,
    ) -> None:
        super().__init__(app)
        self.limiter = limiter or FixedWindowRateLimiter(
            max_requests=settings.rate_limit_max_requests(),
            window_seconds=settings.rate_limit_window_seconds(),
        )
        self.exclude_paths = exclude_paths if exclude_paths is not None else ["/health"]
        self.enabled = settings.rate_limit_enabled() if enabled is None else enabled
        self.trust_proxy = settings.trust_proxy() if trust_proxy is None else trust_proxy

    def client_key(self, request: Request) -> str:
        if self.trust_proxy:
            forwarded = request.headers.get("X-Forwarded-For")
            if forwarded:
                # Earlier hops are client-supplied.
                return forwarded.split(",")[-1].strip()
        return request.client.host if request.client else "unknown"

    async def dispatch(self, request: Request, call_next) -> Response:
        if not self.enabled:
            return await call_next(request)

        path = request.url.path
        if any(path == excluded or path.startswith(excluded + "/") for excluded in self.exclude_paths):
            return await call_next(request)

        key = self.client_key(request)
        if not self.limiter.hit(key):
            retry_after = self.limiter.retry_after(key)
            logger.warning("rate_limited client=%s path=%s retry_after=%s", key, path, retry_after)
            return JSONResponse(
                status_code=429,
                content={"error": RATE_LIMIT_MESSAGE},
                headers={
                    "Retry-After": str(retry_after),
                    "X-RateLimit-Limit": str(self.limiter.max_requests),
                },
            )

        return await call_next(request)
