"""FastAPI middleware for API rate limiting."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

log = structlog.get_logger(__name__)

# How many dispatch cycles between full sweeps of stale client entries.
_GC_INTERVAL = 256
_WINDOW_SECONDS = 60.0


@dataclass(frozen=True)
class RateLimitRule:
    """Requests per minute per IP for paths starting with ``prefix``."""

    prefix: str
    requests_per_minute: int
    message: str = "Too many requests. Please try again later."


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window rate limiter per client IP and path prefix.

    Every rule whose prefix matches the request path is enforced; a
    request is counted against all of them only when none is exhausted.
    Rules with ``requests_per_minute <= 0`` are ignored.

    Args:
        app: ASGI application.
        rules: Rate limit rules, e.g. ``/api`` and a stricter ``/api/analyze``.
    """

    def __init__(self, app: object, rules: list[RateLimitRule]) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._rules = [r for r in rules if r.requests_per_minute > 0]
        self._window: dict[tuple[str, str], deque[float]] = {}
        self._dispatch_count = 0

    def _timestamps(self, rule: RateLimitRule, client_ip: str, now: float) -> deque[float]:
        key = (rule.prefix, client_ip)
        timestamps = self._window.get(key)
        if timestamps is None:
            timestamps = deque()
            self._window[key] = timestamps

        cutoff = now - _WINDOW_SECONDS
        while timestamps and timestamps[0] <= cutoff:
            timestamps.popleft()
        return timestamps

    def _gc(self) -> None:
        self._dispatch_count += 1
        if self._dispatch_count >= _GC_INTERVAL:
            self._dispatch_count = 0
            stale = [key for key, dq in self._window.items() if not dq]
            for key in stale:
                del self._window[key]

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        matching = [r for r in self._rules if path.startswith(r.prefix)]
        if not matching:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()

        windows = [(r, self._timestamps(r, client_ip, now)) for r in matching]
        for rule, timestamps in windows:
            if len(timestamps) >= rule.requests_per_minute:
                log.warning(
                    "rate_limit_exceeded",
                    client_ip=client_ip,
                    prefix=rule.prefix,
                    rpm=rule.requests_per_minute,
                )
                return JSONResponse(
                    status_code=429,
                    content={
                        "error": rule.message,
                        "retryAfter": int(_WINDOW_SECONDS),
                    },
                    headers={"Retry-After": str(int(_WINDOW_SECONDS))},
                )

        for _, timestamps in windows:
            timestamps.append(now)
        self._gc()

        # Report the tightest matching rule
        rule, timestamps = min(
            windows, key=lambda w: w[0].requests_per_minute - len(w[1])
        )
        response = await call_next(request)
        remaining = max(0, rule.requests_per_minute - len(timestamps))
        response.headers["X-RateLimit-Limit"] = str(rule.requests_per_minute)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
