"""Redis-backed fixed window rate limiting middleware."""

import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from smartcharge.middleware.error_handler import error_response
from smartcharge.redis_client import get_optional_redis

# Health endpoints are never throttled
_EXEMPT_PATHS = frozenset({"/health", "/ready", "/version"})


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limit requests per client IP using one Redis counter per window."""

    def __init__(self, app: Any, requests_per_window: int = 100, window_seconds: int = 60) -> None:  # noqa: ANN401
        super().__init__(app)
        self.requests_per_window = requests_per_window
        self.window_seconds = window_seconds

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _EXEMPT_PATHS:
            return await call_next(request)

        redis = get_optional_redis()
        if redis is None:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        window = int(time.time()) // self.window_seconds
        rate_key = f"sc:ratelimit:{client_ip}:{window}"

        pipe = redis.pipeline()
        pipe.incr(rate_key)
        pipe.expire(rate_key, self.window_seconds + 1)
        results: list[Any] = await pipe.execute()
        current_count: int = results[0]

        if current_count > self.requests_per_window:
            return error_response(
                429,
                "rate_limited",
                "Rate limit exceeded. Try again later.",
                headers={
                    "Retry-After": str(self.window_seconds),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Limit": str(self.requests_per_window),
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self.requests_per_window - current_count))
        response.headers["X-RateLimit-Limit"] = str(self.requests_per_window)
        return response
