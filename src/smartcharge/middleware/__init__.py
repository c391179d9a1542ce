"""Middleware registration."""

from fastapi import FastAPI

from smartcharge.config import Settings
from smartcharge.middleware.cors import setup_cors
from smartcharge.middleware.error_handler import setup_error_handlers
from smartcharge.middleware.logging import setup_logging
from smartcharge.middleware.rate_limit import RateLimitMiddleware
from smartcharge.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Install logging, error envelopes and the HTTP middleware stack.

    Outermost first: CORS, request id, rate limiting. CORS wraps everything so
    browser clients can read 429 and error envelopes too. A non-positive
    ``SC_RATE_LIMIT_REQUESTS`` turns throttling off.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    if settings.rate_limit_requests > 0:
        app.add_middleware(
            RateLimitMiddleware,
            requests_per_window=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)
