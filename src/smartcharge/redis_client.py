"""Redis client for the rate limiter and the readiness check.

Redis is optional for this service: when it was never initialized (tests,
local dev) callers use ``get_optional_redis`` and skip throttling.
"""

import redis.asyncio as redis

_client: redis.Redis | None = None

# Rate limiting issues one pipeline per request; a small pool is enough
MAX_CONNECTIONS = 20


async def init_redis(url: str) -> None:
    """Create the client. Connections are opened lazily on first command."""
    global _client  # noqa: PLW0603
    _client = redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=MAX_CONNECTIONS,
    )


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None


def get_redis() -> redis.Redis:
    """Raises RuntimeError when Redis was never initialized."""
    if _client is None:
        msg = "Redis not initialized. Call init_redis() first."
        raise RuntimeError(msg)
    return _client


def get_optional_redis() -> redis.Redis | None:
    return _client


async def check_redis() -> str:
    """``"ok"`` or ``"error: <reason>"`` for the readiness check."""
    try:
        await get_redis().ping()
    except (RuntimeError, redis.RedisError, OSError) as exc:
        return f"error: {exc}"
    return "ok"
