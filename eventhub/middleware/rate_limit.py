from __future__ import annotations

import time

import structlog
from fastapi import Request
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from eventhub.core.config import settings
from eventhub.redis_client import get_redis

logger = structlog.get_logger()

_WINDOWS = {
    "second": 1,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
}


def parse_rate(rate: str) -> tuple[int, int]:
    """Parse ``"<limit>/<window>"`` such as ``"60/minute"`` into ``(limit, seconds)``."""
    raw = rate.strip().lower()
    if "/" not in raw:
        raise ValueError(f"Invalid rate format: {rate}")

    limit_str, window_str = raw.split("/", 1)
    window = window_str.strip().rstrip("s")
    if window in {"sec", "min"}:
        window = {"sec": "second", "min": "minute"}[window]
    if window not in _WINDOWS:
        raise ValueError(f"Invalid rate window: {window_str}")
    return int(limit_str), _WINDOWS[window]


def _rate_for_path(path: str) -> str:
    if path in set(settings.rate_limit_auth_paths):
        return settings.rate_limit_auth
    return settings.rate_limit_default


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window counter per client, method and path, stored in redis.

    Fails open when redis is unreachable or the rate string is malformed.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        if not settings.rate_limit_enabled or request.method == "OPTIONS":
            return await call_next(request)

        path = request.url.path
        if path in set(settings.rate_limit_exempt_paths):
            return await call_next(request)

        try:
            limit, window_seconds = parse_rate(_rate_for_path(path))
        except ValueError:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = int(time.time())
        bucket = now // window_seconds
        key = f"rl:{client_ip}:{request.method}:{path}:{window_seconds}:{bucket}"

        try:
            r = get_redis()
            count = r.incr(key)
            if count == 1:
                r.expire(key, window_seconds)
        except RedisError:
            return await call_next(request)

        reset = (bucket + 1) * window_seconds
        if count > limit:
            logger.warning("rate_limited", client_ip=client_ip, path=path)
            return JSONResponse(
                status_code=429,
                content={"status": "fail", "message": "Too many requests. Please try again later."},
                headers={
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(reset),
                    "Retry-After": str(max(0, reset - now)),
                },
            )

        response = await call_next(request)
        response.headers.setdefault("X-RateLimit-Limit", str(limit))
        response.headers.setdefault("X-RateLimit-Remaining", str(max(0, limit - int(count))))
        response.headers.setdefault("X-RateLimit-Reset", str(reset))
        return response
