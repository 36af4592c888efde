"""Fixed-window rate limiting for the unauthenticated auth endpoints.

Counts requests per client IP per minute in Redis:
    count = INCR ratelimit:{ip}:auth
    EXPIRE ratelimit:{ip}:auth 60   (first hit of the window only)
Over the limit the request is answered with 429 and ``Retry-After: 60``
without reaching the handler.
"""

from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from config.settings import settings
from src.bk_common.errors import RateLimitError
from src.bk_common.redis_client import get_redis
from src.bk_common.response import error_response

WINDOW_SECONDS = 60
LIMITED_PATHS = frozenset({"/api/v1/auth/login", "/api/v1/auth/register"})


def client_ip(request: Request) -> str:
    """First X-Forwarded-For hop when behind a proxy, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        limit: int | None = None,
        redis_getter: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
    ) -> None:
        super().__init__(app)
        self._limit = settings.RATE_LIMIT_AUTH_PER_MINUTE if limit is None else limit
        self._redis_getter = redis_getter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._limit <= 0 or request.url.path not in LIMITED_PATHS:
            return await call_next(request)

        key = f"ratelimit:{client_ip(request)}:auth"
        redis = await self._redis_getter()
        count = await redis.incr(key)
        if count == 1:
            await redis.expire(key, WINDOW_SECONDS)
        if count > self._limit:
            err = RateLimitError()
            body = error_response(
                err.code, err.message, getattr(request.state, "request_id", None)
            )
            return JSONResponse(
                status_code=err.http_status,
                content=body.model_dump(),
                headers={"Retry-After": str(WINDOW_SECONDS)},
            )
        return await call_next(request)
