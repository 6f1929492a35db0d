import logging
import time
import uuid
from typing import Callable

from redis.asyncio import Redis
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from utils.responses import err

logger = logging.getLogger(__name__)


class SlidingWindowRateLimitMiddleware(BaseHTTPMiddleware):
    """Per-client sliding window over every API request, kept in a redis sorted set."""

    def __init__(self, app: Callable, limit: int = 300, window: int = 900, prefix: str = "/api") -> None:
        super().__init__(app)
        self.limit = limit
        self.window = window
        self.prefix = prefix

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not request.url.path.startswith(self.prefix):
            return await call_next(request)
        redis: Redis = request.app.state.redis
        client = request.client.host if request.client else "unknown"
        key = f"ratelimit:{client}"
        now = time.time()
        pipe = redis.pipeline()
        pipe.zremrangebyscore(key, 0, now - self.window)
        pipe.zcard(key)
        pipe.zrange(key, 0, 0, withscores=True)
        _, count, oldest = await pipe.execute()
        if count >= self.limit:
            # rejected requests are not recorded, so the window keeps sliding
            retry = int(oldest[0][1] + self.window - now) + 1 if oldest else self.window
            logger.warning("rate limit exceeded for %s (%s requests)", client, count)
            return JSONResponse(
                err("Too many requests, please try again later.", code="RATE_LIMIT_EXCEEDED"),
                status_code=HTTP_429_TOO_MANY_REQUESTS,
                headers={"Retry-After": str(max(retry, 1))},
            )

        pipe = redis.pipeline()
        pipe.zadd(key, {str(uuid.uuid4()): now})
        pipe.expire(key, self.window)
        await pipe.execute()
        return await call_next(request)
