import contextvars
import logging
import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATHS = {"/health"}

# Context var to store request id so any code during the request can fetch it
request_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("request_id", default=None)

logger = logging.getLogger("restaurant.http")


class RequestIdFilter(logging.Filter):
    """Attach request_id to every LogRecord so formatter can include it."""
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get() or "-"
        return True


def setup_logging(level: int = logging.INFO) -> None:
    """
    Root logging setup, called by create_app and the seed script.
    Safe to call repeatedly: the request-id handler is only installed once.
    """
    root = logging.getLogger()
    root.setLevel(level)
    if any(getattr(h, "_request_id_handler", False) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler._request_id_handler = True
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"))
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    One log line per request with method, path, status and duration.

    - Reuses an incoming X-Request-ID (the frontend sends one) or generates one.
    - 4xx responses log at WARNING, 5xx at ERROR; health checks only at DEBUG.
    - Echoes the request id back on the response.
    """

    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_ctx.set(req_id)
        start = time.perf_counter()
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception:
            elapsed = int((time.perf_counter() - start) * 1000)
            logger.exception("%s %s failed after %sms", request.method, path, elapsed)
            raise
        else:
            elapsed = int((time.perf_counter() - start) * 1000)
            level = logging.DEBUG if path in QUIET_PATHS else _level_for(response.status_code)
            logger.log(
                level,
                "%s %s -> %s %sms",
                request.method,
                path,
                response.status_code,
                elapsed,
                extra={
                    "client": request.client.host if request.client else None,
                    "status_code": response.status_code,
                    "duration_ms": elapsed,
                },
            )
            response.headers[REQUEST_ID_HEADER] = req_id
            return response
        finally:
            request_id_ctx.reset(token)
