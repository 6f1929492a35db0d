import logging
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

CURRENT_PREFIX = "/api/v1"
LEGACY_PREFIX = "/api"


def is_legacy_path(path: str) -> bool:
    return path.startswith(LEGACY_PREFIX + "/") and not path.startswith(CURRENT_PREFIX + "/")


class LegacyApiDeprecationMiddleware(BaseHTTPMiddleware):
    """Flag requests that still use the unversioned ``/api`` prefix."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if not is_legacy_path(path):
            return await call_next(request)

        new_path = CURRENT_PREFIX + path[len(LEGACY_PREFIX):]
        logger.warning("deprecated api path %s %s, use %s", request.method, path, new_path)
        response = await call_next(request)
        response.headers["X-API-Deprecated"] = "true"
        response.headers["X-API-Deprecation-Info"] = (
            f"The {LEGACY_PREFIX} prefix is deprecated. Use {CURRENT_PREFIX} instead."
        )
        response.headers["X-API-Migration-Guide"] = f"Replace {path} with {new_path}"
        return response
