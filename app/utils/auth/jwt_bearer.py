import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from schemas import UserRole
from utils.exceptions import ForbiddenError, UnauthorizedError

from .jwt_handler import TokenExpired, verify_access_token

logger = logging.getLogger(__name__)


class JWTBearer(HTTPBearer):
    def __init__(self):
        # missing header handled below so the response uses the error envelope
        super().__init__(auto_error=False)

    async def __call__(self, request: Request) -> dict:
        credentials: HTTPAuthorizationCredentials = await super().__call__(request)
        if not credentials:
            raise UnauthorizedError("Access token is required")
        if credentials.scheme.lower() != "bearer":
            raise UnauthorizedError("Invalid authentication scheme")
        try:
            payload = verify_access_token(credentials.credentials)
        except TokenExpired:
            raise UnauthorizedError("Access token has expired")
        if payload is None:
            raise UnauthorizedError("Invalid access token")
        return payload


def require_roles(*roles: UserRole):
    allowed = {UserRole(role).value for role in roles}

    def dependency(payload: dict = Depends(JWTBearer())):
        if payload.get("role") not in allowed:
            logger.warning("role %s denied, requires one of %s", payload.get("role"), sorted(allowed))
            raise ForbiddenError()
        return payload

    return dependency


ADMIN_ONLY = (UserRole.ADMIN,)
FLOOR_STAFF = (UserRole.ADMIN, UserRole.STAFF)
ALL_STAFF = (UserRole.ADMIN, UserRole.STAFF, UserRole.KITCHEN)
