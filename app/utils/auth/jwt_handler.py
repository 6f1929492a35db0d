import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from utils.config import settings


def _encode(payload: dict, secret: str, minutes: int, token_type: str) -> str:
    to_encode = payload.copy()
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=minutes)
    to_encode.update({
        "exp": expire,
        "iat": now,
        "jti": str(uuid.uuid4()),
        "type": token_type,
    })
    return jwt.encode(to_encode, secret, algorithm=settings.ALGORITHM)


def create_access_token(payload: dict) -> str:
    return _encode(payload, settings.JWT_SECRET, settings.ACCESS_TOKEN_EXPIRE_MINUTES, "access")


def create_refresh_token(payload: dict) -> str:
    return _encode(payload, settings.REFRESH_TOKEN_SECRET, settings.REFRESH_TOKEN_EXPIRE_MINUTES, "refresh")


def refresh_token_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES)


class TokenExpired(Exception):
    pass


def _decode(token: str, secret: str, token_type: str) -> Optional[dict]:
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError:
        return None
    if payload.get("type") != token_type:
        return None
    return payload


def verify_access_token(token: str) -> Optional[dict]:
    """Decoded access-token claims, ``None`` when invalid; raises ``TokenExpired``."""
    return _decode(token, settings.JWT_SECRET, "access")


def verify_refresh_token(token: str) -> Optional[dict]:
    return _decode(token, settings.REFRESH_TOKEN_SECRET, "refresh")


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str):
    return pwd_context.hash(password)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)
