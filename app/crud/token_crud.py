from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from model import RefreshToken
from utils.helper import to_utc, utcnow


def store_refresh_token(db: Session, token: str, user_id: int, expires_at: datetime) -> RefreshToken:
    rt = RefreshToken(token=token, user_id=user_id, expires_at=expires_at)
    db.add(rt)
    db.commit()
    db.refresh(rt)
    return rt


def find_valid_refresh_token(db: Session, token: str, user_id: int) -> Optional[RefreshToken]:
    """Stored token for the user, or ``None``; an expired row is deleted on sight."""
    rt = (
        db.query(RefreshToken)
        .filter(RefreshToken.token == token, RefreshToken.user_id == user_id)
        .first()
    )
    if rt is None:
        return None
    if to_utc(rt.expires_at) < utcnow():
        db.delete(rt)
        db.commit()
        return None
    return rt


def delete_refresh_token(db: Session, token: str) -> int:
    deleted = db.query(RefreshToken).filter(RefreshToken.token == token).delete()
    db.commit()
    return deleted
