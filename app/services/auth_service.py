import logging
from typing import List

from sqlalchemy.orm import Session

from crud.token_crud import delete_refresh_token, find_valid_refresh_token, store_refresh_token
from crud.user_crud import user_crud
from model import User
from schemas.user_schema import LoginOut, RefreshOut, UserCreate, UserOut, UserUpdate
from utils.auth.jwt_handler import (
    TokenExpired,
    create_access_token,
    create_refresh_token,
    refresh_token_expiry,
    verify_refresh_token,
)
from utils.exceptions import ConflictError, UnauthorizedError, ValidationError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


def token_claims(user: User) -> dict:
    return {"userId": user.id, "username": user.username, "role": user.role.value}


class AuthService:
    def login(self, db: Session, username: str, password: str) -> LoginOut:
        user = user_crud.authenticate(db, username, password)
        if user is None:
            # unknown user and wrong password look the same to the caller
            logger.warning("failed login for %r", username)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        claims = token_claims(user)
        access_token = create_access_token(claims)
        refresh_token = create_refresh_token(claims)
        store_refresh_token(db, refresh_token, user.id, refresh_token_expiry())
        logger.info("user %s logged in", user.username)
        return LoginOut(access_token=access_token, refresh_token=refresh_token, user=UserOut.model_validate(user))

    def refresh(self, db: Session, refresh_token: str) -> RefreshOut:
        try:
            payload = verify_refresh_token(refresh_token)
        except TokenExpired:
            raise UnauthorizedError("Refresh token expired")
        if payload is None:
            raise UnauthorizedError("Invalid refresh token")
        if find_valid_refresh_token(db, refresh_token, payload.get("userId")) is None:
            raise UnauthorizedError("Invalid or expired refresh token")

        claims = {key: payload[key] for key in ("userId", "username", "role")}
        return RefreshOut(access_token=create_access_token(claims))

    def logout(self, db: Session, refresh_token: str) -> None:
        delete_refresh_token(db, refresh_token)
        logger.info("refresh token revoked")


class UserService:
    def list_users(self, db: Session) -> List[User]:
        return user_crud.get_all(db)

    def get_user(self, db: Session, user_id: int) -> User:
        return user_crud.get(db, user_id)

    def create_user(self, db: Session, data: UserCreate) -> User:
        if user_crud.get_by_username(db, data.username):
            raise ConflictError("Username already exists")
        return user_crud.create(db, data)

    def update_user(self, db: Session, user_id: int, data: UserUpdate) -> User:
        user = user_crud.get(db, user_id)
        if data.username:
            existing = user_crud.get_by_username(db, data.username)
            if existing and existing.id != user.id:
                raise ConflictError("Username already exists")
        return user_crud.update(db, user, data)

    def delete_user(self, db: Session, user_id: int, current_user_id=None) -> None:
        if current_user_id is not None and user_id == current_user_id:
            raise ValidationError("You cannot delete your own account")
        user_crud.remove(db, user_id)
        logger.info("user %s deleted", user_id)
