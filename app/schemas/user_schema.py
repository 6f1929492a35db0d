from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from utils.sanitize import strip_html

from . import ORMModel, UserRole


class LoginRequest(ORMModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RefreshRequest(ORMModel):
    refresh_token: str = Field(..., min_length=1)


class LogoutRequest(RefreshRequest):
    pass


class UserBase(ORMModel):
    username: str = Field(..., min_length=3, max_length=50)
    role: UserRole = UserRole.STAFF

    @field_validator("username", mode="before")
    @classmethod
    def clean_username(cls, v):
        return strip_html(v)


class UserCreate(UserBase):
    password: str = Field(..., min_length=8, max_length=255)


class UserUpdate(ORMModel):
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    password: Optional[str] = Field(None, min_length=8, max_length=255)
    role: Optional[UserRole] = None

    @field_validator("username", mode="before")
    @classmethod
    def clean_username(cls, v):
        return strip_html(v)


# password is never part of any response model
class UserOut(ORMModel):
    id: int
    username: str
    role: UserRole
    created_at: Optional[datetime] = None


class LoginOut(ORMModel):
    access_token: str
    refresh_token: str
    user: UserOut


class RefreshOut(ORMModel):
    access_token: str


class CurrentUser(ORMModel):
    user_id: int
    username: str
    role: UserRole
