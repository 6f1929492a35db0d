from typing import Optional

from sqlalchemy.orm import Session

from crud.base import CRUDBase
from model import User
from schemas.user_schema import UserCreate, UserUpdate
from utils.auth.jwt_handler import hash_password, verify_password


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    def get_by_username(self, db: Session, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    def create(self, db: Session, obj_in: UserCreate) -> User:
        new_user = User(
            username=obj_in.username,
            role=obj_in.role,
            password=hash_password(obj_in.password),
        )
        db.add(new_user)
        db.commit()
        db.refresh(new_user)
        return new_user

    def update(self, db: Session, db_obj: User, obj_in: UserUpdate) -> User:
        data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
        if "password" in data:
            data["password"] = hash_password(data["password"])
        return super().update(db, db_obj, data)

    def authenticate(self, db: Session, username: str, password: str) -> Optional[User]:
        user = self.get_by_username(db, username)
        if user and verify_password(password, user.password):
            return user
        # Return None so the caller can answer with one generic 401
        return None


user_crud = CRUDUser(User)
