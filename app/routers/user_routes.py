from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from schemas import ApiResponse
from schemas.user_schema import UserCreate, UserOut, UserUpdate
from services import Services, get_services
from utils.auth.jwt_bearer import ADMIN_ONLY, require_roles
from utils.responses import ok

router = APIRouter(prefix="/users", tags=["Users"], dependencies=[Depends(require_roles(*ADMIN_ONLY))])


@router.get("", response_model=ApiResponse[List[UserOut]])
def list_users(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.users.list_users(db))


@router.get("/{user_id}", response_model=ApiResponse[UserOut])
def get_user(user_id: int, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.users.get_user(db, user_id))


@router.post("", response_model=ApiResponse[UserOut], status_code=status.HTTP_201_CREATED)
def create_user(body: UserCreate, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.users.create_user(db, body))


@router.put("/{user_id}", response_model=ApiResponse[UserOut])
def update_user(
    user_id: int, body: UserUpdate, db: Session = Depends(get_db), services: Services = Depends(get_services)
):
    return ok(services.users.update_user(db, user_id, body))


@router.delete("/{user_id}", response_model=ApiResponse[None])
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
    current_user: dict = Depends(require_roles(*ADMIN_ONLY)),
):
    services.users.delete_user(db, user_id, current_user_id=current_user.get("userId"))
    return ok(message="User deleted successfully")
