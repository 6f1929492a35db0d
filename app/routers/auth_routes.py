from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas import ApiResponse
from schemas.user_schema import CurrentUser, LoginOut, LoginRequest, LogoutRequest, RefreshOut, RefreshRequest
from services import Services, get_services
from utils.auth.jwt_bearer import JWTBearer
from utils.responses import ok

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=ApiResponse[LoginOut])
def login(body: LoginRequest, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.auth.login(db, body.username, body.password))


@router.post("/refresh", response_model=ApiResponse[RefreshOut])
def refresh(body: RefreshRequest, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.auth.refresh(db, body.refresh_token))


@router.post("/logout", response_model=ApiResponse[None])
def logout(body: LogoutRequest, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    services.auth.logout(db, body.refresh_token)
    return ok(message="Logged out successfully")


@router.get("/me", response_model=ApiResponse[CurrentUser])
def me(payload: dict = Depends(JWTBearer())):
    return ok(CurrentUser(user_id=payload["userId"], username=payload["username"], role=payload["role"]))
