from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas import ApiResponse
from schemas.setting_schema import RestaurantNameOut, RestaurantNameUpdate
from services import Services, get_services
from utils.auth.jwt_bearer import ADMIN_ONLY, require_roles
from utils.responses import ok

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("/name", response_model=ApiResponse[RestaurantNameOut])
def get_restaurant_name(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(RestaurantNameOut(name=services.settings.get_restaurant_name(db)))


@router.post("/name", response_model=ApiResponse[RestaurantNameOut], dependencies=[Depends(require_roles(*ADMIN_ONLY))])
def set_restaurant_name(
    body: RestaurantNameUpdate, db: Session = Depends(get_db), services: Services = Depends(get_services)
):
    name = services.settings.set_restaurant_name(db, body.name)
    return ok(RestaurantNameOut(name=name), message="Restaurant name updated")
