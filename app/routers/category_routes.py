from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from schemas import ApiResponse
from schemas.menu_schema import CategoryCreate, CategoryOut, CategoryUpdate
from services import Services, get_services
from utils.auth.jwt_bearer import ADMIN_ONLY, require_roles
from utils.responses import ok

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=ApiResponse[List[CategoryOut]])
def list_categories(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.categories.list_categories(db))


@router.get("/{category_id}", response_model=ApiResponse[CategoryOut])
def get_category(category_id: int, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.categories.get_category(db, category_id))


@router.post(
    "",
    response_model=ApiResponse[CategoryOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*ADMIN_ONLY))],
)
def create_category(body: CategoryCreate, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.categories.create_category(db, body))


@router.put("/{category_id}", response_model=ApiResponse[CategoryOut], dependencies=[Depends(require_roles(*ADMIN_ONLY))])
def update_category(
    category_id: int, body: CategoryUpdate, db: Session = Depends(get_db), services: Services = Depends(get_services)
):
    return ok(services.categories.update_category(db, category_id, body))


@router.delete("/{category_id}", response_model=ApiResponse[None], dependencies=[Depends(require_roles(*ADMIN_ONLY))])
def delete_category(category_id: int, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    services.categories.delete_category(db, category_id)
    return ok(message="Category deleted successfully")
