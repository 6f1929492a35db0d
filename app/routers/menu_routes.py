from typing import List, Literal, Optional, Union

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_db
from schemas import ApiResponse
from schemas.menu_schema import CategoryWithMenusOut, MenuCreate, MenuOut, MenuPage, MenuUpdate
from services import Services, get_services
from utils.auth.jwt_bearer import ADMIN_ONLY, require_roles
from utils.config import settings
from utils.responses import ok

router = APIRouter(prefix="/menus", tags=["Menus"])

admin_only = [Depends(require_roles(*ADMIN_ONLY))]


# scope=all returns a flat paginated list for the admin panel,
# otherwise categories with their visible menus for customers
@router.get("", response_model=ApiResponse[Union[MenuPage, List[CategoryWithMenusOut]]])
def list_menus(
    scope: Optional[Literal["all"]] = Query(None),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    if scope == "all":
        limit = min(limit or settings.PAGINATION_DEFAULT_LIMIT, settings.PAGINATION_MAX_LIMIT)
        return ok(services.menus.list_paginated(db, page, limit))
    return ok(services.menus.list_by_category(db))


@router.get("/{menu_id}", response_model=ApiResponse[MenuOut])
def get_menu(menu_id: int, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.menus.get_menu(db, menu_id))


@router.post("", response_model=ApiResponse[MenuOut], status_code=status.HTTP_201_CREATED, dependencies=admin_only)
def create_menu(body: MenuCreate, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.menus.create_menu(db, body))


@router.put("/{menu_id}", response_model=ApiResponse[MenuOut], dependencies=admin_only)
def update_menu(menu_id: int, body: MenuUpdate, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.menus.update_menu(db, menu_id, body))


@router.delete("/{menu_id}", response_model=ApiResponse[None], dependencies=admin_only)
def delete_menu(menu_id: int, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    services.menus.delete_menu(db, menu_id)
    return ok(message="Menu deleted successfully")


@router.patch("/{menu_id}/availability", response_model=ApiResponse[MenuOut], dependencies=admin_only)
def toggle_availability(menu_id: int, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.menus.toggle_availability(db, menu_id))


@router.patch("/{menu_id}/visibility", response_model=ApiResponse[MenuOut], dependencies=admin_only)
def toggle_visibility(menu_id: int, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.menus.toggle_visibility(db, menu_id))
