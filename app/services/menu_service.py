import logging
import math
from typing import List

from sqlalchemy.orm import Session

from crud.category_crud import category_crud
from crud.menu_crud import menu_crud
from model import Menu
from schemas.menu_schema import (
    CategoryWithMenusOut,
    MenuCreate,
    MenuOut,
    MenuPage,
    MenuUpdate,
    Pagination,
)
from utils.exceptions import ConflictError

logger = logging.getLogger(__name__)


class MenuService:
    def list_paginated(self, db: Session, page: int, limit: int) -> MenuPage:
        menus, total = menu_crud.paginate(db, page, limit)
        return MenuPage(
            menus=[MenuOut.model_validate(menu) for menu in menus],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=math.ceil(total / limit) if limit else 0,
            ),
        )

    def list_by_category(self, db: Session) -> List[CategoryWithMenusOut]:
        """Customer view: every category with its visible menus."""
        grouped = {}
        for menu in menu_crud.get_visible(db):
            grouped.setdefault(menu.category_id, []).append(menu)
        return [
            CategoryWithMenusOut(
                id=category.id,
                name=category.name,
                menus=[MenuOut.model_validate(menu) for menu in grouped.get(category.id, [])],
            )
            for category in category_crud.get_all(db)
        ]

    def get_menu(self, db: Session, menu_id: int) -> Menu:
        return menu_crud.get(db, menu_id)

    def _check_name(self, db: Session, name_th: str, menu_id=None):
        existing = menu_crud.get_by_name_th(db, name_th)
        if existing and existing.id != menu_id:
            raise ConflictError("Menu name already exists")

    def create_menu(self, db: Session, data: MenuCreate) -> Menu:
        category_crud.get(db, data.category_id)
        self._check_name(db, data.name_th)
        values = data.model_dump()
        values["name_en"] = values.get("name_en") or ""
        for flag, default in (("is_recommended", False), ("is_available", True), ("is_visible", True)):
            if values.get(flag) is None:
                values[flag] = default
        menu = menu_crud.create(db, values)
        logger.info("menu %s created", menu.id)
        return menu_crud.get(db, menu.id)

    def update_menu(self, db: Session, menu_id: int, data: MenuUpdate) -> Menu:
        menu = menu_crud.get(db, menu_id)
        values = data.model_dump(exclude_unset=True)
        # required columns cannot be cleared
        for key in ("name_th", "price", "category_id", "is_recommended", "is_available", "is_visible"):
            if key in values and values[key] is None:
                values.pop(key)
        if "name_en" in values and values["name_en"] is None:
            values["name_en"] = ""
        if "category_id" in values:
            category_crud.get(db, values["category_id"])
        if "name_th" in values:
            self._check_name(db, values["name_th"], menu.id)
        return menu_crud.update(db, menu, values)

    def delete_menu(self, db: Session, menu_id: int) -> None:
        menu = menu_crud.get(db, menu_id)
        menu_crud.soft_delete(db, menu)
        logger.info("menu %s soft deleted", menu_id)

    def toggle_availability(self, db: Session, menu_id: int) -> Menu:
        menu = menu_crud.get(db, menu_id)
        return menu_crud.update(db, menu, {"is_available": not menu.is_available})

    def toggle_visibility(self, db: Session, menu_id: int) -> Menu:
        menu = menu_crud.get(db, menu_id)
        return menu_crud.update(db, menu, {"is_visible": not menu.is_visible})
