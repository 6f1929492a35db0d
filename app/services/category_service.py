import logging
from typing import List

from sqlalchemy.orm import Session

from crud.category_crud import category_crud
from model import Category
from schemas.menu_schema import CategoryCreate, CategoryUpdate
from utils.exceptions import ConflictError

logger = logging.getLogger(__name__)


class CategoryService:
    def list_categories(self, db: Session) -> List[Category]:
        return category_crud.get_all(db)

    def get_category(self, db: Session, category_id: int) -> Category:
        return category_crud.get(db, category_id)

    def create_category(self, db: Session, data: CategoryCreate) -> Category:
        if category_crud.get_by_name(db, data.name):
            raise ConflictError("Category name already exists")
        return category_crud.create(db, data)

    def update_category(self, db: Session, category_id: int, data: CategoryUpdate) -> Category:
        category = category_crud.get(db, category_id)
        existing = category_crud.get_by_name(db, data.name)
        if existing and existing.id != category.id:
            raise ConflictError("Category name already exists")
        return category_crud.update(db, category, data)

    def delete_category(self, db: Session, category_id: int) -> None:
        category_crud.get(db, category_id)
        if category_crud.count_menus(db, category_id) > 0:
            raise ConflictError("Cannot delete category with existing menus")
        category_crud.detach_deleted_menus(db, category_id)
        category_crud.remove(db, category_id)
        logger.info("category %s deleted", category_id)
