from typing import Optional

from sqlalchemy.orm import Session

from crud.base import CRUDBase
from model import Category, Menu
from schemas.menu_schema import CategoryCreate, CategoryUpdate


class CRUDCategory(CRUDBase[Category, CategoryCreate, CategoryUpdate]):
    def get_by_name(self, db: Session, name: str) -> Optional[Category]:
        return db.query(Category).filter(Category.name == name).first()

    def count_menus(self, db: Session, category_id: int) -> int:
        return (
            db.query(Menu)
            .filter(Menu.category_id == category_id, Menu.deleted_at.is_(None))
            .count()
        )

    def detach_deleted_menus(self, db: Session, category_id: int) -> int:
        """Unlink soft-deleted menus so the category row can go; not committed."""
        return (
            db.query(Menu)
            .filter(Menu.category_id == category_id, Menu.deleted_at.isnot(None))
            .update({"category_id": None}, synchronize_session=False)
        )


category_crud = CRUDCategory(Category)
