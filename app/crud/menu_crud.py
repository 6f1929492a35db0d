from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from crud.base import CRUDBase
from model import Menu
from schemas.menu_schema import MenuCreate, MenuUpdate
from utils.helper import utcnow


class CRUDMenu(CRUDBase[Menu, MenuCreate, MenuUpdate]):
    def _query(self, db: Session):
        return db.query(Menu).options(joinedload(Menu.category)).filter(Menu.deleted_at.is_(None))

    def get_by_name_th(self, db: Session, name_th: str) -> Optional[Menu]:
        return self._query(db).filter(Menu.name_th == name_th).first()

    def get_many(self, db: Session, ids) -> List[Menu]:
        return db.query(Menu).filter(Menu.id.in_(list(ids))).all()

    def paginate(self, db: Session, page: int, limit: int) -> Tuple[List[Menu], int]:
        total = self._query(db).count()
        menus = (
            self._query(db)
            .order_by(Menu.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return menus, total

    def get_visible(self, db: Session) -> List[Menu]:
        return (
            self._query(db)
            .filter(Menu.is_visible.is_(True))
            .order_by(Menu.id)
            .all()
        )

    def soft_delete(self, db: Session, menu: Menu) -> Menu:
        menu.deleted_at = utcnow()
        db.commit()
        return menu


menu_crud = CRUDMenu(Menu)
