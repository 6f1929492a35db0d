from typing import Optional

from sqlalchemy.orm import Session, selectinload

from crud.base import CRUDBase
from model import Order, OrderItem, Table
from schemas import OrderStatus
from schemas.table_schema import TableCreate, TableUpdate
from utils.helper import utcnow


class CRUDTable(CRUDBase[Table, TableCreate, TableUpdate]):
    # soft-deleted tables are invisible everywhere
    def _query(self, db: Session):
        return db.query(Table).filter(Table.deleted_at.is_(None))

    def get_all(self, db: Session, skip=0, limit=None, filters=None, order_by=None):
        return super().get_all(db, skip=skip, limit=limit, filters=filters, order_by=order_by or Table.name)

    def get_by_name(self, db: Session, name: str) -> Optional[Table]:
        return self._query(db).filter(Table.name == name).first()

    def get_with_open_orders(self, db: Session, table_id: Optional[int] = None):
        """Tables with their not-yet-completed orders, items and menus loaded."""
        query = self._query(db).options(
            selectinload(Table.orders).selectinload(Order.items).selectinload(OrderItem.menu)
        )
        if table_id is not None:
            return query.filter(Table.id == table_id).first()
        return query.order_by(Table.name).all()

    @staticmethod
    def open_orders(table: Table):
        return [order for order in table.orders if order.status != OrderStatus.COMPLETED]

    def soft_delete(self, db: Session, table: Table) -> Table:
        table.deleted_at = utcnow()
        db.commit()
        return table


table_crud = CRUDTable(Table)
