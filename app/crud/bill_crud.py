from typing import Optional

from sqlalchemy.orm import Session, selectinload

from crud.base import CRUDBase
from model import Bill, Order, OrderItem
from schemas import BillStatus


class CRUDBill(CRUDBase[Bill, None, None]):
    @staticmethod
    def _with_items(query):
        return query.options(
            selectinload(Bill.table),
            selectinload(Bill.orders).selectinload(Order.items).selectinload(OrderItem.menu),
        )

    def get_open_for_table(self, db: Session, table_id: int, lock: bool = False) -> Optional[Bill]:
        query = db.query(Bill).filter(Bill.table_id == table_id, Bill.status == BillStatus.OPEN)
        if lock:
            query = query.with_for_update()
        return self._with_items(query).order_by(Bill.created_at.desc()).first()

    def get_with_items(self, db: Session, bill_id: str) -> Optional[Bill]:
        return self._with_items(db.query(Bill)).filter(Bill.id == bill_id).first()

    def close_if_open(self, db: Session, bill_id: str, **values) -> int:
        """Conditional close; returns the number of rows actually updated."""
        return (
            db.query(Bill)
            .filter(Bill.id == bill_id, Bill.status == BillStatus.OPEN)
            .update(values, synchronize_session="fetch")
        )

    def query_with_items(self, db: Session):
        return self._with_items(db.query(Bill))


bill_crud = CRUDBill(Bill, resource="Bill")
