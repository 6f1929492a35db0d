from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from crud.base import CRUDBase
from model import Order, OrderItem
from schemas import ACTIVE_ORDER_STATUSES


class CRUDOrder(CRUDBase[Order, None, None]):
    def _query(self, db: Session):
        return db.query(Order).options(
            selectinload(Order.table),
            selectinload(Order.items).selectinload(OrderItem.menu),
        )

    def get_active(self, db: Session) -> List[Order]:
        return (
            self._query(db)
            .filter(Order.status.in_(ACTIVE_ORDER_STATUSES), Order.items.any())
            .order_by(Order.created_at.asc(), Order.id.asc())
            .all()
        )

    def get_for_bill(self, db: Session, bill_id: str) -> List[Order]:
        return (
            self._query(db)
            .filter(Order.bill_id == bill_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )


class CRUDOrderItem(CRUDBase[OrderItem, None, None]):
    def _query(self, db: Session):
        return db.query(OrderItem).options(
            selectinload(OrderItem.menu),
            selectinload(OrderItem.order).selectinload(Order.table),
        )

    def get_for_order(self, db: Session, order_id: int) -> List[OrderItem]:
        return db.query(OrderItem).filter(OrderItem.order_id == order_id).order_by(OrderItem.id).all()


order_crud = CRUDOrder(Order)
order_item_crud = CRUDOrderItem(OrderItem, resource="Order item")
