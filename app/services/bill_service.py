import logging
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crud.bill_crud import bill_crud
from model import Order, Table
from schemas import BillStatus, OrderStatus
from schemas.bill_schema import BillItemOut, TableBillOut
from utils.exceptions import ConflictError, NotFoundError
from utils.helper import utcnow

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def line_total(item) -> Decimal:
    return Decimal(item.menu.price) * item.quantity


def calculate_bill(orders: Iterable[Order]) -> Tuple[Decimal, List[dict]]:
    """Flatten the items of ``orders`` and total them.

    Every item is listed, cancelled ones included, but only items whose
    status is not CANCELLED count towards the total.
    """
    total = ZERO
    items = []
    for order in orders:
        for item in order.items:
            subtotal = line_total(item)
            if item.status != OrderStatus.CANCELLED:
                total += subtotal
            items.append({
                "id": item.id,
                "menu_name": item.menu.name_th,
                "price": item.menu.price,
                "quantity": item.quantity,
                "status": item.status,
                "total": subtotal,
                "note": item.note or "",
            })
    return total, items


class BillService:
    def get_table_bill(self, db: Session, table_id: int) -> TableBillOut:
        bill = bill_crud.get_open_for_table(db, table_id)
        if bill is None:
            return TableBillOut(bill_id=None, table_id=table_id, items=[], total_amount=0)
        total, items = calculate_bill(bill.orders)
        return TableBillOut(
            bill_id=bill.id,
            table_id=table_id,
            items=[BillItemOut(**item) for item in items],
            total_amount=total,
        )

    def checkout_table(self, db: Session, table_id: int, payment_method: str = "CASH") -> dict:
        """Close the table's OPEN bill and free the table in one transaction."""
        try:
            bill = bill_crud.get_open_for_table(db, table_id, lock=True)
            if bill is None:
                raise NotFoundError("Active bill")

            total, _ = calculate_bill(bill.orders)
            now = utcnow()
            updated = bill_crud.close_if_open(
                db,
                bill.id,
                status=BillStatus.PAID,
                closed_at=now,
                updated_at=now,
                total_price=total,
                payment_method=payment_method or "CASH",
            )
            if updated == 0:
                raise ConflictError("Bill has already been paid")

            db.query(Table).filter(Table.id == table_id).update(
                {"is_occupied": False, "is_calling_staff": False}, synchronize_session="fetch"
            )
            db.commit()
        except (NotFoundError, ConflictError, SQLAlchemyError):
            db.rollback()
            raise

        logger.info("bill %s for table %s closed, total %s via %s", bill.id, table_id, total, payment_method)
        return {"message": "Bill closed successfully"}

    def recalculate(self, db: Session, bill_id: Optional[str]) -> Optional[Decimal]:
        """Recompute and stage a bill's total; the caller commits."""
        if not bill_id:
            return None
        bill = bill_crud.get_with_items(db, bill_id)
        # a paid total is fixed at checkout
        if bill is None or bill.status != BillStatus.OPEN:
            return None
        total, _ = calculate_bill(bill.orders)
        bill.total_price = total
        return total
