import logging
from decimal import Decimal
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crud.bill_crud import bill_crud
from crud.menu_crud import menu_crud
from crud.order_crud import order_crud, order_item_crud
from crud.table_crud import table_crud
from model import Bill, Order, OrderItem
from schemas import BillStatus, OrderStatus, can_transition
from schemas.order_schema import OrderCreate
from services.bill_service import BillService
from utils.exceptions import AppError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def check_transition(current: OrderStatus, target: OrderStatus) -> None:
    if not can_transition(current, target):
        raise ValidationError(
            f"Cannot transition from {OrderStatus(current).value} to {OrderStatus(target).value}"
        )


class OrderService:
    def __init__(self, bill_service: BillService):
        self.bill_service = bill_service

    def create_order(self, db: Session, data: OrderCreate) -> Order:
        try:
            table = table_crud.get(db, data.table_id)
            if not table.is_available:
                raise ValidationError("Table is not available")

            # prices always come from the menu rows, never from the client
            menus = {menu.id: menu for menu in menu_crud.get_many(db, {i.menu_id for i in data.items})}
            order_total = Decimal("0")
            for item in data.items:
                menu = menus.get(item.menu_id)
                if menu is None or menu.deleted_at is not None:
                    raise NotFoundError(f"Menu with ID {item.menu_id}")
                if not menu.is_available:
                    raise ValidationError(f"Menu '{menu.name_th}' is not available")
                order_total += Decimal(menu.price) * item.quantity

            bill = bill_crud.get_open_for_table(db, table.id, lock=True)
            if bill is None:
                bill = Bill(table_id=table.id, status=BillStatus.OPEN, total_price=0)
                db.add(bill)
                db.flush()

            order = Order(
                table_id=table.id,
                bill_id=bill.id,
                status=OrderStatus.PENDING,
                total_price=order_total,
                items=[
                    OrderItem(
                        menu_id=item.menu_id,
                        quantity=item.quantity,
                        note=item.note or "",
                        status=OrderStatus.PENDING,
                    )
                    for item in data.items
                ],
            )
            db.add(order)
            bill.total_price = Decimal(bill.total_price or 0) + order_total
            table.is_occupied = True
            db.commit()
        except (AppError, SQLAlchemyError):
            db.rollback()
            raise

        logger.info("order %s created for table %s, total %s", order.id, data.table_id, order_total)
        return order_crud.get(db, order.id)

    def get_active_orders(self, db: Session) -> List[Order]:
        return order_crud.get_active(db)

    def update_order_status(self, db: Session, order_id: int, status: OrderStatus) -> Order:
        order = order_crud.get(db, order_id)
        check_transition(order.status, status)
        if order.status == status:
            return order

        order.status = status
        # items only follow when their own transition allows it; items that
        # are further along or already terminal keep their status
        for item in order.items:
            if item.status != status and can_transition(item.status, status):
                item.status = status
        self.bill_service.recalculate(db, order.bill_id)
        db.commit()
        logger.info("order %s moved to %s", order_id, status.value)
        return order_crud.get(db, order_id)

    def update_order_item_status(self, db: Session, item_id: int, status: OrderStatus) -> OrderItem:
        item = order_item_crud.get(db, item_id)
        check_transition(item.status, status)
        if item.status == status:
            return item

        item.status = status
        self.bill_service.recalculate(db, item.order.bill_id)
        db.commit()
        logger.info("order item %s moved to %s", item_id, status.value)
        return order_item_crud.get(db, item_id)

    def get_table_orders(self, db: Session, table_id: int) -> List[Order]:
        """Orders on the table's current OPEN bill, newest first."""
        table_crud.get(db, table_id)
        bill = bill_crud.get_open_for_table(db, table_id)
        if bill is None:
            return []
        return order_crud.get_for_bill(db, bill.id)
