import logging
from decimal import Decimal
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crud.bill_crud import bill_crud
from crud.table_crud import table_crud
from model import Table
from schemas import BillStatus, OrderStatus
from schemas.table_schema import (
    TableCreate,
    TableDetailsOut,
    TableItemOut,
    TableOut,
    TableStatusOut,
    TableUpdate,
)
from services.bill_service import calculate_bill, line_total
from utils.config import settings
from utils.exceptions import AppError, ConflictError, ValidationError
from utils.helper import utcnow

logger = logging.getLogger(__name__)

# item states a table can be closed with
CLOSABLE_ITEM_STATUSES = (OrderStatus.SERVED, OrderStatus.COMPLETED, OrderStatus.CANCELLED)


def qr_code_url(table_id: int) -> str:
    return f"{settings.CLIENT_URL.rstrip('/')}/order?tableId={table_id}"


class TableService:
    def list_tables(self, db: Session) -> List[Table]:
        return table_crud.get_all(db)

    def get_table(self, db: Session, table_id: int) -> Table:
        return table_crud.get(db, table_id)

    def create_table(self, db: Session, data: TableCreate) -> Table:
        if table_crud.get_by_name(db, data.name):
            raise ConflictError("Table name already exists")
        table = table_crud.create(db, {"name": data.name, "qr_code": ""})
        # the QR code needs the generated id
        return table_crud.update(db, table, {"qr_code": qr_code_url(table.id)})

    def update_table(self, db: Session, table_id: int, data: TableUpdate) -> Table:
        table = table_crud.get(db, table_id)
        existing = table_crud.get_by_name(db, data.name)
        if existing and existing.id != table.id:
            raise ConflictError("Table name already exists")
        return table_crud.update(db, table, {"name": data.name})

    def delete_table(self, db: Session, table_id: int) -> None:
        table = table_crud.get(db, table_id)
        if table.is_occupied:
            raise ConflictError("Cannot delete occupied table")
        table_crud.soft_delete(db, table)
        logger.info("table %s soft deleted", table_id)

    def set_availability(self, db: Session, table_id: int, is_available: bool) -> Table:
        table = table_crud.get(db, table_id)
        return table_crud.update(db, table, {"is_available": is_available})

    def set_call_staff(self, db: Session, table_id: int, is_calling: bool) -> Table:
        table = table_crud.get(db, table_id)
        return table_crud.update(db, table, {"is_calling_staff": is_calling})

    def get_tables_status(self, db: Session) -> List[TableStatusOut]:
        rows = []
        for table in table_crud.get_with_open_orders(db):
            orders = table_crud.open_orders(table)
            total = Decimal("0")
            ready = 0
            for order in orders:
                for item in order.items:
                    if item.status == OrderStatus.READY:
                        ready += 1
                    if item.status != OrderStatus.CANCELLED:
                        total += line_total(item)
            rows.append(TableStatusOut(
                id=table.id,
                name=table.name,
                is_occupied=table.is_occupied,
                total_amount=total,
                active_orders=len(orders),
                is_available=table.is_available,
                is_calling_staff=table.is_calling_staff,
                ready_order_count=ready,
            ))
        return rows

    def get_table_details(self, db: Session, table_id: int) -> TableDetailsOut:
        table = table_crud.get_with_open_orders(db, table_id)
        if table is None:
            table_crud.get(db, table_id)
        items = [
            TableItemOut(
                id=item.id,
                order_id=order.id,
                menu_name=item.menu.name_th,
                price=item.menu.price,
                quantity=item.quantity,
                total=line_total(item),
                status=item.status,
                note=item.note,
            )
            for order in table_crud.open_orders(table)
            for item in order.items
        ]
        return TableDetailsOut(**TableOut.model_validate(table).model_dump(), items=items)

    def close_table(self, db: Session, table_id: int) -> Table:
        """Settle everything on the table as cash and switch the table off."""
        table = table_crud.get_with_open_orders(db, table_id)
        if table is None:
            table_crud.get(db, table_id)
        orders = table_crud.open_orders(table)
        if any(item.status not in CLOSABLE_ITEM_STATUSES for order in orders for item in order.items):
            raise ValidationError("Cannot close table. Some items are not yet SERVED or COMPLETED.")

        try:
            bill = bill_crud.get_open_for_table(db, table_id, lock=True)
            if bill is not None:
                total, _ = calculate_bill(bill.orders)
                now = utcnow()
                bill_crud.close_if_open(
                    db,
                    bill.id,
                    status=BillStatus.PAID,
                    closed_at=now,
                    updated_at=now,
                    total_price=total,
                    payment_method="CASH",
                )
            for order in orders:
                for item in order.items:
                    if item.status != OrderStatus.CANCELLED:
                        item.status = OrderStatus.COMPLETED
                if order.status != OrderStatus.CANCELLED:
                    order.status = OrderStatus.COMPLETED
            table.is_occupied = False
            table.is_calling_staff = False
            table.is_available = False
            db.commit()
        except (AppError, SQLAlchemyError):
            db.rollback()
            raise

        logger.info("table %s closed and switched off", table_id)
        db.refresh(table)
        return table
