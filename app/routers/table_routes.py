from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from schemas import ApiResponse
from schemas.order_schema import OrderOut
from schemas.table_schema import (
    CallStaffUpdate,
    TableAvailabilityUpdate,
    TableCreate,
    TableDetailsOut,
    TableOut,
    TableStatusOut,
    TableUpdate,
)
from services import Services, get_services
from utils.auth.jwt_bearer import ADMIN_ONLY, FLOOR_STAFF, require_roles
from utils.responses import ok
from utils.ws_manager import ws_manager

router = APIRouter(prefix="/tables", tags=["Tables"])

admin_only = [Depends(require_roles(*ADMIN_ONLY))]
floor_staff = [Depends(require_roles(*FLOOR_STAFF))]


@router.get("", response_model=ApiResponse[List[TableOut]], dependencies=floor_staff)
def list_tables(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.tables.list_tables(db))


@router.get("/status", response_model=ApiResponse[List[TableStatusOut]])
def get_tables_status(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.tables.get_tables_status(db))


@router.get("/{table_id}", response_model=ApiResponse[TableOut])
def get_table(table_id: int, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.tables.get_table(db, table_id))


@router.get("/{table_id}/details", response_model=ApiResponse[TableDetailsOut])
def get_table_details(table_id: int, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.tables.get_table_details(db, table_id))


# customer order history for the current bill
@router.get("/{table_id}/orders", response_model=ApiResponse[List[OrderOut]])
def get_table_orders(table_id: int, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.orders.get_table_orders(db, table_id))


@router.post("", response_model=ApiResponse[TableOut], status_code=status.HTTP_201_CREATED, dependencies=admin_only)
def create_table(body: TableCreate, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.tables.create_table(db, body))


@router.put("/{table_id}", response_model=ApiResponse[TableOut], dependencies=admin_only)
def update_table(
    table_id: int, body: TableUpdate, db: Session = Depends(get_db), services: Services = Depends(get_services)
):
    return ok(services.tables.update_table(db, table_id, body))


@router.delete("/{table_id}", response_model=ApiResponse[None], dependencies=admin_only)
def delete_table(table_id: int, db: Session = Depends(get_db), services: Services = Depends(get_services)):
    services.tables.delete_table(db, table_id)
    return ok(message="Table deleted successfully")


@router.patch("/{table_id}/availability", response_model=ApiResponse[TableOut], dependencies=floor_staff)
def set_availability(
    table_id: int,
    body: TableAvailabilityUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    table = TableOut.model_validate(services.tables.set_availability(db, table_id, body.is_available))
    background_tasks.add_task(
        ws_manager.notify,
        "table_updated",
        table,
        table_id=table_id,
        room_data={"id": table_id, "isAvailable": table.is_available},
    )
    return ok(table)


@router.patch("/{table_id}/call", response_model=ApiResponse[TableOut])
def call_staff(
    table_id: int,
    body: CallStaffUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    table = TableOut.model_validate(services.tables.set_call_staff(db, table_id, body.is_calling))
    background_tasks.add_task(
        ws_manager.notify,
        "table_updated",
        table,
        table_id=table_id,
        room_data={"id": table_id, "isCallingStaff": table.is_calling_staff},
    )
    return ok(table)


@router.post("/{table_id}/close", response_model=ApiResponse[TableOut], dependencies=floor_staff)
def close_table(
    table_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    table = TableOut.model_validate(services.tables.close_table(db, table_id))
    background_tasks.add_task(
        ws_manager.notify,
        "table_updated",
        table,
        table_id=table_id,
        room_data={"id": table_id, "isOccupied": False, "isAvailable": False},
    )
    return ok(table, message="Table and bill closed successfully")
