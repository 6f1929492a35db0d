from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from schemas import ApiResponse
from schemas.order_schema import OrderCreate, OrderItemOut, OrderOut, OrderStatusUpdate
from services import Services, get_services
from utils.auth.jwt_bearer import ALL_STAFF, require_roles
from utils.responses import ok
from utils.ws_manager import table_room, ws_manager

router = APIRouter(prefix="/orders", tags=["Orders"])

all_staff = [Depends(require_roles(*ALL_STAFF))]


@router.post("", response_model=ApiResponse[OrderOut], status_code=status.HTTP_201_CREATED)
def create_order(
    body: OrderCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    order = OrderOut.model_validate(services.orders.create_order(db, body))
    background_tasks.add_task(ws_manager.broadcast_staff, "new_order", order)
    background_tasks.add_task(
        ws_manager.broadcast_room,
        table_room(order.table_id),
        "order_status_updated",
        {"tableId": order.table_id, "orderId": order.id, "status": order.status},
    )
    return ok(order)


@router.get("/active", response_model=ApiResponse[List[OrderOut]], dependencies=all_staff)
def get_active_orders(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.orders.get_active_orders(db))


@router.patch("/{order_id}/status", response_model=ApiResponse[OrderOut], dependencies=all_staff)
def update_order_status(
    order_id: int,
    body: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    order = OrderOut.model_validate(services.orders.update_order_status(db, order_id, body.status))
    background_tasks.add_task(
        ws_manager.notify,
        "order_status_updated",
        order,
        table_id=order.table_id,
        room_data={"tableId": order.table_id, "orderId": order.id, "status": order.status},
    )
    return ok(order)


@router.patch("/items/{item_id}/status", response_model=ApiResponse[OrderItemOut], dependencies=all_staff)
def update_order_item_status(
    item_id: int,
    body: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    item = services.orders.update_order_item_status(db, item_id, body.status)
    order = item.order
    payload = {
        "id": item.id,
        "orderId": item.order_id,
        "status": item.status,
        "menuName": item.menu.name_th,
        "tableName": order.table.name if order.table else "",
        "tableId": order.table_id,
        "quantity": item.quantity,
        "note": item.note,
        "createdAt": order.created_at,
    }
    background_tasks.add_task(
        ws_manager.notify,
        "item_status_updated",
        payload,
        table_id=order.table_id,
        room_data={"itemId": item.id, "orderId": item.order_id, "status": item.status},
    )
    return ok(OrderItemOut.model_validate(item))
