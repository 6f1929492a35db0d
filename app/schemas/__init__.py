from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, model_serializer
from pydantic.alias_generators import to_camel


# Shared Pydantic base with ORM support (Pydantic v2); camelCase on the wire
class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    status: str = "success"
    data: Optional[T] = None
    message: Optional[str] = None

    @model_serializer(mode="wrap")
    def _drop_empty(self, handler):
        body = handler(self)
        return {key: value for key, value in body.items() if key == "status" or value is not None}


# Enums shared across schemas
class OrderStatus(str, Enum):
    PENDING = "PENDING"
    COOKING = "COOKING"
    READY = "READY"
    SERVED = "SERVED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class BillStatus(str, Enum):
    OPEN = "OPEN"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"
    KITCHEN = "KITCHEN"


# Allowed predecessor -> successor pairs for orders and order items.
# COMPLETED and CANCELLED are terminal.
ORDER_STATUS_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.COOKING, OrderStatus.CANCELLED}),
    OrderStatus.COOKING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.SERVED, OrderStatus.CANCELLED}),
    OrderStatus.SERVED: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# Orders the kitchen and staff dashboards still have to act on
ACTIVE_ORDER_STATUSES = (OrderStatus.PENDING, OrderStatus.COOKING, OrderStatus.READY)


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    current = OrderStatus(current)
    target = OrderStatus(target)
    if current == target:
        return True
    return target in ORDER_STATUS_TRANSITIONS[current]
