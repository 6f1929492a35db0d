from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from utils.coercion import parse_bool
from utils.sanitize import strip_html

from . import ORMModel, OrderStatus


class TableBase(ORMModel):
    name: str = Field(..., min_length=1, max_length=50)

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, v):
        return strip_html(v)


class TableCreate(TableBase):
    pass


class TableUpdate(TableBase):
    pass


class TableAvailabilityUpdate(ORMModel):
    is_available: bool

    @field_validator("is_available", mode="before")
    @classmethod
    def coerce_bool(cls, v):
        return parse_bool(v)


class CallStaffUpdate(ORMModel):
    is_calling: bool

    @field_validator("is_calling", mode="before")
    @classmethod
    def coerce_bool(cls, v):
        return parse_bool(v)


class TableOut(ORMModel):
    id: int
    name: str
    qr_code: Optional[str] = None
    is_occupied: bool
    is_available: bool
    is_calling_staff: bool
    created_at: Optional[datetime] = None


# Staff dashboard row
class TableStatusOut(ORMModel):
    id: int
    name: str
    is_occupied: bool
    total_amount: float
    active_orders: int
    is_available: bool
    is_calling_staff: bool
    ready_order_count: int


class TableItemOut(ORMModel):
    id: int
    order_id: int
    menu_name: str
    price: float
    quantity: int
    total: float
    status: OrderStatus
    note: Optional[str] = None


class TableDetailsOut(TableOut):
    items: List[TableItemOut] = []
