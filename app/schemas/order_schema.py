from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from utils.coercion import parse_positive_int
from utils.sanitize import strip_html

from . import ORMModel, OrderStatus
from .menu_schema import MenuOut
from .table_schema import TableOut


class OrderItemCreate(ORMModel):
    menu_id: int
    quantity: int = Field(..., le=99)
    note: Optional[str] = Field(None, max_length=200)

    @field_validator("menu_id", "quantity", mode="before")
    @classmethod
    def coerce_positive(cls, v):
        return parse_positive_int(v)

    @field_validator("note", mode="before")
    @classmethod
    def clean_note(cls, v):
        return strip_html(v)


class OrderCreate(ORMModel):
    table_id: int
    items: List[OrderItemCreate] = Field(..., min_length=1, max_length=50)

    @field_validator("table_id", mode="before")
    @classmethod
    def coerce_table(cls, v):
        return parse_positive_int(v)


class OrderStatusUpdate(ORMModel):
    status: OrderStatus


class OrderItemOut(ORMModel):
    id: int
    order_id: int
    menu_id: int
    quantity: int
    note: Optional[str] = None
    status: OrderStatus
    menu: Optional[MenuOut] = None


class OrderOut(ORMModel):
    id: int
    table_id: int
    bill_id: Optional[str] = None
    status: OrderStatus
    total_price: float
    created_at: datetime
    table: Optional[TableOut] = None
    items: List[OrderItemOut] = []
