from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator

from utils.coercion import parse_positive_int
from utils.sanitize import strip_html

from . import ORMModel, OrderStatus


class CheckoutRequest(ORMModel):
    table_id: int
    payment_method: str = Field("CASH", min_length=1, max_length=30)

    @field_validator("table_id", mode="before")
    @classmethod
    def coerce_table(cls, v):
        return parse_positive_int(v)

    @field_validator("payment_method", mode="before")
    @classmethod
    def clean_method(cls, v):
        # an explicit null falls back to cash
        return strip_html(v) if v is not None else "CASH"


class BillItemOut(ORMModel):
    id: int
    menu_name: str
    price: float
    quantity: int
    status: OrderStatus
    total: float
    note: str = ""


class TableBillOut(ORMModel):
    bill_id: Optional[str] = None
    table_id: int
    items: List[BillItemOut] = []
    total_amount: float = 0
