from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from . import BillStatus, ORMModel, OrderStatus
from .menu_schema import Pagination


class TrendPoint(ORMModel):
    name: str
    total: float


class TopItem(ORMModel):
    name: str
    value: int


class SummaryOut(ORMModel):
    today_total: float
    today_count: int
    sales_trend: List[TrendPoint]
    top_items: List[TopItem]


class DailyBillItemOut(ORMModel):
    id: int
    quantity: int
    menu_name: str
    price: float
    status: OrderStatus
    note: Optional[str] = None


class DailyBillOut(ORMModel):
    id: str
    table_id: int
    status: BillStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    total_price: float
    items: List[DailyBillItemOut]


class HistoryItemOut(ORMModel):
    id: int
    name: str
    price: float
    quantity: int
    subtotal: float
    status: OrderStatus
    note: Optional[str] = None


class HistoryBillOut(ORMModel):
    id: str
    date: Optional[datetime] = None
    table_name: str
    total: float
    payment_method: Optional[str] = None
    items_count: int
    items: List[HistoryItemOut]


class HistorySummary(ORMModel):
    total_sales: float
    bill_count: int


class HistoryOut(ORMModel):
    summary: HistorySummary
    bills: List[HistoryBillOut]
    pagination: Pagination
