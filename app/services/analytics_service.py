import logging
import math
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from crud.bill_crud import bill_crud
from model import Bill, Menu, OrderItem
from schemas import BillStatus, OrderStatus
from schemas.analytics_schema import (
    DailyBillItemOut,
    DailyBillOut,
    HistoryBillOut,
    HistoryItemOut,
    HistoryOut,
    HistorySummary,
    SummaryOut,
    TopItem,
    TrendPoint,
)
from schemas.menu_schema import Pagination
from services.bill_service import calculate_bill, line_total
from utils.exceptions import ValidationError
from utils.helper import end_of_day, start_of_day, to_utc, utcnow

logger = logging.getLogger(__name__)

TREND_DAYS = 7
TOP_ITEMS = 5


class AnalyticsService:
    """Sales figures for the admin dashboard. Days are UTC calendar days."""

    def summary(self, db: Session, today: Optional[date] = None) -> SummaryOut:
        today = today or utcnow().date()
        day_start = start_of_day(today)

        today_total, today_count = (
            db.query(func.coalesce(func.sum(Bill.total_price), 0), func.count(Bill.id))
            .filter(Bill.status == BillStatus.PAID, Bill.closed_at >= day_start)
            .one()
        )

        first_day = today - timedelta(days=TREND_DAYS - 1)
        per_day = {first_day + timedelta(days=i): Decimal("0") for i in range(TREND_DAYS)}
        past = (
            db.query(Bill.closed_at, Bill.total_price)
            .filter(Bill.status == BillStatus.PAID, Bill.closed_at >= start_of_day(first_day))
            .all()
        )
        for closed_at, total_price in past:
            day = to_utc(closed_at).date()
            if day in per_day:
                per_day[day] += Decimal(total_price or 0)
        trend = [TrendPoint(name=day.strftime("%d/%m"), total=total) for day, total in per_day.items()]

        quantity = func.sum(OrderItem.quantity).label("quantity")
        grouped = (
            db.query(OrderItem.menu_id, quantity)
            .filter(OrderItem.status != OrderStatus.CANCELLED)
            .group_by(OrderItem.menu_id)
            .order_by(quantity.desc(), OrderItem.menu_id)
            .limit(TOP_ITEMS)
            .all()
        )
        names = dict(
            db.query(Menu.id, Menu.name_th).filter(Menu.id.in_([menu_id for menu_id, _ in grouped])).all()
        )
        top_items = [
            TopItem(name=names.get(menu_id) or f"Menu #{menu_id}", value=int(qty or 0))
            for menu_id, qty in grouped
        ]

        return SummaryOut(
            today_total=today_total or 0,
            today_count=today_count or 0,
            sales_trend=trend,
            top_items=top_items,
        )

    def daily_bills(self, db: Session, today: Optional[date] = None) -> List[DailyBillOut]:
        """Bills opened or closed today; unpaid bills show their live total."""
        day_start = start_of_day(today or utcnow().date())
        bills = (
            bill_crud.query_with_items(db)
            .filter(or_(Bill.created_at >= day_start, Bill.closed_at >= day_start))
            .order_by(Bill.updated_at.desc())
            .all()
        )
        rows = []
        for bill in bills:
            live_total, _ = calculate_bill(bill.orders)
            rows.append(DailyBillOut(
                id=bill.id,
                table_id=bill.table_id,
                status=bill.status,
                created_at=bill.created_at,
                updated_at=bill.updated_at,
                total_price=bill.total_price if bill.status == BillStatus.PAID else live_total,
                items=[
                    DailyBillItemOut(
                        id=item.id,
                        quantity=item.quantity,
                        menu_name=item.menu.name_th,
                        price=item.menu.price,
                        status=item.status,
                        note=item.note,
                    )
                    for order in bill.orders
                    for item in order.items
                ],
            ))
        return rows

    def bill_history(
        self,
        db: Session,
        start: Optional[date] = None,
        end: Optional[date] = None,
        page: int = 1,
        limit: int = 20,
    ) -> HistoryOut:
        today = utcnow().date()
        start = start or today.replace(day=1)
        end = end or today
        if start > end:
            raise ValidationError("startDate must not be after endDate")

        filters = (
            Bill.status == BillStatus.PAID,
            Bill.closed_at >= start_of_day(start),
            Bill.closed_at <= end_of_day(end),
        )
        total_sales, bill_count = (
            db.query(func.coalesce(func.sum(Bill.total_price), 0), func.count(Bill.id)).filter(*filters).one()
        )
        bills = (
            bill_crud.query_with_items(db)
            .filter(*filters)
            .order_by(Bill.closed_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        rows = []
        for bill in bills:
            items = [
                HistoryItemOut(
                    id=item.id,
                    name=item.menu.name_th,
                    price=item.menu.price,
                    quantity=item.quantity,
                    subtotal=0 if item.status == OrderStatus.CANCELLED else line_total(item),
                    status=item.status,
                    note=item.note,
                )
                for order in bill.orders
                for item in order.items
            ]
            rows.append(HistoryBillOut(
                id=bill.id,
                date=bill.closed_at,
                table_name=bill.table.name,
                total=bill.total_price,
                payment_method=bill.payment_method,
                items_count=len(items),
                items=items,
            ))

        return HistoryOut(
            summary=HistorySummary(total_sales=total_sales or 0, bill_count=bill_count),
            bills=rows,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=bill_count,
                total_pages=math.ceil(bill_count / limit),
            ),
        )
