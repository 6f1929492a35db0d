from datetime import date, timedelta

import pytest

from schemas import OrderStatus
from utils.exceptions import ValidationError
from utils.helper import utcnow


@pytest.fixture
def paid_bill(db, services, make_table, make_menu, place_order):
    table = make_table("T1")
    curry = make_menu("Curry", "80.00")
    tea = make_menu("Tea", "20.00")
    order = place_order(table, (curry, 2), (tea, 3))
    services.orders.update_order_item_status(db, order.items[1].id, OrderStatus.CANCELLED)
    services.bills.checkout_table(db, table.id)
    return table


def test_summary(db, services, paid_bill, make_table, make_menu, place_order):
    # an open bill does not count towards sales, but its items count as sold
    place_order(make_table("T2"), (make_menu("Rice", "10.00"), 1))

    summary = services.analytics.summary(db)
    assert summary.today_total == 160
    assert summary.today_count == 1
    assert len(summary.sales_trend) == 7
    assert summary.sales_trend[-1].name == utcnow().strftime("%d/%m")
    assert summary.sales_trend[-1].total == 160
    assert all(point.total == 0 for point in summary.sales_trend[:-1])
    assert [(item.name, item.value) for item in summary.top_items] == [("Curry", 2), ("Rice", 1)]


def test_summary_on_empty_database(db, services):
    summary = services.analytics.summary(db)
    assert summary.today_total == 0
    assert summary.today_count == 0
    assert summary.top_items == []


def test_daily_bills(db, services, paid_bill, make_table, make_menu, place_order):
    place_order(make_table("T2"), (make_menu("Rice", "10.00"), 4))

    rows = {row.status.value: row for row in services.analytics.daily_bills(db)}
    assert rows["PAID"].total_price == 160
    assert len(rows["PAID"].items) == 2
    assert rows["OPEN"].total_price == 40


def test_bill_history(db, services, paid_bill):
    history = services.analytics.bill_history(db)
    assert history.summary.total_sales == 160
    assert history.summary.bill_count == 1
    assert history.pagination.total_pages == 1
    bill = history.bills[0]
    assert bill.table_name == "T1"
    assert bill.payment_method == "CASH"
    assert bill.items_count == 2
    assert sorted(item.subtotal for item in bill.items) == [0, 160]

    yesterday = utcnow().date() - timedelta(days=1)
    assert services.analytics.bill_history(db, start=yesterday, end=yesterday).bills == []


def test_bill_history_rejects_inverted_range(db, services):
    with pytest.raises(ValidationError):
        services.analytics.bill_history(db, start=date(2024, 2, 1), end=date(2024, 1, 1))


def test_analytics_routes(client, admin_headers, staff_headers, paid_bill):
    resp = client.get("/api/v1/analytics/summary", headers=admin_headers)
    assert resp.status_code == 200
    assert set(resp.json()["data"]) == {"todayTotal", "todayCount", "salesTrend", "topItems"}

    resp = client.get("/api/v1/analytics/orders", headers=admin_headers)
    assert resp.json()["data"][0]["tableId"] == paid_bill.id

    resp = client.get("/api/v1/analytics/history", params={"startDate": "nope"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["errors"] == [{"field": "startDate", "message": "must be a date in YYYY-MM-DD format"}]

    resp = client.get(
        "/api/v1/analytics/history",
        params={"startDate": "2024-02-01", "endDate": "2024-01-01"},
        headers=admin_headers,
    )
    assert resp.status_code == 400

    assert client.get("/api/v1/analytics/summary", headers=staff_headers).status_code == 403
