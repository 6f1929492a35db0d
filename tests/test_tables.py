from decimal import Decimal

from model import Bill, Table
from schemas import BillStatus, OrderStatus
from schemas.table_schema import TableCreate


def test_create_table_assigns_qr_code(client, admin_headers):
    resp = client.post("/api/v1/tables", json={"name": "T9"}, headers=admin_headers)
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["name"] == "T9"
    assert data["qrCode"] == f"http://localhost:3000/order?tableId={data['id']}"
    assert data["isAvailable"] is True
    assert data["isOccupied"] is False


def test_duplicate_table_name_conflicts(client, admin_headers, make_table):
    make_table("T1")
    resp = client.post("/api/v1/tables", json={"name": "T1"}, headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json() == {"status": "error", "message": "Table name already exists", "code": "CONFLICT"}


def test_table_names_are_case_sensitive(db, services, make_table):
    make_table("T1")
    assert services.tables.create_table(db, TableCreate(name="t1")).name == "t1"


def test_only_admins_manage_tables(client, staff_headers, admin_headers, make_table):
    assert client.post("/api/v1/tables", json={"name": "X"}, headers=staff_headers).status_code == 403
    table = make_table()
    resp = client.put(f"/api/v1/tables/{table.id}", json={"name": "Patio"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Patio"


def test_rename_to_taken_name_conflicts(client, admin_headers, make_table):
    make_table("T1")
    other = make_table("T2")
    resp = client.put(f"/api/v1/tables/{other.id}", json={"name": "T1"}, headers=admin_headers)
    assert resp.status_code == 409


def test_delete_occupied_table_conflicts(client, admin_headers, make_table):
    table = make_table(is_occupied=True)
    resp = client.delete(f"/api/v1/tables/{table.id}", headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json()["message"] == "Cannot delete occupied table"


def test_soft_deleted_table_disappears_and_frees_name(client, db, admin_headers, make_table):
    table = make_table("T1")
    resp = client.delete(f"/api/v1/tables/{table.id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Table deleted successfully"

    assert client.get(f"/api/v1/tables/{table.id}").status_code == 404
    assert client.get("/api/v1/tables", headers=admin_headers).json()["data"] == []
    # the row is still there
    assert db.query(Table).count() == 1

    resp = client.post("/api/v1/tables", json={"name": "T1"}, headers=admin_headers)
    assert resp.status_code == 201


def test_list_tables_sorted_by_name(client, staff_headers, make_table):
    make_table("T2")
    make_table("A1")
    resp = client.get("/api/v1/tables", headers=staff_headers)
    assert [t["name"] for t in resp.json()["data"]] == ["A1", "T2"]


def test_availability_and_call_staff(client, staff_headers, make_table):
    table = make_table()
    resp = client.patch(f"/api/v1/tables/{table.id}/availability", json={"isAvailable": "false"}, headers=staff_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["isAvailable"] is False

    # customers can call staff without logging in
    resp = client.patch(f"/api/v1/tables/{table.id}/call", json={"isCalling": True})
    assert resp.status_code == 200
    assert resp.json()["data"]["isCallingStaff"] is True

    resp = client.patch(f"/api/v1/tables/{table.id}/call", json={"isCalling": "maybe"})
    assert resp.status_code == 400


def test_tables_status_overview(client, db, services, make_table, make_menu, place_order):
    busy = make_table("T1")
    make_table("T2")
    order = place_order(busy, (make_menu("A", "50.00"), 2), (make_menu("B", "60.00"), 1))
    services.orders.update_order_item_status(db, order.items[1].id, OrderStatus.CANCELLED)
    services.orders.update_order_item_status(db, order.items[0].id, OrderStatus.COOKING)
    services.orders.update_order_item_status(db, order.items[0].id, OrderStatus.READY)

    resp = client.get("/api/v1/tables/status")
    assert resp.status_code == 200
    rows = {row["name"]: row for row in resp.json()["data"]}
    assert rows["T1"] == {
        "id": busy.id,
        "name": "T1",
        "isOccupied": True,
        "totalAmount": 100,
        "activeOrders": 1,
        "isAvailable": True,
        "isCallingStaff": False,
        "readyOrderCount": 1,
    }
    assert rows["T2"]["activeOrders"] == 0
    assert rows["T2"]["totalAmount"] == 0


def test_table_details_lists_items(client, make_table, make_menu, place_order):
    table = make_table()
    place_order(table, (make_menu("Khao Pad", "55.00"), 2))

    resp = client.get(f"/api/v1/tables/{table.id}/details")
    data = resp.json()["data"]
    assert data["name"] == table.name
    assert len(data["items"]) == 1
    item = data["items"][0]
    assert item["menuName"] == "Khao Pad"
    assert item["price"] == 55
    assert item["total"] == 110
    assert item["status"] == "PENDING"

    assert client.get("/api/v1/tables/999/details").status_code == 404


def test_close_table_refuses_unserved_items(client, db, staff_headers, make_table, make_menu, place_order):
    table = make_table()
    place_order(table, (make_menu(), 1))
    resp = client.post(f"/api/v1/tables/{table.id}/close", headers=staff_headers)
    assert resp.status_code == 400
    assert "not yet SERVED" in resp.json()["message"]
    assert db.query(Bill).one().status == BillStatus.OPEN


def test_close_table_settles_bill(client, db, services, staff_headers, make_table, make_menu, place_order):
    table = make_table()
    order = place_order(table, (make_menu("A", "40.00"), 1), (make_menu("B", "25.00"), 2))
    for status in (OrderStatus.COOKING, OrderStatus.READY, OrderStatus.SERVED):
        services.orders.update_order_status(db, order.id, status)
    services.orders.update_order_item_status(db, order.items[1].id, OrderStatus.CANCELLED)
    cancelled = place_order(table, (make_menu("C", "99.00"), 1))
    services.orders.update_order_status(db, cancelled.id, OrderStatus.CANCELLED)
    services.tables.set_call_staff(db, table.id, True)

    resp = client.post(f"/api/v1/tables/{table.id}/close", headers=staff_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Table and bill closed successfully"
    assert body["data"]["isOccupied"] is False
    assert body["data"]["isAvailable"] is False
    assert body["data"]["isCallingStaff"] is False

    db.expire_all()
    bill = db.query(Bill).one()
    assert bill.status == BillStatus.PAID
    assert bill.payment_method == "CASH"
    assert bill.closed_at is not None
    assert bill.total_price == Decimal("40")
    orders = {o.id: o for o in bill.orders}
    assert orders[cancelled.id].status == OrderStatus.CANCELLED
    settled = [o for o in orders.values() if o.id != cancelled.id][0]
    assert settled.status == OrderStatus.COMPLETED
    assert [item.status for item in settled.items] == [OrderStatus.COMPLETED, OrderStatus.CANCELLED]


def test_close_table_requires_floor_staff(client, kitchen_headers, make_table):
    table = make_table()
    assert client.post(f"/api/v1/tables/{table.id}/close", headers=kitchen_headers).status_code == 403
