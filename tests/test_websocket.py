import pytest
from starlette.websockets import WebSocketDisconnect

from utils.auth.jwt_handler import create_access_token


def test_staff_socket_requires_token(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws/staff"):
            pass
    assert exc.value.code == 1008

    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/ws/staff?token=bad"):
            pass


def test_ping_pong(client, make_table):
    table = make_table()
    with client.websocket_connect(f"/ws/tables/{table.id}") as ws:
        ws.send_json({"action": "ping"})
        assert ws.receive_json() == {"event": "pong"}


def test_new_order_reaches_staff_and_table_room(client, make_table, make_menu):
    table = make_table()
    menu = make_menu("Curry", "80.00")
    token = create_access_token({"userId": 3, "username": "kitchen", "role": "KITCHEN"})

    with client.websocket_connect(f"/ws/staff?token={token}") as staff, \
            client.websocket_connect(f"/ws/tables/{table.id}") as room:
        resp = client.post("/api/v1/orders", json={"tableId": table.id, "items": [{"menuId": menu.id, "quantity": 1}]})
        assert resp.status_code == 201
        order_id = resp.json()["data"]["id"]

        message = staff.receive_json()
        assert message["event"] == "new_order"
        assert message["data"]["id"] == order_id
        assert message["data"]["items"][0]["menu"]["nameTH"] == "Curry"

        message = room.receive_json()
        assert message == {
            "event": "order_status_updated",
            "data": {"tableId": table.id, "orderId": order_id, "status": "PENDING"},
        }


def test_call_staff_is_pushed(client, make_table):
    table = make_table()
    token = create_access_token({"userId": 2, "username": "staff", "role": "STAFF"})
    with client.websocket_connect(f"/ws/staff?token={token}") as staff, \
            client.websocket_connect(f"/ws/tables/{table.id}") as room:
        client.patch(f"/api/v1/tables/{table.id}/call", json={"isCalling": True})

        message = staff.receive_json()
        assert message["event"] == "table_updated"
        assert message["data"]["isCallingStaff"] is True
        assert room.receive_json() == {"event": "table_updated", "data": {"id": table.id, "isCallingStaff": True}}
