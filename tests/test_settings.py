def test_default_restaurant_name(client):
    resp = client.get("/api/v1/settings/name")
    assert resp.json() == {"status": "success", "data": {"name": "Restaurant"}}


def test_update_restaurant_name(client, admin_headers):
    resp = client.post("/api/v1/settings/name", json={"name": "<b>Baan</b> Thai"}, headers=admin_headers)
    assert resp.json() == {"status": "success", "data": {"name": "Baan Thai"}, "message": "Restaurant name updated"}

    resp = client.post("/api/v1/settings/name", json={"name": "Other"}, headers=admin_headers)
    assert resp.status_code == 200
    assert client.get("/api/v1/settings/name").json()["data"]["name"] == "Other"


def test_update_restaurant_name_validation(client, admin_headers, staff_headers):
    assert client.post("/api/v1/settings/name", json={"name": ""}, headers=admin_headers).status_code == 400
    assert client.post("/api/v1/settings/name", json={"name": "X"}, headers=staff_headers).status_code == 403
