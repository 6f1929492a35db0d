import pytest

from model import Menu
from schemas.menu_schema import MenuCreate, MenuUpdate
from utils.exceptions import ConflictError, NotFoundError


# ---------------- categories ----------------

def test_category_crud(client, admin_headers):
    resp = client.post("/api/v1/categories", json={"name": "Drinks"}, headers=admin_headers)
    assert resp.status_code == 201
    category_id = resp.json()["data"]["id"]

    resp = client.put(f"/api/v1/categories/{category_id}", json={"name": "Beverages"}, headers=admin_headers)
    assert resp.json()["data"] == {"id": category_id, "name": "Beverages"}

    assert client.get("/api/v1/categories").json()["data"] == [{"id": category_id, "name": "Beverages"}]

    resp = client.delete(f"/api/v1/categories/{category_id}", headers=admin_headers)
    assert resp.json() == {"status": "success", "message": "Category deleted successfully"}
    assert client.get(f"/api/v1/categories/{category_id}").status_code == 404


def test_duplicate_category_conflicts(client, admin_headers, make_category):
    make_category("Drinks")
    resp = client.post("/api/v1/categories", json={"name": "Drinks"}, headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json()["message"] == "Category name already exists"


def test_category_with_menus_cannot_be_deleted(client, admin_headers, make_category, make_menu):
    category = make_category()
    make_menu(category=category)
    resp = client.delete(f"/api/v1/categories/{category.id}", headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json()["message"] == "Cannot delete category with existing menus"


def test_category_with_only_deleted_menus_can_be_deleted(db, services, make_category, make_menu):
    category = make_category()
    menu = make_menu(category=category)
    services.menus.delete_menu(db, menu.id)
    services.categories.delete_category(db, category.id)

    db.expire_all()
    # the soft-deleted menu survives for order history
    assert db.get(Menu, menu.id).category_id is None
    with pytest.raises(NotFoundError):
        services.categories.get_category(db, category.id)


def test_category_writes_need_admin(client, staff_headers):
    assert client.post("/api/v1/categories", json={"name": "X"}, headers=staff_headers).status_code == 403
    assert client.post("/api/v1/categories", json={"name": "X"}).status_code == 401


# ---------------- menus ----------------

def test_create_menu_via_route(client, admin_headers, make_category):
    category = make_category()
    resp = client.post(
        "/api/v1/menus",
        json={"nameTH": "<i>Tom Yum</i>", "price": "89.999", "categoryId": str(category.id)},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["nameTH"] == "Tom Yum"
    assert data["nameEN"] == ""
    assert data["price"] == 90.0
    assert data["isAvailable"] is True
    assert data["isVisible"] is True
    assert data["isRecommended"] is False
    assert data["category"] == {"id": category.id, "name": category.name}


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"nameTH": "", "price": 10}, "nameTH"),
        ({"nameTH": "A", "price": -1}, "price"),
        ({"nameTH": "A", "price": 1000000}, "price"),
        ({"nameTH": "A", "price": "abc"}, "price"),
        ({"nameTH": "A", "price": 10, "imageUrl": "ftp://x/y.png"}, "imageUrl"),
    ],
)
def test_menu_validation(client, admin_headers, make_category, payload, field):
    payload = dict(payload, categoryId=make_category().id)
    resp = client.post("/api/v1/menus", json=payload, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == field


def test_menu_needs_existing_category(db, services):
    with pytest.raises(NotFoundError, match="Category not found"):
        services.menus.create_menu(db, MenuCreate(name_th="A", price=10, category_id=99))


def test_duplicate_menu_name_conflicts_until_deleted(db, services, make_menu):
    menu = make_menu("Pad Thai")
    data = MenuCreate(name_th="Pad Thai", price=10, category_id=menu.category_id)
    with pytest.raises(ConflictError, match="Menu name already exists"):
        services.menus.create_menu(db, data)

    services.menus.delete_menu(db, menu.id)
    assert services.menus.create_menu(db, data).id != menu.id


def test_update_menu_keeps_unset_fields(db, services, make_menu):
    menu = make_menu("Pad Thai", "50.00", description="noodles")
    updated = services.menus.update_menu(db, menu.id, MenuUpdate(price="65"))
    assert updated.name_th == "Pad Thai"
    assert updated.description == "noodles"
    assert float(updated.price) == 65

    other = make_menu("Pad See Ew")
    with pytest.raises(ConflictError):
        services.menus.update_menu(db, other.id, MenuUpdate(name_th="Pad Thai"))


def test_deleted_menu_is_not_found(client, db, services, make_menu):
    menu = make_menu()
    services.menus.delete_menu(db, menu.id)
    resp = client.get(f"/api/v1/menus/{menu.id}")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Menu not found"
    assert db.query(Menu).count() == 1


def test_toggles(client, admin_headers, make_menu):
    menu = make_menu()
    resp = client.patch(f"/api/v1/menus/{menu.id}/availability", headers=admin_headers)
    assert resp.json()["data"]["isAvailable"] is False
    resp = client.patch(f"/api/v1/menus/{menu.id}/visibility", headers=admin_headers)
    assert resp.json()["data"]["isVisible"] is False
    resp = client.patch(f"/api/v1/menus/{menu.id}/availability", headers=admin_headers)
    assert resp.json()["data"]["isAvailable"] is True


def test_admin_list_is_paginated(client, db, services, make_menu):
    menus = [make_menu(f"Dish {i}") for i in range(5)]
    services.menus.delete_menu(db, menus[0].id)

    resp = client.get("/api/v1/menus", params={"scope": "all", "page": 2, "limit": 3})
    data = resp.json()["data"]
    assert data["pagination"] == {"page": 2, "limit": 3, "total": 4, "totalPages": 2}
    assert [m["nameTH"] for m in data["menus"]] == ["Dish 4"]


def test_customer_list_groups_visible_menus(client, make_category, make_menu):
    mains = make_category("Mains")
    drinks = make_category("Drinks")
    make_menu("Curry", category=mains)
    make_menu("Secret", category=mains, is_visible=False)
    make_menu("Tea", category=drinks)

    data = client.get("/api/v1/menus").json()["data"]
    grouped = {c["name"]: [m["nameTH"] for m in c["menus"]] for c in data}
    assert grouped == {"Mains": ["Curry"], "Drinks": ["Tea"]}
