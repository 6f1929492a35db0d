"""Shared fixtures: in-memory SQLite, a TestClient and token helpers."""
import os

# Provide settings before anything imports the app
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["CLOUDINARY_CLOUD_NAME"] = ""
os.environ["CLOUDINARY_API_KEY"] = ""
os.environ["CLOUDINARY_API_SECRET"] = ""
os.environ.setdefault("JWT_SECRET", "test-access-secret-" + "x" * 32)
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret-" + "y" * 32)
os.environ.setdefault("CLIENT_URL", "http://localhost:3000")
os.environ.setdefault("LOG_LEVEL", "warning")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from crud.user_crud import user_crud
from database import Base, engine, get_db, SessionLocal
from main import app
from model import Category, Menu, Table
from schemas import UserRole
from schemas.order_schema import OrderCreate
from schemas.user_schema import UserCreate
from services import build_services
from utils.auth.jwt_handler import create_access_token


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def services():
    return build_services()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def token_for(role: UserRole, user_id: int = 1, username: str = None) -> str:
    return create_access_token({"userId": user_id, "username": username or role.value.lower(), "role": role.value})


def bearer(role: UserRole, user_id: int = 1) -> dict:
    return {"Authorization": f"Bearer {token_for(role, user_id)}"}


@pytest.fixture
def admin_headers():
    return bearer(UserRole.ADMIN)


@pytest.fixture
def staff_headers():
    return bearer(UserRole.STAFF, user_id=2)


@pytest.fixture
def kitchen_headers():
    return bearer(UserRole.KITCHEN, user_id=3)


@pytest.fixture
def make_user(db):
    def _make(username="admin", password="admin1234", role=UserRole.ADMIN):
        return user_crud.create(db, UserCreate(username=username, password=password, role=role))
    return _make


@pytest.fixture
def make_table(db):
    def _make(name="T1", **values):
        table = Table(name=name, qr_code="", **values)
        db.add(table)
        db.commit()
        db.refresh(table)
        return table
    return _make


@pytest.fixture
def make_category(db):
    def _make(name="Mains"):
        category = Category(name=name)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category
    return _make


@pytest.fixture
def make_menu(db, make_category):
    def _make(name_th="Pad Thai", price="50.00", category=None, **values):
        category = category or db.query(Category).first() or make_category()
        menu = Menu(name_th=name_th, name_en="", price=Decimal(price), category_id=category.id, **values)
        db.add(menu)
        db.commit()
        db.refresh(menu)
        return menu
    return _make


@pytest.fixture
def place_order(db, services):
    def _place(table, *lines):
        """``lines`` are ``(menu, quantity)`` pairs."""
        data = OrderCreate(
            table_id=table.id,
            items=[{"menu_id": menu.id, "quantity": qty} for menu, qty in lines],
        )
        return services.orders.create_order(db, data)
    return _place
