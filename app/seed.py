"""Load demo data: categories, menus, tables and an admin account.

Run from the ``app`` directory with ``python -m seed``. Rows that already
exist (matched by name) are left alone, so the script can be re-run.
"""
import logging
import os
from decimal import Decimal

from crud.user_crud import user_crud
from database import SessionLocal, init_db
from model import Category, Menu, Table
from schemas import UserRole
from schemas.user_schema import UserCreate
from services.table_service import qr_code_url
from utils.middleware.logger import setup_logging

logger = logging.getLogger("seed")

CATEGORIES = ["อาหารจานเดียว", "เครื่องดื่ม", "ของทานเล่น"]

MENUS = [
    {
        "name_th": "ข้าวกะเพราไก่ไข่ดาว",
        "name_en": "Basil Chicken with Rice",
        "description": "เผ็ดร้อน ถึงใจ",
        "price": Decimal("60"),
        "category": "อาหารจานเดียว",
        "image_url": "https://placehold.co/600x400/png?text=Basil+Chicken",
    },
    {
        "name_th": "ข้าวผัดหมู",
        "name_en": "Fried Rice with Pork",
        "price": Decimal("55"),
        "category": "อาหารจานเดียว",
        "image_url": "https://placehold.co/600x400/png?text=Fried+Rice",
    },
    {
        "name_th": "น้ำเปล่า",
        "name_en": "Water",
        "price": Decimal("15"),
        "category": "เครื่องดื่ม",
        "image_url": "https://placehold.co/600x400/png?text=Water",
    },
    {
        "name_th": "โค้ก",
        "name_en": "Coke",
        "price": Decimal("25"),
        "category": "เครื่องดื่ม",
        "image_url": "https://placehold.co/600x400/png?text=Coke",
    },
    {
        "name_th": "เฟรนช์ฟรายส์",
        "name_en": "French Fries",
        "price": Decimal("49"),
        "category": "ของทานเล่น",
    },
]

TABLES = ["T1", "T2", "T3", "T4", "VIP1"]


def seed(db) -> None:
    categories = {}
    for name in CATEGORIES:
        category = db.query(Category).filter(Category.name == name).first()
        if category is None:
            category = Category(name=name)
            db.add(category)
            db.flush()
        categories[name] = category

    for data in MENUS:
        data = dict(data)
        category = categories[data.pop("category")]
        exists = db.query(Menu).filter(Menu.name_th == data["name_th"], Menu.deleted_at.is_(None)).first()
        if exists is None:
            db.add(Menu(category_id=category.id, **data))

    for name in TABLES:
        table = db.query(Table).filter(Table.name == name, Table.deleted_at.is_(None)).first()
        if table is None:
            table = Table(name=name)
            db.add(table)
            db.flush()
            table.qr_code = qr_code_url(table.id)
    db.commit()

    if user_crud.get_by_username(db, "admin") is None:
        password = os.getenv("SEED_ADMIN_PASSWORD", "admin1234")
        user_crud.create(db, UserCreate(username="admin", password=password, role=UserRole.ADMIN))
        logger.info("created admin user")


def main() -> None:
    setup_logging()
    init_db()
    db = SessionLocal()
    try:
        logger.info("seeding database")
        seed(db)
        logger.info("seeding finished")
    finally:
        db.close()


if __name__ == "__main__":
    main()
