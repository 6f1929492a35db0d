from model.bill import Bill
from model.menu import Category, Menu
from model.order import Order, OrderItem
from model.setting import Setting
from model.table import Table
from model.user import RefreshToken, User

__all__ = [
    "Bill",
    "Category",
    "Menu",
    "Order",
    "OrderItem",
    "RefreshToken",
    "Setting",
    "Table",
    "User",
]
