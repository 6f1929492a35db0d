from dataclasses import dataclass

from fastapi import Request

from services.analytics_service import AnalyticsService
from services.auth_service import AuthService, UserService
from services.bill_service import BillService
from services.category_service import CategoryService
from services.menu_service import MenuService
from services.order_service import OrderService
from services.setting_service import SettingService
from services.table_service import TableService


@dataclass
class Services:
    bills: BillService
    orders: OrderService
    tables: TableService
    categories: CategoryService
    menus: MenuService
    auth: AuthService
    users: UserService
    settings: SettingService
    analytics: AnalyticsService


def build_services() -> Services:
    bills = BillService()
    return Services(
        bills=bills,
        orders=OrderService(bills),
        tables=TableService(),
        categories=CategoryService(),
        menus=MenuService(),
        auth=AuthService(),
        users=UserService(),
        settings=SettingService(),
        analytics=AnalyticsService(),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
