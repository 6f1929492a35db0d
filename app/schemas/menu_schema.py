from __future__ import annotations

from decimal import Decimal
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator

from utils.coercion import parse_bool, parse_positive_int, parse_price
from utils.sanitize import strip_html

from . import ORMModel

MAX_PRICE = Decimal("999999")


def _check_image_url(v):
    if v is None or v == "":
        return v
    parsed = urlparse(v)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid image URL")
    return v


def _check_price(v):
    amount = parse_price(v)
    if amount is not None and amount > MAX_PRICE:
        raise ValueError("Price is too high")
    return amount


# CATEGORY
class CategoryBase(ORMModel):
    name: str = Field(..., min_length=1, max_length=50)

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, v):
        return strip_html(v)


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    pass


class CategoryOut(ORMModel):
    id: int
    name: str


# MENU
class MenuCreate(ORMModel):
    name_th: str = Field(..., alias="nameTH", min_length=1, max_length=100)
    name_en: Optional[str] = Field(None, alias="nameEN", max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    price: Decimal
    category_id: int
    image_url: Optional[str] = None
    is_recommended: Optional[bool] = None
    is_available: Optional[bool] = None
    is_visible: Optional[bool] = None

    @field_validator("name_th", "name_en", "description", mode="before")
    @classmethod
    def clean_text(cls, v):
        return strip_html(v)

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v):
        return _check_price(v)

    @field_validator("category_id", mode="before")
    @classmethod
    def coerce_category(cls, v):
        return parse_positive_int(v)

    @field_validator("image_url")
    @classmethod
    def check_image_url(cls, v):
        return _check_image_url(v)

    @field_validator("is_recommended", "is_available", "is_visible", mode="before")
    @classmethod
    def coerce_flags(cls, v):
        return parse_bool(v)


class MenuUpdate(MenuCreate):
    name_th: Optional[str] = Field(None, alias="nameTH", min_length=1, max_length=100)
    price: Optional[Decimal] = None
    category_id: Optional[int] = None


class MenuOut(ORMModel):
    id: int
    name_th: str = Field(..., alias="nameTH")
    name_en: str = Field("", alias="nameEN")
    description: str = ""
    price: float
    category_id: Optional[int] = None
    image_url: str = ""
    is_recommended: bool
    is_available: bool
    is_visible: bool
    category: Optional[CategoryOut] = None

    @field_validator("name_en", "description", "image_url", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or ""


class CategoryWithMenusOut(CategoryOut):
    menus: List[MenuOut] = []


class Pagination(ORMModel):
    page: int
    limit: int
    total: int
    total_pages: int


class MenuPage(ORMModel):
    menus: List[MenuOut]
    pagination: Pagination
