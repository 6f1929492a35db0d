from __future__ import annotations

from pydantic import Field, field_validator

from utils.sanitize import strip_html

from . import ORMModel


class RestaurantNameUpdate(ORMModel):
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, v):
        return strip_html(v)


class RestaurantNameOut(ORMModel):
    name: str
