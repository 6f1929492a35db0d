from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from database import Base
from utils.helper import utcnow


# ---------------------------------------------------------------------------
# CATEGORY
# ---------------------------------------------------------------------------

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)

    menus = relationship("Menu", back_populates="category", order_by="Menu.id")


# ---------------------------------------------------------------------------
# MENU
# ---------------------------------------------------------------------------

class Menu(Base):
    __tablename__ = "menus"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name_th = Column(String(150), nullable=False)
    name_en = Column(String(150), nullable=False, default="")
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String(500), nullable=True)
    is_recommended = Column(Boolean, nullable=False, default=False)
    is_available = Column(Boolean, nullable=False, default=True)
    is_visible = Column(Boolean, nullable=False, default=True)
    # only soft-deleted menus lose their category
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    category = relationship("Category", back_populates="menus")

    __table_args__ = (
        Index("ix_menus_category_id", "category_id"),
        Index("ix_menus_is_recommended", "is_recommended"),
        Index("ix_menus_deleted_at", "deleted_at"),
        Index("ix_menus_is_visible_is_available", "is_visible", "is_available"),
    )
