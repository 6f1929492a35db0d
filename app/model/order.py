from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from database import Base
from schemas import OrderStatus
from utils.helper import utcnow


# ---------------------------------------------------------------------------
# ORDER
# ---------------------------------------------------------------------------

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    table_id = Column(Integer, ForeignKey("tables.id", ondelete="RESTRICT"), nullable=False)
    bill_id = Column(String(36), ForeignKey("bills.id", ondelete="SET NULL"), nullable=True)
    status = Column(SAEnum(OrderStatus, name="order_status_enum"), nullable=False, default=OrderStatus.PENDING)
    total_price = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    table = relationship("Table", back_populates="orders")
    bill = relationship("Bill", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all,delete-orphan", order_by="OrderItem.id")

    __table_args__ = (
        Index("ix_orders_table_id_status", "table_id", "status"),
        Index("ix_orders_bill_id_status", "bill_id", "status"),
        Index("ix_orders_status_created_at", "status", "created_at"),
    )


# ---------------------------------------------------------------------------
# ORDER_ITEM
# ---------------------------------------------------------------------------

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    menu_id = Column(Integer, ForeignKey("menus.id", ondelete="RESTRICT"), nullable=False)
    quantity = Column(Integer, nullable=False)
    note = Column(Text, nullable=True)
    status = Column(SAEnum(OrderStatus, name="order_status_enum"), nullable=False, default=OrderStatus.PENDING)

    order = relationship("Order", back_populates="items")
    menu = relationship("Menu")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_gt_0"),
        Index("ix_order_items_order_id_status", "order_id", "status"),
        Index("ix_order_items_menu_id", "menu_id"),
    )
