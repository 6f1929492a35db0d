import uuid

from sqlalchemy import Column, DateTime, Enum as SAEnum, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from schemas import BillStatus
from utils.helper import utcnow


# ---------------------------------------------------------------------------
# BILL
# ---------------------------------------------------------------------------

class Bill(Base):
    __tablename__ = "bills"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    table_id = Column(Integer, ForeignKey("tables.id", ondelete="RESTRICT"), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False, default=0)
    payment_method = Column(String(30), nullable=True)
    status = Column(SAEnum(BillStatus, name="bill_status_enum"), nullable=False, default=BillStatus.OPEN)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    closed_at = Column(DateTime(timezone=True), nullable=True)

    table = relationship("Table", back_populates="bills")
    orders = relationship("Order", back_populates="bill", order_by="Order.created_at")

    __table_args__ = (
        Index("ix_bills_table_id_status", "table_id", "status"),
        Index("ix_bills_status_closed_at", "status", "closed_at"),
    )
