from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String
from sqlalchemy.orm import relationship

from database import Base
from utils.helper import utcnow


# ---------------------------------------------------------------------------
# TABLE (dining table)
# ---------------------------------------------------------------------------

class Table(Base):
    __tablename__ = "tables"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(50), nullable=False)
    qr_code = Column(String(255), nullable=True)
    is_occupied = Column(Boolean, nullable=False, default=False)
    is_available = Column(Boolean, nullable=False, default=True)
    is_calling_staff = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    orders = relationship("Order", back_populates="table")
    bills = relationship("Bill", back_populates="table")

    __table_args__ = (
        Index("ix_tables_name_deleted_at", "name", "deleted_at"),
        Index("ix_tables_is_available", "is_available"),
        Index("ix_tables_is_occupied", "is_occupied"),
    )
