"""Sale (bill) and SaleItem models."""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from ledger.core.database import Base
from ledger.models.shared import generate_id, utc_now


class PaymentStatus(str, Enum):
    """Informational badge stored on a sale; the ledger never reads it for math."""

    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"
    FULL_RETURN = "full_return"


class Sale(Base):
    """A bill: either a point-of-sale invoice or a manually entered balance."""

    __tablename__ = "sales"

    id = Column(String(36), primary_key=True, default=generate_id)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=False, index=True)

    total_amount = Column(Numeric(12, 4), nullable=False, default=0)
    # Cumulative: point-of-sale payment plus every later recorded payment
    amount_paid = Column(Numeric(12, 4), nullable=False, default=0)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.UNPAID.value)

    due_date = Column(DateTime(timezone=True), nullable=True)
    is_manual_balance = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.position",
    )
    payments = relationship(
        "Payment",
        back_populates="sale",
        cascade="all, delete-orphan",
    )


class SaleItem(Base):
    """A line on a bill."""

    __tablename__ = "sale_items"

    id = Column(String(36), primary_key=True, default=generate_id)
    sale_id = Column(
        String(36), ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)

    product_id = Column(String(36), nullable=True)
    description = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False)
    rate = Column(Numeric(12, 4), nullable=False)
    subtotal = Column(Numeric(12, 4), nullable=False)
    quantity_returned = Column(Integer, nullable=False, default=0)

    sale = relationship("Sale", back_populates="items")
