"""Return (refund) and ReturnItem models."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from ledger.core.database import Base
from ledger.models.shared import generate_id, utc_now


class ReturnType(str, Enum):
    FULL_BILL = "full_bill"
    ITEM = "item"


class RefundMethod(str, Enum):
    """How the refund reached the customer.

    Only CREDIT refunds reduce what the customer owes; CASH refunds are handed
    back over the counter and never touch the balance.
    """

    CASH = "cash"
    CREDIT = "credit"


class ReturnStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"


class SaleReturn(Base):
    __tablename__ = "returns"

    id = Column(String(36), primary_key=True, default=generate_id)
    sale_id = Column(
        String(36), ForeignKey("sales.id", ondelete="SET NULL"), nullable=True, index=True
    )
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=False, index=True)

    return_type = Column(String(20), nullable=False, default=ReturnType.ITEM.value)
    refund_method = Column(String(20), nullable=False, default=RefundMethod.CASH.value)
    status = Column(String(20), nullable=False, default=ReturnStatus.COMPLETED.value)
    total_refund = Column(Numeric(12, 4), nullable=False, default=0)
    reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    items = relationship(
        "ReturnItem",
        back_populates="sale_return",
        cascade="all, delete-orphan",
        order_by="ReturnItem.position",
    )


class ReturnItem(Base):
    __tablename__ = "return_items"

    id = Column(String(36), primary_key=True, default=generate_id)
    return_id = Column(
        String(36), ForeignKey("returns.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)

    sale_item_id = Column(
        String(36), ForeignKey("sale_items.id", ondelete="SET NULL"), nullable=True
    )
    product_id = Column(String(36), nullable=True)
    description = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False)
    rate = Column(Numeric(12, 4), nullable=False)
    subtotal = Column(Numeric(12, 4), nullable=False)

    sale_return = relationship("SaleReturn", back_populates="items")
