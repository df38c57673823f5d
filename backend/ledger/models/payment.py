"""Payment model for recovery payments recorded against a bill."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from ledger.core.database import Base
from ledger.models.shared import generate_id, utc_now


class PaymentMethod(str, Enum):
    """Supported payment methods."""

    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"


class Payment(Base):
    """Payment model - one row per payment received after the bill was created."""

    __tablename__ = "payment_history"

    id = Column(String(36), primary_key=True, default=generate_id)
    sale_id = Column(
        String(36), ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_phone = Column(String(50), nullable=False, index=True)

    amount = Column(Numeric(12, 4), nullable=False)
    # Bill outstanding immediately before/after this payment, for the audit trail
    previous_balance = Column(Numeric(12, 4), nullable=False, default=0)
    new_balance = Column(Numeric(12, 4), nullable=False, default=0)

    payment_method = Column(String(20), nullable=False, default=PaymentMethod.CASH.value)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    sale = relationship("Sale", back_populates="payments")
