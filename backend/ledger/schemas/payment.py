"""Payment schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from ledger.models.payment import PaymentMethod


class PaymentCreate(BaseModel):
    """Schema for recording a payment against a bill."""

    amount: Decimal = Field(gt=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str | None = None


class PaymentUpdate(BaseModel):
    """Schema for editing a recorded payment."""

    amount: Decimal | None = Field(default=None, gt=0)
    payment_method: PaymentMethod | None = None
    notes: str | None = None


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sale_id: str
    customer_phone: str
    amount: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    payment_method: str
    notes: str | None = None
    created_at: datetime
