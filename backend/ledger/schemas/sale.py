"""Sale (bill) schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class SaleItemCreate(BaseModel):
    product_id: str | None = None
    description: str | None = Field(default=None, max_length=255)
    quantity: int = Field(gt=0)
    rate: Decimal = Field(ge=0)


class SaleCreate(BaseModel):
    """Schema for a point-of-sale bill, optionally paid in part at the counter."""

    customer_name: str = Field(min_length=1, max_length=255)
    customer_phone: str = Field(min_length=1, max_length=50)
    items: list[SaleItemCreate] = Field(min_length=1)
    amount_paid: Decimal = Field(default=Decimal("0"), ge=0)
    due_date: datetime | None = None
    notes: str | None = None


class ManualBalanceCreate(BaseModel):
    """Schema for an opening balance or loan entered by hand."""

    customer_name: str = Field(min_length=1, max_length=255)
    customer_phone: str = Field(min_length=1, max_length=50)
    total_amount: Decimal = Field(gt=0)
    due_date: datetime | None = None
    notes: str | None = None


class DueDateUpdate(BaseModel):
    due_date: datetime | None = None
    notes: str | None = None


class SaleItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sale_id: str
    product_id: str | None = None
    description: str | None = None
    quantity: int
    rate: Decimal
    subtotal: Decimal
    quantity_returned: int


class SaleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_name: str
    customer_phone: str
    total_amount: Decimal
    amount_paid: Decimal
    payment_status: str
    due_date: datetime | None = None
    is_manual_balance: bool
    notes: str | None = None
    created_at: datetime
    items: list[SaleItemResponse] = []
