"""Return and ReturnItem schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from ledger.models.sale_return import RefundMethod, ReturnType


class ReturnItemCreate(BaseModel):
    sale_item_id: str | None = None
    product_id: str | None = None
    description: str | None = Field(default=None, max_length=255)
    quantity: int = Field(gt=0)
    rate: Decimal = Field(ge=0)


class ReturnCreate(BaseModel):
    sale_id: str | None = None
    customer_name: str = Field(min_length=1, max_length=255)
    customer_phone: str = Field(min_length=1, max_length=50)
    return_type: ReturnType = ReturnType.ITEM
    refund_method: RefundMethod = RefundMethod.CASH
    reason: str | None = None
    items: list[ReturnItemCreate] = Field(min_length=1)


class ReturnItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    return_id: str
    sale_item_id: str | None = None
    product_id: str | None = None
    description: str | None = None
    quantity: int
    rate: Decimal
    subtotal: Decimal


class ReturnResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sale_id: str | None = None
    customer_name: str
    customer_phone: str
    return_type: str
    refund_method: str
    status: str
    total_refund: Decimal
    reason: str | None = None
    created_at: datetime
    items: list[ReturnItemResponse] = []
