from ledger.models.payment import Payment, PaymentMethod
from ledger.models.sale import PaymentStatus, Sale, SaleItem
from ledger.models.sale_return import (
    RefundMethod,
    ReturnItem,
    ReturnStatus,
    ReturnType,
    SaleReturn,
)

__all__ = [
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "RefundMethod",
    "ReturnItem",
    "ReturnStatus",
    "ReturnType",
    "Sale",
    "SaleItem",
    "SaleReturn",
]
