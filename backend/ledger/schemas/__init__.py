from ledger.schemas.customer import BillStatusFilter, CustomerBalanceResponse, CustomerSort
from ledger.schemas.ledger import (
    BalanceSide,
    BillSnapshot,
    CustomerLedger,
    CustomerSnapshot,
    DuePayment,
    DueStatus,
    LedgerEntry,
    LedgerEntryKind,
    LedgerLineItem,
    LedgerStats,
    LineItemSnapshot,
    PaymentSnapshot,
    ReturnSnapshot,
)
from ledger.schemas.payment import PaymentCreate, PaymentResponse, PaymentUpdate
from ledger.schemas.sale import (
    DueDateUpdate,
    ManualBalanceCreate,
    SaleCreate,
    SaleItemCreate,
    SaleItemResponse,
    SaleResponse,
)
from ledger.schemas.sale_return import (
    ReturnCreate,
    ReturnItemCreate,
    ReturnItemResponse,
    ReturnResponse,
)

__all__ = [
    "BalanceSide",
    "BillSnapshot",
    "BillStatusFilter",
    "CustomerBalanceResponse",
    "CustomerLedger",
    "CustomerSnapshot",
    "CustomerSort",
    "DueDateUpdate",
    "DuePayment",
    "DueStatus",
    "LedgerEntry",
    "LedgerEntryKind",
    "LedgerLineItem",
    "LedgerStats",
    "LineItemSnapshot",
    "ManualBalanceCreate",
    "PaymentCreate",
    "PaymentResponse",
    "PaymentSnapshot",
    "PaymentUpdate",
    "ReturnCreate",
    "ReturnItemCreate",
    "ReturnItemResponse",
    "ReturnResponse",
    "ReturnSnapshot",
    "SaleCreate",
    "SaleItemCreate",
    "SaleItemResponse",
    "SaleResponse",
]
