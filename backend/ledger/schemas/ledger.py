"""Ledger snapshot inputs and reconciled outputs.

Snapshot records are deliberately loose: amounts and dates keep whatever shape
storage produced (text, number, ``None``) and are only interpreted by the
lenient parsers in ``ledger.core.numeric``.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

RawAmount = Decimal | int | float | str | None
RawDate = datetime | date | int | float | str | None


class LedgerEntryKind(str, Enum):
    BILL = "bill"
    PAYMENT = "payment"
    RETURN = "return"


class BalanceSide(str, Enum):
    """Which side of zero a signed balance sits on.

    Distinct from an entry's ``credit`` column, which is money received.
    """

    OUTSTANDING = "outstanding"
    CREDIT = "credit"


class DueStatus(str, Enum):
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    NORMAL = "normal"


class LineItemSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: str | None = None
    description: str | None = None
    quantity: RawAmount = None
    rate: RawAmount = None
    subtotal: RawAmount = None


class BillSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_name: str | None = None
    customer_phone: str | None = None
    total_amount: RawAmount = None
    amount_paid: RawAmount = None
    payment_status: str | None = None
    created_at: RawDate = None
    due_date: RawDate = None
    is_manual_balance: bool | None = False
    notes: str | None = None
    items: list[LineItemSnapshot] = Field(default_factory=list)


class PaymentSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sale_id: str | None = None
    amount: RawAmount = None
    payment_method: str | None = None
    notes: str | None = None
    created_at: RawDate = None


class ReturnSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sale_id: str | None = None
    total_refund: RawAmount = None
    refund_method: str | None = None
    return_type: str | None = None
    reason: str | None = None
    created_at: RawDate = None
    items: list[LineItemSnapshot] = Field(default_factory=list)


class CustomerSnapshot(BaseModel):
    """Every raw record belonging to one customer, already fetched."""

    customer_phone: str
    customer_name: str | None = None
    bills: list[BillSnapshot] = Field(default_factory=list)
    payments: list[PaymentSnapshot] = Field(default_factory=list)
    returns: list[ReturnSnapshot] = Field(default_factory=list)


class LedgerLineItem(BaseModel):
    product_id: str | None = None
    description: str | None = None
    quantity: Decimal
    rate: Decimal
    subtotal: Decimal


class LedgerEntry(BaseModel):
    """One normalized, balance-annotated row of a customer ledger."""

    entry_id: str
    source_id: str
    kind: LedgerEntryKind
    date: datetime
    description: str
    reference: str

    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    balance_after: Decimal = Decimal("0")

    sale_id: str | None = None
    # Bills: face value, cumulative paid, credited returns and what is still owed
    total_amount: Decimal = Decimal("0")
    paid: Decimal = Decimal("0")
    bill_returns: Decimal = Decimal("0")
    outstanding: Decimal = Decimal("0")
    is_manual_balance: bool = False
    payment_status: str | None = None
    due_date: datetime | None = None

    payment_method: str | None = None
    refund_method: str | None = None
    return_type: str | None = None
    # Returns: the full refund value, credited or not
    refund_amount: Decimal = Decimal("0")

    notes: str | None = None
    items: list[LedgerLineItem] = Field(default_factory=list)


class LedgerStats(BaseModel):
    total_bills: int = 0
    paid_bills: int = 0
    unpaid_bills: int = 0
    total_purchases: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    total_payments_received: Decimal = Decimal("0")
    total_return_credits: Decimal = Decimal("0")
    total_returns: int = 0
    # Signed: negative means the customer holds credit
    total_outstanding: Decimal = Decimal("0")
    display_outstanding: Decimal = Decimal("0")
    has_credit: bool = False
    balance_side: BalanceSide = BalanceSide.OUTSTANDING


class DuePayment(BaseModel):
    bill: BillSnapshot
    due_date: datetime
    outstanding: Decimal
    status: DueStatus


class CustomerLedger(BaseModel):
    customer_phone: str
    customer_name: str | None = None
    ledger: list[LedgerEntry] = Field(default_factory=list)
    stats: LedgerStats = Field(default_factory=LedgerStats)
    due_payments: list[DuePayment] = Field(default_factory=list)
