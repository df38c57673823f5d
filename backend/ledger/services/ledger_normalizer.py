"""Turn raw bills, payments and returns into uniform ledger entries.

The credit-attribution rule for bills lives here and only here: the ledger
builder and the bill classifier both call :func:`attribute_bill`, so a bill's
outstanding figure can never disagree between the two.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from ledger.core.numeric import ZERO, round2, safe_parse_date, safe_parse_decimal
from ledger.models.sale_return import RefundMethod, ReturnType
from ledger.schemas.ledger import (
    BillSnapshot,
    LedgerEntry,
    LedgerEntryKind,
    LedgerLineItem,
    LineItemSnapshot,
    PaymentSnapshot,
    ReturnSnapshot,
)


@dataclass(frozen=True)
class BillAttribution:
    """How a bill's face value splits into paid, returned and still owed."""

    total_amount: Decimal
    amount_paid: Decimal
    bill_returns: Decimal
    recovery_payments: Decimal
    initial_payment: Decimal
    outstanding: Decimal

    @property
    def is_paid(self) -> bool:
        return self.outstanding <= 0


@dataclass
class SaleTotals:
    """Per-bill aggregates over the whole payment and return streams."""

    recovery_payments: dict[str, Decimal] = field(default_factory=lambda: defaultdict(Decimal))
    credited_returns: dict[str, Decimal] = field(default_factory=lambda: defaultdict(Decimal))

    @classmethod
    def collect(
        cls,
        payments: Iterable[PaymentSnapshot],
        returns: Iterable[ReturnSnapshot],
    ) -> "SaleTotals":
        totals = cls()
        for payment in payments:
            if payment.sale_id:
                totals.recovery_payments[payment.sale_id] += round2(
                    safe_parse_decimal(payment.amount)
                )
        for sale_return in returns:
            if sale_return.sale_id:
                totals.credited_returns[sale_return.sale_id] += credited_refund(sale_return)
        return totals

    def payments_for(self, sale_id: str) -> Decimal:
        return round2(self.recovery_payments.get(sale_id, ZERO))

    def returns_for(self, sale_id: str) -> Decimal:
        return round2(self.credited_returns.get(sale_id, ZERO))


def is_credit_refund(sale_return: ReturnSnapshot) -> bool:
    method = (sale_return.refund_method or "").strip().lower()
    return method == RefundMethod.CREDIT.value


def credited_refund(sale_return: ReturnSnapshot) -> Decimal:
    """Amount of a return that reduces the balance: the refund if credited, else 0."""
    if not is_credit_refund(sale_return):
        return ZERO
    return round2(safe_parse_decimal(sale_return.total_refund))


def attribute_bill(bill: BillSnapshot, totals: SaleTotals) -> BillAttribution:
    """Apply the attribution rule to one bill.

    initial_payment = max(0, amount_paid - recovery_payments)
    outstanding     = max(0, total_amount - amount_paid - bill_returns)
    """
    total_amount = round2(safe_parse_decimal(bill.total_amount))
    amount_paid = round2(safe_parse_decimal(bill.amount_paid))
    bill_returns = totals.returns_for(bill.id)
    recovery_payments = totals.payments_for(bill.id)

    initial_payment = round2(max(ZERO, amount_paid - recovery_payments))
    outstanding = round2(max(ZERO, total_amount - amount_paid - bill_returns))

    return BillAttribution(
        total_amount=total_amount,
        amount_paid=amount_paid,
        bill_returns=bill_returns,
        recovery_payments=recovery_payments,
        initial_payment=initial_payment,
        outstanding=outstanding,
    )


def _line_items(items: list[LineItemSnapshot]) -> list[LedgerLineItem]:
    return [
        LedgerLineItem(
            product_id=item.product_id,
            description=item.description,
            quantity=safe_parse_decimal(item.quantity),
            rate=round2(safe_parse_decimal(item.rate)),
            subtotal=round2(safe_parse_decimal(item.subtotal)),
        )
        for item in items
    ]


def _short_ref(record_id: str, length: int = 8) -> str:
    return record_id[:length].upper()


def normalize_bill(bill: BillSnapshot, totals: SaleTotals, now: datetime) -> LedgerEntry:
    attribution = attribute_bill(bill, totals)

    if bill.is_manual_balance:
        description = "Manual Balance"
    else:
        description = f"Bill #{bill.id[:8]}"
        if attribution.bill_returns > 0:
            description += f" (Return: {attribution.bill_returns})"

    due_date = None
    if bill.due_date not in (None, ""):
        due_date = safe_parse_date(bill.due_date, now)

    return LedgerEntry(
        entry_id=f"{LedgerEntryKind.BILL.value}-{bill.id}",
        source_id=bill.id,
        kind=LedgerEntryKind.BILL,
        date=safe_parse_date(bill.created_at, now),
        description=description,
        reference=_short_ref(bill.id),
        debit=attribution.total_amount,
        credit=attribution.initial_payment,
        sale_id=bill.id,
        total_amount=attribution.total_amount,
        paid=attribution.amount_paid,
        bill_returns=attribution.bill_returns,
        outstanding=attribution.outstanding,
        is_manual_balance=bool(bill.is_manual_balance),
        payment_status=bill.payment_status,
        due_date=due_date,
        notes=bill.notes or None,
        items=_line_items(bill.items),
    )


def normalize_payment(payment: PaymentSnapshot, now: datetime) -> LedgerEntry:
    method = (payment.payment_method or "cash").strip()
    return LedgerEntry(
        entry_id=f"{LedgerEntryKind.PAYMENT.value}-{payment.id}",
        source_id=payment.id,
        kind=LedgerEntryKind.PAYMENT,
        date=safe_parse_date(payment.created_at, now),
        description=f"Payment Received ({method.upper()})",
        reference=_short_ref(payment.id),
        credit=round2(safe_parse_decimal(payment.amount)),
        sale_id=payment.sale_id,
        payment_method=method,
        notes=payment.notes or None,
    )


def normalize_return(sale_return: ReturnSnapshot, now: datetime) -> LedgerEntry:
    """Returns always appear in history; cash refunds carry a zero credit."""
    if sale_return.return_type in (ReturnType.FULL_BILL.value, "bill"):
        description = "Full Bill Return"
    else:
        description = "Item Return"
    if sale_return.reason:
        description += f" - {sale_return.reason}"

    return LedgerEntry(
        entry_id=f"{LedgerEntryKind.RETURN.value}-{sale_return.id}",
        source_id=sale_return.id,
        kind=LedgerEntryKind.RETURN,
        date=safe_parse_date(sale_return.created_at, now),
        description=description,
        reference=f"RET-{_short_ref(sale_return.id, 6)}",
        credit=credited_refund(sale_return),
        sale_id=sale_return.sale_id,
        refund_method=sale_return.refund_method,
        return_type=sale_return.return_type,
        refund_amount=round2(safe_parse_decimal(sale_return.total_refund)),
        notes=sale_return.reason or None,
        items=_line_items(sale_return.items),
    )
