"""Paid/unpaid split of bills, aggregate statistics and the due-payment view."""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

from ledger.core.numeric import ZERO, round2, safe_parse_date, safe_parse_decimal
from ledger.schemas.ledger import (
    BalanceSide,
    BillSnapshot,
    DuePayment,
    DueStatus,
    LedgerStats,
    PaymentSnapshot,
    ReturnSnapshot,
)
from ledger.services.ledger_normalizer import (
    BillAttribution,
    SaleTotals,
    attribute_bill,
    credited_refund,
)

DEFAULT_DUE_SOON_DAYS = 7
_SECONDS_PER_DAY = 86400


@dataclass
class BillClassification:
    paid: list[BillSnapshot] = field(default_factory=list)
    unpaid: list[BillSnapshot] = field(default_factory=list)
    attributions: dict[str, BillAttribution] = field(default_factory=dict)


def classify_bills(bills: Iterable[BillSnapshot], totals: SaleTotals) -> BillClassification:
    """A bill is paid iff its outstanding, after payments and credited returns, is zero."""
    result = BillClassification()
    for bill in bills:
        attribution = attribute_bill(bill, totals)
        result.attributions[bill.id] = attribution
        if attribution.is_paid:
            result.paid.append(bill)
        else:
            result.unpaid.append(bill)
    return result


def balance_side(balance: Decimal) -> BalanceSide:
    return BalanceSide.CREDIT if balance < 0 else BalanceSide.OUTSTANDING


def compute_stats(
    classification: BillClassification,
    payments: Iterable[PaymentSnapshot],
    returns: Iterable[ReturnSnapshot],
) -> LedgerStats:
    attributions = classification.attributions.values()
    returns = list(returns)

    total_purchases = round2(sum((a.total_amount for a in attributions), ZERO))
    total_paid = round2(sum((a.amount_paid for a in attributions), ZERO))
    total_payments_received = round2(
        sum((round2(safe_parse_decimal(p.amount)) for p in payments), ZERO)
    )
    total_return_credits = round2(sum((credited_refund(r) for r in returns), ZERO))

    total_outstanding = round2(total_purchases - total_paid - total_return_credits)

    return LedgerStats(
        total_bills=len(classification.paid) + len(classification.unpaid),
        paid_bills=len(classification.paid),
        unpaid_bills=len(classification.unpaid),
        total_purchases=total_purchases,
        total_paid=total_paid,
        total_payments_received=total_payments_received,
        total_return_credits=total_return_credits,
        total_returns=len(returns),
        total_outstanding=total_outstanding,
        display_outstanding=abs(total_outstanding),
        has_credit=total_outstanding < 0,
        balance_side=balance_side(total_outstanding),
    )


def due_status(
    due_date: datetime,
    now: datetime,
    due_soon_days: int = DEFAULT_DUE_SOON_DAYS,
) -> DueStatus:
    """Overdue once the due date has passed; due soon within ``due_soon_days``."""
    days_left = math.ceil((due_date - now).total_seconds() / _SECONDS_PER_DAY)
    if days_left < 0:
        return DueStatus.OVERDUE
    if days_left <= due_soon_days:
        return DueStatus.DUE_SOON
    return DueStatus.NORMAL


def due_payments(
    classification: BillClassification,
    now: datetime | None = None,
    due_soon_days: int = DEFAULT_DUE_SOON_DAYS,
) -> list[DuePayment]:
    """Unpaid bills that carry a due date, earliest due first."""
    if now is None:
        now = datetime.now(UTC)

    scheduled: list[DuePayment] = []
    for bill in classification.unpaid:
        if bill.due_date in (None, ""):
            continue
        due_date = safe_parse_date(bill.due_date, now)
        scheduled.append(
            DuePayment(
                bill=bill,
                due_date=due_date,
                outstanding=classification.attributions[bill.id].outstanding,
                status=due_status(due_date, now, due_soon_days),
            )
        )

    scheduled.sort(key=lambda item: (item.due_date, item.bill.id))
    return scheduled
