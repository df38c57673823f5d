"""One-call reconciliation of a customer snapshot: ledger, stats and due payments."""

from datetime import UTC, datetime

from ledger.schemas.ledger import CustomerLedger, CustomerSnapshot
from ledger.services.bill_classifier import (
    DEFAULT_DUE_SOON_DAYS,
    classify_bills,
    compute_stats,
    due_payments,
)
from ledger.services.ledger_builder import build_ledger
from ledger.services.ledger_normalizer import SaleTotals


def reconcile_customer(
    snapshot: CustomerSnapshot,
    now: datetime | None = None,
    due_soon_days: int = DEFAULT_DUE_SOON_DAYS,
) -> CustomerLedger:
    """Recompute everything derived from one customer's raw records.

    Pure: no I/O, no caching, and the snapshot is left untouched. Callers
    re-run this after every create/edit/delete of a bill, payment or return.
    """
    if now is None:
        now = datetime.now(UTC)

    ledger = build_ledger(snapshot.bills, snapshot.payments, snapshot.returns, now=now)

    totals = SaleTotals.collect(snapshot.payments, snapshot.returns)
    classification = classify_bills(snapshot.bills, totals)
    stats = compute_stats(classification, snapshot.payments, snapshot.returns)

    return CustomerLedger(
        customer_phone=snapshot.customer_phone,
        customer_name=snapshot.customer_name,
        ledger=ledger,
        stats=stats,
        due_payments=due_payments(classification, now=now, due_soon_days=due_soon_days),
    )
