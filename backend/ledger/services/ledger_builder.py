"""Chronological, balance-annotated customer ledger."""

from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import Decimal

from ledger.core.numeric import ZERO, round2
from ledger.schemas.ledger import (
    BillSnapshot,
    LedgerEntry,
    LedgerEntryKind,
    PaymentSnapshot,
    ReturnSnapshot,
)
from ledger.services.ledger_normalizer import (
    SaleTotals,
    normalize_bill,
    normalize_payment,
    normalize_return,
)


def _sort_key(entry: LedgerEntry) -> tuple[datetime, str]:
    return entry.date, entry.entry_id


def build_ledger(
    bills: Iterable[BillSnapshot],
    payments: Iterable[PaymentSnapshot],
    returns: Iterable[ReturnSnapshot],
    now: datetime | None = None,
) -> list[LedgerEntry]:
    """Merge the three record streams into one ledger, newest entry first.

    Entries are ordered by (date, entry_id) and scanned oldest-first with a
    running balance: a bill adds its debit and subtracts its point-of-sale
    credit, payments and returns subtract their credit. Each entry records the
    balance right after it. The result is then reversed for display; the
    reversal does not touch the computed balances.

    Args:
        bills: Bill snapshots for one customer.
        payments: Recovery payment snapshots for the same customer.
        returns: Return snapshots for the same customer.
        now: Stand-in for unparsable dates. Defaults to the current time,
            captured once for the whole run.

    Returns:
        Fresh ``LedgerEntry`` objects in descending chronological order.
    """
    if now is None:
        now = datetime.now(UTC)

    bills = list(bills)
    payments = list(payments)
    returns = list(returns)
    totals = SaleTotals.collect(payments, returns)

    entries = [normalize_bill(bill, totals, now) for bill in bills]
    entries.extend(normalize_payment(payment, now) for payment in payments)
    entries.extend(normalize_return(sale_return, now) for sale_return in returns)
    entries.sort(key=_sort_key)

    balance = ZERO
    for entry in entries:
        if entry.kind == LedgerEntryKind.BILL:
            balance = round2(balance + entry.debit - entry.credit)
        else:
            balance = round2(balance - entry.credit)
        entry.balance_after = balance

    entries.reverse()
    return entries


def closing_balance(ledger: list[LedgerEntry]) -> Decimal:
    """Signed balance after the most recent entry of a descending ledger."""
    if not ledger:
        return round2(ZERO)
    return ledger[0].balance_after
