"""Customer statements: snapshot loading, ledger projection and exports."""

import csv
import io
import logging
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from ledger.core.config import settings
from ledger.core.numeric import safe_parse_date
from ledger.repositories.payment_repository import PaymentRepository
from ledger.repositories.return_repository import ReturnRepository
from ledger.repositories.sale_repository import SaleRepository
from ledger.schemas.customer import BillStatusFilter, CustomerBalanceResponse, CustomerSort
from ledger.schemas.ledger import (
    BillSnapshot,
    CustomerLedger,
    CustomerSnapshot,
    PaymentSnapshot,
    ReturnSnapshot,
)
from ledger.services.pdf_service import StatementPdfService
from ledger.services.reconciliation import reconcile_customer

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "date",
    "type",
    "description",
    "reference",
    "debit",
    "credit",
    "balance",
    "outstanding",
]


class CustomerStatementService:
    """Service that feeds stored records through the reconciliation engine.

    Nothing computed here is ever written back; every call reloads the
    customer's bills, payments and returns and reconciles them from scratch.
    """

    def __init__(self, db: Session):
        self.db = db
        self.sale_repo = SaleRepository(db)
        self.payment_repo = PaymentRepository(db)
        self.return_repo = ReturnRepository(db)

    def load_snapshot(self, customer_phone: str) -> CustomerSnapshot | None:
        """Fetch every raw record for one customer, or None if there are none."""
        sales = self.sale_repo.get_by_customer_phone(customer_phone)
        payments = self.payment_repo.get_by_customer_phone(customer_phone)
        returns = self.return_repo.get_by_customer_phone(customer_phone)
        if not sales and not payments and not returns:
            return None

        customer_name = self.sale_repo.latest_customer_name(customer_phone)
        if customer_name is None and returns:
            customer_name = returns[-1].customer_name

        return CustomerSnapshot(
            customer_phone=customer_phone,
            customer_name=customer_name,
            bills=[BillSnapshot.model_validate(sale) for sale in sales],
            payments=[PaymentSnapshot.model_validate(payment) for payment in payments],
            returns=[ReturnSnapshot.model_validate(sale_return) for sale_return in returns],
        )

    def get_customer_ledger(
        self,
        customer_phone: str,
        now: datetime | None = None,
    ) -> CustomerLedger | None:
        """Reconciled ledger, stats and due payments for one customer."""
        snapshot = self.load_snapshot(customer_phone)
        if snapshot is None:
            return None

        statement = reconcile_customer(snapshot, now=now, due_soon_days=settings.DUE_SOON_DAYS)
        logger.info(
            "Built statement for %s: %d entries, outstanding %s",
            customer_phone,
            len(statement.ledger),
            statement.stats.total_outstanding,
        )
        return statement

    def export_csv(self, customer_phone: str, now: datetime | None = None) -> str | None:
        """Ledger as CSV text, newest entry first."""
        statement = self.get_customer_ledger(customer_phone, now=now)
        if statement is None:
            return None

        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(CSV_COLUMNS)
        for entry in statement.ledger:
            writer.writerow(
                [
                    entry.date.isoformat(),
                    entry.kind.value,
                    entry.description,
                    entry.reference,
                    str(entry.debit),
                    str(entry.credit),
                    str(entry.balance_after),
                    str(entry.outstanding),
                ]
            )
        return output.getvalue()

    def render_pdf(self, customer_phone: str, now: datetime | None = None) -> bytes | None:
        statement = self.get_customer_ledger(customer_phone, now=now)
        if statement is None:
            return None
        return StatementPdfService().render(statement, statement_date=now)

    def list_customer_balances(
        self,
        bill_status: BillStatusFilter = BillStatusFilter.ALL,
        search: str | None = None,
        min_outstanding: Decimal | None = None,
        max_outstanding: Decimal | None = None,
        sort: CustomerSort = CustomerSort.OLDEST,
        now: datetime | None = None,
    ) -> list[CustomerBalanceResponse]:
        """One balance row per customer, reconciled the same way as the ledger.

        Args:
            bill_status: ``unpaid`` keeps customers with at least one unpaid
                bill, ``fully_paid`` those with none.
            search: Case-insensitive substring of the name or phone.
            min_outstanding: Lower bound on the signed outstanding.
            max_outstanding: Upper bound on the signed outstanding.
            sort: Row order.
            now: Reference time for bill ages.
        """
        if now is None:
            now = datetime.now(UTC)
        needle = search.strip().lower() if search else ""

        rows: list[CustomerBalanceResponse] = []
        for phone in self.sale_repo.list_customer_phones():
            snapshot = self.load_snapshot(phone)
            if snapshot is None:
                continue
            name = snapshot.customer_name or ""
            if needle and needle not in name.lower() and needle not in phone.lower():
                continue

            stats = reconcile_customer(snapshot, now=now).stats

            if bill_status == BillStatusFilter.UNPAID and stats.unpaid_bills == 0:
                continue
            if bill_status == BillStatusFilter.FULLY_PAID and stats.unpaid_bills > 0:
                continue
            if min_outstanding is not None and stats.total_outstanding < min_outstanding:
                continue
            if max_outstanding is not None and stats.total_outstanding > max_outstanding:
                continue

            bill_dates = [safe_parse_date(bill.created_at, now) for bill in snapshot.bills]
            oldest = min(bill_dates) if bill_dates else None

            rows.append(
                CustomerBalanceResponse(
                    customer_phone=phone,
                    customer_name=name,
                    total_bills=stats.total_bills,
                    unpaid_bills=stats.unpaid_bills,
                    total_purchases=stats.total_purchases,
                    total_paid=stats.total_paid,
                    total_outstanding=stats.total_outstanding,
                    display_outstanding=stats.display_outstanding,
                    has_credit=stats.has_credit,
                    oldest_bill_date=oldest,
                    days_since_oldest_bill=max(0, (now - oldest).days) if oldest else 0,
                )
            )

        return _sort_balances(rows, sort)


def _sort_balances(
    rows: list[CustomerBalanceResponse], sort: CustomerSort
) -> list[CustomerBalanceResponse]:
    far_future = datetime.max.replace(tzinfo=UTC)
    far_past = datetime.min.replace(tzinfo=UTC)
    if sort == CustomerSort.OLDEST:
        return sorted(rows, key=lambda r: (r.oldest_bill_date or far_future, r.customer_phone))
    if sort == CustomerSort.NEWEST:
        return sorted(
            rows,
            key=lambda r: (r.oldest_bill_date or far_past, r.customer_phone),
            reverse=True,
        )
    if sort == CustomerSort.HIGHEST:
        return sorted(rows, key=lambda r: (-r.total_outstanding, r.customer_phone))
    if sort == CustomerSort.LOWEST:
        return sorted(rows, key=lambda r: (r.total_outstanding, r.customer_phone))
    return sorted(rows, key=lambda r: (r.customer_name.lower(), r.customer_phone))

