"""Sale service: point-of-sale bills, manual balances and due dates."""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from ledger.core.numeric import ZERO, round2
from ledger.models.sale import PaymentStatus, Sale
from ledger.repositories.payment_repository import PaymentRepository
from ledger.repositories.return_repository import ReturnRepository
from ledger.repositories.sale_repository import SaleRepository
from ledger.schemas.ledger import BillSnapshot, PaymentSnapshot, ReturnSnapshot
from ledger.schemas.sale import DueDateUpdate, ManualBalanceCreate, SaleCreate
from ledger.services.ledger_normalizer import BillAttribution, SaleTotals, attribute_bill

logger = logging.getLogger(__name__)


def payment_status_for(
    total_amount: Decimal,
    amount_paid: Decimal,
    bill_returns: Decimal = ZERO,
) -> PaymentStatus:
    """Badge shown on a bill; the ledger itself never reads it."""
    if round2(total_amount - amount_paid - bill_returns) <= 0:
        return PaymentStatus.PAID
    if amount_paid > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


class SaleService:
    """Service for sale (bill) business logic."""

    def __init__(self, db: Session):
        self.db = db
        self.sale_repo = SaleRepository(db)
        self.payment_repo = PaymentRepository(db)
        self.return_repo = ReturnRepository(db)

    def create_sale(self, data: SaleCreate) -> Sale:
        """Create a bill from line items, with an optional payment taken at the counter."""
        items = []
        for item in data.items:
            items.append(
                {
                    "product_id": item.product_id,
                    "description": item.description,
                    "quantity": item.quantity,
                    "rate": round2(item.rate),
                    "subtotal": round2(item.quantity * item.rate),
                }
            )
        total_amount = round2(sum((item["subtotal"] for item in items), ZERO))
        amount_paid = round2(data.amount_paid)

        sale = self.sale_repo.create(
            customer_name=data.customer_name,
            customer_phone=data.customer_phone,
            total_amount=total_amount,
            amount_paid=amount_paid,
            payment_status=payment_status_for(total_amount, amount_paid),
            items=items,
            due_date=data.due_date,
            notes=data.notes,
        )
        logger.info(
            "Created sale %s for %s: total=%s paid=%s",
            sale.id,
            sale.customer_phone,
            total_amount,
            amount_paid,
        )
        return sale

    def create_manual_balance(self, data: ManualBalanceCreate) -> Sale:
        """Record an opening balance or loan as an unpaid bill without items."""
        total_amount = round2(data.total_amount)
        sale = self.sale_repo.create(
            customer_name=data.customer_name,
            customer_phone=data.customer_phone,
            total_amount=total_amount,
            due_date=data.due_date,
            notes=data.notes or f"Manual balance of {total_amount}",
            is_manual_balance=True,
        )
        logger.info(
            "Created manual balance %s for %s: total=%s",
            sale.id,
            sale.customer_phone,
            total_amount,
        )
        return sale

    def set_due_date(self, sale: Sale, data: DueDateUpdate) -> Sale:
        """Set or clear a bill's due date, replacing notes only when they are sent."""
        fields: dict[str, object] = {"due_date": data.due_date}
        if "notes" in data.model_fields_set:
            fields["notes"] = data.notes
        return self.sale_repo.update_fields(sale, **fields)

    def delete_sale(self, sale_id: str) -> bool:
        deleted = self.sale_repo.delete(sale_id)
        if deleted:
            logger.info("Deleted sale %s", sale_id)
        return deleted

    def attribution(self, sale: Sale) -> BillAttribution:
        """Paid/returned/outstanding split of one bill, from its current records."""
        totals = SaleTotals.collect(
            [PaymentSnapshot.model_validate(p) for p in self.payment_repo.get_by_sale_id(sale.id)],
            [ReturnSnapshot.model_validate(r) for r in self.return_repo.get_by_sale_id(sale.id)],
        )
        return attribute_bill(BillSnapshot.model_validate(sale), totals)

    def refresh_payment_status(self, sale: Sale) -> None:
        """Recompute the badge after a payment or return changed; caller commits."""
        if sale.payment_status == PaymentStatus.FULL_RETURN.value:
            return
        self.db.flush()
        attribution = self.attribution(sale)
        sale.payment_status = payment_status_for(
            attribution.total_amount,
            attribution.amount_paid,
            attribution.bill_returns,
        ).value
