"""Payment service for recording and correcting recovery payments."""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from ledger.core.numeric import ZERO, round2, safe_parse_decimal
from ledger.models.payment import Payment
from ledger.repositories.payment_repository import PaymentRepository
from ledger.repositories.sale_repository import SaleRepository
from ledger.schemas.payment import PaymentCreate, PaymentUpdate
from ledger.services.sale_service import SaleService

logger = logging.getLogger(__name__)


class PaymentService:
    """Service for payment business logic.

    Every change here adjusts the bill's cumulative ``amount_paid`` so that it
    keeps equalling the counter payment plus all recorded payments. Ledger
    balances are never touched; they are recomputed on the next read.
    """

    def __init__(self, db: Session):
        self.db = db
        self.sale_repo = SaleRepository(db)
        self.payment_repo = PaymentRepository(db)
        self.sale_service = SaleService(db)

    def record_payment(self, sale_id: str, data: PaymentCreate) -> Payment:
        """Record a payment against a bill.

        Args:
            sale_id: The bill being paid.
            data: Amount, method and notes.

        Returns:
            The stored payment, with the bill's outstanding before and after.

        Raises:
            ValueError: If the bill does not exist, or the amount is not
                positive or exceeds what is still owed on the bill.
        """
        sale = self.sale_repo.get_by_id(sale_id)
        if not sale:
            logger.warning("Payment rejected: sale %s not found", sale_id)
            raise ValueError(f"Sale {sale_id} not found")

        amount = round2(data.amount)
        if amount <= 0:
            raise ValueError("Payment amount must be greater than 0")

        attribution = self.sale_service.attribution(sale)
        previous_balance = attribution.outstanding
        if amount > previous_balance:
            raise ValueError(
                f"Payment amount ({amount}) exceeds outstanding balance ({previous_balance})"
            )

        payment = self.payment_repo.create(
            sale_id=sale.id,
            customer_phone=sale.customer_phone,
            amount=amount,
            previous_balance=previous_balance,
            new_balance=round2(previous_balance - amount),
            payment_method=data.payment_method,
            notes=data.notes,
            commit=False,
        )
        sale.amount_paid = round2(attribution.amount_paid + amount)
        self.sale_service.refresh_payment_status(sale)
        self.db.commit()
        self.db.refresh(payment)

        logger.info(
            "Recorded payment %s of %s on sale %s (outstanding %s -> %s)",
            payment.id,
            amount,
            sale.id,
            previous_balance,
            payment.new_balance,
        )
        return payment

    def _shift_amount_paid(self, payment: Payment, difference: Decimal) -> None:
        sale = self.sale_repo.get_by_id(payment.sale_id)
        if not sale:
            logger.warning("Payment %s references missing sale %s", payment.id, payment.sale_id)
            return
        current_paid = safe_parse_decimal(sale.amount_paid)
        sale.amount_paid = round2(max(ZERO, current_paid + difference))
        self.sale_service.refresh_payment_status(sale)

    def update_payment(self, payment_id: str, data: PaymentUpdate) -> Payment | None:
        """Edit a payment's amount, method or notes."""
        payment = self.payment_repo.get_by_id(payment_id)
        if not payment:
            return None

        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("amount") is not None:
            old_amount = round2(safe_parse_decimal(payment.amount))
            new_amount = round2(update_data["amount"])
            payment.amount = new_amount
            if new_amount != old_amount:
                self._shift_amount_paid(payment, new_amount - old_amount)
                logger.info(
                    "Payment %s amount changed %s -> %s", payment.id, old_amount, new_amount
                )

        if update_data.get("payment_method") is not None:
            payment.payment_method = update_data["payment_method"].value
        if "notes" in update_data:
            payment.notes = update_data["notes"]

        self.db.commit()
        self.db.refresh(payment)
        return payment

    def delete_payment(self, payment_id: str) -> bool:
        """Delete a payment and take its amount back off the bill."""
        payment = self.payment_repo.get_by_id(payment_id)
        if not payment:
            return False

        sale_id = payment.sale_id
        amount = round2(safe_parse_decimal(payment.amount))
        self._shift_amount_paid(payment, -amount)
        self.payment_repo.delete(payment, commit=False)
        self.db.commit()

        logger.info("Deleted payment %s of %s on sale %s", payment_id, amount, sale_id)
        return True
