"""Payment repository for data access."""

from decimal import Decimal

from sqlalchemy.orm import Session

from ledger.models.payment import Payment, PaymentMethod


class PaymentRepository:
    """Repository for Payment model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        customer_phone: str | None = None,
        sale_id: str | None = None,
    ) -> list[Payment]:
        """Get all payments with optional filters, newest first."""
        query = self.db.query(Payment)
        if customer_phone:
            query = query.filter(Payment.customer_phone == customer_phone)
        if sale_id:
            query = query.filter(Payment.sale_id == sale_id)
        return query.order_by(Payment.created_at.desc()).offset(skip).limit(limit).all()

    def get_by_id(self, payment_id: str) -> Payment | None:
        """Get a payment by ID."""
        return self.db.query(Payment).filter(Payment.id == payment_id).first()

    def get_by_sale_id(self, sale_id: str) -> list[Payment]:
        """Get every payment recorded against a sale."""
        return (
            self.db.query(Payment)
            .filter(Payment.sale_id == sale_id)
            .order_by(Payment.created_at.asc())
            .all()
        )

    def get_by_customer_phone(self, customer_phone: str) -> list[Payment]:
        """Get every payment for a customer, oldest first."""
        return (
            self.db.query(Payment)
            .filter(Payment.customer_phone == customer_phone)
            .order_by(Payment.created_at.asc())
            .all()
        )

    def create(
        self,
        sale_id: str,
        customer_phone: str,
        amount: Decimal,
        previous_balance: Decimal,
        new_balance: Decimal,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        notes: str | None = None,
        commit: bool = True,
    ) -> Payment:
        """Create a new payment."""
        payment = Payment(
            sale_id=sale_id,
            customer_phone=customer_phone,
            amount=amount,
            previous_balance=previous_balance,
            new_balance=new_balance,
            payment_method=payment_method.value,
            notes=notes,
        )
        self.db.add(payment)
        if commit:
            self.db.commit()
            self.db.refresh(payment)
        else:
            self.db.flush()
        return payment

    def delete(self, payment: Payment, commit: bool = True) -> None:
        """Delete a loaded payment."""
        self.db.delete(payment)
        if commit:
            self.db.commit()
        else:
            self.db.flush()
