"""Sale repository for data access."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ledger.models.sale import PaymentStatus, Sale, SaleItem
from ledger.models.sale_return import ReturnItem, SaleReturn


class SaleRepository:
    """Repository for Sale and SaleItem models."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        customer_phone: str | None = None,
    ) -> list[Sale]:
        """Get all sales with optional filters."""
        query = self.db.query(Sale)
        if customer_phone:
            query = query.filter(Sale.customer_phone == customer_phone)
        return query.order_by(Sale.created_at.desc()).offset(skip).limit(limit).all()

    def get_by_id(self, sale_id: str) -> Sale | None:
        """Get a sale by ID."""
        return self.db.query(Sale).filter(Sale.id == sale_id).first()

    def get_by_customer_phone(self, customer_phone: str) -> list[Sale]:
        """Get every sale for a customer, oldest first."""
        return (
            self.db.query(Sale)
            .filter(Sale.customer_phone == customer_phone)
            .order_by(Sale.created_at.asc())
            .all()
        )

    def get_item_by_id(self, item_id: str) -> SaleItem | None:
        """Get a sale line item by ID."""
        return self.db.query(SaleItem).filter(SaleItem.id == item_id).first()

    def list_customer_phones(self) -> list[str]:
        """Distinct phone numbers of every customer with a sale or a return."""
        phones = {row[0] for row in self.db.query(Sale.customer_phone).distinct()}
        phones.update(row[0] for row in self.db.query(SaleReturn.customer_phone).distinct())
        return sorted(phones)

    def latest_customer_name(self, customer_phone: str) -> str | None:
        """Name used on the customer's most recent sale."""
        row = (
            self.db.query(Sale.customer_name)
            .filter(Sale.customer_phone == customer_phone)
            .order_by(Sale.created_at.desc())
            .first()
        )
        return row[0] if row else None

    def count(self, customer_phone: str | None = None) -> int:
        """Count sales, optionally for a single customer."""
        query = self.db.query(func.count(Sale.id))
        if customer_phone:
            query = query.filter(Sale.customer_phone == customer_phone)
        return query.scalar() or 0

    def create(
        self,
        customer_name: str,
        customer_phone: str,
        total_amount: Decimal,
        amount_paid: Decimal = Decimal("0"),
        payment_status: PaymentStatus = PaymentStatus.UNPAID,
        items: list[dict[str, Any]] | None = None,
        due_date: datetime | None = None,
        notes: str | None = None,
        is_manual_balance: bool = False,
    ) -> Sale:
        """Create a sale together with its line items."""
        sale = Sale(
            customer_name=customer_name,
            customer_phone=customer_phone,
            total_amount=total_amount,
            amount_paid=amount_paid,
            payment_status=payment_status.value,
            due_date=due_date,
            notes=notes,
            is_manual_balance=is_manual_balance,
        )
        for position, item in enumerate(items or []):
            sale.items.append(SaleItem(position=position, **item))

        self.db.add(sale)
        self.db.commit()
        self.db.refresh(sale)
        return sale

    def update_fields(self, sale: Sale, **fields: Any) -> Sale:
        """Apply column changes to a loaded sale and persist them."""
        for key, value in fields.items():
            setattr(sale, key, value)
        self.db.commit()
        self.db.refresh(sale)
        return sale

    def delete(self, sale_id: str) -> bool:
        """Delete a sale with its items and payments; its returns lose the link."""
        sale = self.get_by_id(sale_id)
        if not sale:
            return False
        # Returns outlive the sale they came from.
        self.db.query(SaleReturn).filter(SaleReturn.sale_id == sale_id).update(
            {SaleReturn.sale_id: None}, synchronize_session=False
        )
        item_ids = select(SaleItem.id).where(SaleItem.sale_id == sale_id)
        self.db.query(ReturnItem).filter(ReturnItem.sale_item_id.in_(item_ids)).update(
            {ReturnItem.sale_item_id: None}, synchronize_session=False
        )
        self.db.delete(sale)
        self.db.commit()
        return True
