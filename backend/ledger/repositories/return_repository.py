"""Return repository for data access."""

from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from ledger.models.sale_return import (
    RefundMethod,
    ReturnItem,
    ReturnStatus,
    ReturnType,
    SaleReturn,
)


class ReturnRepository:
    """Repository for SaleReturn and ReturnItem models."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        customer_phone: str | None = None,
        sale_id: str | None = None,
    ) -> list[SaleReturn]:
        """Get all returns with optional filters, newest first."""
        query = self.db.query(SaleReturn)
        if customer_phone:
            query = query.filter(SaleReturn.customer_phone == customer_phone)
        if sale_id:
            query = query.filter(SaleReturn.sale_id == sale_id)
        return query.order_by(SaleReturn.created_at.desc()).offset(skip).limit(limit).all()

    def get_by_id(self, return_id: str) -> SaleReturn | None:
        """Get a return by ID."""
        return self.db.query(SaleReturn).filter(SaleReturn.id == return_id).first()

    def get_by_sale_id(self, sale_id: str) -> list[SaleReturn]:
        """Get every return linked to a sale."""
        return (
            self.db.query(SaleReturn)
            .filter(SaleReturn.sale_id == sale_id)
            .order_by(SaleReturn.created_at.asc())
            .all()
        )

    def get_by_customer_phone(self, customer_phone: str) -> list[SaleReturn]:
        """Get every return for a customer, oldest first."""
        return (
            self.db.query(SaleReturn)
            .filter(SaleReturn.customer_phone == customer_phone)
            .order_by(SaleReturn.created_at.asc())
            .all()
        )

    def create(
        self,
        customer_name: str,
        customer_phone: str,
        total_refund: Decimal,
        items: list[dict[str, Any]],
        sale_id: str | None = None,
        return_type: ReturnType = ReturnType.ITEM,
        refund_method: RefundMethod = RefundMethod.CASH,
        reason: str | None = None,
        commit: bool = True,
    ) -> SaleReturn:
        """Create a return together with its items."""
        sale_return = SaleReturn(
            sale_id=sale_id,
            customer_name=customer_name,
            customer_phone=customer_phone,
            return_type=return_type.value,
            refund_method=refund_method.value,
            status=ReturnStatus.COMPLETED.value,
            total_refund=total_refund,
            reason=reason,
        )
        for position, item in enumerate(items):
            sale_return.items.append(ReturnItem(position=position, **item))

        self.db.add(sale_return)
        if commit:
            self.db.commit()
            self.db.refresh(sale_return)
        else:
            self.db.flush()
        return sale_return
