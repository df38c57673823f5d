"""Return service: refunds against bills or standalone."""

import logging

from sqlalchemy.orm import Session

from ledger.core.numeric import ZERO, round2
from ledger.models.sale import PaymentStatus, Sale, SaleItem
from ledger.models.sale_return import RefundMethod, ReturnType, SaleReturn
from ledger.repositories.return_repository import ReturnRepository
from ledger.repositories.sale_repository import SaleRepository
from ledger.schemas.sale_return import ReturnCreate
from ledger.services.sale_service import SaleService

logger = logging.getLogger(__name__)


class ReturnService:
    """Service for return business logic."""

    def __init__(self, db: Session):
        self.db = db
        self.sale_repo = SaleRepository(db)
        self.return_repo = ReturnRepository(db)
        self.sale_service = SaleService(db)

    def create_return(self, data: ReturnCreate) -> SaleReturn:
        """Record a return and update the sold items it references.

        Only ``credit`` refunds later reduce what the customer owes; a ``cash``
        refund is stored and listed but leaves every balance unchanged.

        Raises:
            ValueError: If the referenced bill or bill item does not exist, or
                more units would be returned than were sold.
        """
        sale: Sale | None = None
        if data.sale_id:
            sale = self.sale_repo.get_by_id(data.sale_id)
            if not sale:
                logger.warning("Return rejected: sale %s not found", data.sale_id)
                raise ValueError(f"Sale {data.sale_id} not found")

        # Every item is checked before any sold quantity changes.
        returned: dict[str, tuple[SaleItem, int]] = {}
        items = []
        for item in data.items:
            if item.sale_item_id:
                sale_item, quantity = returned.get(item.sale_item_id, (None, 0))
                if sale_item is None:
                    sale_item = self.sale_repo.get_item_by_id(item.sale_item_id)
                if not sale_item or (sale is not None and sale_item.sale_id != sale.id):
                    raise ValueError(f"Sale item {item.sale_item_id} not found")
                remaining = sale_item.quantity - (sale_item.quantity_returned or 0) - quantity
                if item.quantity > remaining:
                    raise ValueError(
                        f"Cannot return {item.quantity} of item {sale_item.id}: "
                        f"only {remaining} left to return"
                    )
                returned[sale_item.id] = (sale_item, quantity + item.quantity)

            items.append(
                {
                    "sale_item_id": item.sale_item_id,
                    "product_id": item.product_id,
                    "description": item.description,
                    "quantity": item.quantity,
                    "rate": round2(item.rate),
                    "subtotal": round2(item.quantity * item.rate),
                }
            )

        for sale_item, quantity in returned.values():
            sale_item.quantity_returned = (sale_item.quantity_returned or 0) + quantity

        total_refund = round2(sum((item["subtotal"] for item in items), ZERO))

        sale_return = self.return_repo.create(
            customer_name=data.customer_name,
            customer_phone=data.customer_phone,
            total_refund=total_refund,
            items=items,
            sale_id=sale.id if sale else None,
            return_type=data.return_type,
            refund_method=data.refund_method,
            reason=data.reason,
            commit=False,
        )

        if sale is not None:
            if data.return_type == ReturnType.FULL_BILL:
                sale.payment_status = PaymentStatus.FULL_RETURN.value
            elif data.refund_method == RefundMethod.CREDIT:
                self.sale_service.refresh_payment_status(sale)

        self.db.commit()
        self.db.refresh(sale_return)

        logger.info(
            "Recorded %s return %s of %s (%s refund) for %s",
            sale_return.return_type,
            sale_return.id,
            total_refund,
            sale_return.refund_method,
            sale_return.customer_phone,
        )
        return sale_return
