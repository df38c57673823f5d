"""Payment API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ledger.core.database import get_db
from ledger.models.payment import Payment
from ledger.repositories.payment_repository import PaymentRepository
from ledger.schemas.payment import PaymentResponse, PaymentUpdate
from ledger.services.payment_service import PaymentService

router = APIRouter()


@router.get(
    "/",
    response_model=list[PaymentResponse],
    summary="List payments",
)
async def list_payments(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    customer_phone: str | None = None,
    sale_id: str | None = None,
    db: Session = Depends(get_db),
) -> list[Payment]:
    """List payments, newest first, with optional filters."""
    return PaymentRepository(db).get_all(
        skip=skip,
        limit=limit,
        customer_phone=customer_phone,
        sale_id=sale_id,
    )


@router.patch(
    "/{payment_id}",
    response_model=PaymentResponse,
    summary="Update payment",
    responses={404: {"description": "Payment not found"}},
)
async def update_payment(
    payment_id: str,
    data: PaymentUpdate,
    db: Session = Depends(get_db),
) -> Payment:
    """Edit a payment; the bill's amount paid moves by the difference."""
    payment = PaymentService(db).update_payment(payment_id, data)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


@router.delete(
    "/{payment_id}",
    status_code=204,
    summary="Delete payment",
    responses={404: {"description": "Payment not found"}},
)
async def delete_payment(
    payment_id: str,
    db: Session = Depends(get_db),
) -> None:
    if not PaymentService(db).delete_payment(payment_id):
        raise HTTPException(status_code=404, detail="Payment not found")
