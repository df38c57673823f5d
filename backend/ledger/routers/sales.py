"""Sale (bill) API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ledger.core.database import get_db
from ledger.models.payment import Payment
from ledger.models.sale import Sale
from ledger.repositories.sale_repository import SaleRepository
from ledger.schemas.payment import PaymentCreate, PaymentResponse
from ledger.schemas.sale import DueDateUpdate, ManualBalanceCreate, SaleCreate, SaleResponse
from ledger.services.payment_service import PaymentService
from ledger.services.sale_service import SaleService

router = APIRouter()


@router.post(
    "/",
    response_model=SaleResponse,
    status_code=201,
    summary="Create sale",
    responses={422: {"description": "Validation error"}},
)
async def create_sale(
    data: SaleCreate,
    db: Session = Depends(get_db),
) -> Sale:
    """Create a bill from line items, optionally with an amount paid at the counter."""
    return SaleService(db).create_sale(data)


@router.post(
    "/manual_balance",
    response_model=SaleResponse,
    status_code=201,
    summary="Create manual balance",
    responses={422: {"description": "Validation error"}},
)
async def create_manual_balance(
    data: ManualBalanceCreate,
    db: Session = Depends(get_db),
) -> Sale:
    """Enter an opening balance or loan for a customer."""
    return SaleService(db).create_manual_balance(data)


@router.get(
    "/{sale_id}",
    response_model=SaleResponse,
    summary="Get sale",
    responses={404: {"description": "Sale not found"}},
)
async def get_sale(
    sale_id: str,
    db: Session = Depends(get_db),
) -> Sale:
    sale = SaleRepository(db).get_by_id(sale_id)
    if not sale:
        raise HTTPException(status_code=404, detail="Sale not found")
    return sale


@router.patch(
    "/{sale_id}/due_date",
    response_model=SaleResponse,
    summary="Set sale due date",
    responses={404: {"description": "Sale not found"}},
)
async def update_due_date(
    sale_id: str,
    data: DueDateUpdate,
    db: Session = Depends(get_db),
) -> Sale:
    """Set or clear the due date of a bill."""
    sale = SaleRepository(db).get_by_id(sale_id)
    if not sale:
        raise HTTPException(status_code=404, detail="Sale not found")
    return SaleService(db).set_due_date(sale, data)


@router.delete(
    "/{sale_id}",
    status_code=204,
    summary="Delete sale",
    responses={404: {"description": "Sale not found"}},
)
async def delete_sale(
    sale_id: str,
    db: Session = Depends(get_db),
) -> None:
    """Delete a bill with its items and payments. Its returns are kept."""
    if not SaleService(db).delete_sale(sale_id):
        raise HTTPException(status_code=404, detail="Sale not found")


@router.post(
    "/{sale_id}/payments",
    response_model=PaymentResponse,
    status_code=201,
    summary="Record payment",
    responses={
        400: {"description": "Payment exceeds outstanding balance"},
        404: {"description": "Sale not found"},
    },
)
async def record_payment(
    sale_id: str,
    data: PaymentCreate,
    db: Session = Depends(get_db),
) -> Payment:
    """Record a payment received against a bill."""
    if not SaleRepository(db).get_by_id(sale_id):
        raise HTTPException(status_code=404, detail="Sale not found")
    try:
        return PaymentService(db).record_payment(sale_id, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
