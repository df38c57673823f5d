"""Return API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ledger.core.database import get_db
from ledger.models.sale_return import SaleReturn
from ledger.repositories.return_repository import ReturnRepository
from ledger.schemas.sale_return import ReturnCreate, ReturnResponse
from ledger.services.return_service import ReturnService

router = APIRouter()


@router.post(
    "/",
    response_model=ReturnResponse,
    status_code=201,
    summary="Create return",
    responses={
        400: {"description": "Sale or sale item not found, or quantity exceeds what was sold"},
        422: {"description": "Validation error"},
    },
)
async def create_return(
    data: ReturnCreate,
    db: Session = Depends(get_db),
) -> SaleReturn:
    """Record a return. Only credit refunds reduce what the customer owes."""
    try:
        return ReturnService(db).create_return(data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None


@router.get(
    "/",
    response_model=list[ReturnResponse],
    summary="List returns",
)
async def list_returns(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    customer_phone: str | None = None,
    sale_id: str | None = None,
    db: Session = Depends(get_db),
) -> list[SaleReturn]:
    return ReturnRepository(db).get_all(
        skip=skip,
        limit=limit,
        customer_phone=customer_phone,
        sale_id=sale_id,
    )


@router.get(
    "/{return_id}",
    response_model=ReturnResponse,
    summary="Get return",
    responses={404: {"description": "Return not found"}},
)
async def get_return(
    return_id: str,
    db: Session = Depends(get_db),
) -> SaleReturn:
    sale_return = ReturnRepository(db).get_by_id(return_id)
    if not sale_return:
        raise HTTPException(status_code=404, detail="Return not found")
    return sale_return
