"""Customer statement endpoints."""

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from ledger.core.database import get_db
from ledger.schemas.customer import BillStatusFilter, CustomerBalanceResponse, CustomerSort
from ledger.schemas.ledger import CustomerLedger, DuePayment
from ledger.services.statement_service import CustomerStatementService

router = APIRouter()


@router.get(
    "/",
    response_model=list[CustomerBalanceResponse],
    summary="List customer balances",
)
async def list_customer_balances(
    response: Response,
    bill_status: BillStatusFilter = BillStatusFilter.ALL,
    search: str | None = None,
    min_outstanding: Decimal | None = None,
    max_outstanding: Decimal | None = None,
    sort: CustomerSort = CustomerSort.OLDEST,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> list[CustomerBalanceResponse]:
    """One reconciled balance row per customer, filtered and sorted."""
    rows = CustomerStatementService(db).list_customer_balances(
        bill_status=bill_status,
        search=search,
        min_outstanding=min_outstanding,
        max_outstanding=max_outstanding,
        sort=sort,
    )
    response.headers["X-Total-Count"] = str(len(rows))
    return rows[skip : skip + limit]


def _get_statement(customer_phone: str, db: Session) -> CustomerLedger:
    statement = CustomerStatementService(db).get_customer_ledger(customer_phone)
    if statement is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return statement


@router.get(
    "/{customer_phone}/ledger",
    response_model=CustomerLedger,
    summary="Get customer ledger",
    responses={404: {"description": "Customer not found"}},
)
async def get_customer_ledger(
    customer_phone: str,
    db: Session = Depends(get_db),
) -> CustomerLedger:
    """Ledger (newest first) with running balances, stats and due payments."""
    return _get_statement(customer_phone, db)


@router.get(
    "/{customer_phone}/due_payments",
    response_model=list[DuePayment],
    summary="List customer due payments",
    responses={404: {"description": "Customer not found"}},
)
async def get_customer_due_payments(
    customer_phone: str,
    db: Session = Depends(get_db),
) -> list[DuePayment]:
    """Unpaid bills with a due date, earliest first."""
    return _get_statement(customer_phone, db).due_payments


@router.get(
    "/{customer_phone}/statement.csv",
    summary="Download customer statement as CSV",
    responses={404: {"description": "Customer not found"}},
)
async def download_statement_csv(
    customer_phone: str,
    db: Session = Depends(get_db),
) -> Response:
    content = CustomerStatementService(db).export_csv(customer_phone)
    if content is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return Response(
        content=content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="statement_{customer_phone}.csv"'
        },
    )


@router.get(
    "/{customer_phone}/statement.pdf",
    summary="Download customer statement as PDF",
    responses={404: {"description": "Customer not found"}},
)
async def download_statement_pdf(
    customer_phone: str,
    db: Session = Depends(get_db),
) -> Response:
    pdf_bytes = CustomerStatementService(db).render_pdf(customer_phone)
    if pdf_bytes is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="statement_{customer_phone}.pdf"'
        },
    )
