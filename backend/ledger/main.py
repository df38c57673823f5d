import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ledger.core.config import settings
from ledger.routers import customers, payments, returns, sales

logging.getLogger("ledger").setLevel(settings.LOG_LEVEL.upper())

OPENAPI_TAGS = [
    {"name": "Customers", "description": "Customer balances, ledgers and statements."},
    {"name": "Sales", "description": "Create bills and manual balances, set due dates."},
    {"name": "Payments", "description": "Record, edit and delete payments against bills."},
    {"name": "Returns", "description": "Record item and full-bill returns."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Customer ledger API. Tracks bills, payments and returns per customer "
        "and reconciles them into running-balance statements."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)


app.include_router(customers.router, prefix="/v1/customers", tags=["Customers"])
app.include_router(sales.router, prefix="/v1/sales", tags=["Sales"])
app.include_router(payments.router, prefix="/v1/payments", tags=["Payments"])
app.include_router(returns.router, prefix="/v1/returns", tags=["Returns"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "domain": settings.APP_DOMAIN,
        "status": "running",
    }
