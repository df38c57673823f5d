from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel


class BillStatusFilter(str, Enum):
    ALL = "all"
    UNPAID = "unpaid"
    FULLY_PAID = "fully_paid"


class CustomerSort(str, Enum):
    OLDEST = "oldest"
    NEWEST = "newest"
    HIGHEST = "highest"
    LOWEST = "lowest"
    NAME = "name"


class CustomerBalanceResponse(BaseModel):
    customer_phone: str
    customer_name: str
    total_bills: int
    unpaid_bills: int
    total_purchases: Decimal
    total_paid: Decimal
    total_outstanding: Decimal
    display_outstanding: Decimal
    has_credit: bool
    oldest_bill_date: datetime | None = None
    days_since_oldest_bill: int = 0
