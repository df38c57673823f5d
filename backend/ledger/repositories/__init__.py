from ledger.repositories.payment_repository import PaymentRepository
from ledger.repositories.return_repository import ReturnRepository
from ledger.repositories.sale_repository import SaleRepository

__all__ = [
    "PaymentRepository",
    "ReturnRepository",
    "SaleRepository",
]
