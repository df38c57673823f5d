"""Tests for payment API, PaymentService and PaymentRepository."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from ledger.main import app
from ledger.models.payment import PaymentMethod
from ledger.models.sale import PaymentStatus
from ledger.repositories.payment_repository import PaymentRepository
from ledger.repositories.sale_repository import SaleRepository
from ledger.schemas.payment import PaymentCreate, PaymentUpdate
from ledger.schemas.sale import SaleCreate, SaleItemCreate
from ledger.services.payment_service import PaymentService
from ledger.services.sale_service import SaleService


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def sale(db_session):
    """A 1000.00 bill with 400.00 paid at the counter."""
    return SaleService(db_session).create_sale(
        SaleCreate(
            customer_name="Chand",
            customer_phone="0322",
            items=[SaleItemCreate(quantity=4, rate=Decimal("250"))],
            amount_paid=Decimal("400"),
        )
    )


def _reload(db_session, sale_id):  # type: ignore[no-untyped-def]
    db_session.expire_all()
    return SaleRepository(db_session).get_by_id(sale_id)


class TestRecordPayment:
    def test_records_balances_and_updates_bill(self, db_session, sale):
        payment = PaymentService(db_session).record_payment(
            sale.id,
            PaymentCreate(amount=Decimal("250"), payment_method=PaymentMethod.CARD, notes="half"),
        )

        assert Decimal(payment.amount) == Decimal("250")
        assert Decimal(payment.previous_balance) == Decimal("600")
        assert Decimal(payment.new_balance) == Decimal("350")
        assert payment.payment_method == "card"
        assert payment.customer_phone == "0322"

        updated = _reload(db_session, sale.id)
        assert Decimal(updated.amount_paid) == Decimal("650")
        assert updated.payment_status == PaymentStatus.PARTIAL.value

    def test_paying_the_rest_marks_bill_paid(self, db_session, sale):
        PaymentService(db_session).record_payment(sale.id, PaymentCreate(amount=Decimal("600")))
        assert _reload(db_session, sale.id).payment_status == PaymentStatus.PAID.value

    def test_rejects_amount_above_outstanding(self, db_session, sale):
        with pytest.raises(ValueError, match="exceeds outstanding balance"):
            PaymentService(db_session).record_payment(
                sale.id, PaymentCreate(amount=Decimal("600.01"))
            )
        assert PaymentRepository(db_session).get_by_sale_id(sale.id) == []

    def test_rejects_amount_that_rounds_to_zero(self, db_session, sale):
        with pytest.raises(ValueError, match="greater than 0"):
            PaymentService(db_session).record_payment(
                sale.id, PaymentCreate(amount=Decimal("0.001"))
            )

    def test_rejects_missing_sale(self, db_session):
        with pytest.raises(ValueError, match="not found"):
            PaymentService(db_session).record_payment("missing", PaymentCreate(amount=Decimal("1")))


class TestUpdatePayment:
    def test_amount_change_shifts_amount_paid(self, db_session, sale):
        service = PaymentService(db_session)
        payment = service.record_payment(sale.id, PaymentCreate(amount=Decimal("200")))

        updated = service.update_payment(payment.id, PaymentUpdate(amount=Decimal("150")))

        assert Decimal(updated.amount) == Decimal("150")
        assert Decimal(_reload(db_session, sale.id).amount_paid) == Decimal("550")

    def test_method_and_notes_only(self, db_session, sale):
        service = PaymentService(db_session)
        payment = service.record_payment(sale.id, PaymentCreate(amount=Decimal("100")))

        updated = service.update_payment(
            payment.id,
            PaymentUpdate(payment_method=PaymentMethod.BANK_TRANSFER, notes="wire"),
        )

        assert updated.payment_method == "bank_transfer"
        assert updated.notes == "wire"
        assert Decimal(_reload(db_session, sale.id).amount_paid) == Decimal("500")

    def test_missing_payment(self, db_session):
        assert PaymentService(db_session).update_payment("missing", PaymentUpdate()) is None


class TestDeletePayment:
    def test_delete_subtracts_amount(self, db_session, sale):
        service = PaymentService(db_session)
        payment = service.record_payment(sale.id, PaymentCreate(amount=Decimal("600")))

        assert service.delete_payment(payment.id) is True

        updated = _reload(db_session, sale.id)
        assert Decimal(updated.amount_paid) == Decimal("400")
        assert updated.payment_status == PaymentStatus.PARTIAL.value
        assert PaymentRepository(db_session).get_by_id(payment.id) is None

    def test_amount_paid_never_goes_negative(self, db_session, sale):
        service = PaymentService(db_session)
        payment = service.record_payment(sale.id, PaymentCreate(amount=Decimal("100")))
        SaleRepository(db_session).update_fields(
            _reload(db_session, sale.id), amount_paid=Decimal("30")
        )

        service.delete_payment(payment.id)

        updated = _reload(db_session, sale.id)
        assert Decimal(updated.amount_paid) == Decimal("0")
        assert updated.payment_status == PaymentStatus.UNPAID.value

    def test_missing_payment(self, db_session):
        assert PaymentService(db_session).delete_payment("missing") is False


class TestPaymentsAPI:
    def test_record_list_update_delete(self, client: TestClient, sale):
        response = client.post(
            f"/v1/sales/{sale.id}/payments",
            json={"amount": "100", "payment_method": "cash"},
        )
        assert response.status_code == 201
        payment_id = response.json()["id"]

        response = client.get("/v1/payments/", params={"customer_phone": "0322"})
        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [payment_id]

        response = client.patch(f"/v1/payments/{payment_id}", json={"amount": "120"})
        assert response.status_code == 200
        assert Decimal(response.json()["amount"]) == Decimal("120")

        assert client.delete(f"/v1/payments/{payment_id}").status_code == 204
        assert client.get("/v1/payments/", params={"customer_phone": "0322"}).json() == []

    def test_overpayment_is_rejected(self, client: TestClient, sale):
        response = client.post(f"/v1/sales/{sale.id}/payments", json={"amount": "10000"})
        assert response.status_code == 400
        assert "exceeds outstanding balance" in response.json()["detail"]

    def test_non_positive_amount_is_invalid(self, client: TestClient, sale):
        response = client.post(f"/v1/sales/{sale.id}/payments", json={"amount": "0"})
        assert response.status_code == 422

    def test_payment_for_missing_sale(self, client: TestClient):
        response = client.post("/v1/sales/missing/payments", json={"amount": "5"})
        assert response.status_code == 404

    def test_update_and_delete_missing(self, client: TestClient):
        assert client.patch("/v1/payments/missing", json={"notes": "x"}).status_code == 404
        assert client.delete("/v1/payments/missing").status_code == 404
