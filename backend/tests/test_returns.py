"""Tests for return API, ReturnService and ReturnRepository."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from ledger.main import app
from ledger.models.sale import PaymentStatus
from ledger.models.sale_return import RefundMethod, ReturnStatus, ReturnType
from ledger.repositories.return_repository import ReturnRepository
from ledger.repositories.sale_repository import SaleRepository
from ledger.schemas.sale import SaleCreate, SaleItemCreate
from ledger.schemas.sale_return import ReturnCreate, ReturnItemCreate
from ledger.services.return_service import ReturnService
from ledger.services.sale_service import SaleService


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def sale(db_session):
    """A 300.00 bill: 3 tins at 80.00 and one roller at 60.00, nothing paid."""
    return SaleService(db_session).create_sale(
        SaleCreate(
            customer_name="Dua",
            customer_phone="0333",
            items=[
                SaleItemCreate(product_id="tin", quantity=3, rate=Decimal("80")),
                SaleItemCreate(product_id="roller", quantity=1, rate=Decimal("60")),
            ],
        )
    )


def _return(sale, *items, **overrides):  # type: ignore[no-untyped-def]
    data = {
        "sale_id": sale.id if sale else None,
        "customer_name": "Dua",
        "customer_phone": "0333",
        "items": list(items),
    }
    data.update(overrides)
    return ReturnCreate(**data)


class TestCreateReturn:
    def test_item_return_bumps_quantity_returned(self, db_session, sale):
        tin = sale.items[0]
        sale_return = ReturnService(db_session).create_return(
            _return(
                sale,
                ReturnItemCreate(
                    sale_item_id=tin.id, product_id="tin", quantity=2, rate=Decimal("80")
                ),
            )
        )

        assert Decimal(sale_return.total_refund) == Decimal("160")
        assert sale_return.status == ReturnStatus.COMPLETED.value
        assert sale_return.return_type == ReturnType.ITEM.value
        assert sale_return.refund_method == RefundMethod.CASH.value
        assert len(sale_return.items) == 1

        db_session.expire_all()
        assert SaleRepository(db_session).get_item_by_id(tin.id).quantity_returned == 2

    def test_cannot_return_more_than_sold(self, db_session, sale):
        tin = sale.items[0]
        service = ReturnService(db_session)
        service.create_return(
            _return(sale, ReturnItemCreate(sale_item_id=tin.id, quantity=2, rate=Decimal("80")))
        )

        with pytest.raises(ValueError, match="only 1 left to return"):
            service.create_return(
                _return(sale, ReturnItemCreate(sale_item_id=tin.id, quantity=2, rate=Decimal("80")))
            )

    def test_rejected_return_leaves_sold_quantities_untouched(self, db_session, sale):
        tin, roller = sale.items
        with pytest.raises(ValueError, match="only 1 left to return"):
            ReturnService(db_session).create_return(
                _return(
                    sale,
                    ReturnItemCreate(sale_item_id=tin.id, quantity=1, rate=Decimal("80")),
                    ReturnItemCreate(sale_item_id=roller.id, quantity=2, rate=Decimal("60")),
                )
            )

        assert tin.quantity_returned == 0
        assert roller.quantity_returned == 0
        assert tin not in db_session.dirty

    def test_repeated_item_counts_against_one_quantity(self, db_session, sale):
        tin = sale.items[0]
        with pytest.raises(ValueError, match="only 1 left to return"):
            ReturnService(db_session).create_return(
                _return(
                    sale,
                    ReturnItemCreate(sale_item_id=tin.id, quantity=2, rate=Decimal("80")),
                    ReturnItemCreate(sale_item_id=tin.id, quantity=2, rate=Decimal("80")),
                )
            )
        assert tin.quantity_returned == 0

    def test_item_must_belong_to_the_sale(self, db_session, sale):
        other = SaleService(db_session).create_sale(
            SaleCreate(
                customer_name="Dua",
                customer_phone="0333",
                items=[SaleItemCreate(quantity=1, rate=Decimal("5"))],
            )
        )
        with pytest.raises(ValueError, match="not found"):
            ReturnService(db_session).create_return(
                _return(
                    sale,
                    ReturnItemCreate(sale_item_id=other.items[0].id, quantity=1, rate=Decimal("5")),
                )
            )

    def test_missing_sale(self, db_session):
        data = ReturnCreate(
            sale_id="missing",
            customer_name="Dua",
            customer_phone="0333",
            items=[ReturnItemCreate(quantity=1, rate=Decimal("1"))],
        )
        with pytest.raises(ValueError, match="Sale missing not found"):
            ReturnService(db_session).create_return(data)

    def test_standalone_return(self, db_session):
        sale_return = ReturnService(db_session).create_return(
            _return(None, ReturnItemCreate(quantity=2, rate=Decimal("12.345")))
        )
        assert sale_return.sale_id is None
        assert Decimal(sale_return.total_refund) == Decimal("24.69")

    def test_full_bill_return_marks_status_only(self, db_session, sale):
        SaleRepository(db_session).update_fields(sale, amount_paid=Decimal("100"))
        ReturnService(db_session).create_return(
            _return(
                sale,
                ReturnItemCreate(quantity=1, rate=Decimal("300")),
                return_type=ReturnType.FULL_BILL,
                refund_method=RefundMethod.CASH,
            )
        )

        db_session.expire_all()
        updated = SaleRepository(db_session).get_by_id(sale.id)
        assert updated.payment_status == PaymentStatus.FULL_RETURN.value
        assert Decimal(updated.amount_paid) == Decimal("100")

    def test_credit_return_can_settle_bill(self, db_session, sale):
        SaleRepository(db_session).update_fields(sale, amount_paid=Decimal("240"))
        ReturnService(db_session).create_return(
            _return(
                sale,
                ReturnItemCreate(sale_item_id=sale.items[1].id, quantity=1, rate=Decimal("60")),
                refund_method=RefundMethod.CREDIT,
            )
        )

        db_session.expire_all()
        assert SaleRepository(db_session).get_by_id(sale.id).payment_status == "paid"

    def test_cash_return_leaves_status(self, db_session, sale):
        ReturnService(db_session).create_return(
            _return(
                sale,
                ReturnItemCreate(sale_item_id=sale.items[1].id, quantity=1, rate=Decimal("60")),
            )
        )
        db_session.expire_all()
        assert SaleRepository(db_session).get_by_id(sale.id).payment_status == "unpaid"


class TestReturnRepository:
    def test_filters(self, db_session, sale):
        service = ReturnService(db_session)
        service.create_return(_return(sale, ReturnItemCreate(quantity=1, rate=Decimal("1"))))
        service.create_return(
            _return(
                None,
                ReturnItemCreate(quantity=1, rate=Decimal("1")),
                customer_phone="0444",
            )
        )

        repo = ReturnRepository(db_session)
        assert len(repo.get_all()) == 2
        assert len(repo.get_all(customer_phone="0333")) == 1
        assert len(repo.get_all(sale_id=sale.id)) == 1
        assert len(repo.get_by_sale_id(sale.id)) == 1
        assert len(repo.get_by_customer_phone("0444")) == 1


class TestReturnsAPI:
    def test_create_get_and_list(self, client: TestClient, sale):
        response = client.post(
            "/v1/returns/",
            json={
                "sale_id": sale.id,
                "customer_name": "Dua",
                "customer_phone": "0333",
                "refund_method": "credit",
                "reason": "wrong shade",
                "items": [{"sale_item_id": sale.items[0].id, "quantity": 1, "rate": "80"}],
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["refund_method"] == "credit"
        assert data["reason"] == "wrong shade"
        assert Decimal(data["total_refund"]) == Decimal("80")

        response = client.get(f"/v1/returns/{data['id']}")
        assert response.status_code == 200
        assert response.json()["items"][0]["quantity"] == 1

        response = client.get("/v1/returns/", params={"customer_phone": "0333"})
        assert [r["id"] for r in response.json()] == [data["id"]]

    def test_over_return_is_bad_request(self, client: TestClient, sale):
        response = client.post(
            "/v1/returns/",
            json={
                "sale_id": sale.id,
                "customer_name": "Dua",
                "customer_phone": "0333",
                "items": [{"sale_item_id": sale.items[1].id, "quantity": 2, "rate": "60"}],
            },
        )
        assert response.status_code == 400

    def test_invalid_refund_method(self, client: TestClient):
        response = client.post(
            "/v1/returns/",
            json={
                "customer_name": "Dua",
                "customer_phone": "0333",
                "refund_method": "voucher",
                "items": [{"quantity": 1, "rate": "1"}],
            },
        )
        assert response.status_code == 422

    def test_get_missing_return(self, client: TestClient):
        assert client.get("/v1/returns/missing").status_code == 404
