"""API tests for the ledger app: health, schema and database setup."""

import json
import runpy
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import inspect

from ledger.core import database as db_module
from ledger.core.config import settings
from ledger.core.database import init_db
from ledger.main import app


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


class TestRoot:
    def test_health(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["app"] == settings.APP_NAME
        assert data["version"] == settings.version
        assert data["status"] == "running"

    def test_cors_exposes_total_count(self, client: TestClient):
        response = client.options(
            "/v1/customers/",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


class TestOpenAPI:
    def test_routes_documented(self, client: TestClient):
        schema = client.get("/openapi.json").json()
        paths = schema["paths"]
        assert "/v1/customers/{customer_phone}/ledger" in paths
        assert "/v1/customers/{customer_phone}/statement.pdf" in paths
        assert "/v1/sales/{sale_id}/payments" in paths
        assert "/v1/returns/" in paths
        assert [tag["name"] for tag in schema["tags"]] == [
            "Customers",
            "Sales",
            "Payments",
            "Returns",
        ]

    def test_generate_openapi_script(self, capsys):
        runpy.run_module("scripts.generate_openapi", run_name="__main__")
        schema = json.loads(capsys.readouterr().out)
        assert schema["info"]["title"] == settings.APP_NAME


class TestInitDb:
    def test_creates_tables(self):
        init_db()
        tables = set(inspect(db_module.engine).get_table_names())
        assert {"sales", "sale_items", "payment_history", "returns", "return_items"} <= tables

    def test_foreign_keys_enforced(self, db_session):
        assert db_session.connection().exec_driver_sql("PRAGMA foreign_keys").scalar() == 1

    def test_init_db_script(self, capsys):
        with patch("ledger.core.database.init_db") as mock_init:
            runpy.run_module("scripts.init_db", run_name="__main__")
        mock_init.assert_called_once()
        assert "Ledger tables ready" in capsys.readouterr().out
