"""Fixtures shared by the ledger test modules."""

import contextlib

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import ledger.models  # noqa: F401
from ledger.core import database as db_module
from ledger.core.database import Base, get_db

# One in-memory SQLite database behind a single shared connection, so the
# TestClient's request sessions and db_session see the same rows.
_ledger_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_LedgerSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_ledger_engine)


@pytest.fixture(autouse=True)
def ledger_database():
    """Point the app at the in-memory database and empty every ledger table afterwards."""
    saved_engine, saved_sessionmaker = db_module.engine, db_module.SessionLocal
    db_module.engine = _ledger_engine
    db_module.SessionLocal = _LedgerSessionLocal

    Base.metadata.create_all(bind=_ledger_engine)

    yield

    # Returns and payments reference sales; drop the FK checks while clearing.
    # SQLite ignores the pragma inside a transaction, so switch it back on only
    # after the deletes are committed.
    with _ledger_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.commit()
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    db_module.engine, db_module.SessionLocal = saved_engine, saved_sessionmaker


@pytest.fixture
def db_session():
    """Session from the app's own get_db dependency, for service and repository tests."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass
