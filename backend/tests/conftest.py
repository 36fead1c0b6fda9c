"""
Shared test configuration.

Environment is set before the application modules are imported so that
database.py never reaches for PostgreSQL and logging stays on the console.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = ""
os.environ["LEDGER_CORRECTION_MODE"] = "retain"

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from database import Base, get_db
from main import app
from models.business_partners import BusinessPartner
from tenant_ledger import TenantLedger

TENANT_ID = "tenant-a"
OTHER_TENANT_ID = "tenant-b"

# In-memory database shared by every connection of the test run
TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test function and drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def ledger(db_session):
    """Ledger handle for TENANT_ID with an empty chart of accounts."""
    return TenantLedger(db_session, TENANT_ID)


@pytest.fixture
def provisioned_ledger(ledger):
    ledger.provision_defaults()
    return ledger


@pytest.fixture
def make_partner(db_session):
    def _make_partner(name, tenant_id=TENANT_ID, is_customer=True, is_vendor=True):
        partner = BusinessPartner(name=name, tenant_id=tenant_id, is_customer=is_customer, is_vendor=is_vendor)
        db_session.add(partner)
        db_session.commit()
        db_session.refresh(partner)
        return partner
    return _make_partner


@pytest.fixture
def customer(make_partner):
    return make_partner("Acme Retail", is_vendor=False)


@pytest.fixture
def vendor(make_partner):
    return make_partner("Global Supplies", is_customer=False)


@pytest.fixture
def invoice_data(customer):
    return {
        "invoice_number": "INV-001",
        "customer_id": customer.id,
        "invoice_date": date(2024, 3, 1),
        "subtotal": 5000,
        "tax": 0,
        "total": 5000,
    }


@pytest.fixture
def client():
    """API client bound to TENANT_ID, with get_db pointed at the test database."""
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app, headers={"X-Tenant-ID": TENANT_ID})
    app.dependency_overrides.clear()
