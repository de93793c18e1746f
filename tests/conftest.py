"""Pytest fixtures for testing"""

import os

# Settings are read at import time; keep the app engine off PostgreSQL
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date
from decimal import Decimal
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from receipts_gateway.api.main import create_app
from receipts_gateway.infrastructure.database.models import Base, Client, Invoice
from receipts_gateway.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db: Session) -> sessionmaker:
    """Session factory bound to the test database, for work outside the shared session"""
    return TestingSessionLocal


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def make_customer(db: Session) -> Callable[..., Client]:
    """Factory for ledger clients"""

    def _make(name: str = "Acme Hardware", credit_balance: str = "0.00") -> Client:
        customer = Client(name=name, credit_balance=Decimal(credit_balance))
        db.add(customer)
        db.commit()
        return customer

    return _make


@pytest.fixture
def make_invoice(db: Session) -> Callable[..., Invoice]:
    """Factory for unpaid invoices"""

    def _make(customer: Client, balance: str, issue_date: date | None = None, description: str = "Services") -> Invoice:
        invoice = Invoice(
            client_id=customer.id,
            balance=Decimal(balance),
            issue_date=issue_date or date(2026, 9, 1),
            description=description,
        )
        db.add(invoice)
        db.commit()
        return invoice

    return _make


@pytest.fixture
def customer(make_customer) -> Client:
    """Client with 200.00 of credit balance"""
    return make_customer(credit_balance="200.00")


@pytest.fixture
def invoice_a(make_invoice, customer) -> Invoice:
    return make_invoice(customer, "100.00", issue_date=date(2026, 8, 1), description="Invoice A")


@pytest.fixture
def invoice_b(make_invoice, customer) -> Invoice:
    return make_invoice(customer, "50.00", issue_date=date(2026, 8, 15), description="Invoice B")
