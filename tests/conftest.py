"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from treasury_gateway.api.main import create_app
from treasury_gateway.domain.accounts import Account, AccountType, Customer
from treasury_gateway.domain.tax_filings import FilingPeriod, TaxFiling
from treasury_gateway.domain.tax_rates import TaxType
from treasury_gateway.domain.taxpayers import Taxpayer, TaxpayerType
from treasury_gateway.infrastructure.database.models import Base
from treasury_gateway.infrastructure.database.session import get_db
from treasury_gateway.services.accounts import AccountService
from treasury_gateway.services.customers import CustomerService
from treasury_gateway.services.tax_filings import TaxFilingService
from treasury_gateway.services.taxpayers import TaxpayerService


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
def customer(db: Session) -> Customer:
    """Persisted bank customer"""
    return CustomerService(db).create_customer("Ada", "Lovelace", "ada@example.com", "555-0100")


@pytest.fixture
def account_factory(db: Session, customer: Customer):
    """Create persisted accounts with an opening balance"""
    service = AccountService(db)

    def make(balance: int = 0, currency_code: str = "USD", name: str = "Checking") -> Account:
        account = service.create_account(customer.id, AccountType.CHECKING, name, currency_code)
        if balance:
            service.deposit(account.id, balance, "opening balance")
            account = service.get_account(account.id)
        return account

    return make


@pytest.fixture
def taxpayer(db: Session) -> Taxpayer:
    """Persisted business taxpayer"""
    return TaxpayerService(db).create_taxpayer(
        TaxpayerType.BUSINESS,
        "Acme Widgets LLC",
        "12-3456789",
        contact_email="tax@acme.example",
    )


@pytest.fixture
def filing(db: Session, taxpayer: Taxpayer) -> TaxFiling:
    """Persisted draft income filing for tax year 2025"""
    return TaxFilingService(db).create_filing(
        taxpayer_id=taxpayer.id,
        tax_year=2025,
        period=FilingPeriod.ANNUAL,
        period_start=date(2025, 1, 1),
        period_end=date(2025, 12, 31),
        filing_type=TaxType.INCOME,
        due_date=date(2026, 4, 15),
    )
