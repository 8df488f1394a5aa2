"""Integration tests for repositories against SQLite"""

import pytest
from datetime import date
from sqlalchemy.orm import Session, sessionmaker
from treasury_gateway.domain.accounts import Account, AccountType, Customer, CustomerStatus
from treasury_gateway.domain.exceptions import (
    AccountNotFoundError,
    ConcurrentModificationError,
    DuplicateRecordError,
)
from treasury_gateway.domain.models import Address
from treasury_gateway.domain.tax_filings import FilingPeriod, TaxFiling
from treasury_gateway.domain.tax_payments import PaymentMethod, TaxPayment
from treasury_gateway.domain.tax_rates import TaxBracketType, TaxRate, TaxType
from treasury_gateway.domain.taxpayers import Taxpayer, TaxpayerType
from treasury_gateway.infrastructure.database.repositories import (
    AccountRepository,
    CustomerRepository,
    TransactionRepository,
)
from treasury_gateway.infrastructure.database.session import transactional
from treasury_gateway.infrastructure.database.tax_repositories import (
    TaxFilingRepository,
    TaxPaymentRepository,
    TaxRateRepository,
    TaxpayerRepository,
)
from treasury_gateway.domain.transactions import Transaction, TransactionType


def test_account_round_trip(db: Session, customer):
    """Test an account reads back field for field"""
    repo = AccountRepository(db)
    account = Account(customer_id=customer.id, type=AccountType.CREDIT, name="Card", currency_code="EUR", balance=75)
    with transactional(db):
        repo.create(account)

    loaded = repo.get_by_id(account.id)
    assert loaded == account


def test_filing_round_trip_keeps_adjustments(db: Session, taxpayer):
    """Test deductions and credits survive storage in order"""
    repo = TaxFilingRepository(db)
    filing = TaxFiling(
        taxpayer_id=taxpayer.id,
        tax_year=2025,
        period=FilingPeriod.MONTHLY,
        period_start=date(2025, 2, 1),
        period_end=date(2025, 2, 28),
        filing_type=TaxType.SALES,
        due_date=date(2025, 3, 20),
    )
    filing.add_deduction("D1", "Returns", 120)
    filing.add_deduction("D2", "Bad debt", 80)
    filing.add_credit("C1", "Overpayment", 40)
    with transactional(db):
        repo.create(filing)

    loaded = repo.get_by_id(filing.id)
    assert loaded == filing
    assert [d.code for d in loaded.deductions] == ["D1", "D2"]


def test_customer_round_trip(db: Session):
    """Test a customer and its embedded address read back field for field"""
    repo = CustomerRepository(db)
    customer = Customer(
        first_name="Grace",
        last_name="Hopper",
        email="grace@example.com",
        phone_number="555-0100",
        address=Address(street="1 Navy Way", city="Arlington", state="VA", country="US", postal_code="22202"),
        status=CustomerStatus.INACTIVE,
    )
    with transactional(db):
        repo.create(customer)

    assert repo.get_by_id(customer.id) == customer


def test_taxpayer_round_trip_keeps_exemptions(db: Session):
    """Test exemption codes and business fields survive storage"""
    repo = TaxpayerRepository(db)
    taxpayer = Taxpayer(
        type=TaxpayerType.NON_PROFIT,
        name="Food Bank",
        tax_identifier="77-1234567",
        contact_email="info@foodbank.example",
        address=Address(city="Portland", state="OR"),
        exemption_codes=["501C3", "SALES-EXEMPT"],
        annual_revenue=250_000_00,
        business_type="charity",
        industry="social services",
    )
    with transactional(db):
        repo.create(taxpayer)

    loaded = repo.get_by_id(taxpayer.id)
    assert loaded == taxpayer
    assert loaded.exemption_codes == ["501C3", "SALES-EXEMPT"]


def test_tax_rate_round_trip(db: Session):
    """Test fractional rates, bounds, category and dates read back unchanged"""
    repo = TaxRateRepository(db)
    rate = TaxRate(
        type=TaxType.SALES,
        name="Prepared food",
        rate=0.0625,
        bracket_type=TaxBracketType.TIERED,
        jurisdiction_code="CA-LA",
        effective_date=date(2025, 7, 1),
        description="County surcharge",
        min_amount=100,
        max_amount=100_000,
        category="food",
        expiration_date=date(2026, 6, 30),
    )
    with transactional(db):
        repo.create(rate)

    loaded = repo.get_by_id(rate.id)
    assert loaded == rate
    assert loaded.calculate_tax(10_000) == 625


def test_tax_payment_round_trip(db: Session, filing):
    """Test a payment linked to a filing reads back field for field"""
    repo = TaxPaymentRepository(db)
    payment = TaxPayment(
        taxpayer_id=filing.taxpayer_id,
        tax_type=TaxType.INCOME,
        amount=1250,
        payment_method=PaymentMethod.CHECK,
        payment_date=date(2025, 4, 1),
        filing_id=filing.id,
        notes="Q1 estimate",
    )
    with transactional(db):
        repo.create(payment)

    loaded = repo.get_by_id(payment.id)
    assert loaded == payment
    assert repo.get_by_confirmation_code(payment.confirmation_code).id == payment.id


def test_transaction_metadata_round_trip(db: Session, account_factory):
    """Test transaction metadata is stored as JSON"""
    account = account_factory()
    repo = TransactionRepository(db)
    transaction = Transaction(type=TransactionType.FEE, account_id=account.id, amount=5, currency_code="USD")
    transaction.add_metadata("channel", "atm")
    with transactional(db):
        repo.create(transaction)

    assert repo.get_by_id(transaction.id).metadata == {"channel": "atm"}
    assert repo.get_by_reference(transaction.reference).id == transaction.id


def test_missing_and_malformed_ids_not_found(db: Session):
    """Test unknown and non-UUID ids raise not found"""
    repo = AccountRepository(db)
    with pytest.raises(AccountNotFoundError):
        repo.get_by_id("00000000-0000-0000-0000-000000000000")
    with pytest.raises(AccountNotFoundError):
        repo.get_by_id("abc")


def test_duplicate_unique_field(db: Session, taxpayer):
    """Test unique columns reject duplicates"""
    repo = TaxPaymentRepository(db)
    first = TaxPayment(
        taxpayer_id=taxpayer.id,
        tax_type=TaxType.INCOME,
        amount=100,
        payment_method=PaymentMethod.CHECK,
        payment_date=date(2025, 1, 1),
    )
    with transactional(db):
        repo.create(first)

    second = TaxPayment(
        taxpayer_id=taxpayer.id,
        tax_type=TaxType.INCOME,
        amount=100,
        payment_method=PaymentMethod.CHECK,
        payment_date=date(2025, 1, 1),
        confirmation_code=first.confirmation_code,
    )
    with pytest.raises(DuplicateRecordError):
        with transactional(db):
            repo.create(second)


def test_stale_entity_update_rejected(db: Session, account_factory):
    """Test an update based on an outdated read is refused"""
    account = account_factory(balance=100)
    repo = AccountRepository(db)

    first = repo.get_by_id(account.id)
    second = repo.get_by_id(account.id)

    with transactional(db):
        first.deposit(10)
        repo.update(first)

    with pytest.raises(ConcurrentModificationError):
        with transactional(db):
            second.deposit(20)
            repo.update(second)

    assert repo.get_by_id(account.id).balance == 110


def test_concurrent_session_update_rejected(db: Session, account_factory):
    """Test a write committed by another session makes this session's write fail"""
    account = account_factory(balance=100)
    repo = AccountRepository(db)
    mine = repo.get_by_id(account.id)

    other_db = sessionmaker(bind=db.get_bind())()
    try:
        other_repo = AccountRepository(other_db)
        theirs = other_repo.get_by_id(account.id)
        with transactional(other_db):
            theirs.deposit(50)
            other_repo.update(theirs)
    finally:
        other_db.close()

    with pytest.raises(ConcurrentModificationError):
        with transactional(db):
            mine.deposit(20)
            repo.update(mine)

    assert repo.get_by_id(account.id).balance == 150


def test_taxpayer_search(db: Session, taxpayer):
    """Test search matches name, identifier and email case-insensitively"""
    repo = TaxpayerRepository(db)
    assert [t.id for t in repo.search("acme")] == [taxpayer.id]
    assert [t.id for t in repo.search("3456")] == [taxpayer.id]
    assert [t.id for t in repo.search("ACME.EXAMPLE")] == [taxpayer.id]
    assert repo.search("nobody") == []
