"""Integration tests for account service money movement"""

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from treasury_gateway.domain.accounts import AccountStatus, AccountType
from treasury_gateway.domain.exceptions import (
    AccountClosedError,
    AccountNotFoundError,
    CurrencyMismatchError,
    CustomerNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidTransferError,
    INVALID_STATE,
)
from treasury_gateway.domain.transactions import TransactionStatus, TransactionType
from treasury_gateway.infrastructure.database.repositories import TransactionRepository
from treasury_gateway.services.accounts import AccountService
from treasury_gateway.services.transactions import TransactionService


def test_create_account_for_unknown_customer(db: Session):
    """Test accounts need an existing customer"""
    with pytest.raises(CustomerNotFoundError):
        AccountService(db).create_account("00000000-0000-0000-0000-000000000000", AccountType.SAVINGS, "x")


def test_create_account_defaults(db: Session, customer):
    """Test new accounts are active, empty and in the default currency"""
    account = AccountService(db).create_account(customer.id, AccountType.SAVINGS, "Rainy day")
    assert account.status == AccountStatus.ACTIVE
    assert account.balance == 0
    assert account.currency_code == "USD"


def test_deposit_records_completed_transaction(db: Session, account_factory):
    """Test deposit persists the balance and a completed deposit transaction"""
    service = AccountService(db)
    account = account_factory()

    transaction = service.deposit(account.id, 2500, "paycheck")

    assert service.get_account(account.id).balance == 2500
    assert transaction.type == TransactionType.DEPOSIT
    assert transaction.status == TransactionStatus.COMPLETED
    assert TransactionService(db).get_transaction(transaction.id).reference == transaction.reference


def test_withdraw_insufficient_funds_leaves_balance(db: Session, account_factory):
    """Test a failed withdrawal changes nothing"""
    service = AccountService(db)
    account = account_factory(balance=100)

    with pytest.raises(InsufficientFundsError):
        service.withdraw(account.id, 101)

    assert service.get_account(account.id).balance == 100
    assert len(TransactionRepository(db).list_by_account(account.id)) == 1


@pytest.mark.parametrize("amount", [0, -10])
def test_non_positive_amounts_rejected(db: Session, account_factory, amount):
    """Test deposits and withdrawals need a positive amount"""
    service = AccountService(db)
    account = account_factory(balance=100)

    with pytest.raises(InvalidAmountError):
        service.deposit(account.id, amount)
    with pytest.raises(InvalidAmountError):
        service.withdraw(account.id, amount)


def test_deposit_unknown_account(db: Session):
    """Test unknown or malformed ids are not found"""
    with pytest.raises(AccountNotFoundError):
        AccountService(db).deposit("not-a-uuid", 100)


def test_transfer_moves_funds(db: Session, account_factory):
    """Test transfer of 40 from 100/0 leaves 60/40 and one transfer record"""
    service = AccountService(db)
    source = account_factory(balance=100, name="A")
    target = account_factory(name="B")

    transaction = service.transfer(source.id, target.id, 40, "split bill")

    assert service.get_account(source.id).balance == 60
    assert service.get_account(target.id).balance == 40

    transfers = [
        t for t in TransactionRepository(db).list_by_account(target.id)
        if t.type == TransactionType.TRANSFER
    ]
    assert len(transfers) == 1
    assert transfers[0].id == transaction.id
    assert transfers[0].source_account_id == source.id
    assert transfers[0].target_account_id == target.id


def test_transfer_to_closed_account_changes_nothing(db: Session, account_factory):
    """Test a closed target blocks the transfer before any balance moves"""
    service = AccountService(db)
    source = account_factory(balance=100, name="A")
    target = account_factory(name="B")
    service.close_account(target.id)

    with pytest.raises(AccountClosedError):
        service.transfer(source.id, target.id, 40)

    assert service.get_account(source.id).balance == 100
    assert service.get_account(target.id).balance == 0


def test_transfer_rolls_back_on_mid_operation_failure(db: Session, account_factory, monkeypatch):
    """Test a storage failure after both balances changed leaves neither changed"""
    service = AccountService(db)
    source = account_factory(balance=100, name="A")
    target = account_factory(name="B")

    def broken_create(self, entity):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(TransactionRepository, "create", broken_create)

    with pytest.raises(SQLAlchemyError):
        service.transfer(source.id, target.id, 40)

    monkeypatch.undo()
    assert service.get_account(source.id).balance == 100
    assert service.get_account(target.id).balance == 0


def test_transfer_same_account_rejected(db: Session, account_factory):
    """Test source and target must differ"""
    account = account_factory(balance=100)
    with pytest.raises(InvalidTransferError):
        AccountService(db).transfer(account.id, account.id, 10)


def test_transfer_currency_mismatch(db: Session, account_factory):
    """Test transfers stay within one currency"""
    usd = account_factory(balance=100, currency_code="USD", name="USD")
    eur = account_factory(currency_code="EUR", name="EUR")
    with pytest.raises(CurrencyMismatchError):
        AccountService(db).transfer(usd.id, eur.id, 10)


def test_transfer_insufficient_funds(db: Session, account_factory):
    """Test overdrawing transfers fail without moving money"""
    service = AccountService(db)
    source = account_factory(balance=30, name="A")
    target = account_factory(name="B")

    with pytest.raises(InsufficientFundsError):
        service.transfer(source.id, target.id, 40)

    assert service.get_account(source.id).balance == 30
    assert service.get_account(target.id).balance == 0


def test_close_account_twice_fails(db: Session, account_factory):
    """Test closing is not idempotent: the second call is an invalid state"""
    service = AccountService(db)
    account = account_factory()

    closed = service.close_account(account.id)
    assert closed.status == AccountStatus.CLOSED

    with pytest.raises(AccountClosedError) as exc_info:
        service.close_account(account.id)
    assert exc_info.value.kind == INVALID_STATE


def test_deactivate_reactivate_and_rename(db: Session, account_factory):
    """Test the remaining lifecycle operations persist"""
    service = AccountService(db)
    account = account_factory()

    service.deactivate_account(account.id)
    with pytest.raises(AccountClosedError):
        service.update_account(account.id, "Renamed")

    service.reactivate_account(account.id)
    renamed = service.update_account(account.id, "Renamed")
    assert service.get_account(account.id).name == "Renamed"
    assert renamed.version == service.get_account(account.id).version


def test_list_accounts_by_customer(db: Session, customer, account_factory):
    """Test accounts are listed per owner"""
    account_factory(name="A")
    account_factory(name="B")
    service = AccountService(db)

    assert {a.name for a in service.list_accounts_by_customer(customer.id)} == {"A", "B"}
    assert service.list_accounts_by_customer("00000000-0000-0000-0000-000000000000") == []
    assert len(service.list_accounts(limit=1)) == 1
