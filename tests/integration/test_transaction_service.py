"""Integration tests for transaction posting and reversal"""

import pytest
from sqlalchemy.orm import Session
from treasury_gateway.domain.exceptions import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidInputError,
    InvalidTransactionStatusError,
    TransactionNotFoundError,
)
from treasury_gateway.domain.transactions import TransactionStatus, TransactionType
from treasury_gateway.services.accounts import AccountService
from treasury_gateway.services.transactions import TransactionService


def test_fee_and_interest_postings(db: Session, account_factory):
    """Test fees debit and interest credits the account"""
    service = TransactionService(db)
    account = account_factory(balance=1000)

    service.create_transaction(TransactionType.FEE, account.id, 25, "monthly fee")
    service.create_transaction(TransactionType.INTEREST, account.id, 5, "interest")

    assert AccountService(db).get_account(account.id).balance == 980


def test_failed_posting_is_recorded(db: Session, account_factory):
    """Test an overdrawing withdrawal is kept as a failed transaction"""
    service = TransactionService(db)
    account = account_factory(balance=10)

    with pytest.raises(InsufficientFundsError):
        service.create_transaction(TransactionType.WITHDRAWAL, account.id, 50)

    assert AccountService(db).get_account(account.id).balance == 10
    failed = [t for t in service.list_account_transactions(account.id, 50) if t.status == TransactionStatus.FAILED]
    assert len(failed) == 1
    assert failed[0].amount == 50
    assert failed[0].metadata["failure_reason"] == "insufficient funds"


def test_transfer_type_rejected(db: Session, account_factory):
    """Test transfers cannot be posted against a single account"""
    account = account_factory(balance=10)
    with pytest.raises(InvalidInputError):
        TransactionService(db).create_transaction(TransactionType.TRANSFER, account.id, 5)


def test_reverse_deposit(db: Session, account_factory):
    """Test reversing a deposit takes the money back out"""
    accounts = AccountService(db)
    service = TransactionService(db)
    account = account_factory()
    deposit = accounts.deposit(account.id, 300)

    reversed_tx = service.reverse_transaction(deposit.id, "posted to wrong account")

    assert reversed_tx.status == TransactionStatus.REVERSED
    assert accounts.get_account(account.id).balance == 0
    assert service.get_transaction(deposit.id).metadata["reversal_reason"] == "posted to wrong account"


def test_reverse_transfer_restores_both_balances(db: Session, account_factory):
    """Test reversing a transfer moves funds back to the source"""
    accounts = AccountService(db)
    source = account_factory(balance=100, name="A")
    target = account_factory(name="B")
    transfer = accounts.transfer(source.id, target.id, 40)

    TransactionService(db).reverse_transaction(transfer.id)

    assert accounts.get_account(source.id).balance == 100
    assert accounts.get_account(target.id).balance == 0


def test_reverse_twice_fails(db: Session, account_factory):
    """Test a reversed transaction stays reversed"""
    account = account_factory()
    deposit = AccountService(db).deposit(account.id, 300)
    service = TransactionService(db)
    service.reverse_transaction(deposit.id)

    with pytest.raises(InvalidTransactionStatusError):
        service.reverse_transaction(deposit.id)


def test_reverse_deposit_already_spent_fails_atomically(db: Session, account_factory):
    """Test a reversal that would overdraw leaves everything unchanged"""
    accounts = AccountService(db)
    service = TransactionService(db)
    account = account_factory()
    deposit = accounts.deposit(account.id, 300)
    accounts.withdraw(account.id, 200)

    with pytest.raises(InsufficientFundsError):
        service.reverse_transaction(deposit.id)

    assert accounts.get_account(account.id).balance == 100
    assert service.get_transaction(deposit.id).status == TransactionStatus.COMPLETED


def test_lookups(db: Session, account_factory):
    """Test lookup by reference and missing ids"""
    account = account_factory()
    deposit = AccountService(db).deposit(account.id, 300)
    service = TransactionService(db)

    assert service.get_by_reference(deposit.reference).id == deposit.id
    assert service.get_by_reference("TX-missing") is None
    with pytest.raises(TransactionNotFoundError):
        service.get_transaction("00000000-0000-0000-0000-000000000000")
    with pytest.raises(AccountNotFoundError):
        service.list_account_transactions("00000000-0000-0000-0000-000000000000", 10)
    assert len(service.list_transactions(limit=10)) == 1
