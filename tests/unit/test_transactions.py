"""Unit tests for transaction lifecycle"""

import pytest
from treasury_gateway.domain.exceptions import InvalidTransactionStatusError
from treasury_gateway.domain.transactions import Transaction, TransactionStatus, TransactionType


def make_transaction() -> Transaction:
    return Transaction(type=TransactionType.DEPOSIT, account_id="a1", amount=500, currency_code="USD")


def test_new_transaction_is_pending_with_reference():
    """Test transactions start pending with a TX- reference"""
    transaction = make_transaction()
    assert transaction.status == TransactionStatus.PENDING
    assert transaction.reference.startswith("TX-")
    assert len(transaction.reference) == 11


def test_complete_once():
    """Test a transaction completes exactly once"""
    transaction = make_transaction()
    transaction.complete()
    assert transaction.status == TransactionStatus.COMPLETED
    assert transaction.completed_at is not None

    with pytest.raises(InvalidTransactionStatusError):
        transaction.complete()
    with pytest.raises(InvalidTransactionStatusError):
        transaction.fail("late")


def test_fail_records_reason():
    """Test failure reason lands in metadata"""
    transaction = make_transaction()
    transaction.fail("insufficient funds")
    assert transaction.status == TransactionStatus.FAILED
    assert transaction.metadata["failure_reason"] == "insufficient funds"


def test_reverse_only_completed():
    """Test only completed transactions can be reversed, and only once"""
    transaction = make_transaction()
    with pytest.raises(InvalidTransactionStatusError):
        transaction.reverse("oops")

    transaction.complete()
    transaction.reverse("customer dispute")
    assert transaction.status == TransactionStatus.REVERSED
    assert transaction.metadata["reversal_reason"] == "customer dispute"

    with pytest.raises(InvalidTransactionStatusError):
        transaction.reverse("again")


def test_transfer_references_both_accounts():
    """Test transfer constructor links source and target"""
    transaction = Transaction.transfer("a1", "a2", 40, "USD", "rent")
    assert transaction.type == TransactionType.TRANSFER
    assert transaction.source_account_id == "a1"
    assert transaction.target_account_id == "a2"
    assert transaction.involves("a1") and transaction.involves("a2")
    assert not transaction.involves("a3")
