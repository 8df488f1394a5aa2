"""Transaction service - single-account movements, lookups and reversals"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from treasury_gateway.domain.accounts import Account
from treasury_gateway.domain.exceptions import (
    AccountClosedError,
    InsufficientFundsError,
    InvalidInputError,
)
from treasury_gateway.domain.money import ensure_positive_amount
from treasury_gateway.domain.transactions import Transaction, TransactionType
from treasury_gateway.infrastructure.database.repositories import AccountRepository, TransactionRepository
from treasury_gateway.infrastructure.database.session import transactional
from treasury_gateway.infrastructure.observability.logging import log_money_movement
from treasury_gateway.infrastructure.observability.metrics import record_money_movement

# Types that add funds to the owning account; the rest take funds out
CREDIT_TYPES = (TransactionType.DEPOSIT, TransactionType.INTEREST)
DEBIT_TYPES = (TransactionType.WITHDRAWAL, TransactionType.FEE)


def apply_movement(account: Account, transaction_type: TransactionType, amount: int) -> None:
    if transaction_type in CREDIT_TYPES:
        account.deposit(amount)
    else:
        account.withdraw(amount)


def undo_movement(account: Account, transaction_type: TransactionType, amount: int) -> None:
    if transaction_type in CREDIT_TYPES:
        account.withdraw(amount)
    else:
        account.deposit(amount)


class TransactionService:
    def __init__(self, db: Session):
        self.db = db
        self.accounts = AccountRepository(db)
        self.transactions = TransactionRepository(db)

    def get_transaction(self, transaction_id: str) -> Transaction:
        return self.transactions.get_by_id(transaction_id)

    def get_by_reference(self, reference: str) -> Optional[Transaction]:
        return self.transactions.get_by_reference(reference)

    def list_transactions(self, limit: int, offset: int = 0) -> List[Transaction]:
        return self.transactions.list(limit, offset)

    def list_account_transactions(self, account_id: str, limit: int, offset: int = 0) -> List[Transaction]:
        self.accounts.get_by_id(account_id)
        return self.transactions.list_by_account(account_id, limit, offset)

    def create_transaction(
        self,
        transaction_type: TransactionType,
        account_id: str,
        amount: int,
        description: str = "",
    ) -> Transaction:
        """
        Record and apply a deposit, withdrawal, fee or interest posting.

        When the account rejects the movement the balance is left unchanged,
        the attempt is kept as a failed transaction and the error is re-raised.
        """
        transaction_type = TransactionType(transaction_type)
        if transaction_type == TransactionType.TRANSFER:
            raise InvalidInputError("transfers move funds between two accounts; use the transfer operation")
        ensure_positive_amount(amount)

        try:
            with transactional(self.db):
                account = self.accounts.get_by_id(account_id)
                transaction = Transaction(
                    type=transaction_type,
                    account_id=account.id,
                    amount=amount,
                    currency_code=account.currency_code,
                    description=description,
                )
                apply_movement(account, transaction_type, amount)
                self.accounts.update(account)

                transaction.complete()
                self.transactions.create(transaction)
        except (InsufficientFundsError, AccountClosedError) as e:
            self._record_failure(transaction, str(e))
            raise

        record_money_movement(transaction_type.value, amount)
        log_money_movement(transaction.id, transaction_type.value, amount, transaction.status.value, [account.id])
        return transaction

    def reverse_transaction(self, transaction_id: str, reason: str = "") -> Transaction:
        """Undo a completed transaction's balance effect and mark it reversed"""
        with transactional(self.db):
            transaction = self.transactions.get_by_id(transaction_id)
            transaction.reverse(reason)

            if transaction.type == TransactionType.TRANSFER:
                source = self.accounts.get_by_id(transaction.source_account_id)
                target = self.accounts.get_by_id(transaction.target_account_id)
                target.withdraw(transaction.amount)
                source.deposit(transaction.amount)
                self.accounts.update(target)
                self.accounts.update(source)
                account_ids = [source.id, target.id]
            else:
                account = self.accounts.get_by_id(transaction.account_id)
                undo_movement(account, transaction.type, transaction.amount)
                self.accounts.update(account)
                account_ids = [account.id]

            self.transactions.update(transaction)

        record_money_movement(transaction.type.value, transaction.amount, outcome="reversed")
        log_money_movement(transaction.id, transaction.type.value, transaction.amount, "reversed", account_ids)
        return transaction

    def _record_failure(self, transaction: Transaction, reason: str) -> None:
        transaction.fail(reason)
        with transactional(self.db):
            self.transactions.create(transaction)

        record_money_movement(transaction.type.value, transaction.amount, outcome="failed")
        logging.warning(
            f"Transaction failed: {reason}",
            extra={"transaction_id": transaction.id, "account_id": transaction.account_id},
        )
