"""
Account service - balance-changing operations across one or two accounts.

Each operation runs inside a single unit of work: the account writes and the
transaction record commit together or not at all. Stale reads are rejected by
the version column, so concurrent deposits on one account cannot lose updates.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from treasury_gateway.config import settings
from treasury_gateway.domain.accounts import Account, AccountType
from treasury_gateway.domain.exceptions import (
    AccountClosedError,
    CurrencyMismatchError,
    DomainException,
    InvalidTransferError,
)
from treasury_gateway.domain.money import ensure_positive_amount
from treasury_gateway.domain.transactions import Transaction, TransactionType
from treasury_gateway.infrastructure.database.repositories import (
    AccountRepository,
    CustomerRepository,
    TransactionRepository,
)
from treasury_gateway.infrastructure.database.session import transactional
from treasury_gateway.infrastructure.observability.logging import log_money_movement
from treasury_gateway.infrastructure.observability.metrics import record_money_movement


class AccountService:
    def __init__(self, db: Session):
        self.db = db
        self.accounts = AccountRepository(db)
        self.customers = CustomerRepository(db)
        self.transactions = TransactionRepository(db)

    # Account lifecycle

    def create_account(
        self,
        customer_id: str,
        account_type: AccountType,
        name: str,
        currency_code: Optional[str] = None,
    ) -> Account:
        with transactional(self.db):
            customer = self.customers.get_by_id(customer_id)
            account = Account(
                customer_id=customer.id,
                type=AccountType(account_type),
                name=name,
                currency_code=currency_code or settings.default_currency,
            )
            return self.accounts.create(account)

    def get_account(self, account_id: str) -> Account:
        return self.accounts.get_by_id(account_id)

    def list_accounts(self, limit: int, offset: int = 0) -> List[Account]:
        return self.accounts.list(limit, offset)

    def list_accounts_by_customer(self, customer_id: str) -> List[Account]:
        return self.accounts.list_by_customer(customer_id)

    def update_account(self, account_id: str, name: str) -> Account:
        with transactional(self.db):
            account = self.accounts.get_by_id(account_id)
            account.rename(name)
            return self.accounts.update(account)

    def close_account(self, account_id: str) -> Account:
        """Close an active account; closing twice raises AccountClosedError"""
        with transactional(self.db):
            account = self.accounts.get_by_id(account_id)
            account.close()
            return self.accounts.update(account)

    def deactivate_account(self, account_id: str) -> Account:
        with transactional(self.db):
            account = self.accounts.get_by_id(account_id)
            account.deactivate()
            return self.accounts.update(account)

    def reactivate_account(self, account_id: str) -> Account:
        with transactional(self.db):
            account = self.accounts.get_by_id(account_id)
            account.reactivate()
            return self.accounts.update(account)

    # Money movement

    def deposit(self, account_id: str, amount: int, description: str = "") -> Transaction:
        ensure_positive_amount(amount)

        try:
            with transactional(self.db):
                account = self.accounts.get_by_id(account_id)
                account.deposit(amount)
                self.accounts.update(account)

                transaction = Transaction(
                    type=TransactionType.DEPOSIT,
                    account_id=account.id,
                    amount=amount,
                    currency_code=account.currency_code,
                    description=description,
                )
                transaction.complete()
                self.transactions.create(transaction)
        except DomainException:
            record_money_movement(TransactionType.DEPOSIT.value, amount, outcome="failed")
            raise

        self._record(transaction, [account.id])
        return transaction

    def withdraw(self, account_id: str, amount: int, description: str = "") -> Transaction:
        ensure_positive_amount(amount)

        try:
            with transactional(self.db):
                account = self.accounts.get_by_id(account_id)
                account.withdraw(amount)
                self.accounts.update(account)

                transaction = Transaction(
                    type=TransactionType.WITHDRAWAL,
                    account_id=account.id,
                    amount=amount,
                    currency_code=account.currency_code,
                    description=description,
                )
                transaction.complete()
                self.transactions.create(transaction)
        except DomainException:
            record_money_movement(TransactionType.WITHDRAWAL.value, amount, outcome="failed")
            raise

        self._record(transaction, [account.id])
        return transaction

    def transfer(self, source_id: str, target_id: str, amount: int, description: str = "") -> Transaction:
        """
        Move funds between two accounts.

        Both balances and the single transfer record are written in one unit
        of work; a failure at any step leaves both accounts untouched.
        """
        ensure_positive_amount(amount)
        if source_id == target_id:
            raise InvalidTransferError()

        try:
            with transactional(self.db):
                source = self.accounts.get_by_id(source_id)
                target = self.accounts.get_by_id(target_id)

                if not source.is_active() or not target.is_active():
                    raise AccountClosedError()
                if source.currency_code != target.currency_code:
                    raise CurrencyMismatchError()

                source.withdraw(amount)
                target.deposit(amount)
                self.accounts.update(source)
                self.accounts.update(target)

                transaction = Transaction.transfer(
                    source_account_id=source.id,
                    target_account_id=target.id,
                    amount=amount,
                    currency_code=source.currency_code,
                    description=description,
                )
                transaction.complete()
                self.transactions.create(transaction)
        except DomainException:
            record_money_movement(TransactionType.TRANSFER.value, amount, outcome="failed")
            raise

        self._record(transaction, [source.id, target.id])
        return transaction

    def _record(self, transaction: Transaction, account_ids: List[str]) -> None:
        record_money_movement(transaction.type.value, transaction.amount)
        log_money_movement(
            transaction_id=transaction.id,
            movement_type=transaction.type.value,
            amount_cents=transaction.amount,
            outcome=transaction.status.value,
            account_ids=account_ids,
        )
