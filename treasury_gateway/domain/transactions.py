"""Money movement records"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from treasury_gateway.domain.exceptions import InvalidTransactionStatusError
from treasury_gateway.utils.codes import generate_code, new_id
from treasury_gateway.utils.date_utils import utcnow


class TransactionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER = "transfer"
    FEE = "fee"
    INTEREST = "interest"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REVERSED = "reversed"


def _generate_reference() -> str:
    return generate_code("TX")


@dataclass
class Transaction:
    """
    Immutable record of a money movement.

    Created pending and moved exactly once to completed or failed. A completed
    transaction may later be reversed by an explicit action; nothing else
    changes after that. The amount is fixed at creation.
    """

    type: TransactionType
    account_id: str
    amount: int
    currency_code: str
    description: str = ""
    source_account_id: Optional[str] = None
    target_account_id: Optional[str] = None
    status: TransactionStatus = TransactionStatus.PENDING
    reference: str = field(default_factory=_generate_reference)
    metadata: Dict[str, str] = field(default_factory=dict)
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    completed_at: Optional[datetime] = None
    version: int = 0

    @classmethod
    def transfer(
        cls,
        source_account_id: str,
        target_account_id: str,
        amount: int,
        currency_code: str,
        description: str = "",
    ) -> "Transaction":
        return cls(
            type=TransactionType.TRANSFER,
            account_id=source_account_id,
            amount=amount,
            currency_code=currency_code,
            description=description,
            source_account_id=source_account_id,
            target_account_id=target_account_id,
        )

    def involves(self, account_id: str) -> bool:
        return account_id in (self.account_id, self.source_account_id, self.target_account_id)

    def complete(self) -> None:
        self._ensure_pending()
        now = utcnow()
        self.status = TransactionStatus.COMPLETED
        self.completed_at = now
        self.updated_at = now

    def fail(self, reason: str = "") -> None:
        self._ensure_pending()
        self.status = TransactionStatus.FAILED
        if reason:
            self.metadata["failure_reason"] = reason
        self.updated_at = utcnow()

    def reverse(self, reason: str = "") -> None:
        if self.status != TransactionStatus.COMPLETED:
            raise InvalidTransactionStatusError("only completed transactions can be reversed")
        self.status = TransactionStatus.REVERSED
        if reason:
            self.metadata["reversal_reason"] = reason
        self.updated_at = utcnow()

    def add_metadata(self, key: str, value: str) -> None:
        self.metadata[key] = value
        self.updated_at = utcnow()

    def _ensure_pending(self) -> None:
        if self.status != TransactionStatus.PENDING:
            raise InvalidTransactionStatusError(f"transaction is already {self.status.value}")
