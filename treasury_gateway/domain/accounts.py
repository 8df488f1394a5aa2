"""Banking entities: customers and their accounts"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from treasury_gateway.domain.exceptions import AccountClosedError, InsufficientFundsError
from treasury_gateway.domain.models import Address
from treasury_gateway.utils.codes import generate_code, new_id
from treasury_gateway.utils.date_utils import utcnow


class CustomerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"


class AccountType(str, Enum):
    SAVINGS = "savings"
    CHECKING = "checking"
    CREDIT = "credit"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    CLOSED = "closed"


@dataclass
class Customer:
    """Bank customer owning one or more accounts"""

    first_name: str
    last_name: str
    email: str
    phone_number: str = ""
    address: Address = field(default_factory=Address)
    status: CustomerStatus = CustomerStatus.ACTIVE
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 0

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def is_active(self) -> bool:
        return self.status == CustomerStatus.ACTIVE

    def update_status(self, status: CustomerStatus) -> None:
        self.status = status
        self.updated_at = utcnow()

    def update_contact(self, email: str, phone_number: str) -> None:
        self.email = email
        self.phone_number = phone_number
        self.updated_at = utcnow()

    def update_address(self, address: Address) -> None:
        self.address = address
        self.updated_at = utcnow()


@dataclass
class Account:
    """
    Bank account holding a non-negative balance in minor units.

    Status transitions: active <-> inactive, active -> closed (terminal).
    The balance only changes through deposit() and withdraw().
    """

    customer_id: str
    type: AccountType
    name: str
    currency_code: str
    balance: int = 0
    status: AccountStatus = AccountStatus.ACTIVE
    number: str = field(default_factory=generate_code)
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    closed_at: Optional[datetime] = None
    version: int = 0

    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    def deposit(self, amount: int) -> None:
        if not self.is_active():
            raise AccountClosedError()

        self.balance += amount
        self.updated_at = utcnow()

    def withdraw(self, amount: int) -> None:
        if not self.is_active():
            raise AccountClosedError()

        if self.balance < amount:
            raise InsufficientFundsError()

        self.balance -= amount
        self.updated_at = utcnow()

    def close(self) -> None:
        """Close the account; closing a non-active account fails"""
        if not self.is_active():
            raise AccountClosedError()

        now = utcnow()
        self.status = AccountStatus.CLOSED
        self.closed_at = now
        self.updated_at = now

    def deactivate(self) -> None:
        if not self.is_active():
            raise AccountClosedError()
        self.status = AccountStatus.INACTIVE
        self.updated_at = utcnow()

    def reactivate(self) -> None:
        if self.status != AccountStatus.INACTIVE:
            raise AccountClosedError("only inactive accounts can be reactivated")
        self.status = AccountStatus.ACTIVE
        self.updated_at = utcnow()

    def rename(self, name: str) -> None:
        if not self.is_active():
            raise AccountClosedError()
        self.name = name
        self.updated_at = utcnow()
