"""Tax payment lifecycle"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

from treasury_gateway.domain.exceptions import InvalidPaymentAmountError, InvalidPaymentStatusError
from treasury_gateway.domain.money import ensure_positive_amount
from treasury_gateway.domain.tax_rates import TaxType
from treasury_gateway.utils.codes import generate_code, new_id
from treasury_gateway.utils.date_utils import utcnow


class PaymentMethod(str, Enum):
    ELECTRONIC = "electronic"
    CHECK = "check"
    CREDIT = "credit"
    DEBIT = "debit"
    CASH = "cash"
    WIRE = "wire"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    VOIDED = "voided"


def _generate_confirmation_code() -> str:
    return generate_code("PAY")


@dataclass
class TaxPayment:
    """
    Payment toward a taxpayer's liability, optionally tied to one filing.

    pending -> completed | failed | voided; completed -> refunded.
    """

    taxpayer_id: str
    tax_type: TaxType
    amount: int
    payment_method: PaymentMethod
    payment_date: date
    filing_id: Optional[str] = None
    notes: str = ""
    status: PaymentStatus = PaymentStatus.PENDING
    confirmation_code: str = field(default_factory=_generate_confirmation_code)
    processed_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 0

    def __post_init__(self) -> None:
        ensure_positive_amount(self.amount, InvalidPaymentAmountError)

    def is_completed(self) -> bool:
        return self.status == PaymentStatus.COMPLETED

    def mark_as_completed(self) -> None:
        self._ensure_pending("only pending payments can be completed")

        now = utcnow()
        self.status = PaymentStatus.COMPLETED
        self.processed_at = now
        self.updated_at = now

    def mark_as_failed(self, reason: str = "") -> None:
        self._ensure_pending("only pending payments can be failed")

        self.status = PaymentStatus.FAILED
        if reason:
            self.notes += "\nFailure reason: " + reason
        self.updated_at = utcnow()

    def refund(self, reason: str) -> None:
        if self.status != PaymentStatus.COMPLETED:
            raise InvalidPaymentStatusError("only completed payments can be refunded")

        now = utcnow()
        self.status = PaymentStatus.REFUNDED
        self.refunded_at = now
        self.notes += "\nRefund reason: " + reason
        self.updated_at = now

    def void(self, reason: str) -> None:
        self._ensure_pending("only pending payments can be voided")

        self.status = PaymentStatus.VOIDED
        self.notes += "\nVoid reason: " + reason
        self.updated_at = utcnow()

    def update_amount(self, amount: int) -> None:
        self._ensure_pending("only pending payments can be updated")
        ensure_positive_amount(amount, InvalidPaymentAmountError)

        self.amount = amount
        self.updated_at = utcnow()

    def _ensure_pending(self, message: str) -> None:
        if self.status != PaymentStatus.PENDING:
            raise InvalidPaymentStatusError(message)
