"""
Tax payment service.

Completing or refunding a payment that is linked to a filing also moves the
filing's paid total. The payment change commits first; the filing update runs
in its own unit of work and a failure there is logged and counted, never
raised, so the payment's new status stands.
"""

from datetime import date
from typing import Callable, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from treasury_gateway.config import settings
from treasury_gateway.domain.exceptions import DomainException, FilingOwnerMismatchError
from treasury_gateway.domain.tax_filings import TaxFiling
from treasury_gateway.domain.tax_payments import PaymentMethod, PaymentStatus, TaxPayment
from treasury_gateway.domain.tax_rates import TaxType
from treasury_gateway.infrastructure.database.session import transactional
from treasury_gateway.infrastructure.database.tax_repositories import (
    TaxFilingRepository,
    TaxPaymentRepository,
    TaxpayerRepository,
)
from treasury_gateway.infrastructure.observability.logging import log_reconciliation_failure
from treasury_gateway.infrastructure.observability.metrics import (
    reconciliation_failure_counter,
    record_payment_event,
)
from treasury_gateway.utils.date_utils import utcnow


class TaxPaymentService:
    def __init__(self, db: Session):
        self.db = db
        self.payments = TaxPaymentRepository(db)
        self.filings = TaxFilingRepository(db)
        self.taxpayers = TaxpayerRepository(db)

    # Queries

    def get_payment(self, payment_id: str) -> TaxPayment:
        return self.payments.get_by_id(payment_id)

    def get_by_confirmation_code(self, code: str) -> Optional[TaxPayment]:
        return self.payments.get_by_confirmation_code(code)

    def list_payments(self, limit: int, offset: int = 0) -> List[TaxPayment]:
        return self.payments.list(limit, offset)

    def list_by_taxpayer(self, taxpayer_id: str, limit: int, offset: int = 0) -> List[TaxPayment]:
        return self.payments.list_by_taxpayer(taxpayer_id, limit, offset)

    def list_by_filing(self, filing_id: str) -> List[TaxPayment]:
        return self.payments.list_by_filing(filing_id)

    def list_by_status(self, status: PaymentStatus) -> List[TaxPayment]:
        return self.payments.list_by_status(PaymentStatus(status))

    def list_by_date_range(self, start_date: date, end_date: date) -> List[TaxPayment]:
        return self.payments.list_by_date_range(start_date, end_date)

    def list_recent(self, days: Optional[int] = None) -> List[TaxPayment]:
        return self.payments.list_recent(days or settings.recent_days)

    def total_by_tax_type(self, tax_type: TaxType, start_date: date, end_date: date) -> int:
        return self.payments.get_total_by_tax_type(TaxType(tax_type), start_date, end_date)

    # Lifecycle

    def create_payment(
        self,
        taxpayer_id: str,
        tax_type: TaxType,
        amount: int,
        payment_method: PaymentMethod,
        filing_id: Optional[str] = None,
        payment_date: Optional[date] = None,
        notes: str = "",
    ) -> TaxPayment:
        with transactional(self.db):
            taxpayer = self.taxpayers.get_by_id(taxpayer_id)
            if filing_id:
                filing = self.filings.get_by_id(filing_id)
                if filing.taxpayer_id != taxpayer.id:
                    raise FilingOwnerMismatchError()

            payment = TaxPayment(
                taxpayer_id=taxpayer.id,
                tax_type=TaxType(tax_type),
                amount=amount,
                payment_method=PaymentMethod(payment_method),
                payment_date=payment_date or utcnow().date(),
                filing_id=filing_id or None,
                notes=notes,
            )
            payment = self.payments.create(payment)

        record_payment_event("created")
        return payment

    def process_payment(self, payment_id: str) -> TaxPayment:
        """Complete a pending payment and add it to the linked filing's paid total"""
        with transactional(self.db):
            payment = self.payments.get_by_id(payment_id)
            payment.mark_as_completed()
            payment = self.payments.update(payment)

        record_payment_event("completed")
        if payment.filing_id:
            self._reconcile(payment, "completed", lambda filing: filing.record_payment(payment.amount))
        return payment

    def mark_failed(self, payment_id: str, reason: str) -> TaxPayment:
        with transactional(self.db):
            payment = self.payments.get_by_id(payment_id)
            payment.mark_as_failed(reason)
            payment = self.payments.update(payment)

        record_payment_event("failed")
        return payment

    def refund_payment(self, payment_id: str, reason: str) -> TaxPayment:
        """Refund a completed payment; the linked filing's paid total drops, never below zero"""
        with transactional(self.db):
            payment = self.payments.get_by_id(payment_id)
            payment.refund(reason)
            payment = self.payments.update(payment)

        record_payment_event("refunded")
        if payment.filing_id:
            self._reconcile(payment, "refunded", lambda filing: filing.reverse_payment(payment.amount))
        return payment

    def void_payment(self, payment_id: str, reason: str) -> TaxPayment:
        with transactional(self.db):
            payment = self.payments.get_by_id(payment_id)
            payment.void(reason)
            payment = self.payments.update(payment)

        record_payment_event("voided")
        return payment

    def update_amount(self, payment_id: str, amount: int) -> TaxPayment:
        with transactional(self.db):
            payment = self.payments.get_by_id(payment_id)
            payment.update_amount(amount)
            return self.payments.update(payment)

    def _reconcile(self, payment: TaxPayment, event: str, change: Callable[[TaxFiling], None]) -> None:
        try:
            with transactional(self.db):
                filing = self.filings.get_by_id(payment.filing_id)
                change(filing)
                self.filings.update(filing)
        except (DomainException, SQLAlchemyError) as e:
            reconciliation_failure_counter.inc()
            log_reconciliation_failure(payment.id, payment.filing_id, event, e)
