"""Tax filing lifecycle"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from treasury_gateway.domain.exceptions import InvalidFilingPeriodError, InvalidFilingStatusError
from treasury_gateway.domain.money import ensure_non_negative_amount, ensure_positive_amount
from treasury_gateway.domain.tax_rates import TaxType
from treasury_gateway.utils.codes import new_id
from treasury_gateway.utils.date_utils import utcnow


class FilingStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    PROCESSING = "processing"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    AMENDED = "amended"
    AUDITED = "audited"


class FilingPeriod(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"


REVIEWABLE_STATUSES = (FilingStatus.SUBMITTED, FilingStatus.PROCESSING)


@dataclass
class Adjustment:
    """Deduction or credit line on a filing"""

    code: str
    description: str
    amount: int

    def to_dict(self) -> dict:
        return {"code": self.code, "description": self.description, "amount": self.amount}


@dataclass
class TaxFiling:
    """
    Periodic tax return for one taxpayer.

    draft -> submitted -> processing -> accepted | rejected. Amending produces
    a separate filing with status "amended"; the original is left untouched.
    Amounts, deductions and credits may only change while in draft.
    """

    taxpayer_id: str
    tax_year: int
    period: FilingPeriod
    period_start: date
    period_end: date
    filing_type: TaxType
    due_date: date
    status: FilingStatus = FilingStatus.DRAFT
    gross_income: int = 0
    taxable_income: int = 0
    total_sales: int = 0
    taxable_amount: int = 0
    tax_calculated: int = 0
    tax_paid: int = 0
    deductions: List[Adjustment] = field(default_factory=list)
    credits: List[Adjustment] = field(default_factory=list)
    notes: str = ""
    submission_date: Optional[datetime] = None
    acceptance_date: Optional[datetime] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 0

    def __post_init__(self) -> None:
        if self.period_end <= self.period_start:
            raise InvalidFilingPeriodError("period end must be after period start")

    @property
    def total_deductions(self) -> int:
        return sum(d.amount for d in self.deductions)

    @property
    def total_credits(self) -> int:
        return sum(c.amount for c in self.credits)

    @property
    def balance_due(self) -> int:
        return max(self.tax_calculated - self.tax_paid, 0)

    def is_overdue(self, today: Optional[date] = None) -> bool:
        today = today or utcnow().date()
        return today > self.due_date and self.status != FilingStatus.ACCEPTED

    def ensure_editable(self) -> None:
        if self.status != FilingStatus.DRAFT:
            raise InvalidFilingStatusError("only draft filings can be changed")

    def submit(self) -> None:
        if self.status != FilingStatus.DRAFT:
            raise InvalidFilingStatusError()

        now = utcnow()
        self.status = FilingStatus.SUBMITTED
        self.submission_date = now
        self.updated_at = now

    def start_processing(self, tax_calculated: int) -> None:
        if self.status != FilingStatus.SUBMITTED:
            raise InvalidFilingStatusError()
        ensure_non_negative_amount(tax_calculated)

        self.status = FilingStatus.PROCESSING
        self.tax_calculated = tax_calculated
        self.updated_at = utcnow()

    def accept(self) -> None:
        if self.status not in REVIEWABLE_STATUSES:
            raise InvalidFilingStatusError()

        now = utcnow()
        self.status = FilingStatus.ACCEPTED
        self.acceptance_date = now
        self.updated_at = now

    def reject(self, reason: str) -> None:
        if self.status not in REVIEWABLE_STATUSES:
            raise InvalidFilingStatusError()

        self.status = FilingStatus.REJECTED
        self.notes += "\nRejection reason: " + reason
        self.updated_at = utcnow()

    def amend(self) -> "TaxFiling":
        """Build a new filing from this one; lists are copied, not shared"""
        return TaxFiling(
            taxpayer_id=self.taxpayer_id,
            tax_year=self.tax_year,
            period=self.period,
            period_start=self.period_start,
            period_end=self.period_end,
            filing_type=self.filing_type,
            due_date=self.due_date,
            status=FilingStatus.AMENDED,
            gross_income=self.gross_income,
            taxable_income=self.taxable_income,
            total_sales=self.total_sales,
            taxable_amount=self.taxable_amount,
            tax_calculated=self.tax_calculated,
            tax_paid=self.tax_paid,
            deductions=[Adjustment(d.code, d.description, d.amount) for d in self.deductions],
            credits=[Adjustment(c.code, c.description, c.amount) for c in self.credits],
            notes=f"Amended from filing ID: {self.id}",
        )

    def update_amounts(self, gross_income: int, taxable_income: int, total_sales: int, taxable_amount: int) -> None:
        for amount in (gross_income, taxable_income, total_sales, taxable_amount):
            ensure_non_negative_amount(amount)

        self.gross_income = gross_income
        self.taxable_income = taxable_income
        self.total_sales = total_sales
        self.taxable_amount = taxable_amount
        self.updated_at = utcnow()

    def add_deduction(self, code: str, description: str, amount: int) -> None:
        ensure_positive_amount(amount)
        self.deductions.append(Adjustment(code, description, amount))
        self.updated_at = utcnow()

    def add_credit(self, code: str, description: str, amount: int) -> None:
        ensure_positive_amount(amount)
        self.credits.append(Adjustment(code, description, amount))
        self.updated_at = utcnow()

    def record_payment(self, amount: int) -> None:
        self.tax_paid += amount
        self.updated_at = utcnow()

    def reverse_payment(self, amount: int) -> None:
        self.tax_paid = max(self.tax_paid - amount, 0)
        self.updated_at = utcnow()
