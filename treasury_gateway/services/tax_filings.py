"""
Tax filing service.

Filing amounts, deductions and credits can only be edited while the filing is
a draft; the check lives here, before the entity is touched.
"""

from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from treasury_gateway.config import settings
from treasury_gateway.domain.tax_filings import FilingPeriod, FilingStatus, TaxFiling
from treasury_gateway.domain.tax_rates import TaxType
from treasury_gateway.infrastructure.database.session import transactional
from treasury_gateway.infrastructure.database.tax_repositories import TaxFilingRepository, TaxpayerRepository
from treasury_gateway.infrastructure.observability.metrics import record_filing_transition


class TaxFilingService:
    def __init__(self, db: Session):
        self.db = db
        self.filings = TaxFilingRepository(db)
        self.taxpayers = TaxpayerRepository(db)

    # Queries

    def get_filing(self, filing_id: str) -> TaxFiling:
        return self.filings.get_by_id(filing_id)

    def list_filings(self, limit: int, offset: int = 0) -> List[TaxFiling]:
        return self.filings.list(limit, offset)

    def list_by_taxpayer(self, taxpayer_id: str, limit: int, offset: int = 0) -> List[TaxFiling]:
        return self.filings.list_by_taxpayer(taxpayer_id, limit, offset)

    def list_by_status(self, status: FilingStatus, limit: int, offset: int = 0) -> List[TaxFiling]:
        return self.filings.list_by_status(FilingStatus(status), limit, offset)

    def list_by_period(self, tax_year: int, period: FilingPeriod) -> List[TaxFiling]:
        return self.filings.list_by_period(tax_year, FilingPeriod(period))

    def list_overdue(self, today: Optional[date] = None) -> List[TaxFiling]:
        return self.filings.list_overdue(today)

    def list_recently_submitted(self, days: Optional[int] = None) -> List[TaxFiling]:
        return self.filings.list_recently_submitted(days or settings.recent_days)

    # Draft editing

    def create_filing(
        self,
        taxpayer_id: str,
        tax_year: int,
        period: FilingPeriod,
        period_start: date,
        period_end: date,
        filing_type: TaxType,
        due_date: date,
        notes: str = "",
    ) -> TaxFiling:
        with transactional(self.db):
            taxpayer = self.taxpayers.get_by_id(taxpayer_id)
            filing = TaxFiling(
                taxpayer_id=taxpayer.id,
                tax_year=tax_year,
                period=FilingPeriod(period),
                period_start=period_start,
                period_end=period_end,
                filing_type=TaxType(filing_type),
                due_date=due_date,
                notes=notes,
            )
            return self.filings.create(filing)

    def update_amounts(
        self,
        filing_id: str,
        gross_income: int,
        taxable_income: int,
        total_sales: int,
        taxable_amount: int,
    ) -> TaxFiling:
        with transactional(self.db):
            filing = self.filings.get_by_id(filing_id)
            filing.ensure_editable()
            filing.update_amounts(gross_income, taxable_income, total_sales, taxable_amount)
            return self.filings.update(filing)

    def add_deduction(self, filing_id: str, code: str, description: str, amount: int) -> TaxFiling:
        with transactional(self.db):
            filing = self.filings.get_by_id(filing_id)
            filing.ensure_editable()
            filing.add_deduction(code, description, amount)
            return self.filings.update(filing)

    def add_credit(self, filing_id: str, code: str, description: str, amount: int) -> TaxFiling:
        with transactional(self.db):
            filing = self.filings.get_by_id(filing_id)
            filing.ensure_editable()
            filing.add_credit(code, description, amount)
            return self.filings.update(filing)

    # Lifecycle

    def submit_filing(self, filing_id: str) -> TaxFiling:
        with transactional(self.db):
            filing = self.filings.get_by_id(filing_id)
            filing.submit()
            filing = self.filings.update(filing)

        record_filing_transition(filing.status.value)
        return filing

    def process_filing(self, filing_id: str, tax_calculated: int) -> TaxFiling:
        with transactional(self.db):
            filing = self.filings.get_by_id(filing_id)
            filing.start_processing(tax_calculated)
            filing = self.filings.update(filing)

        record_filing_transition(filing.status.value)
        return filing

    def accept_filing(self, filing_id: str) -> TaxFiling:
        with transactional(self.db):
            filing = self.filings.get_by_id(filing_id)
            filing.accept()
            filing = self.filings.update(filing)

        record_filing_transition(filing.status.value)
        return filing

    def reject_filing(self, filing_id: str, reason: str) -> TaxFiling:
        with transactional(self.db):
            filing = self.filings.get_by_id(filing_id)
            filing.reject(reason)
            filing = self.filings.update(filing)

        record_filing_transition(filing.status.value)
        return filing

    def amend_filing(self, filing_id: str) -> TaxFiling:
        """Create a new amended filing from any existing one; the original is not modified"""
        with transactional(self.db):
            original = self.filings.get_by_id(filing_id)
            amended = self.filings.create(original.amend())

        record_filing_transition(amended.status.value)
        return amended
