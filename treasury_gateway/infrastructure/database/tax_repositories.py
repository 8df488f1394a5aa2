"""Data access layer for treasury entities"""

from datetime import date, timedelta
from typing import List, Optional
from sqlalchemy import func, or_

from treasury_gateway.domain.exceptions import (
    TaxFilingNotFoundError,
    TaxPaymentNotFoundError,
    TaxpayerNotFoundError,
    TaxRateNotFoundError,
)
from treasury_gateway.domain.tax_filings import Adjustment, FilingPeriod, FilingStatus, TaxFiling
from treasury_gateway.domain.tax_payments import PaymentStatus, TaxPayment
from treasury_gateway.domain.tax_rates import TaxRate, TaxRateStatus, TaxType
from treasury_gateway.domain.taxpayers import Taxpayer, TaxpayerStatus, TaxpayerType
from treasury_gateway.infrastructure.database.models import (
    TaxFilingRecord,
    TaxPaymentRecord,
    TaxpayerRecord,
    TaxRateRecord,
)
from treasury_gateway.infrastructure.database.repositories import (
    SQLAlchemyRepository,
    address_from,
    apply_address,
    is_valid_uuid,
)
from treasury_gateway.utils.date_utils import days_ago, utcnow


class TaxpayerRepository(SQLAlchemyRepository[Taxpayer]):
    """Repository for taxpayers"""

    record_cls = TaxpayerRecord
    not_found_error = TaxpayerNotFoundError

    def to_entity(self, record: TaxpayerRecord) -> Taxpayer:
        return Taxpayer(
            id=record.id,
            type=record.type,
            status=record.status,
            name=record.name,
            tax_identifier=record.tax_identifier,
            contact_email=record.contact_email or "",
            contact_phone=record.contact_phone or "",
            address=address_from(record),
            exemption_codes=list(record.exemption_codes or []),
            annual_revenue=record.annual_revenue,
            business_type=record.business_type or "",
            industry=record.industry or "",
            created_at=record.created_at,
            updated_at=record.updated_at,
            version=record.version,
        )

    def apply(self, record: TaxpayerRecord, entity: Taxpayer) -> None:
        record.type = entity.type
        record.status = entity.status
        record.name = entity.name
        record.tax_identifier = entity.tax_identifier
        record.contact_email = entity.contact_email
        record.contact_phone = entity.contact_phone
        apply_address(record, entity.address)
        record.exemption_codes = list(entity.exemption_codes)
        record.annual_revenue = entity.annual_revenue
        record.business_type = entity.business_type
        record.industry = entity.industry
        record.created_at = entity.created_at
        record.updated_at = entity.updated_at

    def get_by_tax_identifier(self, identifier: str) -> Optional[Taxpayer]:
        return self._first(self._query().filter(TaxpayerRecord.tax_identifier == identifier))

    def list_all(self) -> List[Taxpayer]:
        return self._all(self._query())

    def list_by_type(self, taxpayer_type: TaxpayerType) -> List[Taxpayer]:
        return self._all(self._query().filter(TaxpayerRecord.type == taxpayer_type))

    def list_by_status(self, status: TaxpayerStatus) -> List[Taxpayer]:
        return self._all(self._query().filter(TaxpayerRecord.status == status))

    def list_businesses_by_industry(self, industry: str) -> List[Taxpayer]:
        query = self._query().filter(
            TaxpayerRecord.type == TaxpayerType.BUSINESS,
            TaxpayerRecord.industry == industry,
        )
        return self._all(query)

    def search(self, query_text: str, limit: int = 20) -> List[Taxpayer]:
        """Case-insensitive match on name, tax identifier or contact email"""
        escaped = query_text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        query = self._query().filter(
            or_(
                func.lower(TaxpayerRecord.name).like(pattern, escape="\\"),
                func.lower(TaxpayerRecord.tax_identifier).like(pattern, escape="\\"),
                func.lower(TaxpayerRecord.contact_email).like(pattern, escape="\\"),
            )
        )
        return self._all(query, limit)


class TaxRateRepository(SQLAlchemyRepository[TaxRate]):
    """Repository for tax rates"""

    record_cls = TaxRateRecord
    not_found_error = TaxRateNotFoundError

    def to_entity(self, record: TaxRateRecord) -> TaxRate:
        return TaxRate(
            id=record.id,
            type=record.type,
            name=record.name,
            description=record.description or "",
            rate=record.rate,
            bracket_type=record.bracket_type,
            min_amount=record.min_amount,
            max_amount=record.max_amount,
            status=record.status,
            category=record.category or "",
            jurisdiction_code=record.jurisdiction_code,
            effective_date=record.effective_date,
            expiration_date=record.expiration_date,
            created_at=record.created_at,
            updated_at=record.updated_at,
            version=record.version,
        )

    def apply(self, record: TaxRateRecord, entity: TaxRate) -> None:
        record.type = entity.type
        record.name = entity.name
        record.description = entity.description
        record.rate = entity.rate
        record.bracket_type = entity.bracket_type
        record.min_amount = entity.min_amount
        record.max_amount = entity.max_amount
        record.status = entity.status
        record.category = entity.category
        record.jurisdiction_code = entity.jurisdiction_code
        record.effective_date = entity.effective_date
        record.expiration_date = entity.expiration_date
        record.created_at = entity.created_at
        record.updated_at = entity.updated_at

    def list_by_type(self, tax_type: TaxType) -> List[TaxRate]:
        return self._all(self._query().filter(TaxRateRecord.type == tax_type))

    def list_active(self) -> List[TaxRate]:
        return self._all(self._query().filter(TaxRateRecord.status == TaxRateStatus.ACTIVE))

    def list_by_jurisdiction(self, jurisdiction_code: str) -> List[TaxRate]:
        return self._all(self._query().filter(TaxRateRecord.jurisdiction_code == jurisdiction_code))

    def get_rates_for_income(self, amount: int, jurisdiction_code: str) -> List[TaxRate]:
        """Active income tax rates in the jurisdiction whose bracket applies to the amount"""
        query = self._query().filter(
            TaxRateRecord.type == TaxType.INCOME,
            TaxRateRecord.status == TaxRateStatus.ACTIVE,
            TaxRateRecord.jurisdiction_code == jurisdiction_code,
        )
        return [rate for rate in self._all(query) if rate.is_applicable(amount)]


class TaxFilingRepository(SQLAlchemyRepository[TaxFiling]):
    """Repository for tax filings"""

    record_cls = TaxFilingRecord
    not_found_error = TaxFilingNotFoundError

    def to_entity(self, record: TaxFilingRecord) -> TaxFiling:
        return TaxFiling(
            id=record.id,
            taxpayer_id=record.taxpayer_id,
            tax_year=record.tax_year,
            period=record.period,
            period_start=record.period_start,
            period_end=record.period_end,
            filing_type=record.filing_type,
            status=record.status,
            gross_income=record.gross_income,
            taxable_income=record.taxable_income,
            total_sales=record.total_sales,
            taxable_amount=record.taxable_amount,
            tax_calculated=record.tax_calculated,
            tax_paid=record.tax_paid,
            deductions=[Adjustment(**d) for d in record.deductions or []],
            credits=[Adjustment(**c) for c in record.credits or []],
            notes=record.notes or "",
            submission_date=record.submission_date,
            acceptance_date=record.acceptance_date,
            due_date=record.due_date,
            created_at=record.created_at,
            updated_at=record.updated_at,
            version=record.version,
        )

    def apply(self, record: TaxFilingRecord, entity: TaxFiling) -> None:
        record.taxpayer_id = entity.taxpayer_id
        record.tax_year = entity.tax_year
        record.period = entity.period
        record.period_start = entity.period_start
        record.period_end = entity.period_end
        record.filing_type = entity.filing_type
        record.status = entity.status
        record.gross_income = entity.gross_income
        record.taxable_income = entity.taxable_income
        record.total_sales = entity.total_sales
        record.taxable_amount = entity.taxable_amount
        record.tax_calculated = entity.tax_calculated
        record.tax_paid = entity.tax_paid
        record.deductions = [d.to_dict() for d in entity.deductions]
        record.credits = [c.to_dict() for c in entity.credits]
        record.notes = entity.notes
        record.submission_date = entity.submission_date
        record.acceptance_date = entity.acceptance_date
        record.due_date = entity.due_date
        record.created_at = entity.created_at
        record.updated_at = entity.updated_at

    def list_by_taxpayer(self, taxpayer_id: str, limit: int = 50, offset: int = 0) -> List[TaxFiling]:
        if not is_valid_uuid(taxpayer_id):
            return []
        return self._all(self._query().filter(TaxFilingRecord.taxpayer_id == taxpayer_id), limit, offset)

    def list_by_status(self, status: FilingStatus, limit: int = 50, offset: int = 0) -> List[TaxFiling]:
        return self._all(self._query().filter(TaxFilingRecord.status == status), limit, offset)

    def list_by_period(self, tax_year: int, period: FilingPeriod) -> List[TaxFiling]:
        query = self._query().filter(TaxFilingRecord.tax_year == tax_year, TaxFilingRecord.period == period)
        return self._all(query)

    def list_by_year(self, tax_year: int) -> List[TaxFiling]:
        return self._all(self._query().filter(TaxFilingRecord.tax_year == tax_year))

    def list_due_between(self, start_date: date, end_date: date) -> List[TaxFiling]:
        query = self._query().filter(TaxFilingRecord.due_date >= start_date, TaxFilingRecord.due_date <= end_date)
        return self._all(query)

    def list_overdue(self, today: Optional[date] = None) -> List[TaxFiling]:
        today = today or utcnow().date()
        query = self._query().filter(
            TaxFilingRecord.due_date < today,
            TaxFilingRecord.status != FilingStatus.ACCEPTED,
        )
        return self._all(query)

    def list_recently_submitted(self, days: int) -> List[TaxFiling]:
        query = self._query().filter(
            TaxFilingRecord.submission_date.is_not(None),
            TaxFilingRecord.submission_date >= days_ago(days),
        )
        return self._all(query)


class TaxPaymentRepository(SQLAlchemyRepository[TaxPayment]):
    """Repository for tax payments"""

    record_cls = TaxPaymentRecord
    not_found_error = TaxPaymentNotFoundError

    def to_entity(self, record: TaxPaymentRecord) -> TaxPayment:
        return TaxPayment(
            id=record.id,
            taxpayer_id=record.taxpayer_id,
            filing_id=record.filing_id,
            tax_type=record.tax_type,
            amount=record.amount,
            payment_method=record.payment_method,
            status=record.status,
            payment_date=record.payment_date,
            confirmation_code=record.confirmation_code,
            notes=record.notes or "",
            processed_at=record.processed_at,
            refunded_at=record.refunded_at,
            created_at=record.created_at,
            updated_at=record.updated_at,
            version=record.version,
        )

    def apply(self, record: TaxPaymentRecord, entity: TaxPayment) -> None:
        record.taxpayer_id = entity.taxpayer_id
        record.filing_id = entity.filing_id
        record.tax_type = entity.tax_type
        record.amount = entity.amount
        record.payment_method = entity.payment_method
        record.status = entity.status
        record.payment_date = entity.payment_date
        record.confirmation_code = entity.confirmation_code
        record.notes = entity.notes
        record.processed_at = entity.processed_at
        record.refunded_at = entity.refunded_at
        record.created_at = entity.created_at
        record.updated_at = entity.updated_at

    def get_by_confirmation_code(self, code: str) -> Optional[TaxPayment]:
        return self._first(self._query().filter(TaxPaymentRecord.confirmation_code == code))

    def list_by_taxpayer(self, taxpayer_id: str, limit: int = 50, offset: int = 0) -> List[TaxPayment]:
        if not is_valid_uuid(taxpayer_id):
            return []
        return self._all(self._query().filter(TaxPaymentRecord.taxpayer_id == taxpayer_id), limit, offset)

    def list_by_filing(self, filing_id: str) -> List[TaxPayment]:
        if not is_valid_uuid(filing_id):
            return []
        return self._all(self._query().filter(TaxPaymentRecord.filing_id == filing_id))

    def list_by_status(self, status: PaymentStatus) -> List[TaxPayment]:
        return self._all(self._query().filter(TaxPaymentRecord.status == status))

    def list_by_date_range(self, start_date: date, end_date: date) -> List[TaxPayment]:
        """Payments whose payment date falls within [start_date, end_date]"""
        query = self._query().filter(
            TaxPaymentRecord.payment_date >= start_date,
            TaxPaymentRecord.payment_date <= end_date,
        )
        return self._all(query)

    def list_recent(self, days: int) -> List[TaxPayment]:
        since = utcnow().date() - timedelta(days=days)
        return self._all(self._query().filter(TaxPaymentRecord.payment_date >= since))

    def get_total_by_tax_type(self, tax_type: TaxType, start_date: date, end_date: date) -> int:
        """Sum of completed payments of one tax type in the date range"""
        total = (
            self.db.query(func.coalesce(func.sum(TaxPaymentRecord.amount), 0))
            .filter(
                TaxPaymentRecord.tax_type == tax_type,
                TaxPaymentRecord.status == PaymentStatus.COMPLETED,
                TaxPaymentRecord.payment_date >= start_date,
                TaxPaymentRecord.payment_date <= end_date,
            )
            .scalar()
        )
        return int(total)
