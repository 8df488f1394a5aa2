"""Revenue, filing and compliance reports aggregated from stored payments and filings"""

from collections import Counter, defaultdict
from datetime import date
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from treasury_gateway.config import settings
from treasury_gateway.domain.exceptions import InvalidInputError
from treasury_gateway.domain.reports import (
    FilingStatusReport,
    MonthlyRevenue,
    RevenueReport,
    TaxBreakdown,
    TaxpayerComplianceReport,
    TaxpayerRevenue,
    TaxTypeBreakdownReport,
)
from treasury_gateway.domain.tax_payments import PaymentStatus, TaxPayment
from treasury_gateway.domain.tax_rates import TaxType
from treasury_gateway.domain.taxpayers import TaxpayerStatus, TaxpayerType
from treasury_gateway.infrastructure.database.tax_repositories import (
    TaxFilingRepository,
    TaxPaymentRepository,
    TaxpayerRepository,
)
from treasury_gateway.utils.date_utils import generate_month_range, utcnow


class TaxReportService:
    def __init__(self, db: Session):
        self.db = db
        self.payments = TaxPaymentRepository(db)
        self.filings = TaxFilingRepository(db)
        self.taxpayers = TaxpayerRepository(db)

    def revenue_report(self, start_date: date, end_date: date, top_n: Optional[int] = None) -> RevenueReport:
        """
        Completed payments dated within [start_date, end_date].

        Revenue is grouped by tax type, by calendar month and by taxpayer; the
        top_n largest contributors are listed, largest first.
        """
        payments = self._completed_payments(start_date, end_date)
        top_n = top_n or settings.top_taxpayers_limit

        by_type: Dict[str, int] = {t.value: 0 for t in TaxType}
        by_month: Dict[tuple, int] = defaultdict(int)
        by_taxpayer: Dict[str, int] = defaultdict(int)
        for payment in payments:
            by_type[payment.tax_type.value] += payment.amount
            by_month[(payment.payment_date.year, payment.payment_date.month)] += payment.amount
            by_taxpayer[payment.taxpayer_id] += payment.amount

        monthly = [
            MonthlyRevenue(year=year, month=month, revenue=by_month.get((year, month), 0))
            for year, month in generate_month_range(start_date, end_date)
        ]

        ranked = sorted(by_taxpayer.items(), key=lambda item: (-item[1], item[0]))[:top_n]
        top_taxpayers = [
            TaxpayerRevenue(
                taxpayer_id=taxpayer_id,
                taxpayer_name=self.taxpayers.get_by_id(taxpayer_id).name,
                revenue=revenue,
            )
            for taxpayer_id, revenue in ranked
        ]

        return RevenueReport(
            start_date=start_date,
            end_date=end_date,
            total_revenue=sum(p.amount for p in payments),
            revenue_by_type=by_type,
            monthly_revenue=monthly,
            top_taxpayers=top_taxpayers,
            generated_at=utcnow(),
        )

    def filing_status_report(self, tax_year: int, today: Optional[date] = None) -> FilingStatusReport:
        filings = self.filings.list_by_year(tax_year)

        return FilingStatusReport(
            tax_year=tax_year,
            total_filings=len(filings),
            filings_by_status=dict(Counter(f.status.value for f in filings)),
            filings_by_type=dict(Counter(f.filing_type.value for f in filings)),
            overdue_filings=sum(1 for f in filings if f.is_overdue(today)),
            generated_at=utcnow(),
        )

    def taxpayer_compliance_report(self, today: Optional[date] = None) -> TaxpayerComplianceReport:
        taxpayers = self.taxpayers.list_all()
        with_overdue = {f.taxpayer_id for f in self.filings.list_overdue(today)}

        totals: Dict[str, int] = defaultdict(int)
        compliant_by_type: Dict[str, int] = defaultdict(int)
        compliant = 0
        delinquent = 0
        for taxpayer in taxpayers:
            is_delinquent = taxpayer.status == TaxpayerStatus.DELINQUENT
            if is_delinquent:
                delinquent += 1

            totals[taxpayer.type.value] += 1
            if not is_delinquent and taxpayer.id not in with_overdue:
                compliant += 1
                compliant_by_type[taxpayer.type.value] += 1

        compliance_by_type = {
            t.value: compliant_by_type[t.value] / totals[t.value]
            for t in TaxpayerType
            if totals[t.value]
        }

        return TaxpayerComplianceReport(
            total_taxpayers=len(taxpayers),
            compliant_taxpayers=compliant,
            delinquent_taxpayers=delinquent,
            compliance_by_type=compliance_by_type,
            generated_at=utcnow(),
        )

    def tax_type_breakdown(self, start_date: date, end_date: date) -> TaxTypeBreakdownReport:
        """Revenue share and activity per tax type; filings are counted by due date"""
        payments = self._completed_payments(start_date, end_date)
        filings = self.filings.list_due_between(start_date, end_date)

        breakdown = {t.value: TaxBreakdown() for t in TaxType}
        for payment in payments:
            entry = breakdown[payment.tax_type.value]
            entry.revenue += payment.amount
            entry.payments_count += 1
        for filing in filings:
            breakdown[filing.filing_type.value].filings_count += 1

        total = sum(entry.revenue for entry in breakdown.values())
        if total:
            for entry in breakdown.values():
                entry.percentage = entry.revenue / total * 100

        return TaxTypeBreakdownReport(
            start_date=start_date,
            end_date=end_date,
            total_revenue=total,
            breakdown_by_type=breakdown,
            generated_at=utcnow(),
        )

    def _completed_payments(self, start_date: date, end_date: date) -> List[TaxPayment]:
        if end_date < start_date:
            raise InvalidInputError("end date must not precede start date")
        return [
            p for p in self.payments.list_by_date_range(start_date, end_date)
            if p.status == PaymentStatus.COMPLETED
        ]
