"""Report models produced by the tax report service"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional


@dataclass
class MonthlyRevenue:
    year: int
    month: int
    revenue: int


@dataclass
class TaxpayerRevenue:
    taxpayer_id: str
    taxpayer_name: str
    revenue: int


@dataclass
class RevenueReport:
    """Completed tax payments collected in a date range"""

    start_date: date
    end_date: date
    total_revenue: int
    revenue_by_type: Dict[str, int]
    monthly_revenue: List[MonthlyRevenue]
    top_taxpayers: List[TaxpayerRevenue]
    generated_at: datetime


@dataclass
class FilingStatusReport:
    tax_year: int
    total_filings: int
    filings_by_status: Dict[str, int]
    filings_by_type: Dict[str, int]
    overdue_filings: int
    generated_at: datetime


@dataclass
class TaxpayerComplianceReport:
    """
    A taxpayer is compliant when it is not delinquent and has no overdue
    filings. compliance_by_type holds the compliant share (0.0-1.0) per type.
    """

    total_taxpayers: int
    compliant_taxpayers: int
    delinquent_taxpayers: int
    compliance_by_type: Dict[str, float]
    generated_at: datetime


@dataclass
class TaxBreakdown:
    revenue: int = 0
    percentage: float = 0.0
    filings_count: int = 0
    payments_count: int = 0


@dataclass
class TaxTypeBreakdownReport:
    start_date: date
    end_date: date
    total_revenue: int
    breakdown_by_type: Dict[str, TaxBreakdown] = field(default_factory=dict)
    generated_at: Optional[datetime] = None
