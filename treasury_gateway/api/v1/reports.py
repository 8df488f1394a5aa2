"""Treasury report endpoints"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query

from treasury_gateway.api.dependencies import get_tax_report_service
from treasury_gateway.api.v1.schemas import (
    ComplianceReportResponse,
    FilingStatusReportResponse,
    RevenueReportResponse,
    TaxTypeBreakdownResponse,
)
from treasury_gateway.services.tax_reports import TaxReportService

router = APIRouter()


@router.get("/reports/revenue", response_model=RevenueReportResponse)
def revenue_report(
    start_date: date = Query(...),
    end_date: date = Query(...),
    top: Optional[int] = Query(None, ge=1, le=100, description="Number of top taxpayers"),
    service: TaxReportService = Depends(get_tax_report_service),
):
    return RevenueReportResponse.model_validate(service.revenue_report(start_date, end_date, top))


@router.get("/reports/filings", response_model=FilingStatusReportResponse)
def filing_status_report(
    tax_year: int = Query(..., ge=1900, le=9999),
    service: TaxReportService = Depends(get_tax_report_service),
):
    return FilingStatusReportResponse.model_validate(service.filing_status_report(tax_year))


@router.get("/reports/compliance", response_model=ComplianceReportResponse)
def compliance_report(service: TaxReportService = Depends(get_tax_report_service)):
    return ComplianceReportResponse.model_validate(service.taxpayer_compliance_report())


@router.get("/reports/tax-types", response_model=TaxTypeBreakdownResponse)
def tax_type_breakdown(
    start_date: date = Query(...),
    end_date: date = Query(...),
    service: TaxReportService = Depends(get_tax_report_service),
):
    return TaxTypeBreakdownResponse.model_validate(service.tax_type_breakdown(start_date, end_date))
