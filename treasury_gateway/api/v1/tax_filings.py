"""Tax filing endpoints"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from treasury_gateway.api.dependencies import get_tax_filing_service
from treasury_gateway.api.v1.schemas import (
    AdjustmentSchema,
    FilingAmountsRequest,
    ProcessFilingRequest,
    ReasonRequest,
    TaxFilingCreateRequest,
    TaxFilingResponse,
)
from treasury_gateway.config import settings
from treasury_gateway.domain.tax_filings import FilingPeriod, FilingStatus
from treasury_gateway.services.tax_filings import TaxFilingService

router = APIRouter()


@router.post("/tax-filings", response_model=TaxFilingResponse, status_code=201)
def create_filing(
    request_body: TaxFilingCreateRequest,
    service: TaxFilingService = Depends(get_tax_filing_service),
):
    filing = service.create_filing(
        taxpayer_id=request_body.taxpayer_id,
        tax_year=request_body.tax_year,
        period=request_body.period,
        period_start=request_body.period_start,
        period_end=request_body.period_end,
        filing_type=request_body.filing_type,
        due_date=request_body.due_date,
        notes=request_body.notes,
    )
    return TaxFilingResponse.model_validate(filing)


@router.get("/tax-filings", response_model=List[TaxFilingResponse])
def list_filings(
    taxpayer_id: Optional[str] = Query(None),
    status: Optional[FilingStatus] = Query(None),
    tax_year: Optional[int] = Query(None),
    period: Optional[FilingPeriod] = Query(None),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    service: TaxFilingService = Depends(get_tax_filing_service),
):
    """List filings by taxpayer, by status, or by tax year and period"""
    if taxpayer_id:
        filings = service.list_by_taxpayer(taxpayer_id, limit, offset)
    elif status:
        filings = service.list_by_status(status, limit, offset)
    elif tax_year and period:
        filings = service.list_by_period(tax_year, period)
    else:
        filings = service.list_filings(limit, offset)
    return [TaxFilingResponse.model_validate(f) for f in filings]


@router.get("/tax-filings/overdue", response_model=List[TaxFilingResponse])
def list_overdue_filings(service: TaxFilingService = Depends(get_tax_filing_service)):
    return [TaxFilingResponse.model_validate(f) for f in service.list_overdue()]


@router.get("/tax-filings/recent", response_model=List[TaxFilingResponse])
def list_recently_submitted(
    days: int = Query(settings.recent_days, ge=1),
    service: TaxFilingService = Depends(get_tax_filing_service),
):
    return [TaxFilingResponse.model_validate(f) for f in service.list_recently_submitted(days)]


@router.get("/tax-filings/{filing_id}", response_model=TaxFilingResponse)
def get_filing(filing_id: str, service: TaxFilingService = Depends(get_tax_filing_service)):
    return TaxFilingResponse.model_validate(service.get_filing(filing_id))


@router.put("/tax-filings/{filing_id}/amounts", response_model=TaxFilingResponse)
def update_amounts(
    filing_id: str,
    request_body: FilingAmountsRequest,
    service: TaxFilingService = Depends(get_tax_filing_service),
):
    filing = service.update_amounts(
        filing_id,
        request_body.gross_income,
        request_body.taxable_income,
        request_body.total_sales,
        request_body.taxable_amount,
    )
    return TaxFilingResponse.model_validate(filing)


@router.post("/tax-filings/{filing_id}/deductions", response_model=TaxFilingResponse)
def add_deduction(
    filing_id: str,
    request_body: AdjustmentSchema,
    service: TaxFilingService = Depends(get_tax_filing_service),
):
    filing = service.add_deduction(filing_id, request_body.code, request_body.description, request_body.amount)
    return TaxFilingResponse.model_validate(filing)


@router.post("/tax-filings/{filing_id}/credits", response_model=TaxFilingResponse)
def add_credit(
    filing_id: str,
    request_body: AdjustmentSchema,
    service: TaxFilingService = Depends(get_tax_filing_service),
):
    filing = service.add_credit(filing_id, request_body.code, request_body.description, request_body.amount)
    return TaxFilingResponse.model_validate(filing)


@router.post("/tax-filings/{filing_id}/submit", response_model=TaxFilingResponse)
def submit_filing(filing_id: str, service: TaxFilingService = Depends(get_tax_filing_service)):
    return TaxFilingResponse.model_validate(service.submit_filing(filing_id))


@router.post("/tax-filings/{filing_id}/process", response_model=TaxFilingResponse)
def process_filing(
    filing_id: str,
    request_body: ProcessFilingRequest,
    service: TaxFilingService = Depends(get_tax_filing_service),
):
    return TaxFilingResponse.model_validate(service.process_filing(filing_id, request_body.tax_calculated))


@router.post("/tax-filings/{filing_id}/accept", response_model=TaxFilingResponse)
def accept_filing(filing_id: str, service: TaxFilingService = Depends(get_tax_filing_service)):
    return TaxFilingResponse.model_validate(service.accept_filing(filing_id))


@router.post("/tax-filings/{filing_id}/reject", response_model=TaxFilingResponse)
def reject_filing(
    filing_id: str,
    request_body: ReasonRequest,
    service: TaxFilingService = Depends(get_tax_filing_service),
):
    return TaxFilingResponse.model_validate(service.reject_filing(filing_id, request_body.reason))


@router.post("/tax-filings/{filing_id}/amend", response_model=TaxFilingResponse, status_code=201)
def amend_filing(filing_id: str, service: TaxFilingService = Depends(get_tax_filing_service)):
    return TaxFilingResponse.model_validate(service.amend_filing(filing_id))
