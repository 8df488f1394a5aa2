"""Tax rate endpoints and tax calculators"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from treasury_gateway.api.dependencies import get_tax_rate_service
from treasury_gateway.api.v1.schemas import (
    TaxCalculationResponse,
    TaxRateCreateRequest,
    TaxRateResponse,
    TaxRateUpdateRequest,
)
from treasury_gateway.config import settings
from treasury_gateway.domain.tax_rates import TaxType
from treasury_gateway.services.tax_rates import TaxRateService

router = APIRouter()


@router.post("/tax-rates", response_model=TaxRateResponse, status_code=201)
def create_tax_rate(
    request_body: TaxRateCreateRequest,
    service: TaxRateService = Depends(get_tax_rate_service),
):
    tax_rate = service.create_tax_rate(
        tax_type=request_body.type,
        name=request_body.name,
        rate=request_body.rate,
        bracket_type=request_body.bracket_type,
        jurisdiction_code=request_body.jurisdiction_code,
        effective_date=request_body.effective_date,
        description=request_body.description,
        min_amount=request_body.min_amount,
        max_amount=request_body.max_amount,
        category=request_body.category,
        expiration_date=request_body.expiration_date,
    )
    return TaxRateResponse.model_validate(tax_rate)


@router.get("/tax-rates", response_model=List[TaxRateResponse])
def list_tax_rates(
    type: Optional[TaxType] = Query(None),
    jurisdiction: Optional[str] = Query(None),
    active: bool = Query(False, description="Only active rates"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    service: TaxRateService = Depends(get_tax_rate_service),
):
    if active:
        rates = service.list_active()
    elif type:
        rates = service.list_by_type(type)
    elif jurisdiction:
        rates = service.list_by_jurisdiction(jurisdiction)
    else:
        rates = service.list_tax_rates(limit, offset)
    return [TaxRateResponse.model_validate(r) for r in rates]


@router.get("/tax-rates/income", response_model=List[TaxRateResponse])
def rates_for_income(
    amount: int = Query(..., ge=0),
    jurisdiction: str = Query(..., min_length=1),
    service: TaxRateService = Depends(get_tax_rate_service),
):
    return [TaxRateResponse.model_validate(r) for r in service.rates_for_income(amount, jurisdiction)]


@router.get("/tax-rates/calculate/income", response_model=TaxCalculationResponse)
def calculate_income_tax(
    amount: int = Query(..., ge=0, description="Income in minor units"),
    jurisdiction: str = Query(..., min_length=1),
    service: TaxRateService = Depends(get_tax_rate_service),
):
    tax = service.calculate_income_tax(amount, jurisdiction)
    return TaxCalculationResponse(amount=amount, jurisdiction_code=jurisdiction, tax=tax)


@router.get("/tax-rates/calculate/sales", response_model=TaxCalculationResponse)
def calculate_sales_tax(
    amount: int = Query(..., ge=0, description="Sale amount in minor units"),
    jurisdiction: str = Query(..., min_length=1),
    category: str = Query(""),
    service: TaxRateService = Depends(get_tax_rate_service),
):
    tax = service.calculate_sales_tax(amount, category, jurisdiction)
    return TaxCalculationResponse(amount=amount, jurisdiction_code=jurisdiction, tax=tax)


@router.get("/tax-rates/{rate_id}", response_model=TaxRateResponse)
def get_tax_rate(rate_id: str, service: TaxRateService = Depends(get_tax_rate_service)):
    return TaxRateResponse.model_validate(service.get_tax_rate(rate_id))


@router.put("/tax-rates/{rate_id}", response_model=TaxRateResponse)
def update_tax_rate(
    rate_id: str,
    request_body: TaxRateUpdateRequest,
    service: TaxRateService = Depends(get_tax_rate_service),
):
    tax_rate = service.update_tax_rate(
        rate_id,
        name=request_body.name,
        description=request_body.description,
        rate=request_body.rate,
        category=request_body.category,
        effective_date=request_body.effective_date,
        expiration_date=request_body.expiration_date,
    )
    return TaxRateResponse.model_validate(tax_rate)


@router.post("/tax-rates/{rate_id}/activate", response_model=TaxRateResponse)
def activate_tax_rate(rate_id: str, service: TaxRateService = Depends(get_tax_rate_service)):
    return TaxRateResponse.model_validate(service.activate_tax_rate(rate_id))


@router.post("/tax-rates/{rate_id}/deactivate", response_model=TaxRateResponse)
def deactivate_tax_rate(rate_id: str, service: TaxRateService = Depends(get_tax_rate_service)):
    return TaxRateResponse.model_validate(service.deactivate_tax_rate(rate_id))


@router.post("/tax-rates/{rate_id}/archive", response_model=TaxRateResponse)
def archive_tax_rate(rate_id: str, service: TaxRateService = Depends(get_tax_rate_service)):
    return TaxRateResponse.model_validate(service.archive_tax_rate(rate_id))
