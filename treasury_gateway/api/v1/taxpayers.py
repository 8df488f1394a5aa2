"""Taxpayer endpoints"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from treasury_gateway.api.dependencies import get_taxpayer_service
from treasury_gateway.api.v1.schemas import (
    AddressSchema,
    BusinessInfoRequest,
    ExemptionRequest,
    TaxpayerContactRequest,
    TaxpayerCreateRequest,
    TaxpayerResponse,
    TaxpayerStatusRequest,
)
from treasury_gateway.config import settings
from treasury_gateway.domain.exceptions import TaxpayerNotFoundError
from treasury_gateway.domain.taxpayers import TaxpayerStatus, TaxpayerType
from treasury_gateway.services.taxpayers import TaxpayerService

router = APIRouter()


@router.post("/taxpayers", response_model=TaxpayerResponse, status_code=201)
def create_taxpayer(
    request_body: TaxpayerCreateRequest,
    service: TaxpayerService = Depends(get_taxpayer_service),
):
    taxpayer = service.create_taxpayer(
        taxpayer_type=request_body.type,
        name=request_body.name,
        tax_identifier=request_body.tax_identifier,
        contact_email=request_body.contact_email,
        contact_phone=request_body.contact_phone,
        address=request_body.address.to_domain() if request_body.address else None,
        exemption_codes=request_body.exemption_codes,
    )
    return TaxpayerResponse.model_validate(taxpayer)


@router.get("/taxpayers", response_model=List[TaxpayerResponse])
def list_taxpayers(
    type: Optional[TaxpayerType] = Query(None),
    status: Optional[TaxpayerStatus] = Query(None),
    industry: Optional[str] = Query(None, description="Businesses in this industry"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    service: TaxpayerService = Depends(get_taxpayer_service),
):
    """List taxpayers; at most one of type, status or industry filters the result"""
    if industry:
        taxpayers = service.list_businesses_by_industry(industry)
    elif type:
        taxpayers = service.list_by_type(type)
    elif status:
        taxpayers = service.list_by_status(status)
    else:
        taxpayers = service.list_taxpayers(limit, offset)
    return [TaxpayerResponse.model_validate(t) for t in taxpayers]


@router.get("/taxpayers/search", response_model=List[TaxpayerResponse])
def search_taxpayers(
    q: str = Query(..., min_length=1, description="Name, tax identifier or email fragment"),
    limit: int = Query(20, ge=1, le=settings.max_page_size),
    service: TaxpayerService = Depends(get_taxpayer_service),
):
    return [TaxpayerResponse.model_validate(t) for t in service.search(q, limit)]


@router.get("/taxpayers/by-identifier/{tax_identifier}", response_model=TaxpayerResponse)
def get_taxpayer_by_identifier(tax_identifier: str, service: TaxpayerService = Depends(get_taxpayer_service)):
    taxpayer = service.get_by_tax_identifier(tax_identifier)
    if taxpayer is None:
        raise TaxpayerNotFoundError()
    return TaxpayerResponse.model_validate(taxpayer)


@router.get("/taxpayers/{taxpayer_id}", response_model=TaxpayerResponse)
def get_taxpayer(taxpayer_id: str, service: TaxpayerService = Depends(get_taxpayer_service)):
    return TaxpayerResponse.model_validate(service.get_taxpayer(taxpayer_id))


@router.put("/taxpayers/{taxpayer_id}/status", response_model=TaxpayerResponse)
def update_taxpayer_status(
    taxpayer_id: str,
    request_body: TaxpayerStatusRequest,
    service: TaxpayerService = Depends(get_taxpayer_service),
):
    return TaxpayerResponse.model_validate(service.update_status(taxpayer_id, request_body.status))


@router.put("/taxpayers/{taxpayer_id}/contact", response_model=TaxpayerResponse)
def update_taxpayer_contact(
    taxpayer_id: str,
    request_body: TaxpayerContactRequest,
    service: TaxpayerService = Depends(get_taxpayer_service),
):
    taxpayer = service.update_contact(taxpayer_id, request_body.contact_email, request_body.contact_phone)
    return TaxpayerResponse.model_validate(taxpayer)


@router.put("/taxpayers/{taxpayer_id}/address", response_model=TaxpayerResponse)
def update_taxpayer_address(
    taxpayer_id: str,
    request_body: AddressSchema,
    service: TaxpayerService = Depends(get_taxpayer_service),
):
    return TaxpayerResponse.model_validate(service.update_address(taxpayer_id, request_body.to_domain()))


@router.put("/taxpayers/{taxpayer_id}/business", response_model=TaxpayerResponse)
def update_business_info(
    taxpayer_id: str,
    request_body: BusinessInfoRequest,
    service: TaxpayerService = Depends(get_taxpayer_service),
):
    taxpayer = service.update_business_info(
        taxpayer_id,
        request_body.annual_revenue,
        request_body.business_type,
        request_body.industry,
    )
    return TaxpayerResponse.model_validate(taxpayer)


@router.post("/taxpayers/{taxpayer_id}/exemptions", response_model=TaxpayerResponse)
def add_exemption(
    taxpayer_id: str,
    request_body: ExemptionRequest,
    service: TaxpayerService = Depends(get_taxpayer_service),
):
    return TaxpayerResponse.model_validate(service.add_exemption(taxpayer_id, request_body.code))


@router.delete("/taxpayers/{taxpayer_id}/exemptions/{code}", response_model=TaxpayerResponse)
def remove_exemption(taxpayer_id: str, code: str, service: TaxpayerService = Depends(get_taxpayer_service)):
    return TaxpayerResponse.model_validate(service.remove_exemption(taxpayer_id, code))
