"""Tax payment endpoints"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from treasury_gateway.api.dependencies import get_tax_payment_service
from treasury_gateway.api.v1.schemas import (
    PaymentAmountRequest,
    PaymentTotalResponse,
    ReasonRequest,
    TaxPaymentCreateRequest,
    TaxPaymentResponse,
)
from treasury_gateway.config import settings
from treasury_gateway.domain.exceptions import TaxPaymentNotFoundError
from treasury_gateway.domain.tax_payments import PaymentStatus
from treasury_gateway.domain.tax_rates import TaxType
from treasury_gateway.services.tax_payments import TaxPaymentService

router = APIRouter()


@router.post("/tax-payments", response_model=TaxPaymentResponse, status_code=201)
def create_payment(
    request_body: TaxPaymentCreateRequest,
    service: TaxPaymentService = Depends(get_tax_payment_service),
):
    payment = service.create_payment(
        taxpayer_id=request_body.taxpayer_id,
        tax_type=request_body.tax_type,
        amount=request_body.amount,
        payment_method=request_body.payment_method,
        filing_id=request_body.filing_id,
        payment_date=request_body.payment_date,
        notes=request_body.notes,
    )
    return TaxPaymentResponse.model_validate(payment)


@router.get("/tax-payments", response_model=List[TaxPaymentResponse])
def list_payments(
    taxpayer_id: Optional[str] = Query(None),
    filing_id: Optional[str] = Query(None),
    status: Optional[PaymentStatus] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    service: TaxPaymentService = Depends(get_tax_payment_service),
):
    if taxpayer_id:
        payments = service.list_by_taxpayer(taxpayer_id, limit, offset)
    elif filing_id:
        payments = service.list_by_filing(filing_id)
    elif status:
        payments = service.list_by_status(status)
    elif start_date and end_date:
        payments = service.list_by_date_range(start_date, end_date)
    else:
        payments = service.list_payments(limit, offset)
    return [TaxPaymentResponse.model_validate(p) for p in payments]


@router.get("/tax-payments/recent", response_model=List[TaxPaymentResponse])
def list_recent_payments(
    days: int = Query(settings.recent_days, ge=1),
    service: TaxPaymentService = Depends(get_tax_payment_service),
):
    return [TaxPaymentResponse.model_validate(p) for p in service.list_recent(days)]


@router.get("/tax-payments/total", response_model=PaymentTotalResponse)
def total_by_tax_type(
    tax_type: TaxType = Query(...),
    start_date: date = Query(...),
    end_date: date = Query(...),
    service: TaxPaymentService = Depends(get_tax_payment_service),
):
    """Sum of completed payments of one tax type"""
    total = service.total_by_tax_type(tax_type, start_date, end_date)
    return PaymentTotalResponse(tax_type=tax_type, start_date=start_date, end_date=end_date, total=total)


@router.get("/tax-payments/confirmation/{code}", response_model=TaxPaymentResponse)
def get_payment_by_confirmation_code(code: str, service: TaxPaymentService = Depends(get_tax_payment_service)):
    payment = service.get_by_confirmation_code(code)
    if payment is None:
        raise TaxPaymentNotFoundError()
    return TaxPaymentResponse.model_validate(payment)


@router.get("/tax-payments/{payment_id}", response_model=TaxPaymentResponse)
def get_payment(payment_id: str, service: TaxPaymentService = Depends(get_tax_payment_service)):
    return TaxPaymentResponse.model_validate(service.get_payment(payment_id))


@router.put("/tax-payments/{payment_id}/amount", response_model=TaxPaymentResponse)
def update_payment_amount(
    payment_id: str,
    request_body: PaymentAmountRequest,
    service: TaxPaymentService = Depends(get_tax_payment_service),
):
    return TaxPaymentResponse.model_validate(service.update_amount(payment_id, request_body.amount))


@router.post("/tax-payments/{payment_id}/process", response_model=TaxPaymentResponse)
def process_payment(payment_id: str, service: TaxPaymentService = Depends(get_tax_payment_service)):
    return TaxPaymentResponse.model_validate(service.process_payment(payment_id))


@router.post("/tax-payments/{payment_id}/fail", response_model=TaxPaymentResponse)
def fail_payment(
    payment_id: str,
    request_body: ReasonRequest,
    service: TaxPaymentService = Depends(get_tax_payment_service),
):
    return TaxPaymentResponse.model_validate(service.mark_failed(payment_id, request_body.reason))


@router.post("/tax-payments/{payment_id}/refund", response_model=TaxPaymentResponse)
def refund_payment(
    payment_id: str,
    request_body: ReasonRequest,
    service: TaxPaymentService = Depends(get_tax_payment_service),
):
    return TaxPaymentResponse.model_validate(service.refund_payment(payment_id, request_body.reason))


@router.post("/tax-payments/{payment_id}/void", response_model=TaxPaymentResponse)
def void_payment(
    payment_id: str,
    request_body: ReasonRequest,
    service: TaxPaymentService = Depends(get_tax_payment_service),
):
    return TaxPaymentResponse.model_validate(service.void_payment(payment_id, request_body.reason))
