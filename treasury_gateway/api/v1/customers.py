"""Customer endpoints"""

from typing import List
from fastapi import APIRouter, Depends, Query

from treasury_gateway.api.dependencies import get_account_service, get_customer_service
from treasury_gateway.api.v1.schemas import (
    AccountResponse,
    CustomerCreateRequest,
    CustomerResponse,
    CustomerStatusRequest,
    CustomerUpdateRequest,
)
from treasury_gateway.config import settings
from treasury_gateway.domain.exceptions import CustomerNotFoundError
from treasury_gateway.services.accounts import AccountService
from treasury_gateway.services.customers import CustomerService

router = APIRouter()


@router.post("/customers", response_model=CustomerResponse, status_code=201)
def create_customer(
    request_body: CustomerCreateRequest,
    service: CustomerService = Depends(get_customer_service),
):
    customer = service.create_customer(
        first_name=request_body.first_name,
        last_name=request_body.last_name,
        email=request_body.email,
        phone_number=request_body.phone_number,
        address=request_body.address.to_domain() if request_body.address else None,
    )
    return CustomerResponse.model_validate(customer)


@router.get("/customers", response_model=List[CustomerResponse])
def list_customers(
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    service: CustomerService = Depends(get_customer_service),
):
    return [CustomerResponse.model_validate(c) for c in service.list_customers(limit, offset)]


@router.get("/customers/by-email", response_model=CustomerResponse)
def get_customer_by_email(
    email: str = Query(..., min_length=3),
    service: CustomerService = Depends(get_customer_service),
):
    customer = service.get_customer_by_email(email)
    if customer is None:
        raise CustomerNotFoundError()
    return CustomerResponse.model_validate(customer)


@router.get("/customers/{customer_id}", response_model=CustomerResponse)
def get_customer(customer_id: str, service: CustomerService = Depends(get_customer_service)):
    return CustomerResponse.model_validate(service.get_customer(customer_id))


@router.put("/customers/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: str,
    request_body: CustomerUpdateRequest,
    service: CustomerService = Depends(get_customer_service),
):
    customer = service.update_customer(
        customer_id,
        email=request_body.email,
        phone_number=request_body.phone_number,
        address=request_body.address.to_domain() if request_body.address else None,
    )
    return CustomerResponse.model_validate(customer)


@router.put("/customers/{customer_id}/status", response_model=CustomerResponse)
def update_customer_status(
    customer_id: str,
    request_body: CustomerStatusRequest,
    service: CustomerService = Depends(get_customer_service),
):
    return CustomerResponse.model_validate(service.update_customer_status(customer_id, request_body.status))


@router.get("/customers/{customer_id}/accounts", response_model=List[AccountResponse])
def list_customer_accounts(
    customer_id: str,
    customers: CustomerService = Depends(get_customer_service),
    accounts: AccountService = Depends(get_account_service),
):
    customers.get_customer(customer_id)
    return [AccountResponse.model_validate(a) for a in accounts.list_accounts_by_customer(customer_id)]
