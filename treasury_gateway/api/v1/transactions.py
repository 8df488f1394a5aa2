"""Transaction endpoints"""

from typing import List
from fastapi import APIRouter, Depends, Query

from treasury_gateway.api.dependencies import get_transaction_service
from treasury_gateway.api.v1.schemas import ReasonRequest, TransactionCreateRequest, TransactionResponse
from treasury_gateway.config import settings
from treasury_gateway.domain.exceptions import TransactionNotFoundError
from treasury_gateway.services.transactions import TransactionService

router = APIRouter()


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
def create_transaction(
    request_body: TransactionCreateRequest,
    service: TransactionService = Depends(get_transaction_service),
):
    """Post a deposit, withdrawal, fee or interest against one account"""
    transaction = service.create_transaction(
        request_body.type,
        request_body.account_id,
        request_body.amount,
        request_body.description,
    )
    return TransactionResponse.model_validate(transaction)


@router.get("/transactions", response_model=List[TransactionResponse])
def list_transactions(
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    service: TransactionService = Depends(get_transaction_service),
):
    return [TransactionResponse.model_validate(t) for t in service.list_transactions(limit, offset)]


@router.get("/transactions/reference/{reference}", response_model=TransactionResponse)
def get_transaction_by_reference(reference: str, service: TransactionService = Depends(get_transaction_service)):
    transaction = service.get_by_reference(reference)
    if transaction is None:
        raise TransactionNotFoundError()
    return TransactionResponse.model_validate(transaction)


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
def get_transaction(transaction_id: str, service: TransactionService = Depends(get_transaction_service)):
    return TransactionResponse.model_validate(service.get_transaction(transaction_id))


@router.post("/transactions/{transaction_id}/reverse", response_model=TransactionResponse)
def reverse_transaction(
    transaction_id: str,
    request_body: ReasonRequest,
    service: TransactionService = Depends(get_transaction_service),
):
    return TransactionResponse.model_validate(service.reverse_transaction(transaction_id, request_body.reason))
