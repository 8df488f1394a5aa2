"""Account endpoints - lifecycle, deposits, withdrawals and transfers"""

import logging
from typing import List
from fastapi import APIRouter, Depends, Query, Request

from treasury_gateway.api.dependencies import get_account_service, get_request_id, get_transaction_service
from treasury_gateway.api.v1.schemas import (
    AccountCreateRequest,
    AccountResponse,
    AccountUpdateRequest,
    MoneyMovementRequest,
    TransactionResponse,
    TransferRequest,
)
from treasury_gateway.config import settings
from treasury_gateway.services.accounts import AccountService
from treasury_gateway.services.transactions import TransactionService

router = APIRouter()


@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(
    request_body: AccountCreateRequest,
    service: AccountService = Depends(get_account_service),
):
    account = service.create_account(
        customer_id=request_body.customer_id,
        account_type=request_body.type,
        name=request_body.name,
        currency_code=request_body.currency_code,
    )
    return AccountResponse.model_validate(account)


@router.get("/accounts", response_model=List[AccountResponse])
def list_accounts(
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    service: AccountService = Depends(get_account_service),
):
    return [AccountResponse.model_validate(a) for a in service.list_accounts(limit, offset)]


@router.get("/accounts/{account_id}", response_model=AccountResponse)
def get_account(account_id: str, service: AccountService = Depends(get_account_service)):
    return AccountResponse.model_validate(service.get_account(account_id))


@router.put("/accounts/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    request_body: AccountUpdateRequest,
    service: AccountService = Depends(get_account_service),
):
    return AccountResponse.model_validate(service.update_account(account_id, request_body.name))


@router.post("/accounts/{account_id}/close", response_model=AccountResponse)
def close_account(account_id: str, service: AccountService = Depends(get_account_service)):
    return AccountResponse.model_validate(service.close_account(account_id))


@router.post("/accounts/{account_id}/deactivate", response_model=AccountResponse)
def deactivate_account(account_id: str, service: AccountService = Depends(get_account_service)):
    return AccountResponse.model_validate(service.deactivate_account(account_id))


@router.post("/accounts/{account_id}/reactivate", response_model=AccountResponse)
def reactivate_account(account_id: str, service: AccountService = Depends(get_account_service)):
    return AccountResponse.model_validate(service.reactivate_account(account_id))


@router.post("/accounts/{account_id}/deposit", response_model=TransactionResponse, status_code=201)
def deposit(
    account_id: str,
    request_body: MoneyMovementRequest,
    request: Request,
    service: AccountService = Depends(get_account_service),
):
    transaction = service.deposit(account_id, request_body.amount, request_body.description)
    logging.info(
        "Deposit accepted",
        extra={"request_id": get_request_id(request), "transaction_id": transaction.id},
    )
    return TransactionResponse.model_validate(transaction)


@router.post("/accounts/{account_id}/withdraw", response_model=TransactionResponse, status_code=201)
def withdraw(
    account_id: str,
    request_body: MoneyMovementRequest,
    request: Request,
    service: AccountService = Depends(get_account_service),
):
    transaction = service.withdraw(account_id, request_body.amount, request_body.description)
    logging.info(
        "Withdrawal accepted",
        extra={"request_id": get_request_id(request), "transaction_id": transaction.id},
    )
    return TransactionResponse.model_validate(transaction)


@router.get("/accounts/{account_id}/transactions", response_model=List[TransactionResponse])
def list_account_transactions(
    account_id: str,
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    service: TransactionService = Depends(get_transaction_service),
):
    transactions = service.list_account_transactions(account_id, limit, offset)
    return [TransactionResponse.model_validate(t) for t in transactions]


@router.post("/transfers", response_model=TransactionResponse, status_code=201)
def transfer(
    request_body: TransferRequest,
    request: Request,
    service: AccountService = Depends(get_account_service),
):
    """
    Move funds between two accounts of the same currency.

    Both balances and the transfer record are committed together.
    """
    transaction = service.transfer(
        request_body.source_account_id,
        request_body.target_account_id,
        request_body.amount,
        request_body.description,
    )
    logging.info(
        "Transfer accepted",
        extra={"request_id": get_request_id(request), "transaction_id": transaction.id},
    )
    return TransactionResponse.model_validate(transaction)
