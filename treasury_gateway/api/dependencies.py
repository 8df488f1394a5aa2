"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from treasury_gateway.infrastructure.database.session import get_db
from treasury_gateway.services.accounts import AccountService
from treasury_gateway.services.customers import CustomerService
from treasury_gateway.services.tax_filings import TaxFilingService
from treasury_gateway.services.tax_payments import TaxPaymentService
from treasury_gateway.services.tax_rates import TaxRateService
from treasury_gateway.services.tax_reports import TaxReportService
from treasury_gateway.services.taxpayers import TaxpayerService
from treasury_gateway.services.transactions import TransactionService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    return CustomerService(db)


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    return AccountService(db)


def get_transaction_service(db: Session = Depends(get_db)) -> TransactionService:
    return TransactionService(db)


def get_taxpayer_service(db: Session = Depends(get_db)) -> TaxpayerService:
    return TaxpayerService(db)


def get_tax_rate_service(db: Session = Depends(get_db)) -> TaxRateService:
    return TaxRateService(db)


def get_tax_filing_service(db: Session = Depends(get_db)) -> TaxFilingService:
    return TaxFilingService(db)


def get_tax_payment_service(db: Session = Depends(get_db)) -> TaxPaymentService:
    return TaxPaymentService(db)


def get_tax_report_service(db: Session = Depends(get_db)) -> TaxReportService:
    return TaxReportService(db)
