"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import Dict, List, Optional

from treasury_gateway.domain.accounts import AccountStatus, AccountType, CustomerStatus
from treasury_gateway.domain.models import Address
from treasury_gateway.domain.tax_filings import FilingPeriod, FilingStatus
from treasury_gateway.domain.tax_payments import PaymentMethod, PaymentStatus
from treasury_gateway.domain.tax_rates import TaxBracketType, TaxRateStatus, TaxType
from treasury_gateway.domain.taxpayers import TaxpayerStatus, TaxpayerType
from treasury_gateway.domain.transactions import TransactionStatus, TransactionType


class EntitySchema(BaseModel):
    """Responses are read straight off domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


class AddressSchema(EntitySchema):
    street: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    postal_code: str = ""

    def to_domain(self) -> Address:
        return Address(**self.model_dump())


class ErrorResponse(BaseModel):
    """Body returned for every domain error"""

    error: str
    kind: str
    detail: str


# Customers


class CustomerCreateRequest(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone_number: str = ""
    address: Optional[AddressSchema] = None


class CustomerUpdateRequest(BaseModel):
    email: str = Field(..., min_length=3)
    phone_number: str = ""
    address: Optional[AddressSchema] = None


class CustomerStatusRequest(BaseModel):
    status: CustomerStatus


class CustomerResponse(EntitySchema):
    id: str
    first_name: str
    last_name: str
    email: str
    phone_number: str
    address: AddressSchema
    status: CustomerStatus
    created_at: datetime
    updated_at: datetime


# Accounts and money movement


class AccountCreateRequest(BaseModel):
    customer_id: str = Field(..., min_length=1, description="Owning customer identifier")
    type: AccountType
    name: str = Field(..., min_length=1)
    currency_code: Optional[str] = Field(None, min_length=3, max_length=3)


class AccountUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1)


class AccountResponse(EntitySchema):
    id: str
    customer_id: str
    number: str
    type: AccountType
    name: str
    status: AccountStatus
    balance: int
    currency_code: str
    created_at: datetime
    updated_at: datetime
    closed_at: Optional[datetime] = None


class MoneyMovementRequest(BaseModel):
    """Request body for deposits and withdrawals"""

    amount: int = Field(..., gt=0, description="Amount in minor units (cents)")
    description: str = ""


class TransferRequest(BaseModel):
    source_account_id: str = Field(..., min_length=1)
    target_account_id: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0, description="Amount in minor units (cents)")
    description: str = ""


class TransactionCreateRequest(BaseModel):
    type: TransactionType
    account_id: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0, description="Amount in minor units (cents)")
    description: str = ""


class ReasonRequest(BaseModel):
    reason: str = ""


class TransactionResponse(EntitySchema):
    id: str
    reference: str
    type: TransactionType
    status: TransactionStatus
    account_id: str
    source_account_id: Optional[str] = None
    target_account_id: Optional[str] = None
    amount: int
    currency_code: str
    description: str
    metadata: Dict[str, str]
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None


# Taxpayers


class TaxpayerCreateRequest(BaseModel):
    type: TaxpayerType
    name: str = Field(..., min_length=1)
    tax_identifier: str = Field(..., min_length=1, description="SSN, EIN or equivalent")
    contact_email: str = ""
    contact_phone: str = ""
    address: Optional[AddressSchema] = None
    exemption_codes: List[str] = []


class TaxpayerStatusRequest(BaseModel):
    status: TaxpayerStatus


class TaxpayerContactRequest(BaseModel):
    contact_email: str = ""
    contact_phone: str = ""


class BusinessInfoRequest(BaseModel):
    annual_revenue: int = Field(..., ge=0)
    business_type: str = ""
    industry: str = ""


class ExemptionRequest(BaseModel):
    code: str = Field(..., min_length=1)


class TaxpayerResponse(EntitySchema):
    id: str
    type: TaxpayerType
    status: TaxpayerStatus
    name: str
    tax_identifier: str
    contact_email: str
    contact_phone: str
    address: AddressSchema
    exemption_codes: List[str]
    annual_revenue: int
    business_type: str
    industry: str
    created_at: datetime
    updated_at: datetime


# Tax rates


class TaxRateCreateRequest(BaseModel):
    type: TaxType
    name: str = Field(..., min_length=1)
    rate: float = Field(..., ge=0, le=1, description="Decimal rate, 0.07 for 7%")
    bracket_type: TaxBracketType
    jurisdiction_code: str = Field(..., min_length=1)
    effective_date: date
    description: str = ""
    min_amount: int = Field(0, ge=0)
    max_amount: int = Field(0, ge=0)
    category: str = ""
    expiration_date: Optional[date] = None


class TaxRateUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    rate: float = Field(..., ge=0, le=1)
    category: str = ""
    effective_date: date
    expiration_date: Optional[date] = None


class TaxRateResponse(EntitySchema):
    id: str
    type: TaxType
    name: str
    description: str
    rate: float
    bracket_type: TaxBracketType
    min_amount: int
    max_amount: int
    status: TaxRateStatus
    category: str
    jurisdiction_code: str
    effective_date: date
    expiration_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime


class TaxCalculationResponse(BaseModel):
    amount: int
    jurisdiction_code: str
    tax: int


# Tax filings


class TaxFilingCreateRequest(BaseModel):
    taxpayer_id: str = Field(..., min_length=1)
    tax_year: int = Field(..., ge=1900, le=9999)
    period: FilingPeriod
    period_start: date
    period_end: date
    filing_type: TaxType
    due_date: date
    notes: str = ""


class FilingAmountsRequest(BaseModel):
    gross_income: int = Field(0, ge=0)
    taxable_income: int = Field(0, ge=0)
    total_sales: int = Field(0, ge=0)
    taxable_amount: int = Field(0, ge=0)


class AdjustmentSchema(EntitySchema):
    code: str = Field(..., min_length=1)
    description: str = ""
    amount: int = Field(..., gt=0)


class ProcessFilingRequest(BaseModel):
    tax_calculated: int = Field(..., ge=0)


class TaxFilingResponse(EntitySchema):
    id: str
    taxpayer_id: str
    tax_year: int
    period: FilingPeriod
    period_start: date
    period_end: date
    filing_type: TaxType
    status: FilingStatus
    gross_income: int
    taxable_income: int
    total_sales: int
    taxable_amount: int
    tax_calculated: int
    tax_paid: int
    deductions: List[AdjustmentSchema]
    credits: List[AdjustmentSchema]
    total_deductions: int
    total_credits: int
    balance_due: int
    notes: str
    submission_date: Optional[datetime] = None
    acceptance_date: Optional[datetime] = None
    due_date: date
    created_at: datetime
    updated_at: datetime


# Tax payments


class TaxPaymentCreateRequest(BaseModel):
    taxpayer_id: str = Field(..., min_length=1)
    tax_type: TaxType
    amount: int = Field(..., gt=0, description="Amount in minor units (cents)")
    payment_method: PaymentMethod
    filing_id: Optional[str] = None
    payment_date: Optional[date] = None
    notes: str = ""


class PaymentAmountRequest(BaseModel):
    amount: int = Field(..., gt=0)


class TaxPaymentResponse(EntitySchema):
    id: str
    taxpayer_id: str
    filing_id: Optional[str] = None
    tax_type: TaxType
    amount: int
    payment_method: PaymentMethod
    status: PaymentStatus
    payment_date: date
    confirmation_code: str
    notes: str
    processed_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class PaymentTotalResponse(BaseModel):
    tax_type: TaxType
    start_date: date
    end_date: date
    total: int


# Reports


class MonthlyRevenueSchema(EntitySchema):
    year: int
    month: int
    revenue: int


class TaxpayerRevenueSchema(EntitySchema):
    taxpayer_id: str
    taxpayer_name: str
    revenue: int


class RevenueReportResponse(EntitySchema):
    start_date: date
    end_date: date
    total_revenue: int
    revenue_by_type: Dict[str, int]
    monthly_revenue: List[MonthlyRevenueSchema]
    top_taxpayers: List[TaxpayerRevenueSchema]
    generated_at: datetime


class FilingStatusReportResponse(EntitySchema):
    tax_year: int
    total_filings: int
    filings_by_status: Dict[str, int]
    filings_by_type: Dict[str, int]
    overdue_filings: int
    generated_at: datetime


class ComplianceReportResponse(EntitySchema):
    total_taxpayers: int
    compliant_taxpayers: int
    delinquent_taxpayers: int
    compliance_by_type: Dict[str, float]
    generated_at: datetime


class TaxBreakdownSchema(EntitySchema):
    revenue: int
    percentage: float
    filings_count: int
    payments_count: int


class TaxTypeBreakdownResponse(EntitySchema):
    start_date: date
    end_date: date
    total_revenue: int
    breakdown_by_type: Dict[str, TaxBreakdownSchema]
    generated_at: datetime
