"""SQLAlchemy ORM models - one table per banking and treasury entity"""

import uuid
from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Optional, Type
from sqlalchemy import (
    BigInteger,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    JSON,
    Text,
    TypeDecorator,
    Uuid,
)
from sqlalchemy.orm import declarative_base

from treasury_gateway.domain.accounts import AccountStatus, AccountType, CustomerStatus
from treasury_gateway.domain.tax_filings import FilingPeriod, FilingStatus
from treasury_gateway.domain.tax_payments import PaymentMethod, PaymentStatus
from treasury_gateway.domain.tax_rates import TaxBracketType, TaxRateStatus, TaxType
from treasury_gateway.domain.taxpayers import TaxpayerStatus, TaxpayerType
from treasury_gateway.domain.transactions import TransactionStatus, TransactionType

Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """Timestamp stored in UTC and always read back timezone-aware"""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def enum_column(enum_cls: Type[PyEnum], name: str, **kwargs) -> Column:
    """Enum-backed column storing the member values ("active"), not names"""
    return Column(
        Enum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members]),
        nullable=False,
        **kwargs,
    )


def uuid_pk() -> Column:
    return Column(Uuid(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))


class CustomerRecord(Base):
    __tablename__ = "customers"

    id = uuid_pk()
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    phone_number = Column(Text, nullable=True)
    street = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    state = Column(Text, nullable=True)
    country = Column(Text, nullable=True)
    postal_code = Column(Text, nullable=True)
    status = enum_column(CustomerStatus, "customer_status")

    version = Column(Integer, nullable=False)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class AccountRecord(Base):
    __tablename__ = "accounts"

    id = uuid_pk()
    customer_id = Column(Uuid(as_uuid=False), ForeignKey("customers.id"), nullable=False, index=True)
    type = enum_column(AccountType, "account_type")
    status = enum_column(AccountStatus, "account_status")
    balance = Column(BigInteger, nullable=False, default=0)
    currency_code = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    number = Column(Text, nullable=False, unique=True)
    closed_at = Column(UTCDateTime, nullable=True)

    version = Column(Integer, nullable=False)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class TransactionRecord(Base):
    __tablename__ = "transactions"

    id = uuid_pk()
    type = enum_column(TransactionType, "transaction_type")
    status = enum_column(TransactionStatus, "transaction_status")
    account_id = Column(Uuid(as_uuid=False), ForeignKey("accounts.id"), nullable=False, index=True)
    source_account_id = Column(Uuid(as_uuid=False), ForeignKey("accounts.id"), nullable=True, index=True)
    target_account_id = Column(Uuid(as_uuid=False), ForeignKey("accounts.id"), nullable=True, index=True)
    amount = Column(BigInteger, nullable=False)
    currency_code = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    reference = Column(Text, nullable=False, unique=True)
    metadata_ = Column("metadata", JSON, nullable=True)
    completed_at = Column(UTCDateTime, nullable=True)

    version = Column(Integer, nullable=False)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class TaxpayerRecord(Base):
    __tablename__ = "taxpayers"

    id = uuid_pk()
    type = enum_column(TaxpayerType, "taxpayer_type")
    status = enum_column(TaxpayerStatus, "taxpayer_status")
    name = Column(Text, nullable=False, index=True)
    tax_identifier = Column(Text, nullable=False, unique=True)
    contact_email = Column(Text, nullable=True)
    contact_phone = Column(Text, nullable=True)
    street = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    state = Column(Text, nullable=True)
    country = Column(Text, nullable=True)
    postal_code = Column(Text, nullable=True)
    exemption_codes = Column(JSON, nullable=False, default=list)
    annual_revenue = Column(BigInteger, nullable=False, default=0)
    business_type = Column(Text, nullable=True)
    industry = Column(Text, nullable=True, index=True)

    version = Column(Integer, nullable=False)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class TaxRateRecord(Base):
    __tablename__ = "tax_rates"

    id = uuid_pk()
    type = enum_column(TaxType, "tax_type", index=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    rate = Column(Float, nullable=False)
    bracket_type = enum_column(TaxBracketType, "tax_bracket_type")
    min_amount = Column(BigInteger, nullable=False, default=0)
    max_amount = Column(BigInteger, nullable=False, default=0)
    status = enum_column(TaxRateStatus, "tax_rate_status")
    category = Column(Text, nullable=True)
    jurisdiction_code = Column(Text, nullable=False, index=True)
    effective_date = Column(Date, nullable=False)
    expiration_date = Column(Date, nullable=True)

    version = Column(Integer, nullable=False)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class TaxFilingRecord(Base):
    __tablename__ = "tax_filings"

    id = uuid_pk()
    taxpayer_id = Column(Uuid(as_uuid=False), ForeignKey("taxpayers.id"), nullable=False, index=True)
    tax_year = Column(Integer, nullable=False, index=True)
    period = enum_column(FilingPeriod, "filing_period")
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    filing_type = enum_column(TaxType, "filing_tax_type")
    status = enum_column(FilingStatus, "filing_status", index=True)
    gross_income = Column(BigInteger, nullable=False, default=0)
    taxable_income = Column(BigInteger, nullable=False, default=0)
    total_sales = Column(BigInteger, nullable=False, default=0)
    taxable_amount = Column(BigInteger, nullable=False, default=0)
    tax_calculated = Column(BigInteger, nullable=False, default=0)
    tax_paid = Column(BigInteger, nullable=False, default=0)
    deductions = Column(JSON, nullable=False, default=list)
    credits = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    submission_date = Column(UTCDateTime, nullable=True)
    acceptance_date = Column(UTCDateTime, nullable=True)
    due_date = Column(Date, nullable=False)

    version = Column(Integer, nullable=False)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class TaxPaymentRecord(Base):
    __tablename__ = "tax_payments"

    id = uuid_pk()
    taxpayer_id = Column(Uuid(as_uuid=False), ForeignKey("taxpayers.id"), nullable=False, index=True)
    filing_id = Column(Uuid(as_uuid=False), ForeignKey("tax_filings.id"), nullable=True, index=True)
    tax_type = enum_column(TaxType, "payment_tax_type")
    amount = Column(BigInteger, nullable=False)
    payment_method = enum_column(PaymentMethod, "payment_method")
    status = enum_column(PaymentStatus, "payment_status", index=True)
    payment_date = Column(Date, nullable=False, index=True)
    confirmation_code = Column(Text, nullable=False, unique=True)
    notes = Column(Text, nullable=True)
    processed_at = Column(UTCDateTime, nullable=True)
    refunded_at = Column(UTCDateTime, nullable=True)

    version = Column(Integer, nullable=False)
    created_at = Column(UTCDateTime, nullable=False)
    updated_at = Column(UTCDateTime, nullable=False)

    __mapper_args__ = {"version_id_col": version}
