"""Taxpayers - individuals and organisations that owe tax"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List

from treasury_gateway.domain.models import Address
from treasury_gateway.utils.codes import new_id
from treasury_gateway.utils.date_utils import utcnow


class TaxpayerType(str, Enum):
    INDIVIDUAL = "individual"
    BUSINESS = "business"
    NON_PROFIT = "non_profit"
    GOVERNMENT = "government"


class TaxpayerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXEMPT = "exempt"
    DELINQUENT = "delinquent"


@dataclass
class Taxpayer:
    """Entity that pays taxes, identified externally by its tax identifier (SSN, EIN, ...)"""

    type: TaxpayerType
    name: str
    tax_identifier: str
    contact_email: str = ""
    contact_phone: str = ""
    address: Address = field(default_factory=Address)
    exemption_codes: List[str] = field(default_factory=list)
    annual_revenue: int = 0
    business_type: str = ""
    industry: str = ""
    status: TaxpayerStatus = TaxpayerStatus.ACTIVE
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 0

    def __post_init__(self) -> None:
        # exemption codes behave as a set
        self.exemption_codes = list(dict.fromkeys(self.exemption_codes))

    def is_active(self) -> bool:
        return self.status == TaxpayerStatus.ACTIVE

    def is_exempt(self) -> bool:
        return self.status == TaxpayerStatus.EXEMPT

    def is_business(self) -> bool:
        return self.type == TaxpayerType.BUSINESS

    def has_exemption(self, code: str) -> bool:
        return code in self.exemption_codes

    def update_status(self, status: TaxpayerStatus) -> None:
        self.status = status
        self.updated_at = utcnow()

    def update_contact(self, email: str, phone: str) -> None:
        self.contact_email = email
        self.contact_phone = phone
        self.updated_at = utcnow()

    def update_address(self, address: Address) -> None:
        self.address = address
        self.updated_at = utcnow()

    def update_business_info(self, annual_revenue: int, business_type: str, industry: str) -> None:
        self.annual_revenue = annual_revenue
        self.business_type = business_type
        self.industry = industry
        self.updated_at = utcnow()

    def add_exemption(self, code: str) -> None:
        if self.has_exemption(code):
            return
        self.exemption_codes.append(code)
        self.updated_at = utcnow()

    def remove_exemption(self, code: str) -> None:
        if not self.has_exemption(code):
            return
        self.exemption_codes.remove(code)
        self.updated_at = utcnow()
