"""Taxpayer registry"""

from typing import List, Optional
from sqlalchemy.orm import Session

from treasury_gateway.domain.exceptions import TaxpayerExistsError
from treasury_gateway.domain.models import Address
from treasury_gateway.domain.money import ensure_non_negative_amount
from treasury_gateway.domain.taxpayers import Taxpayer, TaxpayerStatus, TaxpayerType
from treasury_gateway.infrastructure.database.session import transactional
from treasury_gateway.infrastructure.database.tax_repositories import TaxpayerRepository


class TaxpayerService:
    def __init__(self, db: Session):
        self.db = db
        self.taxpayers = TaxpayerRepository(db)

    def get_taxpayer(self, taxpayer_id: str) -> Taxpayer:
        return self.taxpayers.get_by_id(taxpayer_id)

    def get_by_tax_identifier(self, identifier: str) -> Optional[Taxpayer]:
        return self.taxpayers.get_by_tax_identifier(identifier)

    def list_taxpayers(self, limit: int, offset: int = 0) -> List[Taxpayer]:
        return self.taxpayers.list(limit, offset)

    def list_by_type(self, taxpayer_type: TaxpayerType) -> List[Taxpayer]:
        return self.taxpayers.list_by_type(TaxpayerType(taxpayer_type))

    def list_by_status(self, status: TaxpayerStatus) -> List[Taxpayer]:
        return self.taxpayers.list_by_status(TaxpayerStatus(status))

    def list_businesses_by_industry(self, industry: str) -> List[Taxpayer]:
        return self.taxpayers.list_businesses_by_industry(industry)

    def search(self, query: str, limit: int = 20) -> List[Taxpayer]:
        if not query.strip():
            return []
        return self.taxpayers.search(query.strip(), limit)

    def create_taxpayer(
        self,
        taxpayer_type: TaxpayerType,
        name: str,
        tax_identifier: str,
        contact_email: str = "",
        contact_phone: str = "",
        address: Optional[Address] = None,
        exemption_codes: Optional[List[str]] = None,
    ) -> Taxpayer:
        with transactional(self.db):
            if self.taxpayers.get_by_tax_identifier(tax_identifier) is not None:
                raise TaxpayerExistsError()

            taxpayer = Taxpayer(
                type=TaxpayerType(taxpayer_type),
                name=name,
                tax_identifier=tax_identifier,
                contact_email=contact_email,
                contact_phone=contact_phone,
                address=address or Address(),
                exemption_codes=list(exemption_codes or []),
            )
            return self.taxpayers.create(taxpayer)

    def update_status(self, taxpayer_id: str, status: TaxpayerStatus) -> Taxpayer:
        with transactional(self.db):
            taxpayer = self.taxpayers.get_by_id(taxpayer_id)
            taxpayer.update_status(TaxpayerStatus(status))
            return self.taxpayers.update(taxpayer)

    def update_contact(self, taxpayer_id: str, email: str, phone: str) -> Taxpayer:
        with transactional(self.db):
            taxpayer = self.taxpayers.get_by_id(taxpayer_id)
            taxpayer.update_contact(email, phone)
            return self.taxpayers.update(taxpayer)

    def update_address(self, taxpayer_id: str, address: Address) -> Taxpayer:
        with transactional(self.db):
            taxpayer = self.taxpayers.get_by_id(taxpayer_id)
            taxpayer.update_address(address)
            return self.taxpayers.update(taxpayer)

    def update_business_info(
        self,
        taxpayer_id: str,
        annual_revenue: int,
        business_type: str,
        industry: str,
    ) -> Taxpayer:
        ensure_non_negative_amount(annual_revenue)
        with transactional(self.db):
            taxpayer = self.taxpayers.get_by_id(taxpayer_id)
            taxpayer.update_business_info(annual_revenue, business_type, industry)
            return self.taxpayers.update(taxpayer)

    def add_exemption(self, taxpayer_id: str, code: str) -> Taxpayer:
        with transactional(self.db):
            taxpayer = self.taxpayers.get_by_id(taxpayer_id)
            taxpayer.add_exemption(code)
            return self.taxpayers.update(taxpayer)

    def remove_exemption(self, taxpayer_id: str, code: str) -> Taxpayer:
        with transactional(self.db):
            taxpayer = self.taxpayers.get_by_id(taxpayer_id)
            taxpayer.remove_exemption(code)
            return self.taxpayers.update(taxpayer)
