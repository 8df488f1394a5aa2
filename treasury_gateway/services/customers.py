"""Customer management"""

from typing import List, Optional
from sqlalchemy.orm import Session

from treasury_gateway.domain.accounts import Customer, CustomerStatus
from treasury_gateway.domain.exceptions import CustomerExistsError
from treasury_gateway.domain.models import Address
from treasury_gateway.infrastructure.database.repositories import CustomerRepository
from treasury_gateway.infrastructure.database.session import transactional


class CustomerService:
    def __init__(self, db: Session):
        self.db = db
        self.customers = CustomerRepository(db)

    def get_customer(self, customer_id: str) -> Customer:
        return self.customers.get_by_id(customer_id)

    def get_customer_by_email(self, email: str) -> Optional[Customer]:
        return self.customers.get_by_email(email)

    def list_customers(self, limit: int, offset: int = 0) -> List[Customer]:
        return self.customers.list(limit, offset)

    def create_customer(
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone_number: str = "",
        address: Optional[Address] = None,
    ) -> Customer:
        with transactional(self.db):
            if self.customers.get_by_email(email) is not None:
                raise CustomerExistsError()

            customer = Customer(
                first_name=first_name,
                last_name=last_name,
                email=email,
                phone_number=phone_number,
                address=address or Address(),
            )
            return self.customers.create(customer)

    def update_customer(
        self,
        customer_id: str,
        email: str,
        phone_number: str,
        address: Optional[Address] = None,
    ) -> Customer:
        """Change contact details; the email stays unique across customers"""
        with transactional(self.db):
            customer = self.customers.get_by_id(customer_id)

            if email != customer.email:
                existing = self.customers.get_by_email(email)
                if existing is not None and existing.id != customer.id:
                    raise CustomerExistsError()

            customer.update_contact(email, phone_number)
            if address is not None:
                customer.update_address(address)
            return self.customers.update(customer)

    def update_customer_status(self, customer_id: str, status: CustomerStatus) -> Customer:
        with transactional(self.db):
            customer = self.customers.get_by_id(customer_id)
            customer.update_status(CustomerStatus(status))
            return self.customers.update(customer)
