"""Data access layer - maps ORM records to domain entities

Every repository exposes the same contract: get_by_id, list, create and
update, plus entity-specific filters. Updates are guarded by the record's
version column; a stale entity raises ConcurrentModificationError.
"""

import uuid
from typing import Generic, List, Optional, Type, TypeVar
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from treasury_gateway.domain.accounts import Account, Customer
from treasury_gateway.domain.exceptions import (
    AccountNotFoundError,
    ConcurrentModificationError,
    CustomerNotFoundError,
    DuplicateRecordError,
    NotFoundError,
    TransactionNotFoundError,
)
from treasury_gateway.domain.models import Address
from treasury_gateway.domain.transactions import Transaction
from treasury_gateway.infrastructure.database.models import AccountRecord, CustomerRecord, TransactionRecord
from treasury_gateway.infrastructure.observability.metrics import concurrency_conflict_counter

E = TypeVar("E")


def is_valid_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def address_from(record) -> Address:
    return Address(
        street=record.street or "",
        city=record.city or "",
        state=record.state or "",
        country=record.country or "",
        postal_code=record.postal_code or "",
    )


def apply_address(record, address: Address) -> None:
    record.street = address.street
    record.city = address.city
    record.state = address.state
    record.country = address.country
    record.postal_code = address.postal_code


class SQLAlchemyRepository(Generic[E]):
    """Shared CRUD behaviour; subclasses provide the record <-> entity mapping"""

    record_cls: Type = None
    not_found_error: Type[NotFoundError] = NotFoundError

    def __init__(self, db: Session):
        self.db = db

    def to_entity(self, record) -> E:
        raise NotImplementedError

    def apply(self, record, entity: E) -> None:
        """Copy entity state onto the record (everything but id and version)"""
        raise NotImplementedError

    def get_by_id(self, entity_id: str) -> E:
        return self.to_entity(self._get_record(entity_id))

    def list(self, limit: int = 50, offset: int = 0) -> List[E]:
        return self._all(self._query(), limit, offset)

    def create(self, entity: E) -> E:
        record = self.record_cls(id=entity.id)
        self.apply(record, entity)
        self.db.add(record)
        self._flush()
        entity.version = record.version
        return entity

    def update(self, entity: E) -> E:
        record = self._get_record(entity.id)
        if record.version != entity.version:
            concurrency_conflict_counter.labels(entity=self.record_cls.__tablename__).inc()
            raise ConcurrentModificationError()

        self.apply(record, entity)
        self._flush()
        entity.version = record.version
        return entity

    def _get_record(self, entity_id: str):
        if not entity_id or not is_valid_uuid(entity_id):
            raise self.not_found_error()

        record = self.db.get(self.record_cls, str(entity_id))
        if record is None:
            raise self.not_found_error()
        return record

    def _query(self):
        return self.db.query(self.record_cls)

    def _all(self, query, limit: Optional[int] = None, offset: int = 0) -> List[E]:
        query = query.order_by(self.record_cls.created_at, self.record_cls.id)
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [self.to_entity(r) for r in query.all()]

    def _first(self, query) -> Optional[E]:
        record = query.first()
        return self.to_entity(record) if record else None

    def _flush(self) -> None:
        try:
            self.db.flush()
        except IntegrityError as e:
            raise DuplicateRecordError(f"{self.record_cls.__tablename__}: unique constraint violated") from e
        except StaleDataError as e:
            concurrency_conflict_counter.labels(entity=self.record_cls.__tablename__).inc()
            raise ConcurrentModificationError() from e


class CustomerRepository(SQLAlchemyRepository[Customer]):
    """Repository for bank customers"""

    record_cls = CustomerRecord
    not_found_error = CustomerNotFoundError

    def to_entity(self, record: CustomerRecord) -> Customer:
        return Customer(
            id=record.id,
            first_name=record.first_name,
            last_name=record.last_name,
            email=record.email,
            phone_number=record.phone_number or "",
            address=address_from(record),
            status=record.status,
            created_at=record.created_at,
            updated_at=record.updated_at,
            version=record.version,
        )

    def apply(self, record: CustomerRecord, entity: Customer) -> None:
        record.first_name = entity.first_name
        record.last_name = entity.last_name
        record.email = entity.email
        record.phone_number = entity.phone_number
        apply_address(record, entity.address)
        record.status = entity.status
        record.created_at = entity.created_at
        record.updated_at = entity.updated_at

    def get_by_email(self, email: str) -> Optional[Customer]:
        return self._first(self._query().filter(CustomerRecord.email == email))


class AccountRepository(SQLAlchemyRepository[Account]):
    """Repository for bank accounts"""

    record_cls = AccountRecord
    not_found_error = AccountNotFoundError

    def to_entity(self, record: AccountRecord) -> Account:
        return Account(
            id=record.id,
            customer_id=record.customer_id,
            type=record.type,
            status=record.status,
            balance=record.balance,
            currency_code=record.currency_code,
            name=record.name,
            number=record.number,
            created_at=record.created_at,
            updated_at=record.updated_at,
            closed_at=record.closed_at,
            version=record.version,
        )

    def apply(self, record: AccountRecord, entity: Account) -> None:
        record.customer_id = entity.customer_id
        record.type = entity.type
        record.status = entity.status
        record.balance = entity.balance
        record.currency_code = entity.currency_code
        record.name = entity.name
        record.number = entity.number
        record.created_at = entity.created_at
        record.updated_at = entity.updated_at
        record.closed_at = entity.closed_at

    def list_by_customer(self, customer_id: str) -> List[Account]:
        if not is_valid_uuid(customer_id):
            return []
        return self._all(self._query().filter(AccountRecord.customer_id == customer_id))


class TransactionRepository(SQLAlchemyRepository[Transaction]):
    """Repository for money movement records"""

    record_cls = TransactionRecord
    not_found_error = TransactionNotFoundError

    def to_entity(self, record: TransactionRecord) -> Transaction:
        return Transaction(
            id=record.id,
            type=record.type,
            status=record.status,
            account_id=record.account_id,
            source_account_id=record.source_account_id,
            target_account_id=record.target_account_id,
            amount=record.amount,
            currency_code=record.currency_code,
            description=record.description,
            reference=record.reference,
            metadata=dict(record.metadata_ or {}),
            created_at=record.created_at,
            updated_at=record.updated_at,
            completed_at=record.completed_at,
            version=record.version,
        )

    def apply(self, record: TransactionRecord, entity: Transaction) -> None:
        record.type = entity.type
        record.status = entity.status
        record.account_id = entity.account_id
        record.source_account_id = entity.source_account_id
        record.target_account_id = entity.target_account_id
        record.amount = entity.amount
        record.currency_code = entity.currency_code
        record.description = entity.description
        record.reference = entity.reference
        record.metadata_ = dict(entity.metadata)
        record.created_at = entity.created_at
        record.updated_at = entity.updated_at
        record.completed_at = entity.completed_at

    def get_by_reference(self, reference: str) -> Optional[Transaction]:
        return self._first(self._query().filter(TransactionRecord.reference == reference))

    def list_by_account(self, account_id: str, limit: int = 50, offset: int = 0) -> List[Transaction]:
        """Transactions owned by, paid from, or paid into the account"""
        if not is_valid_uuid(account_id):
            return []
        query = self._query().filter(
            or_(
                TransactionRecord.account_id == account_id,
                TransactionRecord.source_account_id == account_id,
                TransactionRecord.target_account_id == account_id,
            )
        )
        return self._all(query, limit, offset)
