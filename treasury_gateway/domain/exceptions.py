"""Domain-specific exceptions

Every error carries a ``kind`` tag from a closed set so that callers (the HTTP
layer, tests) can branch on the category without matching on classes.
"""

from typing import Optional

NOT_FOUND = "not_found"
ALREADY_EXISTS = "already_exists"
INVALID_STATE = "invalid_state"
INSUFFICIENT_RESOURCE = "insufficient_resource"
INVALID_INPUT = "invalid_input"
CONFLICT = "conflict"


class DomainException(Exception):
    """Base exception for domain layer"""

    kind: str = INVALID_INPUT
    default_message = "domain error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


# Not found


class NotFoundError(DomainException):
    kind = NOT_FOUND
    default_message = "record not found"


class CustomerNotFoundError(NotFoundError):
    default_message = "customer not found"


class AccountNotFoundError(NotFoundError):
    default_message = "account not found"


class TransactionNotFoundError(NotFoundError):
    default_message = "transaction not found"


class TaxpayerNotFoundError(NotFoundError):
    default_message = "taxpayer not found"


class TaxRateNotFoundError(NotFoundError):
    default_message = "tax rate not found"


class TaxFilingNotFoundError(NotFoundError):
    default_message = "tax filing not found"


class TaxPaymentNotFoundError(NotFoundError):
    default_message = "tax payment not found"


# Unique constraint violations


class AlreadyExistsError(DomainException):
    kind = ALREADY_EXISTS
    default_message = "record already exists"


class CustomerExistsError(AlreadyExistsError):
    default_message = "customer with email already exists"


class TaxpayerExistsError(AlreadyExistsError):
    default_message = "taxpayer with identifier already exists"


class DuplicateRecordError(AlreadyExistsError):
    """A unique column (reference, confirmation code, number) collided"""

    default_message = "duplicate value for a unique field"


# Lifecycle violations


class InvalidStateError(DomainException):
    kind = INVALID_STATE
    default_message = "operation not permitted in current state"


class AccountClosedError(InvalidStateError):
    default_message = "account is closed"


class InvalidTransactionStatusError(InvalidStateError):
    default_message = "invalid transaction status"


class InvalidTaxRateStatusError(InvalidStateError):
    default_message = "invalid tax rate status"


class InvalidFilingStatusError(InvalidStateError):
    default_message = "invalid filing status"


class InvalidPaymentStatusError(InvalidStateError):
    default_message = "invalid payment status"


# Resources


class InsufficientFundsError(DomainException):
    kind = INSUFFICIENT_RESOURCE
    default_message = "insufficient funds"


# Bad input


class InvalidInputError(DomainException):
    kind = INVALID_INPUT
    default_message = "invalid input"


class InvalidAmountError(InvalidInputError):
    default_message = "amount must be a positive integer number of minor units"


class InvalidPaymentAmountError(InvalidAmountError):
    default_message = "invalid payment amount"


class InvalidTaxRateError(InvalidInputError):
    default_message = "invalid tax rate"


class InvalidFilingPeriodError(InvalidInputError):
    default_message = "invalid filing period"


class CurrencyMismatchError(InvalidInputError):
    default_message = "currency codes do not match"


class InvalidTransferError(InvalidInputError):
    default_message = "source and target accounts must differ"


class FilingOwnerMismatchError(InvalidInputError):
    default_message = "filing belongs to a different taxpayer"


# Concurrency


class ConcurrentModificationError(DomainException):
    """Entity was changed by someone else since it was read"""

    kind = CONFLICT
    default_message = "record was modified concurrently"
