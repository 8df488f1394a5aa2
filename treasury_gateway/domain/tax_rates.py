"""Tax rates and bracket calculation"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

from treasury_gateway.domain.exceptions import InvalidTaxRateError, InvalidTaxRateStatusError
from treasury_gateway.domain.money import apply_rate
from treasury_gateway.utils.codes import new_id
from treasury_gateway.utils.date_utils import utcnow


class TaxType(str, Enum):
    INCOME = "income"
    SALES = "sales"
    PROPERTY = "property"
    BUSINESS = "business"
    EXCISE = "excise"


class TaxRateStatus(str, Enum):
    PROPOSED = "proposed"
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class TaxBracketType(str, Enum):
    FLAT = "flat"
    PROGRESSIVE = "progressive"
    TIERED = "tiered"


def validate_rate(rate: float) -> float:
    if not math.isfinite(rate) or not 0 <= rate <= 1:
        raise InvalidTaxRateError("rate must be between 0 and 1")
    return rate


def validate_bounds(bracket_type: TaxBracketType, min_amount: int, max_amount: int) -> None:
    if min_amount < 0 or max_amount < 0:
        raise InvalidTaxRateError("bracket bounds must be non-negative")
    if bracket_type == TaxBracketType.PROGRESSIVE and min_amount and max_amount and max_amount <= min_amount:
        raise InvalidTaxRateError("max amount must exceed min amount")


@dataclass
class TaxRate:
    """
    Rate applied to an amount for one tax type in one jurisdiction.

    Rates are decimals (0.07 for 7%). Zero bounds mean "unbounded" on that
    side. New rates start as proposed; archived rates never change again.
    """

    type: TaxType
    name: str
    rate: float
    bracket_type: TaxBracketType
    jurisdiction_code: str
    effective_date: date
    description: str = ""
    min_amount: int = 0
    max_amount: int = 0
    category: str = ""
    expiration_date: Optional[date] = None
    status: TaxRateStatus = TaxRateStatus.PROPOSED
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 0

    def __post_init__(self) -> None:
        validate_rate(self.rate)
        validate_bounds(self.bracket_type, self.min_amount, self.max_amount)

    def is_active(self) -> bool:
        return self.status == TaxRateStatus.ACTIVE

    def is_effective(self, on: date) -> bool:
        if on < self.effective_date:
            return False
        return self.expiration_date is None or on < self.expiration_date

    def activate(self) -> None:
        if self.status not in (TaxRateStatus.PROPOSED, TaxRateStatus.INACTIVE):
            raise InvalidTaxRateStatusError(f"cannot activate a {self.status.value} tax rate")
        self._set_status(TaxRateStatus.ACTIVE)

    def deactivate(self) -> None:
        if self.status != TaxRateStatus.ACTIVE:
            raise InvalidTaxRateStatusError(f"cannot deactivate a {self.status.value} tax rate")
        self._set_status(TaxRateStatus.INACTIVE)

    def archive(self) -> None:
        if self.status == TaxRateStatus.ARCHIVED:
            raise InvalidTaxRateStatusError("tax rate is already archived")
        self._set_status(TaxRateStatus.ARCHIVED)

    def update_details(
        self,
        name: str,
        description: str,
        rate: float,
        category: str,
        effective_date: date,
        expiration_date: Optional[date],
    ) -> None:
        if self.status == TaxRateStatus.ARCHIVED:
            raise InvalidTaxRateStatusError("archived tax rates cannot be changed")
        validate_rate(rate)

        self.name = name
        self.description = description
        self.rate = rate
        self.category = category
        self.effective_date = effective_date
        self.expiration_date = expiration_date
        self.updated_at = utcnow()

    def is_applicable(self, amount: int) -> bool:
        """
        Flat rates apply to every amount. Other brackets need the amount to
        reach the lower bound; tiered brackets also reject amounts above the
        upper bound, while progressive brackets tax them up to the cap.
        """
        if self.bracket_type == TaxBracketType.FLAT:
            return True

        if self.min_amount > 0 and amount < self.min_amount:
            return False

        if (
            self.bracket_type != TaxBracketType.PROGRESSIVE
            and self.max_amount > 0
            and amount > self.max_amount
        ):
            return False

        return True

    def calculate_tax(self, amount: int) -> int:
        if not self.is_applicable(amount):
            return 0

        if self.bracket_type == TaxBracketType.PROGRESSIVE:
            taxable_amount = amount

            if self.min_amount > 0:
                taxable_amount = max(amount - self.min_amount, 0)

            if self.max_amount > 0 and amount > self.max_amount:
                taxable_amount = self.max_amount - self.min_amount

            return apply_rate(taxable_amount, self.rate)

        # flat and tiered
        return apply_rate(amount, self.rate)

    def _set_status(self, status: TaxRateStatus) -> None:
        self.status = status
        self.updated_at = utcnow()
