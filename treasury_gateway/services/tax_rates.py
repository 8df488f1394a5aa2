"""Tax rate management and tax calculation"""

from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from treasury_gateway.domain.money import ensure_non_negative_amount
from treasury_gateway.domain.tax_rates import TaxBracketType, TaxRate, TaxType
from treasury_gateway.infrastructure.database.session import transactional
from treasury_gateway.infrastructure.database.tax_repositories import TaxRateRepository
from treasury_gateway.utils.date_utils import utcnow


class TaxRateService:
    def __init__(self, db: Session):
        self.db = db
        self.rates = TaxRateRepository(db)

    def get_tax_rate(self, rate_id: str) -> TaxRate:
        return self.rates.get_by_id(rate_id)

    def list_tax_rates(self, limit: int, offset: int = 0) -> List[TaxRate]:
        return self.rates.list(limit, offset)

    def list_by_type(self, tax_type: TaxType) -> List[TaxRate]:
        return self.rates.list_by_type(TaxType(tax_type))

    def list_active(self) -> List[TaxRate]:
        return self.rates.list_active()

    def list_by_jurisdiction(self, jurisdiction_code: str) -> List[TaxRate]:
        return self.rates.list_by_jurisdiction(jurisdiction_code)

    def rates_for_income(self, amount: int, jurisdiction_code: str) -> List[TaxRate]:
        return self.rates.get_rates_for_income(amount, jurisdiction_code)

    def create_tax_rate(
        self,
        tax_type: TaxType,
        name: str,
        rate: float,
        bracket_type: TaxBracketType,
        jurisdiction_code: str,
        effective_date: date,
        description: str = "",
        min_amount: int = 0,
        max_amount: int = 0,
        category: str = "",
        expiration_date: Optional[date] = None,
    ) -> TaxRate:
        """New rates start proposed and must be activated before they count"""
        tax_rate = TaxRate(
            type=TaxType(tax_type),
            name=name,
            rate=rate,
            bracket_type=TaxBracketType(bracket_type),
            jurisdiction_code=jurisdiction_code,
            effective_date=effective_date,
            description=description,
            min_amount=min_amount,
            max_amount=max_amount,
            category=category,
            expiration_date=expiration_date,
        )
        with transactional(self.db):
            return self.rates.create(tax_rate)

    def update_tax_rate(
        self,
        rate_id: str,
        name: str,
        description: str,
        rate: float,
        category: str,
        effective_date: date,
        expiration_date: Optional[date] = None,
    ) -> TaxRate:
        with transactional(self.db):
            tax_rate = self.rates.get_by_id(rate_id)
            tax_rate.update_details(name, description, rate, category, effective_date, expiration_date)
            return self.rates.update(tax_rate)

    def activate_tax_rate(self, rate_id: str) -> TaxRate:
        with transactional(self.db):
            tax_rate = self.rates.get_by_id(rate_id)
            tax_rate.activate()
            return self.rates.update(tax_rate)

    def deactivate_tax_rate(self, rate_id: str) -> TaxRate:
        with transactional(self.db):
            tax_rate = self.rates.get_by_id(rate_id)
            tax_rate.deactivate()
            return self.rates.update(tax_rate)

    def archive_tax_rate(self, rate_id: str) -> TaxRate:
        with transactional(self.db):
            tax_rate = self.rates.get_by_id(rate_id)
            tax_rate.archive()
            return self.rates.update(tax_rate)

    def calculate_income_tax(self, amount: int, jurisdiction_code: str, on: Optional[date] = None) -> int:
        """Sum the tax over every active, effective income rate of the jurisdiction"""
        ensure_non_negative_amount(amount)
        on = on or utcnow().date()

        return sum(
            rate.calculate_tax(amount)
            for rate in self.rates.get_rates_for_income(amount, jurisdiction_code)
            if rate.is_effective(on)
        )

    def calculate_sales_tax(
        self,
        amount: int,
        category: str,
        jurisdiction_code: str,
        on: Optional[date] = None,
    ) -> int:
        """
        Sales tax on an amount: a rate specific to the category wins, otherwise
        the jurisdiction's uncategorised sales rate applies. No rate means no tax.
        """
        ensure_non_negative_amount(amount)
        on = on or utcnow().date()

        candidates = [
            rate
            for rate in self.rates.list_by_jurisdiction(jurisdiction_code)
            if rate.type == TaxType.SALES and rate.is_active() and rate.is_effective(on)
        ]

        rate = None
        if category:
            rate = next((r for r in candidates if r.category == category), None)
        if rate is None:
            rate = next((r for r in candidates if not r.category), None)
        if rate is None:
            return 0

        return rate.calculate_tax(amount)
