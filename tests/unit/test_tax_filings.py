"""Unit tests for tax filing state machine"""

import pytest
from datetime import date
from treasury_gateway.domain.exceptions import (
    InvalidAmountError,
    InvalidFilingPeriodError,
    InvalidFilingStatusError,
)
from treasury_gateway.domain.tax_filings import FilingPeriod, FilingStatus, TaxFiling
from treasury_gateway.domain.tax_rates import TaxType


def make_filing(**kwargs) -> TaxFiling:
    fields = dict(
        taxpayer_id="t1",
        tax_year=2025,
        period=FilingPeriod.QUARTERLY,
        period_start=date(2025, 1, 1),
        period_end=date(2025, 3, 31),
        filing_type=TaxType.SALES,
        due_date=date(2025, 4, 30),
    )
    fields.update(kwargs)
    return TaxFiling(**fields)


def test_period_end_must_follow_start():
    """Test an empty or inverted period is rejected"""
    with pytest.raises(InvalidFilingPeriodError):
        make_filing(period_end=date(2025, 1, 1))
    with pytest.raises(InvalidFilingPeriodError):
        make_filing(period_end=date(2024, 12, 31))


def test_happy_path_to_accepted():
    """Test draft -> submitted -> processing -> accepted"""
    filing = make_filing()
    filing.submit()
    assert filing.status == FilingStatus.SUBMITTED
    assert filing.submission_date is not None

    filing.start_processing(1500)
    assert filing.status == FilingStatus.PROCESSING
    assert filing.tax_calculated == 1500

    filing.accept()
    assert filing.status == FilingStatus.ACCEPTED
    assert filing.acceptance_date is not None


def test_submit_twice_fails_and_keeps_submission_date():
    """Test resubmitting a submitted filing is rejected"""
    filing = make_filing()
    filing.submit()
    submitted_at = filing.submission_date

    with pytest.raises(InvalidFilingStatusError):
        filing.submit()
    assert filing.submission_date == submitted_at


def test_accept_from_submitted_directly():
    """Test a submitted filing can be accepted without processing"""
    filing = make_filing()
    filing.submit()
    filing.accept()
    assert filing.status == FilingStatus.ACCEPTED


def test_accept_draft_fails():
    """Test drafts cannot be accepted or rejected"""
    filing = make_filing()
    with pytest.raises(InvalidFilingStatusError):
        filing.accept()
    with pytest.raises(InvalidFilingStatusError):
        filing.reject("missing schedule")


def test_reject_appends_reason():
    """Test rejection reason is appended to notes"""
    filing = make_filing(notes="first pass")
    filing.submit()
    filing.reject("missing schedule C")
    assert filing.status == FilingStatus.REJECTED
    assert filing.notes == "first pass\nRejection reason: missing schedule C"


def test_process_requires_submitted():
    """Test only submitted filings move to processing"""
    with pytest.raises(InvalidFilingStatusError):
        make_filing().start_processing(100)


def test_amend_creates_independent_copy():
    """Test amending yields a new filing that shares no lists with the original"""
    original = make_filing()
    original.add_deduction("D1", "Equipment", 300)
    original.submit()
    original.accept()

    amended = original.amend()

    assert amended.id != original.id
    assert amended.status == FilingStatus.AMENDED
    assert amended.notes == f"Amended from filing ID: {original.id}"
    assert amended.submission_date is None
    assert amended.acceptance_date is None
    assert amended.total_deductions == 300

    amended.deductions.append(amended.deductions[0])
    assert len(original.deductions) == 1
    assert original.status == FilingStatus.ACCEPTED


def test_amend_allowed_from_draft():
    """Test amend has no status guard"""
    amended = make_filing().amend()
    assert amended.status == FilingStatus.AMENDED


def test_totals_and_balance_due():
    """Test deduction and credit totals and outstanding balance"""
    filing = make_filing()
    filing.add_deduction("D1", "Equipment", 300)
    filing.add_deduction("D2", "Travel", 200)
    filing.add_credit("C1", "Solar", 150)
    assert filing.total_deductions == 500
    assert filing.total_credits == 150

    filing.tax_calculated = 1000
    filing.record_payment(400)
    assert filing.balance_due == 600
    filing.record_payment(700)
    assert filing.balance_due == 0


def test_adjustments_must_be_positive():
    """Test zero or negative deductions are rejected"""
    filing = make_filing()
    with pytest.raises(InvalidAmountError):
        filing.add_deduction("D1", "Nothing", 0)
    with pytest.raises(InvalidAmountError):
        filing.add_credit("C1", "Negative", -5)


def test_ensure_editable_only_in_draft():
    """Test the draft-only edit guard"""
    filing = make_filing()
    filing.ensure_editable()
    filing.submit()
    with pytest.raises(InvalidFilingStatusError):
        filing.ensure_editable()


def test_reverse_payment_floors_at_zero():
    """Test paid total never goes negative"""
    filing = make_filing()
    filing.record_payment(300)
    filing.reverse_payment(500)
    assert filing.tax_paid == 0


def test_is_overdue():
    """Test overdue means past due and not accepted"""
    filing = make_filing()
    assert not filing.is_overdue(date(2025, 4, 30))
    assert filing.is_overdue(date(2025, 5, 1))

    filing.submit()
    filing.accept()
    assert not filing.is_overdue(date(2025, 5, 1))
