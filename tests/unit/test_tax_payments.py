"""Unit tests for tax payment lifecycle"""

import pytest
from datetime import date
from treasury_gateway.domain.exceptions import InvalidPaymentAmountError, InvalidPaymentStatusError
from treasury_gateway.domain.tax_payments import PaymentMethod, PaymentStatus, TaxPayment
from treasury_gateway.domain.tax_rates import TaxType


def make_payment(amount: int = 500) -> TaxPayment:
    return TaxPayment(
        taxpayer_id="t1",
        tax_type=TaxType.INCOME,
        amount=amount,
        payment_method=PaymentMethod.ELECTRONIC,
        payment_date=date(2025, 4, 1),
    )


def test_confirmation_code_generated():
    """Test payments carry a PAY- confirmation code"""
    payment = make_payment()
    assert payment.confirmation_code.startswith("PAY-")
    assert payment.status == PaymentStatus.PENDING


@pytest.mark.parametrize("amount", [0, -100])
def test_amount_must_be_positive(amount):
    """Test non-positive payment amounts are rejected"""
    with pytest.raises(InvalidPaymentAmountError):
        make_payment(amount)


def test_complete_then_refund():
    """Test pending -> completed -> refunded"""
    payment = make_payment()
    payment.mark_as_completed()
    assert payment.processed_at is not None

    payment.refund("duplicate charge")
    assert payment.status == PaymentStatus.REFUNDED
    assert payment.refunded_at is not None
    assert payment.notes.endswith("\nRefund reason: duplicate charge")


def test_refund_pending_fails():
    """Test a pending payment cannot be refunded"""
    with pytest.raises(InvalidPaymentStatusError):
        make_payment().refund("too early")


def test_double_completion_blocked():
    """Test a completed payment cannot be completed again"""
    payment = make_payment()
    payment.mark_as_completed()
    with pytest.raises(InvalidPaymentStatusError):
        payment.mark_as_completed()


def test_fail_appends_reason():
    """Test failing a pending payment records the reason"""
    payment = make_payment()
    payment.mark_as_failed("card declined")
    assert payment.status == PaymentStatus.FAILED
    assert "\nFailure reason: card declined" in payment.notes


def test_void_only_pending():
    """Test voiding is limited to pending payments"""
    payment = make_payment()
    payment.void("entered twice")
    assert payment.status == PaymentStatus.VOIDED

    completed = make_payment()
    completed.mark_as_completed()
    with pytest.raises(InvalidPaymentStatusError):
        completed.void("too late")


def test_update_amount_rules():
    """Test amount changes need a pending payment and a positive amount"""
    payment = make_payment()
    payment.update_amount(750)
    assert payment.amount == 750

    with pytest.raises(InvalidPaymentAmountError):
        payment.update_amount(0)

    payment.mark_as_completed()
    with pytest.raises(InvalidPaymentStatusError):
        payment.update_amount(100)
