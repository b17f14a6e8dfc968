from datetime import date
from decimal import Decimal

import pytest

from apps.payments.processor import (
    PaymentSnapshot,
    apply_payment,
    outstanding_balance,
    payment_status_for,
    summarize_payments,
    validate_amount,
)
from common.errors import AmountExceedsBalance, InvalidAmount, ReceivingIncomplete
from constants.statuses import PAID, PARTIALLY_PAID, UNPAID


def paid(amount, day=date(2024, 6, 10), payment_id=None):
    return PaymentSnapshot(amount=Decimal(str(amount)), paid_on=day, payment_id=payment_id)


class TestValidateAmount:
    @pytest.mark.parametrize("amount", [None, "abc", "", float("nan"), float("inf"), True, 0, "-5"])
    def test_rejects_invalid_amounts(self, amount):
        with pytest.raises(InvalidAmount):
            validate_amount(amount)

    def test_rounds_to_cents(self):
        assert validate_amount("10.005") == Decimal("10.01")
        assert validate_amount(0.1) == Decimal("0.10")

    def test_amount_rounding_to_zero_is_rejected(self):
        with pytest.raises(InvalidAmount):
            validate_amount("0.004")

    @pytest.mark.parametrize("amount", ["1e30", "1000000000000", Decimal("999999999999.995")])
    def test_amounts_beyond_storage_are_rejected(self, amount):
        with pytest.raises(InvalidAmount):
            validate_amount(amount)

    def test_largest_storable_amount(self):
        assert validate_amount("999999999999.99") == Decimal("999999999999.99")


class TestApplyPayment:
    """Balance checks for a new payment"""

    def test_scenario_partial_then_full_then_rejected(self):
        total = Decimal("1000.00")
        payments = []

        amount = apply_payment(total, payments, Decimal("400"))
        payments.append(paid(amount))
        summary = summarize_payments(total, payments)
        assert summary.remaining == Decimal("600.00")
        assert summary.status == PARTIALLY_PAID

        amount = apply_payment(total, payments, Decimal("600"))
        payments.append(paid(amount))
        summary = summarize_payments(total, payments)
        assert summary.remaining == Decimal("0.00")
        assert summary.status == PAID

        with pytest.raises(AmountExceedsBalance):
            apply_payment(total, payments, Decimal("0.01"))

    def test_receiving_is_checked_before_amount(self):
        with pytest.raises(ReceivingIncomplete):
            apply_payment(Decimal("100"), [], None, reception_complete=False)
        with pytest.raises(ReceivingIncomplete):
            apply_payment(Decimal("100"), [], Decimal("10"), reception_complete=False)

    def test_invalid_amount(self):
        with pytest.raises(InvalidAmount):
            apply_payment(Decimal("100"), [], Decimal("-1"))

    def test_amount_too_large_to_store(self):
        with pytest.raises(InvalidAmount):
            apply_payment(Decimal("1000.00"), [], "1e30")
    def test_one_cent_over_is_recorded_as_remaining(self):
        assert apply_payment(Decimal("100"), [paid("50")], Decimal("50.01")) == Decimal("50.00")

    def test_two_cents_over_is_rejected(self):
        with pytest.raises(AmountExceedsBalance) as exc:
            apply_payment(Decimal("100"), [paid("50")], Decimal("50.02"))
        assert exc.value.details == {"remaining": "50.00"}

    @pytest.mark.parametrize(
        "first, second, accepted",
        [
            ("40", "60", True),
            ("40", "60.01", True),
            ("40", "60.02", False),
            ("99.99", "0.01", True),
            ("0.01", "100", True),
            ("0.02", "100", False),
        ],
    )
    def test_two_payments_fit_within_total_plus_tolerance(self, first, second, accepted):
        total = Decimal("100.00")
        payments = [paid(apply_payment(total, [], Decimal(first)))]
        if accepted:
            recorded = apply_payment(total, payments, Decimal(second))
            assert sum(p.amount for p in payments) + recorded <= total
        else:
            with pytest.raises(AmountExceedsBalance):
                apply_payment(total, payments, Decimal(second))

    def test_sum_of_payments_never_exceeds_total(self):
        total = Decimal("250.00")
        payments = []
        for amount in ["100", "100", "50.01"]:
            payments.append(paid(apply_payment(total, payments, Decimal(amount))))
        assert sum(p.amount for p in payments) == total


class TestSummary:
    def test_status_transitions(self):
        assert payment_status_for(Decimal("0"), Decimal("100")) == UNPAID
        assert payment_status_for(Decimal("1"), Decimal("99")) == PARTIALLY_PAID
        assert payment_status_for(Decimal("99.99"), Decimal("0.01")) == PAID

    def test_newest_first_with_stable_ties(self):
        payments = [
            paid("10", date(2024, 1, 1), payment_id=1),
            paid("10", date(2024, 2, 1), payment_id=2),
            paid("10", date(2024, 1, 1), payment_id=3),
        ]
        summary = summarize_payments(Decimal("100"), payments)
        assert [p.payment_id for p in summary.payments] == [2, 1, 3]
        assert summary.total_paid == Decimal("30.00")
        assert summary.remaining == Decimal("70.00")

    def test_unpaid_order(self):
        summary = summarize_payments(Decimal("100"), [])
        assert summary.status == UNPAID
        assert summary.remaining == Decimal("100.00")

    def test_outstanding_balance_is_never_negative(self):
        assert outstanding_balance(Decimal("10"), Decimal("12")) == Decimal("0")
