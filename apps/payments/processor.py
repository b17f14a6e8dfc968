"""
Payment processor: validates a payment against an outstanding balance and
tracks the payment state machine Unpaid -> PartiallyPaid -> Paid.

Pure functions only. `apps.payments.service` re-reads the ledger from the
store, calls `apply_payment`, and writes the result in one transaction.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Tuple

from common.errors import AmountExceedsBalance, InvalidAmount, ReceivingIncomplete
from common.numbers import CENT, MAX_MONEY, ZERO, exceeds, round_currency, to_decimal
from constants.statuses import PAID, PARTIALLY_PAID, UNPAID

BALANCE_TOLERANCE = CENT


@dataclass(frozen=True)
class PaymentSnapshot:
    amount: Decimal
    paid_on: date
    payment_id: Optional[int] = None
    method: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    actor_id: Optional[str] = None
    actor_name: Optional[str] = None

    @classmethod
    def from_model(cls, payment) -> "PaymentSnapshot":
        return cls(
            amount=to_decimal(payment.amount),
            paid_on=payment.paid_on,
            payment_id=payment.id,
            method=payment.method,
            reference=payment.reference,
            notes=payment.notes,
            actor_id=payment.actor_id,
            actor_name=payment.actor_name,
        )


@dataclass(frozen=True)
class PaymentSummary:
    total: Decimal
    total_paid: Decimal
    remaining: Decimal
    status: str
    payments: Tuple[PaymentSnapshot, ...]


def validate_amount(amount) -> Decimal:
    """
    Return the amount rounded to cents, or raise InvalidAmount when it is
    missing, non-numeric, non-finite, not positive or too large to store.
    """
    value = to_decimal(amount, default=None)
    if value is None:
        raise InvalidAmount("Payment amount must be a finite number.")
    if exceeds(value, MAX_MONEY):
        raise InvalidAmount(f"Payment amount cannot exceed {MAX_MONEY}.")
    value = round_currency(value)
    if value <= 0:
        raise InvalidAmount("Payment amount must be greater than zero.")
    return value


def total_paid(payments: Iterable[PaymentSnapshot]) -> Decimal:
    return sum((to_decimal(p.amount) for p in payments), ZERO)


def outstanding_balance(total: Decimal, paid: Decimal) -> Decimal:
    return max(ZERO, round_currency(total) - round_currency(paid))


def payment_status_for(paid: Decimal, remaining: Decimal, tolerance: Decimal = BALANCE_TOLERANCE) -> str:
    if paid <= 0:
        return UNPAID
    if remaining <= tolerance:
        return PAID
    return PARTIALLY_PAID


def summarize_payments(
    total,
    payments: Sequence[PaymentSnapshot],
    tolerance: Decimal = BALANCE_TOLERANCE,
) -> PaymentSummary:
    """
    Balance summary with payments newest first. `payments` is expected in
    insertion order; the sort is stable so same-day payments keep that order.
    """
    total = round_currency(total)
    paid = round_currency(total_paid(payments))
    remaining = outstanding_balance(total, paid)
    ordered = sorted(payments, key=lambda p: p.paid_on, reverse=True)
    return PaymentSummary(
        total=total,
        total_paid=paid,
        remaining=remaining,
        status=payment_status_for(paid, remaining, tolerance),
        payments=tuple(ordered),
    )


def apply_payment(
    total,
    payments: Sequence[PaymentSnapshot],
    amount,
    reception_complete: bool = True,
    tolerance: Decimal = BALANCE_TOLERANCE,
) -> Decimal:
    """
    Validate a new payment against the current ledger and return the amount to record.

    Receiving is checked first so an incomplete order rejects any amount.
    An amount up to `tolerance` above the remaining balance is accepted and
    recorded as the remaining balance, keeping the sum of payments within the total.
    """
    if not reception_complete:
        raise ReceivingIncomplete("Payments are accepted only after the order has been fully received.")

    value = validate_amount(amount)
    remaining = outstanding_balance(round_currency(total), total_paid(payments))

    if remaining <= 0:
        raise AmountExceedsBalance(
            "There is no outstanding balance left to pay.",
            details={"remaining": str(remaining)},
        )
    if value - remaining > tolerance:
        raise AmountExceedsBalance(
            f"Payment of {value} exceeds the outstanding balance of {remaining}.",
            details={"remaining": str(remaining)},
        )
    return min(value, remaining)
