"""Fixed-payment amortization math for a single balance."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

# Single "will never be paid off" marker for months and interest alike.
NEVER_PAID_OFF = math.inf

# Float noise on exact roots (1000 / 25) must not cost an extra month.
_MONTH_EPSILON = 1e-9


@dataclass(slots=True, frozen=True)
class PaymentProjection:
    """Represents a single projected payment for a balance."""

    month: int
    payment: float
    principal: float
    interest: float
    remaining_balance: float


def is_never(value: float) -> bool:
    """Return True when *value* is the never-paid-off sentinel."""

    return math.isinf(value)


def round_cents(amount: float) -> float:
    """Round to cents using half-up rounding."""

    return float(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def monthly_rate(annual_rate_percent: float | None) -> float:
    """Convert a nominal annual percentage into the monthly periodic rate."""

    return max(float(annual_rate_percent or 0.0), 0.0) / 100.0 / 12.0


def months_to_pay_off(
    balance: float, monthly_payment: float, annual_rate_percent: float | None = 0.0
) -> float:
    """Return whole months needed to retire *balance* at a fixed payment.

    Partial months count as full months. Returns ``NEVER_PAID_OFF`` when the
    payment is zero or does not exceed the interest accruing each month.
    """

    if balance <= 0:
        return 0
    if monthly_payment <= 0:
        return NEVER_PAID_OFF

    rate = monthly_rate(annual_rate_percent)
    if rate == 0:
        exact = balance / monthly_payment
    else:
        if monthly_payment <= balance * rate:
            return NEVER_PAID_OFF
        exact = math.log(monthly_payment / (monthly_payment - balance * rate)) / math.log1p(rate)

    return max(1, math.ceil(exact - _MONTH_EPSILON))


def total_interest_paid(
    balance: float, monthly_payment: float, annual_rate_percent: float | None = 0.0
) -> float:
    """Return interest paid over the life of the balance.

    Computed as ``payment * months - balance`` and floored at zero. An
    interest-free balance costs nothing even when the last installment is
    short.
    """

    months = months_to_pay_off(balance, monthly_payment, annual_rate_percent)
    if is_never(months):
        return NEVER_PAID_OFF
    if months == 0 or monthly_rate(annual_rate_percent) == 0:
        return 0.0
    return max(0.0, monthly_payment * months - balance)


def amortization_schedule(
    balance: float,
    monthly_payment: float,
    annual_rate_percent: float | None = 0.0,
    *,
    months: int | None = None,
) -> list[PaymentProjection]:
    """Generate a month-by-month amortization table for one balance.

    Interest is rounded to cents each month and the final payment is capped at
    what is owed. When ``months`` is ``None`` the table runs until the balance
    reaches zero, and a payment that can never retire the balance yields an
    empty table. With ``months`` set, a preview of at most that many rows is
    returned even for a growing balance.
    """

    if balance <= 0 or (months is not None and months <= 0):
        return []
    if months is None and is_never(months_to_pay_off(balance, monthly_payment, annual_rate_percent)):
        return []

    rate = monthly_rate(annual_rate_percent)
    remaining = round_cents(balance)
    payment_amount = max(float(monthly_payment), 0.0)
    schedule: list[PaymentProjection] = []

    month = 0
    while remaining > 0 and (months is None or month < months):
        month += 1
        interest = round_cents(remaining * rate)
        payment = round_cents(min(payment_amount, remaining + interest))
        principal = round_cents(payment - interest)
        previous = remaining
        remaining = round_cents(remaining + interest - payment)
        if remaining < 0.01:
            remaining = 0.0

        schedule.append(
            PaymentProjection(
                month=month,
                payment=payment,
                principal=principal,
                interest=interest,
                remaining_balance=remaining,
            )
        )

        # Cent rounding can swallow a payment that only barely beats interest.
        if months is None and remaining >= previous:
            break

    return schedule


__all__ = [
    "NEVER_PAID_OFF",
    "PaymentProjection",
    "amortization_schedule",
    "is_never",
    "monthly_rate",
    "months_to_pay_off",
    "round_cents",
    "total_interest_paid",
]
