"""Rule-based summaries, progress and advice built on the payoff math.

Nothing here optimizes anything: the recommendations are simple heuristics
meant to nudge a user, not a proof of the best order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Literal

from ..config import BaseConfig
from ..models.liability import Liability
from .amortization import is_never, months_to_pay_off, total_interest_paid
from .debts import MinimumPaymentPolicy, StrategyType, minimum_payment

_MESSAGES: dict[str, tuple[str, ...]] = {
    "snowball": (
        "Every small debt you clear is a win!",
        "You're on the right track. Small wins build momentum.",
        "Amazing progress! The snowball is picking up speed.",
        "Almost there! Each payment brings you closer to financial freedom.",
    ),
    "avalanche": (
        "Smart strategy! You're already saving on interest.",
        "Excellent! Attacking high interest first is the right move.",
        "Keep going! Your wallet will thank you in the long run.",
        "Almost there! You've optimized your path to financial freedom.",
    ),
    "custom": (
        "Your plan, your pace. Every payment counts!",
        "Steady progress! Sticking to your plan is paying off.",
        "More than halfway there. Keep the plan going!",
        "Almost there! The finish line is in sight.",
    ),
}

_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "MXN": "$", "CAD": "$", "JPY": "¥"}


@dataclass(slots=True, frozen=True)
class Recommendation:
    debt: Liability
    reason: Literal["quick_win", "high_interest", "momentum"]
    message: str


@dataclass(slots=True, frozen=True)
class DebtSummary:
    total_debt: float
    total_monthly_payments: float
    highest_interest_debt: Liability | None
    smallest_debt: Liability | None
    estimated_months_to_pay_off: float
    total_interest_will_pay: float


@dataclass(slots=True, frozen=True)
class DebtProgress:
    debt_id: str
    debt_name: str
    current_amount: float
    original_amount: float
    monthly_payment: float
    interest_rate: float
    months_remaining: float
    total_interest_remaining: float
    percentage_paid: float


@dataclass(slots=True, frozen=True)
class ExtraPaymentImpact:
    new_balance: float
    months_saved: float
    interest_saved: float


def _active(liabilities: Iterable[Liability]) -> list[Liability]:
    return [liability for liability in liabilities if not liability.is_paid]


def _highest_interest(liabilities: list[Liability]) -> Liability:
    # First debt wins ties, like a left-to-right scan.
    best = liabilities[0]
    for liability in liabilities[1:]:
        if liability.rate > best.rate:
            best = liability
    return best


def _smallest(liabilities: list[Liability]) -> Liability:
    best = liabilities[0]
    for liability in liabilities[1:]:
        if liability.amount < best.amount:
            best = liability
    return best


def recommend_next_debt_to_pay(
    liabilities: Iterable[Liability],
    *,
    quick_win_share: float = BaseConfig.DEFAULT_QUICK_WIN_SHARE,
    high_interest_threshold: float = BaseConfig.DEFAULT_HIGH_INTEREST_THRESHOLD,
) -> Recommendation | None:
    """Suggest which debt deserves the next extra payment.

    1. The smallest debt when it is under ``quick_win_share`` of all debt.
    2. Otherwise the highest-rate debt when its rate beats the threshold.
    3. Otherwise the smallest debt.
    """

    active = _active(liabilities)
    if not active:
        return None

    smallest = _smallest(active)
    total_debt = sum(liability.amount for liability in active)
    if smallest.amount < total_debt * quick_win_share:
        return Recommendation(
            debt=smallest,
            reason="quick_win",
            message="It's your smallest debt. Paying it off gives you a quick win and motivation.",
        )

    highest = _highest_interest(active)
    if highest.rate > high_interest_threshold:
        return Recommendation(
            debt=highest,
            reason="high_interest",
            message=f"It has the highest interest rate ({highest.rate:g}%). Paying it saves you money.",
        )

    return Recommendation(
        debt=smallest,
        reason="momentum",
        message="Start with the smallest one to build momentum.",
    )


def motivational_message(strategy_type: StrategyType, progress: float) -> str:
    """Pick one of four canned messages for a payoff progress in [0, 1]."""

    try:
        messages = _MESSAGES[strategy_type]
    except KeyError:
        raise ValueError("Invalid debt payoff strategy.") from None
    if math.isnan(progress):
        progress = 0.0
    progress = min(max(progress, 0.0), 1.0)
    index = min(math.floor(progress * len(messages)), len(messages) - 1)
    return messages[index]


def overall_progress(liabilities: Iterable[Liability]) -> float:
    """Fraction of the combined original balances already repaid."""

    snapshot = list(liabilities)
    original = sum(max(liability.starting_amount, 0.0) for liability in snapshot)
    if original <= 0:
        return 0.0
    remaining = sum(max(liability.amount, 0.0) for liability in snapshot)
    return min(max((original - remaining) / original, 0.0), 1.0)


def calculate_simple_debt_summary(
    liabilities: Iterable[Liability], policy: MinimumPaymentPolicy | None = None
) -> DebtSummary:
    """Aggregate totals assuming every debt keeps getting only its minimum."""

    active = _active(liabilities)
    if not active:
        return DebtSummary(
            total_debt=0.0,
            total_monthly_payments=0.0,
            highest_interest_debt=None,
            smallest_debt=None,
            estimated_months_to_pay_off=0,
            total_interest_will_pay=0.0,
        )

    months: float = 0
    interest = 0.0
    payments = 0.0
    for liability in active:
        payment = minimum_payment(liability, policy)
        payments += payment
        # Debts are paid in parallel, so the slowest one sets the horizon.
        months = max(months, months_to_pay_off(liability.amount, payment, liability.rate))
        interest += total_interest_paid(liability.amount, payment, liability.rate)

    return DebtSummary(
        total_debt=sum(liability.amount for liability in active),
        total_monthly_payments=payments,
        highest_interest_debt=_highest_interest(active),
        smallest_debt=_smallest(active),
        estimated_months_to_pay_off=months,
        total_interest_will_pay=interest,
    )


def calculate_debt_progress(
    liability: Liability, policy: MinimumPaymentPolicy | None = None
) -> DebtProgress:
    payment = minimum_payment(liability, policy)
    original = liability.starting_amount
    if original > 0:
        paid_pct = (original - liability.amount) / original * 100
    else:
        paid_pct = 0.0
    return DebtProgress(
        debt_id=liability.id,
        debt_name=liability.name,
        current_amount=liability.amount,
        original_amount=original,
        monthly_payment=payment,
        interest_rate=liability.rate,
        months_remaining=months_to_pay_off(liability.amount, payment, liability.rate),
        total_interest_remaining=total_interest_paid(liability.amount, payment, liability.rate),
        percentage_paid=min(max(paid_pct, 0.0), 100.0),
    )


def simulate_extra_payment(
    current_balance: float,
    monthly_payment: float,
    extra_payment: float,
    annual_rate_percent: float = 0.0,
) -> ExtraPaymentImpact:
    """Estimate what a one-off lump sum does to months and interest left."""

    months_without = months_to_pay_off(current_balance, monthly_payment, annual_rate_percent)
    interest_without = total_interest_paid(current_balance, monthly_payment, annual_rate_percent)

    new_balance = max(0.0, current_balance - extra_payment)
    months_with = months_to_pay_off(new_balance, monthly_payment, annual_rate_percent)
    interest_with = total_interest_paid(new_balance, monthly_payment, annual_rate_percent)

    if is_never(months_with):
        months_saved: float = 0
        interest_saved = 0.0
    elif is_never(months_without):
        months_saved = months_without
        interest_saved = interest_without
    else:
        months_saved = max(0, months_without - months_with)
        interest_saved = max(0.0, interest_without - interest_with)

    return ExtraPaymentImpact(
        new_balance=new_balance, months_saved=months_saved, interest_saved=interest_saved
    )


def format_months(months: float) -> str:
    """Render a month count as text, e.g. ``"2 years and 3 months"``."""

    if is_never(months):
        return "Never"
    months = int(months)
    if months <= 0:
        return "0 months"

    years, remaining = divmod(months, 12)
    month_text = f"{remaining} {'month' if remaining == 1 else 'months'}"
    if years == 0:
        return month_text
    year_text = f"{years} {'year' if years == 1 else 'years'}"
    if remaining == 0:
        return year_text
    return f"{year_text} and {month_text}"


def format_currency(amount: float, *, currency: str = BaseConfig.DEFAULT_CURRENCY) -> str:
    """Format *amount* for display in *currency* (an ISO code)."""

    if is_never(amount):
        return "N/A"
    code = currency.upper()
    symbol = _CURRENCY_SYMBOLS.get(code)
    sign = "-" if amount < 0 else ""
    if symbol is None:
        return f"{sign}{abs(amount):,.2f} {code}"
    return f"{sign}{symbol}{abs(amount):,.2f}"


__all__ = [
    "DebtProgress",
    "DebtSummary",
    "ExtraPaymentImpact",
    "Recommendation",
    "calculate_debt_progress",
    "calculate_simple_debt_summary",
    "format_currency",
    "format_months",
    "motivational_message",
    "overall_progress",
    "recommend_next_debt_to_pay",
    "simulate_extra_payment",
]
