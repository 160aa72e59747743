"""Debt payoff planning (snowball, avalanche and custom ordering)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Literal, Mapping, Sequence

from ..config import BaseConfig
from ..logging_config import get_logger
from ..models.liability import Liability
from .amortization import (
    NEVER_PAID_OFF,
    is_never,
    monthly_rate,
    months_to_pay_off,
    round_cents,
    total_interest_paid,
)

logger = get_logger(__name__)

StrategyType = Literal["snowball", "avalanche", "custom"]
STRATEGY_TYPES: tuple[str, ...] = ("snowball", "avalanche", "custom")

_STRATEGY_COPY: dict[str, tuple[str, str]] = {
    "snowball": (
        "Snowball",
        "Pay the smallest balances first for quick wins and momentum.",
    ),
    "avalanche": (
        "Avalanche",
        "Pay the highest interest rates first to save the most money over time.",
    ),
    "custom": (
        "Custom",
        "Pay debts in the order you choose.",
    ),
}


@dataclass(slots=True, frozen=True)
class MinimumPaymentPolicy:
    """Synthetic minimum used when a liability has no contractual payment.

    The default mirrors common revolving-credit terms (2% of the balance, at
    least $25). Real contracts vary, so callers may pass their own.
    """

    rate: float = BaseConfig.DEFAULT_MIN_PAYMENT_RATE
    floor: float = BaseConfig.DEFAULT_MIN_PAYMENT_FLOOR


DEFAULT_POLICY = MinimumPaymentPolicy()


@dataclass(slots=True, frozen=True)
class DebtAnalysis:
    """One liability evaluated in isolation for a calculation pass.

    ``months_to_pay_off`` and ``total_interest_paid`` are priced at
    ``suggested_payment``, ignoring rollover from other debts.
    """

    liability: Liability
    months_to_pay_off: float
    total_interest_paid: float
    minimum_payment: float
    suggested_payment: float
    priority: int = 0  # assigned by order_debts, 1 == first to get extra money


@dataclass(slots=True, frozen=True)
class PaymentStrategy:
    """How extra money is pointed at debts for one calculation call."""

    type: StrategyType
    name: str
    description: str
    monthly_extra_budget: float = 0.0
    priority_order: tuple[str, ...] = ()  # only read for "custom"

    def __post_init__(self) -> None:
        if self.type not in STRATEGY_TYPES:
            raise ValueError("Invalid debt payoff strategy.")
        if self.monthly_extra_budget < 0:
            raise ValueError("Monthly extra budget cannot be negative.")


@dataclass(slots=True, frozen=True)
class BudgetAllocation:
    debt_id: str
    amount: float
    type: Literal["minimum", "extra"]


@dataclass(slots=True, frozen=True)
class DebtPayment:
    payment: float
    interest: float
    remaining_balance: float


@dataclass(slots=True, frozen=True)
class ScheduleEntry:
    """Totals for one simulated month across every debt in the plan."""

    month: int
    total_paid: float  # cumulative through this month
    remaining_debt: float
    interest_paid: float  # this month only
    payments: Mapping[str, DebtPayment] = field(default_factory=dict)

    def as_chart_point(self) -> dict[str, float]:
        return {
            "month": self.month,
            "totalPaid": self.total_paid,
            "remainingDebt": self.remaining_debt,
        }


@dataclass(slots=True, frozen=True)
class SimulationResult:
    total_months_to_pay_off: float
    total_interest_saved: float
    strategy_interest: float
    baseline_interest: float
    next_debt_to_focus: Liability | None
    monthly_budget_distribution: tuple[BudgetAllocation, ...]
    payment_schedule: tuple[ScheduleEntry, ...] = ()


@dataclass(slots=True, frozen=True)
class DebtPaymentPlan:
    """Presentation-ready payoff plan built fresh on every call."""

    strategy: PaymentStrategy
    debts: tuple[DebtAnalysis, ...]
    total_months_to_pay_off: float
    total_interest_saved: float
    next_debt_to_focus: Liability | None
    monthly_budget_distribution: tuple[BudgetAllocation, ...]
    payment_schedule: tuple[ScheduleEntry, ...] = ()
    total_interest_paid: float = 0.0
    baseline_interest: float = 0.0

    @property
    def is_payable(self) -> bool:
        return not is_never(self.total_months_to_pay_off)


@dataclass(slots=True)
class _LedgerAccount:
    debt_id: str
    balance: float
    rate: float
    minimum: float


def create_payment_strategy(
    strategy_type: StrategyType,
    monthly_extra_budget: float = 0.0,
    priority_order: Iterable[str] = (),
) -> PaymentStrategy:
    """Return a strategy with its canned display name and description."""

    if strategy_type not in _STRATEGY_COPY:
        raise ValueError("Invalid debt payoff strategy.")
    name, description = _STRATEGY_COPY[strategy_type]
    return PaymentStrategy(
        type=strategy_type,
        name=name,
        description=description,
        monthly_extra_budget=float(monthly_extra_budget),
        priority_order=tuple(priority_order),
    )


def minimum_payment(liability: Liability, policy: MinimumPaymentPolicy | None = None) -> float:
    """Return the monthly minimum for *liability*.

    A positive contractual payment always wins. Otherwise the policy derives
    one from the balance.
    """

    if liability.monthly_payment is not None and liability.monthly_payment > 0:
        return float(liability.monthly_payment)
    policy = policy or DEFAULT_POLICY
    return max(liability.amount * policy.rate, policy.floor)


def analyze_debt(
    liability: Liability,
    extra_payment: float = 0.0,
    *,
    policy: MinimumPaymentPolicy | None = None,
) -> DebtAnalysis:
    """Evaluate one liability on its own, ignoring every other debt."""

    minimum = minimum_payment(liability, policy)
    suggested = minimum + extra_payment
    return DebtAnalysis(
        liability=liability,
        months_to_pay_off=months_to_pay_off(liability.amount, suggested, liability.rate),
        total_interest_paid=total_interest_paid(liability.amount, suggested, liability.rate),
        minimum_payment=minimum,
        suggested_payment=suggested,
    )


def order_debts(
    debts: Iterable[DebtAnalysis],
    strategy_type: StrategyType,
    priority_order: Sequence[str] = (),
) -> list[DebtAnalysis]:
    """Return a new, prioritized list of analyses.

    Sorting is stable, so ties keep their input order. For ``custom`` the
    given ID order is used verbatim; debts it does not mention follow in input
    order and unknown IDs are ignored.
    """

    items = list(debts)
    if strategy_type == "snowball":
        ordered = sorted(items, key=lambda d: d.liability.amount)
    elif strategy_type == "avalanche":
        ordered = sorted(items, key=lambda d: d.liability.rate, reverse=True)
    elif strategy_type == "custom":
        position: dict[str, int] = {}
        for index, debt_id in enumerate(priority_order):
            position.setdefault(debt_id, index)
        listed = sorted(
            (d for d in items if d.liability.id in position),
            key=lambda d: position[d.liability.id],
        )
        ordered = listed + [d for d in items if d.liability.id not in position]
    else:
        raise ValueError("Invalid debt payoff strategy.")

    return [replace(debt, priority=index + 1) for index, debt in enumerate(ordered)]


def _budget_distribution(
    debts: Sequence[DebtAnalysis], extra_budget: float
) -> tuple[BudgetAllocation, ...]:
    allocations = []
    for index, debt in enumerate(debts):
        extra_amount = extra_budget if index == 0 else 0.0
        allocations.append(
            BudgetAllocation(
                debt_id=debt.liability.id,
                amount=debt.minimum_payment + extra_amount,
                type="extra" if extra_amount > 0 else "minimum",
            )
        )
    return tuple(allocations)


def _with_extra(debt: DebtAnalysis, extra_budget: float) -> DebtAnalysis:
    """Re-price *debt* in isolation at its minimum plus *extra_budget*."""

    payment = debt.minimum_payment + extra_budget
    amount, rate = debt.liability.amount, debt.liability.rate
    return replace(
        debt,
        suggested_payment=payment,
        months_to_pay_off=months_to_pay_off(amount, payment, rate),
        total_interest_paid=total_interest_paid(amount, payment, rate),
    )


def _interest_saved(baseline: float, strategy: float) -> float:
    if is_never(strategy):
        return 0.0
    if is_never(baseline):
        return NEVER_PAID_OFF
    return max(0.0, round_cents(baseline - strategy))


def _run_ledger(
    debts: Sequence[DebtAnalysis],
    *,
    extra_budget: float,
    rollover: bool,
    max_months: int,
) -> tuple[float, float, list[ScheduleEntry]]:
    """Simulate every debt month by month; return (months, interest, schedule).

    Each month all active debts accrue interest and receive their minimum.
    The extra pool goes to the first active debt in priority order, and any
    overshoot on a debt that gets retired spills into the next one in the same
    month. With ``rollover`` a retired debt's minimum joins the pool from the
    following month on; without it leftovers are simply not spent.
    """

    accounts = [
        _LedgerAccount(
            debt_id=debt.liability.id,
            balance=round_cents(debt.liability.amount),
            rate=monthly_rate(debt.liability.rate),
            minimum=debt.minimum_payment,
        )
        for debt in debts
        if debt.liability.amount > 0
    ]
    schedule: list[ScheduleEntry] = []
    rolled_minimums = 0.0  # freed minimum payments from debts already cleared
    total_interest = 0.0
    total_paid = 0.0
    month = 0

    while any(account.balance > 0 for account in accounts):
        if month >= max_months:
            return NEVER_PAID_OFF, NEVER_PAID_OFF, schedule
        month += 1

        extra_pool = extra_budget + rolled_minimums
        freed_this_month = 0.0
        month_interest = 0.0
        progressed = False
        payments: dict[str, DebtPayment] = {}

        for account in accounts:
            if account.balance <= 0:
                continue

            interest = round_cents(account.balance * account.rate)
            owed = round_cents(account.balance + interest)

            payment = account.minimum
            if extra_pool > 0:
                payment += extra_pool
                extra_pool = 0.0
            payment = round_cents(payment)

            if payment >= owed:
                leftover = payment - owed
                payment = owed
                new_balance = 0.0
                if rollover:
                    extra_pool += leftover
                    freed_this_month += account.minimum
            else:
                new_balance = round_cents(owed - payment)

            if new_balance < account.balance:
                progressed = True
            account.balance = new_balance
            month_interest += interest
            total_paid += payment
            payments[account.debt_id] = DebtPayment(
                payment=payment, interest=interest, remaining_balance=new_balance
            )

        total_interest += month_interest
        rolled_minimums += freed_this_month
        schedule.append(
            ScheduleEntry(
                month=month,
                total_paid=round_cents(total_paid),
                remaining_debt=round_cents(sum(a.balance for a in accounts)),
                interest_paid=round_cents(month_interest),
                payments=payments,
            )
        )

        # No balance went down, so no debt can retire and free its minimum.
        if not progressed:
            return NEVER_PAID_OFF, NEVER_PAID_OFF, schedule

    return month, round_cents(total_interest), schedule


def _estimate_rollover(
    debts: Sequence[DebtAnalysis], extra_budget: float
) -> tuple[float, float, float]:
    """Closed-form approximation; return (months, strategy_interest, baseline_interest).

    Each debt is priced as if its rolled-up payment applied from month one,
    which overstates the savings for debts further down the queue.
    """

    available_extra = extra_budget
    total_months: float = 0
    strategy_interest = 0.0
    baseline_interest = 0.0

    for debt in debts:
        amount = debt.liability.amount
        rate = debt.liability.rate
        payment = debt.minimum_payment + available_extra
        # Parallel payoff: the plan ends when the slowest debt does.
        total_months = max(total_months, months_to_pay_off(amount, payment, rate))
        strategy_interest += total_interest_paid(amount, payment, rate)
        baseline_interest += total_interest_paid(amount, debt.minimum_payment, rate)
        available_extra += debt.minimum_payment

    return total_months, strategy_interest, baseline_interest


def simulate(
    ordered_debts: Sequence[DebtAnalysis],
    strategy: PaymentStrategy,
    *,
    exact: bool = True,
    max_months: int = BaseConfig.DEFAULT_MAX_SCHEDULE_MONTHS,
) -> SimulationResult:
    """Project the payoff of already-ordered debts under *strategy*.

    ``exact`` runs the month-by-month ledger and returns a payment schedule;
    otherwise the closed-form rollover estimate is used and no schedule is
    produced. A debt that can never be retired makes the whole plan
    ``NEVER_PAID_OFF``.
    """

    debts = list(ordered_debts)
    extra_budget = strategy.monthly_extra_budget
    if not debts:
        return SimulationResult(
            total_months_to_pay_off=0,
            total_interest_saved=0.0,
            strategy_interest=0.0,
            baseline_interest=0.0,
            next_debt_to_focus=None,
            monthly_budget_distribution=(),
        )

    schedule: list[ScheduleEntry] = []
    if exact:
        total_months, strategy_interest, schedule = _run_ledger(
            debts, extra_budget=extra_budget, rollover=True, max_months=max_months
        )
        _, baseline_interest, _ = _run_ledger(
            debts, extra_budget=0.0, rollover=False, max_months=max_months
        )
    else:
        total_months, strategy_interest, baseline_interest = _estimate_rollover(
            debts, extra_budget
        )

    return SimulationResult(
        total_months_to_pay_off=total_months,
        total_interest_saved=_interest_saved(baseline_interest, strategy_interest),
        strategy_interest=strategy_interest,
        baseline_interest=baseline_interest,
        next_debt_to_focus=debts[0].liability,
        monthly_budget_distribution=_budget_distribution(debts, extra_budget),
        payment_schedule=tuple(schedule),
    )


def calculate_debt_payment_plan(
    liabilities: Iterable[Liability],
    strategy: PaymentStrategy,
    *,
    policy: MinimumPaymentPolicy | None = None,
    exact: bool = True,
    max_months: int = BaseConfig.DEFAULT_MAX_SCHEDULE_MONTHS,
) -> DebtPaymentPlan:
    """Analyze, order and simulate *liabilities* into a payment plan."""

    active = [liability for liability in liabilities if not liability.is_paid]
    analyses = [analyze_debt(liability, 0.0, policy=policy) for liability in active]
    ordered = order_debts(analyses, strategy.type, strategy.priority_order)

    # Only the focused debt gets the extra budget right now.
    prioritized = tuple(
        _with_extra(debt, strategy.monthly_extra_budget) if index == 0 else debt
        for index, debt in enumerate(ordered)
    )
    logger.debug(
        "Debt order resolved",
        extra={
            "strategy": strategy.type,
            "order": [debt.liability.id for debt in prioritized],
        },
    )

    result = simulate(prioritized, strategy, exact=exact, max_months=max_months)
    if prioritized and is_never(result.total_months_to_pay_off):
        logger.warning(
            "Payment plan never pays off",
            extra={"strategy": strategy.type, "extra_budget": strategy.monthly_extra_budget},
        )
    logger.debug(
        "Payment plan calculated",
        extra={
            "strategy": strategy.type,
            "debts": len(prioritized),
            "months": result.total_months_to_pay_off,
            "interest_saved": result.total_interest_saved,
            "exact": exact,
        },
    )

    return DebtPaymentPlan(
        strategy=strategy,
        debts=prioritized,
        total_months_to_pay_off=result.total_months_to_pay_off,
        total_interest_saved=result.total_interest_saved,
        next_debt_to_focus=result.next_debt_to_focus,
        monthly_budget_distribution=result.monthly_budget_distribution,
        payment_schedule=result.payment_schedule,
        total_interest_paid=result.strategy_interest,
        baseline_interest=result.baseline_interest,
    )


def compare_strategies(
    liabilities: Iterable[Liability],
    monthly_extra_budget: float,
    *,
    policy: MinimumPaymentPolicy | None = None,
    exact: bool = True,
    max_months: int = BaseConfig.DEFAULT_MAX_SCHEDULE_MONTHS,
) -> dict[str, DebtPaymentPlan]:
    """Return snowball and avalanche plans for the same debts and budget."""

    snapshot = list(liabilities)
    return {
        strategy_type: calculate_debt_payment_plan(
            snapshot,
            create_payment_strategy(strategy_type, monthly_extra_budget),
            policy=policy,
            exact=exact,
            max_months=max_months,
        )
        for strategy_type in ("snowball", "avalanche")
    }


def schedule_summary(schedule: Sequence[ScheduleEntry]) -> tuple[int, float, float]:
    """Return (months, total_interest, total_paid)."""

    if not schedule:
        return 0, 0.0, 0.0
    total_interest = round_cents(sum(entry.interest_paid for entry in schedule))
    return len(schedule), total_interest, schedule[-1].total_paid


__all__ = [
    "BudgetAllocation",
    "DEFAULT_POLICY",
    "DebtAnalysis",
    "DebtPayment",
    "DebtPaymentPlan",
    "MinimumPaymentPolicy",
    "PaymentStrategy",
    "STRATEGY_TYPES",
    "ScheduleEntry",
    "SimulationResult",
    "analyze_debt",
    "calculate_debt_payment_plan",
    "compare_strategies",
    "create_payment_strategy",
    "minimum_payment",
    "order_debts",
    "schedule_summary",
    "simulate",
]
