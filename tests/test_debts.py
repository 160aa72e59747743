"""Debt analyzer and strategy ordering tests."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from debtsage.models import Liability
from debtsage.services.debts import (
    MinimumPaymentPolicy,
    PaymentStrategy,
    analyze_debt,
    create_payment_strategy,
    minimum_payment,
    order_debts,
)


class TestMinimumPayment:
    """Tests for the minimum payment policy."""

    def test_contractual_payment_wins(self, liability_factory):
        """A stated monthly payment is returned unchanged."""
        debt = liability_factory(5000.0, monthly_payment=80.0)
        assert minimum_payment(debt) == 80.0

    def test_small_balance_uses_floor(self, liability_factory):
        """2% of 1000 is 20, below the $25 floor."""
        assert minimum_payment(liability_factory(1000.0)) == 25.0

    def test_large_balance_uses_percentage(self, liability_factory):
        assert minimum_payment(liability_factory(5000.0)) == 100.0

    def test_zero_contractual_payment_is_derived(self, liability_factory):
        """A zero payment on record is treated as missing."""
        assert minimum_payment(liability_factory(5000.0, monthly_payment=0.0)) == 100.0

    def test_custom_policy(self, liability_factory):
        policy = MinimumPaymentPolicy(rate=0.03, floor=50.0)

        assert minimum_payment(liability_factory(1000.0), policy) == 50.0
        assert minimum_payment(liability_factory(5000.0), policy) == 150.0
        assert minimum_payment(liability_factory(5000.0, monthly_payment=60.0), policy) == 60.0


class TestAnalyzeDebt:
    """Tests for per-debt analysis in isolation."""

    def test_interest_free_debt_without_payment_on_record(self, liability_factory):
        """1000 at 0% gets a $25 minimum and takes 40 months with no interest."""
        analysis = analyze_debt(liability_factory(1000.0))

        assert analysis.minimum_payment == 25.0
        assert analysis.suggested_payment == 25.0
        assert analysis.months_to_pay_off == 40
        assert analysis.total_interest_paid == 0.0
        assert analysis.priority == 0

    def test_extra_payment_is_added(self, liability_factory):
        analysis = analyze_debt(liability_factory(1000.0), 25.0)

        assert analysis.suggested_payment == 50.0
        assert analysis.months_to_pay_off == 20

    def test_interest_bearing_debt(self, liability_factory):
        """5000 at 18% paying 150/mo takes 47 months."""
        analysis = analyze_debt(liability_factory(5000.0, interest_rate=18.0, monthly_payment=150.0))

        assert analysis.months_to_pay_off == 47
        assert analysis.total_interest_paid == pytest.approx(2050.0)

    def test_non_convergent_debt_uses_sentinel(self, liability_factory):
        analysis = analyze_debt(liability_factory(1000.0, interest_rate=24.0, monthly_payment=15.0))

        assert analysis.months_to_pay_off == float("inf")
        assert analysis.total_interest_paid == float("inf")

    def test_analysis_is_deterministic(self, liability_factory):
        """Repeated calls with the same inputs produce identical results."""
        debt = liability_factory(3200.0, interest_rate=21.5, monthly_payment=95.0)

        assert analyze_debt(debt, 40.0) == analyze_debt(debt, 40.0)


class TestOrderDebts:
    """Tests for snowball, avalanche and custom ordering."""

    @pytest.fixture
    def analyses(self, liability_factory):
        return [
            analyze_debt(liability_factory(500.0, id="a", interest_rate=5.0)),
            analyze_debt(liability_factory(100.0, id="b", interest_rate=20.0)),
            analyze_debt(liability_factory(2000.0, id="c", interest_rate=12.0)),
        ]

    def test_snowball_orders_by_balance(self, analyses):
        """Verify snowball puts the smallest balance first."""
        ordered = order_debts(analyses, "snowball")

        assert [d.liability.amount for d in ordered] == [100.0, 500.0, 2000.0]
        assert [d.priority for d in ordered] == [1, 2, 3]

    def test_avalanche_orders_by_rate(self, analyses):
        """Verify avalanche puts the highest rate first regardless of balance."""
        ordered = order_debts(analyses, "avalanche")

        assert [d.liability.rate for d in ordered] == [20.0, 12.0, 5.0]
        assert ordered[0].liability.id == "b"

    def test_missing_rate_sorts_as_zero(self, liability_factory):
        analyses = [
            analyze_debt(liability_factory(100.0, id="no-rate")),
            analyze_debt(liability_factory(100.0, id="rated", interest_rate=3.0)),
        ]

        ordered = order_debts(analyses, "avalanche")

        assert [d.liability.id for d in ordered] == ["rated", "no-rate"]

    @pytest.mark.parametrize("strategy_type", ["snowball", "avalanche"])
    def test_ties_keep_input_order(self, liability_factory, strategy_type):
        """Equal keys are never reordered between runs."""
        first = analyze_debt(liability_factory(300.0, id="first", interest_rate=9.0))
        second = analyze_debt(liability_factory(300.0, id="second", interest_rate=9.0))

        forward = order_debts([first, second], strategy_type)
        backward = order_debts([second, first], strategy_type)

        assert [d.liability.id for d in forward] == ["first", "second"]
        assert [d.liability.id for d in backward] == ["second", "first"]

    def test_custom_order_is_respected(self, analyses):
        ordered = order_debts(analyses, "custom", ["c", "a", "b"])

        assert [d.liability.id for d in ordered] == ["c", "a", "b"]
        assert [d.priority for d in ordered] == [1, 2, 3]

    def test_custom_order_appends_unlisted_and_skips_unknown(self, analyses):
        ordered = order_debts(analyses, "custom", ["zzz", "c"])

        assert [d.liability.id for d in ordered] == ["c", "a", "b"]

    def test_ordering_returns_new_objects(self, analyses):
        """Priorities are set on copies; the caller's analyses stay untouched."""
        ordered = order_debts(analyses, "snowball")

        assert ordered is not analyses
        assert all(d.priority == 0 for d in analyses)

    def test_unknown_strategy_raises(self, analyses):
        with pytest.raises(ValueError):
            order_debts(analyses, "random")


class TestPaymentStrategy:
    """Tests for strategy construction."""

    def test_create_payment_strategy_fills_copy(self):
        strategy = create_payment_strategy("avalanche", 150)

        assert strategy.type == "avalanche"
        assert strategy.name == "Avalanche"
        assert strategy.description
        assert strategy.monthly_extra_budget == 150.0
        assert strategy.priority_order == ()

    def test_custom_strategy_keeps_order(self):
        strategy = create_payment_strategy("custom", 0, ["x", "y"])

        assert strategy.priority_order == ("x", "y")

    def test_negative_budget_is_rejected(self):
        with pytest.raises(ValueError):
            PaymentStrategy(type="snowball", name="Snowball", description="", monthly_extra_budget=-1)

    def test_invalid_type_is_rejected(self):
        with pytest.raises(ValueError):
            create_payment_strategy("hybrid", 100)


def test_liability_defaults():
    """Optional fields resolve to documented defaults."""
    debt = Liability(id="x", name="Card", amount=400.0)

    assert debt.rate == 0.0
    assert debt.starting_amount == 400.0
    assert debt.type.value == "other"
    assert not debt.is_paid
    assert Liability(id="y", name="Paid", amount=0.0).is_paid
    assert Liability(id="z", name="Overpaid", amount=-5.0).is_paid


@pytest.mark.parametrize("field", ["amount", "original_amount", "interest_rate", "monthly_payment"])
@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_liability_rejects_non_finite_numbers(field, value):
    """NaN and infinity are rejected before they reach the payoff math."""
    data = {"id": "x", "name": "Card", "amount": 400.0, field: value}

    with pytest.raises(ValidationError):
        Liability.model_validate(data)
