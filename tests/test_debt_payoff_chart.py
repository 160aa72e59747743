from pathlib import Path

from debtsage.charts import debt_payoff_chart_png, strategy_comparison_png
from debtsage.services.debts import (
    calculate_debt_payment_plan,
    compare_strategies,
    create_payment_strategy,
)


def _debts(factory):
    return [
        factory(800.0, interest_rate=19.0, monthly_payment=60.0),
        factory(450.0, interest_rate=7.0, monthly_payment=40.0),
    ]


def test_debt_payoff_chart_creates_image(tmp_path: Path, liability_factory) -> None:
    plan = calculate_debt_payment_plan(
        _debts(liability_factory), create_payment_strategy("snowball", 150)
    )

    chart_path = debt_payoff_chart_png(plan.payment_schedule)

    assert chart_path.exists()
    assert chart_path.suffix == ".png"
    # Ensure we can move the file (mimicking export behavior)
    target = tmp_path / "out.png"
    target.write_bytes(chart_path.read_bytes())


def test_debt_payoff_chart_writes_requested_path(tmp_path: Path, liability_factory) -> None:
    plan = calculate_debt_payment_plan(
        _debts(liability_factory), create_payment_strategy("avalanche")
    )
    output_path = tmp_path / "charts" / "payoff.png"

    assert debt_payoff_chart_png(plan.payment_schedule, output_path=output_path) == output_path
    assert output_path.stat().st_size > 0


def test_empty_schedule_still_renders(tmp_path: Path) -> None:
    output_path = tmp_path / "empty.png"

    debt_payoff_chart_png([], output_path=output_path)

    assert output_path.exists()


def test_strategy_comparison_chart(tmp_path: Path, liability_factory) -> None:
    plans = compare_strategies(_debts(liability_factory), 100)
    output_path = tmp_path / "compare.png"

    assert strategy_comparison_png(plans, output_path=output_path).exists()
    assert strategy_comparison_png({}, output_path=tmp_path / "none.png").exists()


def test_chart_axis_uses_configured_currency() -> None:
    import matplotlib.pyplot as plt

    from debtsage.charts import _currency_axis

    fig, ax = plt.subplots()
    _currency_axis(ax, "EUR")

    assert ax.yaxis.get_major_formatter()(1500, 0) == "€1,500.00"
    assert ax.get_ylabel() == "Remaining Balance (EUR)"
    plt.close(fig)


def test_chart_accepts_currency(tmp_path: Path, liability_factory) -> None:
    plan = calculate_debt_payment_plan(
        _debts(liability_factory), create_payment_strategy("snowball", 50)
    )
    output_path = tmp_path / "gbp.png"

    debt_payoff_chart_png(plan.payment_schedule, output_path=output_path, currency="GBP")

    assert output_path.exists()
