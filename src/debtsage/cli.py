"""Command line front end for DebtSage."""

from __future__ import annotations

import json
from pathlib import Path

import click
from pydantic import ValidationError

from .config import BaseConfig
from .logging_config import get_logger, setup_logging
from .models.liability import Liability
from .services.debts import (
    STRATEGY_TYPES,
    DebtPaymentPlan,
    calculate_debt_payment_plan,
    compare_strategies,
    create_payment_strategy,
)
from .services.recommendations import (
    format_currency,
    format_months,
    motivational_message,
    overall_progress,
    recommend_next_debt_to_pay,
)

logger = get_logger(__name__)

# Accept the camelCase keys used by the web client's exports.
_KEY_ALIASES = {
    "originalAmount": "original_amount",
    "interestRate": "interest_rate",
    "monthlyPayment": "monthly_payment",
}


def load_liabilities(path: Path) -> list[Liability]:
    """Read liabilities from a JSON list (or ``{"liabilities": [...]}``)."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{path} is not valid JSON: {exc}") from exc
    if isinstance(payload, dict):
        payload = payload.get("liabilities", [])
    if not isinstance(payload, list):
        raise click.ClickException(f"{path} must contain a list of liabilities.")

    liabilities = []
    for index, raw in enumerate(payload):
        if not isinstance(raw, dict):
            raise click.ClickException(f"Liability #{index + 1} must be an object.")
        data = {_KEY_ALIASES.get(key, key): value for key, value in raw.items()}
        data.setdefault("id", str(index + 1))
        try:
            liabilities.append(Liability.model_validate(data))
        except ValidationError as exc:
            raise click.ClickException(f"Liability #{index + 1} is invalid: {exc}") from exc
    return liabilities


def _echo_plan(plan: DebtPaymentPlan, *, currency: str) -> None:
    click.echo(f"Strategy: {plan.strategy.name}")
    click.echo(f"Debt free in: {format_months(plan.total_months_to_pay_off)}")
    click.echo(f"Interest paid: {format_currency(plan.total_interest_paid, currency=currency)}")
    click.echo(f"Interest saved: {format_currency(plan.total_interest_saved, currency=currency)}")
    if plan.next_debt_to_focus is not None:
        click.echo(f"Focus on: {plan.next_debt_to_focus.name}")
    for debt, allocation in zip(plan.debts, plan.monthly_budget_distribution):
        click.echo(
            f"  {debt.priority}. {debt.liability.name}: "
            f"{format_currency(allocation.amount, currency=currency)} ({allocation.type})"
        )


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Plan debt payoff with snowball, avalanche or custom ordering."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = config


@cli.command("plan")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--strategy",
    "strategy_type",
    type=click.Choice(STRATEGY_TYPES),
    default="snowball",
    show_default=True,
)
@click.option("--extra", type=click.FloatRange(min=0), default=0.0, show_default=True,
              help="Monthly budget on top of minimum payments.")
@click.option("--order", "priority_order", multiple=True,
              help="Debt ID in payoff order (repeat; custom strategy only).")
@click.option("--approximate", is_flag=True, default=False,
              help="Use the closed-form estimate instead of the monthly ledger.")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Write the monthly schedule to this CSV file.")
@click.option("--chart", "chart_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Write a payoff chart PNG to this path.")
@click.pass_obj
def plan_command(
    config: BaseConfig,
    path: Path,
    strategy_type: str,
    extra: float,
    priority_order: tuple[str, ...],
    approximate: bool,
    csv_path: Path | None,
    chart_path: Path | None,
) -> None:
    """Build a payment plan for the liabilities in PATH."""

    liabilities = load_liabilities(path)
    strategy = create_payment_strategy(strategy_type, extra, priority_order)
    plan = calculate_debt_payment_plan(
        liabilities,
        strategy,
        policy=config.minimum_payment_policy(),
        exact=not approximate,
        max_months=config.MAX_SCHEDULE_MONTHS,
    )
    logger.info("Plan built from %s", path, extra={"strategy": strategy_type, "debts": len(plan.debts)})

    _echo_plan(plan, currency=config.CURRENCY)
    click.echo(motivational_message(strategy.type, overall_progress(liabilities)))

    if csv_path is not None:
        from .services.export_csv import export_schedule_csv

        export_schedule_csv(schedule=plan.payment_schedule, output_path=csv_path)
        click.echo(f"Schedule written: {csv_path}")
    if chart_path is not None:
        from .charts import debt_payoff_chart_png

        debt_payoff_chart_png(
            plan.payment_schedule, output_path=chart_path, currency=config.CURRENCY
        )
        click.echo(f"Chart written: {chart_path}")


@cli.command("compare")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--extra", type=click.FloatRange(min=0), default=0.0, show_default=True)
@click.pass_obj
def compare_command(config: BaseConfig, path: Path, extra: float) -> None:
    """Compare snowball and avalanche for the liabilities in PATH."""

    liabilities = load_liabilities(path)
    plans = compare_strategies(
        liabilities,
        extra,
        policy=config.minimum_payment_policy(),
        max_months=config.MAX_SCHEDULE_MONTHS,
    )
    for plan in plans.values():
        _echo_plan(plan, currency=config.CURRENCY)
        click.echo("")

    recommendation = recommend_next_debt_to_pay(
        liabilities,
        quick_win_share=config.QUICK_WIN_SHARE,
        high_interest_threshold=config.HIGH_INTEREST_THRESHOLD,
    )
    if recommendation is not None:
        click.echo(f"Recommended next: {recommendation.debt.name} - {recommendation.message}")


def main() -> None:  # pragma: no cover - console entry point
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
