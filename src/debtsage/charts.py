"""Chart helpers for payoff projections."""

from __future__ import annotations

from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Iterable, Mapping

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker

from .config import BaseConfig
from .services.debts import DebtPaymentPlan, ScheduleEntry
from .services.recommendations import format_currency, format_months

_STRATEGY_COLORS = {"snowball": "#0EA5E9", "avalanche": "#F97316", "custom": "#8B5CF6"}


def _save(fig, output_path: Path | None) -> Path:
    if output_path is None:
        with NamedTemporaryFile(delete=False, suffix=".png") as tmp:
            fig.savefig(tmp.name, bbox_inches="tight", dpi=100)
            path = Path(tmp.name)
    else:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, bbox_inches="tight", dpi=100)
        path = output_path
    plt.close(fig)
    return path


def _currency_axis(ax, currency: str) -> None:
    ax.yaxis.set_major_formatter(
        mticker.FuncFormatter(lambda x, p: format_currency(x, currency=currency))
    )
    ax.set_ylabel(f"Remaining Balance ({currency.upper()})", fontsize=11)


def debt_payoff_chart_png(
    schedule: Iterable[ScheduleEntry],
    *,
    output_path: Path | None = None,
    currency: str = BaseConfig.DEFAULT_CURRENCY,
) -> Path:
    """Render the remaining-balance curve of a payoff schedule."""

    entries = list(schedule)
    fig, ax = plt.subplots(figsize=(10, 6))

    if not entries:
        ax.text(0.5, 0.5, "No payoff schedule", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")
        return _save(fig, output_path)

    starting_debt = entries[0].remaining_debt + entries[0].total_paid - entries[0].interest_paid
    months = [0] + [entry.month for entry in entries]
    totals = [starting_debt] + [entry.remaining_debt for entry in entries]

    ax.plot(months, totals, marker="o", color="#4F46E5", linewidth=2.5, markersize=4)
    ax.fill_between(months, totals, color="#E0E7FF", alpha=0.5)

    if starting_debt > 0:
        for share, label, color in ((0.5, "50% Paid!", "#22C55E"), (0.25, "75% Paid!", "#16A34A")):
            threshold = starting_debt * share
            for month, total in zip(months, totals):
                if total <= threshold:
                    ax.axvline(x=month, color=color, linestyle="--", alpha=0.6, linewidth=1.5)
                    ax.annotate(label, (month, total), xytext=(10, 25), textcoords="offset points",
                                fontsize=9, color=color, fontweight="bold")
                    break

    if totals[-1] < 1:
        ax.scatter([months[-1]], [0], s=200, c="gold", marker="*", zorder=5, edgecolors="#F59E0B")
        ax.annotate("DEBT FREE!", (months[-1], 0), xytext=(0, 25), textcoords="offset points",
                    ha="center", fontsize=12, fontweight="bold", color="#16A34A")

    ax.grid(True, linestyle="--", alpha=0.3)
    ax.set_axisbelow(True)
    ax.set_title("Debt Payoff Projection", fontsize=14, fontweight="bold", pad=15)
    ax.set_xlabel("Month", fontsize=11)
    _currency_axis(ax, currency)

    interest = sum(entry.interest_paid for entry in entries)
    textstr = (
        f"Starting Debt: {format_currency(starting_debt, currency=currency)}\n"
        f"Months to Payoff: {len(entries)}\n"
        f"Interest Paid: {format_currency(interest, currency=currency)}"
    )
    props = dict(boxstyle="round", facecolor="lavender", alpha=0.8)
    ax.text(0.98, 0.98, textstr, transform=ax.transAxes, fontsize=9,
            verticalalignment="top", horizontalalignment="right", bbox=props)

    plt.tight_layout()
    return _save(fig, output_path)


def strategy_comparison_png(
    plans: Mapping[str, DebtPaymentPlan],
    *,
    output_path: Path | None = None,
    currency: str = BaseConfig.DEFAULT_CURRENCY,
) -> Path:
    """Overlay remaining-balance curves for several plans."""

    fig, ax = plt.subplots(figsize=(10, 6))
    drawn = 0
    for strategy_type, plan in plans.items():
        if not plan.payment_schedule:
            continue
        first = plan.payment_schedule[0]
        start = first.remaining_debt + first.total_paid - first.interest_paid
        months = [0] + [entry.month for entry in plan.payment_schedule]
        totals = [start] + [entry.remaining_debt for entry in plan.payment_schedule]
        label = f"{plan.strategy.name} ({format_months(plan.total_months_to_pay_off)})"
        ax.plot(months, totals, linewidth=2.5, label=label,
                color=_STRATEGY_COLORS.get(strategy_type, "#64748B"))
        drawn += 1

    if not drawn:
        ax.text(0.5, 0.5, "No payoff schedule", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")
        return _save(fig, output_path)

    ax.grid(True, linestyle="--", alpha=0.3)
    ax.set_axisbelow(True)
    ax.set_title("Strategy Comparison", fontsize=14, fontweight="bold", pad=15)
    ax.set_xlabel("Month", fontsize=11)
    _currency_axis(ax, currency)
    ax.legend(loc="upper right", framealpha=0.9)

    plt.tight_layout()
    return _save(fig, output_path)
