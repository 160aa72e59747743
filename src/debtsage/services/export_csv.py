"""CSV export helpers for payoff schedules."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from .debts import ScheduleEntry

BASE_HEADERS = ["month", "total_paid", "remaining_debt", "interest_paid"]


def _serialize_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def export_schedule_csv(
    *,
    schedule: Iterable[ScheduleEntry],
    output_path: Path,
    include_debts: bool = True,
) -> Path:
    """Write a payoff schedule to CSV at `output_path`.

    Columns are deterministic: month, total_paid, remaining_debt,
    interest_paid, then (with ``include_debts``) one ``payment_<id>`` and
    ``balance_<id>`` pair per debt in first-seen order. Returns the path
    written.
    """

    entries = list(schedule)
    debt_ids: list[str] = []
    if include_debts:
        for entry in entries:
            for debt_id in entry.payments:
                if debt_id not in debt_ids:
                    debt_ids.append(debt_id)

    headers = list(BASE_HEADERS)
    for debt_id in debt_ids:
        headers.extend([f"payment_{debt_id}", f"balance_{debt_id}"])

    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=headers, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for entry in entries:
            row = {
                "month": _serialize_value(entry.month),
                "total_paid": _serialize_value(entry.total_paid),
                "remaining_debt": _serialize_value(entry.remaining_debt),
                "interest_paid": _serialize_value(entry.interest_paid),
            }
            for debt_id in debt_ids:
                payment = entry.payments.get(debt_id)
                # Retired debts no longer appear in later months.
                row[f"payment_{debt_id}"] = _serialize_value(payment.payment if payment else 0.0)
                row[f"balance_{debt_id}"] = _serialize_value(
                    payment.remaining_balance if payment else 0.0
                )
            writer.writerow(row)

    return output_path
