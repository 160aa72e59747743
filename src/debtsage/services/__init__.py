"""Service module exports."""

from . import amortization, debts, export_csv, recommendations

__all__ = [
    "amortization",
    "debts",
    "export_csv",
    "recommendations",
]
