"""DebtSage debt payoff planning engine."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .models import Liability, LiabilityType
from .services.amortization import NEVER_PAID_OFF
from .services.debts import (
    DebtPaymentPlan,
    PaymentStrategy,
    calculate_debt_payment_plan,
    create_payment_strategy,
)

__all__ = [
    "BaseConfig",
    "DebtPaymentPlan",
    "DevConfig",
    "Liability",
    "LiabilityType",
    "NEVER_PAID_OFF",
    "PaymentStrategy",
    "calculate_debt_payment_plan",
    "create_payment_strategy",
]
