"""Debt and liability entities."""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from pydantic import field_validator
from sqlmodel import Field, SQLModel


class LiabilityType(str, Enum):
    """Descriptive debt category; does not affect payoff math."""

    CREDIT_CARD = "credit_card"
    LOAN = "loan"
    MORTGAGE = "mortgage"
    STUDENT_LOAN = "student_loan"
    OTHER = "other"


class Liability(SQLModel):
    """Outstanding debt snapshot handed to the payoff engine.

    ``amount`` is the live balance. Anything at or below zero counts as paid
    and drops out of active planning instead of being rejected.
    """

    id: str = Field(min_length=1)
    name: str = Field(max_length=80)
    amount: float
    original_amount: Optional[float] = Field(default=None, ge=0)
    interest_rate: Optional[float] = Field(default=None, ge=0)  # annual percent, 18 == 18%
    monthly_payment: Optional[float] = Field(default=None)
    type: LiabilityType = Field(default=LiabilityType.OTHER)

    @field_validator("amount", "original_amount", "interest_rate", "monthly_payment")
    @classmethod
    def require_finite(cls, value: Optional[float]) -> Optional[float]:
        # Payoff math assumes finite inputs.
        if value is not None and not math.isfinite(value):
            raise ValueError("must be a finite number")
        return value

    @property
    def rate(self) -> float:
        """Annual percentage rate with a missing value read as interest-free."""

        return float(self.interest_rate or 0.0)

    @property
    def is_paid(self) -> bool:
        return self.amount <= 0

    @property
    def starting_amount(self) -> float:
        """Original balance, falling back to the live balance."""

        if self.original_amount is None:
            return self.amount
        return self.original_amount
