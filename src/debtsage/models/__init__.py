"""Domain entities consumed by the payoff engine."""

from .liability import Liability, LiabilityType

__all__ = ["Liability", "LiabilityType"]
