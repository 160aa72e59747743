"""Pytest configuration and shared fixtures for DebtSage tests.

Provides liability factories, an isolated configuration environment and
helpers for comparing currency amounts.
"""

from __future__ import annotations

import logging
from itertools import count

import pytest

from debtsage.models import Liability

_ids = count(1)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Point configuration at a throwaway data dir and clear overrides."""

    for name in (
        "DEBTSAGE_CURRENCY",
        "DEBTSAGE_MIN_PAYMENT_RATE",
        "DEBTSAGE_MIN_PAYMENT_FLOOR",
        "DEBTSAGE_HIGH_INTEREST_THRESHOLD",
        "DEBTSAGE_QUICK_WIN_SHARE",
        "DEBTSAGE_MAX_SCHEDULE_MONTHS",
        "DEBTSAGE_DEV_MODE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DEBTSAGE_DATA_DIR", str(tmp_path / "data"))
    yield


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging between tests."""

    yield
    logger = logging.getLogger("debtsage")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def liability_factory():
    """Build liabilities with sensible defaults and unique ids."""

    def _create_liability(
        amount: float,
        *,
        id: str | None = None,
        name: str | None = None,
        interest_rate: float | None = None,
        monthly_payment: float | None = None,
        original_amount: float | None = None,
        type: str = "other",
    ) -> Liability:
        debt_id = id or f"debt-{next(_ids)}"
        return Liability(
            id=debt_id,
            name=name or f"Debt {debt_id}",
            amount=amount,
            interest_rate=interest_rate,
            monthly_payment=monthly_payment,
            original_amount=original_amount,
            type=type,
        )

    return _create_liability


# =============================================================================
# Helper Functions
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    assert abs(actual - expected) <= tolerance, (
        f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
    )
