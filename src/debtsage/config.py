"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

if TYPE_CHECKING:
    from .services.debts import MinimumPaymentPolicy

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float, *, minimum: float = 0.0) -> float:
    """Read a non-negative float from the environment."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}.") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}.")
    return value


def _env_int(name: str, default: int, *, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}.")
    return value


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "DebtSage"
    ENV_PREFIX = "DEBTSAGE_"
    DEFAULT_CURRENCY = "USD"
    # Revolving-credit convention: 2% of the balance with a $25 floor.
    DEFAULT_MIN_PAYMENT_RATE = 0.02
    DEFAULT_MIN_PAYMENT_FLOOR = 25.0
    DEFAULT_HIGH_INTEREST_THRESHOLD = 10.0
    DEFAULT_QUICK_WIN_SHARE = 0.2
    DEFAULT_MAX_SCHEDULE_MONTHS = 1200

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool(self._key("DEV_MODE"), default=True)
        self.CURRENCY = (os.getenv(self._key("CURRENCY")) or self.DEFAULT_CURRENCY).upper()
        self.MIN_PAYMENT_RATE = _env_float(
            self._key("MIN_PAYMENT_RATE"), self.DEFAULT_MIN_PAYMENT_RATE
        )
        self.MIN_PAYMENT_FLOOR = _env_float(
            self._key("MIN_PAYMENT_FLOOR"), self.DEFAULT_MIN_PAYMENT_FLOOR
        )
        self.HIGH_INTEREST_THRESHOLD = _env_float(
            self._key("HIGH_INTEREST_THRESHOLD"), self.DEFAULT_HIGH_INTEREST_THRESHOLD
        )
        self.QUICK_WIN_SHARE = _env_float(
            self._key("QUICK_WIN_SHARE"), self.DEFAULT_QUICK_WIN_SHARE
        )
        self.MAX_SCHEDULE_MONTHS = _env_int(
            self._key("MAX_SCHEDULE_MONTHS"), self.DEFAULT_MAX_SCHEDULE_MONTHS
        )
        if self.MIN_PAYMENT_RATE == 0 and self.MIN_PAYMENT_FLOOR == 0:
            raise ValueError(
                "DEBTSAGE_MIN_PAYMENT_RATE and DEBTSAGE_MIN_PAYMENT_FLOOR cannot both be zero."
            )

    @classmethod
    def _key(cls, name: str) -> str:
        return f"{cls.ENV_PREFIX}{name}"

    def _resolve_data_dir(self) -> Path:
        """Return the directory where logs and exports are written."""

        data_root = os.getenv(self._key("DATA_DIR"), "instance")
        return Path(data_root).expanduser().resolve()

    def minimum_payment_policy(self) -> MinimumPaymentPolicy:
        """Build the minimum-payment policy described by this configuration."""

        # Imported lazily; services import config for their defaults.
        from .services.debts import MinimumPaymentPolicy

        return MinimumPaymentPolicy(rate=self.MIN_PAYMENT_RATE, floor=self.MIN_PAYMENT_FLOOR)


class DevConfig(BaseConfig):
    """Development configuration with verbose console logging."""

    DEBUG = True
    TESTING = False


class TestingConfig(BaseConfig):
    """Configuration used by the test-suite."""

    DEBUG = False
    TESTING = True
