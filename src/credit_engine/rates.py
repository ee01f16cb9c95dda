"""Interest and insurance rate conversions on the 30/360 day-count basis.

Rates are Decimal fractions (0.08 = 8 %). None of these functions validate
their input: they are plain arithmetic and preserve the sign of the rate.
"""
from __future__ import annotations

from decimal import Decimal

from .config import (
    CAPITALIZATION_PERIODS,
    DAYS_PER_MONTH,
    DAYS_PER_YEAR,
    DEFAULT_CAPITALIZATION_PERIODS,
)

_PERIOD_FRACTION = Decimal(DAYS_PER_MONTH) / Decimal(DAYS_PER_YEAR)


def capitalization_periods(capitalization: str | None) -> int:
    """Compounding periods per year; unknown values fall back to monthly."""
    return CAPITALIZATION_PERIODS.get(capitalization or "", DEFAULT_CAPITALIZATION_PERIODS)


def nominal_to_effective(nominal_rate: Decimal, capitalization: str | None) -> Decimal:
    """TEA = (1 + j/m)^m - 1, with m the compounding periods per year."""
    m = capitalization_periods(capitalization)
    return (1 + nominal_rate / Decimal(m)) ** m - 1


def effective_to_nominal(effective_rate: Decimal, capitalization: str | None) -> Decimal:
    """Inverse of :func:`nominal_to_effective`: j = m * ((1 + TEA)^(1/m) - 1)."""
    m = capitalization_periods(capitalization)
    return Decimal(m) * ((1 + effective_rate) ** (Decimal(1) / Decimal(m)) - 1)


def effective_to_monthly_30(effective_rate: Decimal) -> Decimal:
    """Effective rate of a 30-day period: (1 + TEA)^(30/360) - 1."""
    return (1 + effective_rate) ** _PERIOD_FRACTION - 1


def annual_insurance_to_monthly(insurance_rate: Decimal) -> Decimal:
    """Prorate an annual insurance rate linearly to a 30-day period."""
    return insurance_rate * Decimal(DAYS_PER_MONTH) / Decimal(DAYS_PER_YEAR)


def annualize_period_rate(period_rate: float) -> float:
    """Compound a 30-day period rate to a 360-day year: (1 + i)^(360/30) - 1."""
    return (1 + period_rate) ** (DAYS_PER_YEAR / DAYS_PER_MONTH) - 1
