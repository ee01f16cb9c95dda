"""Application-wide constants and configuration defaults.

All tuneable defaults live here so there is a single place to adjust them.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Literal

# ── Type aliases ──────────────────────────────────────────────────────────────

RateType = Literal["nominal", "effective"]
Capitalization = Literal["monthly", "bimonthly", "quarterly", "semiannual", "annual"]
GraceType = Literal["none", "total", "partial"]
Currency = Literal["PEN", "USD"]

VALID_RATE_TYPES: frozenset[str] = frozenset({"nominal", "effective"})
VALID_GRACE_TYPES: frozenset[str] = frozenset({"none", "total", "partial"})
VALID_CURRENCIES: frozenset[str] = frozenset({"PEN", "USD"})

# ── Day-count convention (360-day commercial year) ────────────────────────────

DAYS_PER_MONTH: int = 30
DAYS_PER_YEAR: int = 360
MONTHS_PER_YEAR: int = 12

# Compounding periods per year for nominal rates
CAPITALIZATION_PERIODS: dict[str, int] = {
    "monthly": 12,
    "bimonthly": 6,
    "quarterly": 4,
    "semiannual": 2,
    "annual": 1,
}
DEFAULT_CAPITALIZATION_PERIODS: int = 12
VALID_CAPITALIZATIONS: frozenset[str] = frozenset(CAPITALIZATION_PERIODS)

# ── Schedule ──────────────────────────────────────────────────────────────────

PAYOFF_THRESHOLD = Decimal("0.01")  # balances at or below this are treated as paid

# ── IRR solver (Newton-Raphson, multi-start) ─────────────────────────────────

IRR_INITIAL_GUESSES: tuple[float, ...] = (0.01, 0.05, 0.1, 0.2, 0.5)
IRR_MAX_ITERATIONS: int = 100
IRR_TOLERANCE: float = 1e-7

IRR_PERIOD_RATE_BOUNDS: tuple[float, float] = (-0.99, 10.0)
TIR_ANNUAL_BOUNDS: tuple[float, float] = (-1.0, 10.0)
TCEA_ANNUAL_BOUNDS: tuple[float, float] = (-0.5, 10.0)

# ── CLI defaults (simulation form) ───────────────────────────────────────────

DEFAULT_RATE_TYPE: RateType = "effective"
DEFAULT_ANNUAL_RATE = Decimal("0.08")
DEFAULT_CAPITALIZATION: Capitalization = "monthly"
DEFAULT_TERM_YEARS: int = 20
DEFAULT_INSURANCE_RATE = Decimal("0.0005")
DEFAULT_CURRENCY: Currency = "PEN"

# ── Numeric convenience ───────────────────────────────────────────────────────

ZERO = Decimal("0")
CENT = Decimal("0.01")
RATE_QUANTUM = Decimal("0.000001")
