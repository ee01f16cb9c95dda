"""Loan parameters and input validation.

The engine itself never raises on numeric edge cases; structurally invalid
inputs are rejected here, before any schedule is built.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from .config import (
    MONTHS_PER_YEAR,
    VALID_CAPITALIZATIONS,
    VALID_GRACE_TYPES,
    VALID_RATE_TYPES,
    ZERO,
    Capitalization,
    GraceType,
    RateType,
)


class InvalidLoanParameters(ValueError):
    """Raised when loan parameters cannot describe a valid credit."""


@dataclass(frozen=True)
class LoanParameters:
    loan_amount: Decimal
    annual_interest_rate: Decimal  # fraction, e.g. 0.08
    interest_rate_type: RateType = "effective"
    capitalization: Optional[Capitalization] = None  # nominal rates only
    loan_term_years: int = 20
    grace_period_type: GraceType = "none"
    grace_period_months: int = 0
    insurance_rate: Decimal = ZERO  # annual fraction, prorated per 30 days
    start_date: date = field(default_factory=date.today)

    @property
    def total_periods(self) -> int:
        return self.loan_term_years * MONTHS_PER_YEAR


def validate_parameters(params: LoanParameters) -> None:
    """Raise InvalidLoanParameters if *params* cannot produce a schedule."""
    # NaN would raise InvalidOperation on the comparisons below
    for name in ("loan_amount", "annual_interest_rate", "insurance_rate"):
        if not getattr(params, name).is_finite():
            raise InvalidLoanParameters(f"{name} must be a finite number")

    if params.loan_amount <= ZERO:
        raise InvalidLoanParameters("loan_amount must be > 0")
    if params.loan_term_years < 1:
        raise InvalidLoanParameters("loan_term_years must be >= 1")
    if params.annual_interest_rate < ZERO:
        raise InvalidLoanParameters("annual_interest_rate must be >= 0")
    if params.insurance_rate < ZERO:
        raise InvalidLoanParameters("insurance_rate must be >= 0")

    if params.interest_rate_type not in VALID_RATE_TYPES:
        raise InvalidLoanParameters(
            f"Unknown interest_rate_type '{params.interest_rate_type}'"
        )
    if params.interest_rate_type == "nominal" and params.capitalization not in VALID_CAPITALIZATIONS:
        raise InvalidLoanParameters(
            f"A nominal rate needs a capitalization "
            f"({', '.join(sorted(VALID_CAPITALIZATIONS))}), got {params.capitalization!r}"
        )

    if params.grace_period_type not in VALID_GRACE_TYPES:
        raise InvalidLoanParameters(
            f"Unknown grace_period_type '{params.grace_period_type}'"
        )
    if params.grace_period_months < 0:
        raise InvalidLoanParameters("grace_period_months must be >= 0")
    if params.grace_period_type == "none" and params.grace_period_months != 0:
        raise InvalidLoanParameters(
            "grace_period_months must be 0 when grace_period_type is 'none'"
        )
    if params.grace_period_months >= params.total_periods:
        raise InvalidLoanParameters(
            f"grace_period_months ({params.grace_period_months}) must be lower than "
            f"the loan term ({params.total_periods} months)"
        )


def financed_amount(
    property_price: Decimal,
    initial_payment: Decimal = ZERO,
    bonus: Decimal = ZERO,
) -> Decimal:
    """Loan amount = property price - initial payment - housing bonus."""
    amount = property_price - initial_payment - bonus
    if not amount.is_finite():
        raise InvalidLoanParameters(
            f"Financed amount must be a finite number (price {property_price}, "
            f"initial payment {initial_payment}, bonus {bonus})"
        )
    if amount <= ZERO:
        raise InvalidLoanParameters(
            f"Financed amount must be > 0 (price {property_price}, "
            f"initial payment {initial_payment}, bonus {bonus})"
        )
    return amount
