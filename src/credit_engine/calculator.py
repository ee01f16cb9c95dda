"""Credit amortization entry point.

All monetary values use decimal.Decimal.
Rounding: ROUND_HALF_UP to 2 decimal places for amounts and 6 for rates,
full precision for all intermediate steps.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from .config import CENT, ZERO
from .indicators import compute_indicators
from .parameters import LoanParameters, validate_parameters
from .rates import annual_insurance_to_monthly, effective_to_monthly_30, nominal_to_effective
from .schedule import PaymentPeriod, build_schedule, capitalized_balance, fixed_installment


@dataclass(frozen=True)
class CalculationResult:
    payment_schedule: list[PaymentPeriod]
    tea: Decimal
    tcea: Decimal
    van: Decimal
    tir: Decimal
    # Derived totals
    monthly_rate: Decimal
    monthly_insurance_rate: Decimal
    fixed_installment: Decimal      # principal + interest, amortizing periods
    total_interest: Decimal         # interest actually paid (not capitalized)
    total_insurance: Decimal
    total_paid: Decimal
    grace_periods: int

    def to_record(self) -> dict[str, object]:
        """Summary rates plus schedule rows, keyed the way they are stored."""
        return {
            "tea": self.tea,
            "tcea": self.tcea,
            "van": self.van,
            "tir": self.tir,
            "payment_schedule": [row.to_record() for row in self.payment_schedule],
        }


def effective_annual_rate(params: LoanParameters) -> Decimal:
    """TEA of the loan; nominal rates are converted with their capitalization."""
    if params.interest_rate_type == "nominal" and params.capitalization:
        return nominal_to_effective(params.annual_interest_rate, params.capitalization)
    return params.annual_interest_rate


def compute_amortization(params: LoanParameters) -> CalculationResult:
    """Build the French ordinary schedule and its financial indicators.

    Raises InvalidLoanParameters for inputs that cannot describe a credit;
    numerical edge cases never raise.
    """
    validate_parameters(params)

    tea = effective_annual_rate(params)
    monthly_rate = effective_to_monthly_30(tea)
    monthly_insurance_rate = annual_insurance_to_monthly(params.insurance_rate)

    schedule = build_schedule(
        params.loan_amount,
        monthly_rate,
        monthly_insurance_rate,
        params.total_periods,
        params.grace_period_type,
        params.grace_period_months,
        params.start_date,
    )
    indicators = compute_indicators(params.loan_amount, tea, schedule)

    installment = fixed_installment(
        capitalized_balance(
            params.loan_amount, monthly_rate, params.grace_period_type, params.grace_period_months
        ),
        monthly_rate,
        params.total_periods - params.grace_period_months,
    )

    return CalculationResult(
        payment_schedule=schedule,
        tea=indicators.tea,
        tcea=indicators.tcea,
        van=indicators.van,
        tir=indicators.tir,
        monthly_rate=monthly_rate,
        monthly_insurance_rate=monthly_insurance_rate,
        fixed_installment=installment.quantize(CENT, rounding=ROUND_HALF_UP),
        total_interest=sum(
            (row.interest_payment for row in schedule
             if not (row.is_grace_period and params.grace_period_type == "total")),
            ZERO,
        ),
        total_insurance=sum((row.insurance_payment for row in schedule), ZERO),
        total_paid=sum((row.total_payment for row in schedule), ZERO),
        grace_periods=sum(1 for row in schedule if row.is_grace_period),
    )
