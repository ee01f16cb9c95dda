"""French ordinary amortization schedule on 30-day periods.

Each period pays a fixed installment (principal + interest) plus insurance
on the outstanding balance. Grace periods come first:

- total:   no principal and no interest; the interest of the whole grace
           period is capitalized into the balance upfront, only insurance
           is paid.
- partial: interest and insurance are paid, the balance is frozen.

Monetary fields are rounded ROUND_HALF_UP to 2 places per row and the
rounded ending balance is carried into the next period.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from .config import CENT, DAYS_PER_MONTH, PAYOFF_THRESHOLD, ZERO


def _round(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PaymentPeriod:
    period_number: int
    payment_date: date
    beginning_balance: Decimal
    principal_payment: Decimal
    interest_payment: Decimal
    insurance_payment: Decimal
    total_payment: Decimal
    ending_balance: Decimal
    is_grace_period: bool

    def to_record(self) -> dict[str, object]:
        """Row in the storage layout (``grace_period`` flag, ISO date)."""
        return {
            "period_number": self.period_number,
            "payment_date": self.payment_date.isoformat(),
            "beginning_balance": self.beginning_balance,
            "principal_payment": self.principal_payment,
            "interest_payment": self.interest_payment,
            "insurance_payment": self.insurance_payment,
            "total_payment": self.total_payment,
            "ending_balance": self.ending_balance,
            "grace_period": self.is_grace_period,
        }


@dataclass(frozen=True)
class _Terms:
    monthly_rate: Decimal
    monthly_insurance_rate: Decimal
    installment: Decimal
    total_periods: int
    grace_period_type: str
    grace_period_months: int
    start_date: date


def capitalized_balance(
    loan_amount: Decimal,
    monthly_rate: Decimal,
    grace_period_type: str,
    grace_period_months: int,
) -> Decimal:
    """Balance once total-grace interest has been capitalized."""
    if grace_period_type == "total" and grace_period_months > 0:
        return loan_amount * (1 + monthly_rate) ** grace_period_months
    return loan_amount


def fixed_installment(balance: Decimal, monthly_rate: Decimal, periods: int) -> Decimal:
    """Return the unrounded French installment (principal + interest).

    Uses the annuity formula:
        A = P * i(1 + i)^n / ((1 + i)^n - 1)

    Returns 0 when no amortizing periods are left, and P / n for a zero rate.
    """
    if periods <= 0:
        return ZERO
    if monthly_rate == ZERO:
        return balance / Decimal(periods)
    factor = (1 + monthly_rate) ** periods
    return balance * (monthly_rate * factor) / (factor - 1)


def _next_period(terms: _Terms, balance: Decimal, period: int) -> tuple[Decimal, PaymentPeriod]:
    """Emit the row for *period* and the balance carried into the next one."""
    interest = balance * terms.monthly_rate
    insurance = balance * terms.monthly_insurance_rate
    in_grace = period <= terms.grace_period_months
    principal = ZERO

    if in_grace:
        if terms.grace_period_type == "total":
            # interest was capitalized before the first period
            total = insurance
        elif terms.grace_period_type == "partial":
            total = interest + insurance
        else:
            total = ZERO
    else:
        principal = max(terms.installment - interest, ZERO)
        if period == terms.total_periods or balance - principal < PAYOFF_THRESHOLD:
            # pay off whatever is left, absorbing rounding drift
            principal = balance
            total = principal + interest + insurance
        else:
            total = terms.installment + insurance

    principal = _round(principal)
    ending = _round(balance - principal)
    if ending <= PAYOFF_THRESHOLD:
        ending = ZERO

    row = PaymentPeriod(
        period_number=period,
        payment_date=terms.start_date + timedelta(days=DAYS_PER_MONTH * period),
        beginning_balance=_round(balance),
        principal_payment=principal,
        interest_payment=_round(interest),
        insurance_payment=_round(insurance),
        total_payment=_round(total),
        ending_balance=ending,
        is_grace_period=in_grace,
    )
    return ending, row


def build_schedule(
    loan_amount: Decimal,
    monthly_rate: Decimal,
    monthly_insurance_rate: Decimal,
    total_periods: int,
    grace_period_type: str,
    grace_period_months: int,
    start_date: date,
) -> list[PaymentPeriod]:
    """Build the full period-by-period schedule.

    Inputs are not validated: a grace period covering the whole term yields
    an installment of 0 and rows that never amortize.
    """
    balance = capitalized_balance(loan_amount, monthly_rate, grace_period_type, grace_period_months)
    terms = _Terms(
        monthly_rate=monthly_rate,
        monthly_insurance_rate=monthly_insurance_rate,
        installment=fixed_installment(balance, monthly_rate, total_periods - grace_period_months),
        total_periods=total_periods,
        grace_period_type=grace_period_type,
        grace_period_months=grace_period_months,
        start_date=start_date,
    )

    rows: list[PaymentPeriod] = []
    for period in range(1, total_periods + 1):
        balance, row = _next_period(terms, balance, period)
        rows.append(row)
    return rows
