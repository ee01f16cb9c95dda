"""Financial indicators of a payment schedule: TEA, TCEA, VAN (NPV), TIR (IRR).

The IRR is solved in float with Newton-Raphson, retried from several
initial guesses. Numerical failures never raise: they degrade to 0 for the
IRR/TIR and to the TEA for the TCEA.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from .config import (
    CENT,
    DAYS_PER_MONTH,
    DAYS_PER_YEAR,
    IRR_INITIAL_GUESSES,
    IRR_MAX_ITERATIONS,
    IRR_PERIOD_RATE_BOUNDS,
    IRR_TOLERANCE,
    RATE_QUANTUM,
    TCEA_ANNUAL_BOUNDS,
    TIR_ANNUAL_BOUNDS,
    ZERO,
)
from .rates import annualize_period_rate
from .schedule import PaymentPeriod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinancialIndicators:
    tea: Decimal
    tcea: Decimal
    van: Decimal
    tir: Decimal


def _round_rate(value: Decimal) -> Decimal:
    return value.quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)


def _newton(cash_flows: Sequence[float], guess: float) -> Optional[float]:
    """Run Newton-Raphson from *guess*; None when this attempt fails."""
    low, high = IRR_PERIOD_RATE_BOUNDS
    rate = guess
    for _ in range(IRR_MAX_ITERATIONS):
        value = 0.0
        slope = 0.0
        try:
            for t, cf in enumerate(cash_flows):
                factor = (1 + rate) ** t
                value += cf / factor
                slope += -t * cf / (factor * (1 + rate))
        except (ZeroDivisionError, OverflowError):
            return None

        if abs(slope) < IRR_TOLERANCE:
            return None
        new_rate = rate - value / slope
        if not math.isfinite(new_rate) or not low < new_rate < high:
            return None
        if abs(new_rate - rate) < IRR_TOLERANCE:
            return new_rate
        rate = new_rate
    return None


def irr(cash_flows: Sequence[float]) -> float:
    """Return the per-period IRR of *cash_flows*, or 0.0 if there is none.

    The first flow is the disbursement and must be positive; at least one
    later flow must be negative.
    """
    if len(cash_flows) < 2:
        return 0.0
    if not any(cf > 0 for cf in cash_flows) or not any(cf < 0 for cf in cash_flows):
        return 0.0
    if cash_flows[0] <= 0:
        return 0.0

    for guess in IRR_INITIAL_GUESSES:
        rate = _newton(cash_flows, guess)
        if rate is not None:
            return rate
    logger.debug("IRR did not converge from any initial guess %s", IRR_INITIAL_GUESSES)
    return 0.0


def _annualize(period_rate: float, bounds: tuple[float, float]) -> Optional[float]:
    low, high = bounds
    try:
        annual = annualize_period_rate(period_rate)
    except OverflowError:
        return None
    if not math.isfinite(annual) or not low < annual < high:
        return None
    return annual


def npv(rate: Decimal, loan_amount: Decimal, payments: Sequence[Decimal]) -> Decimal:
    """VAN = -loan + sum(payment_k / (1 + rate)^(30k/360)), rounded to cents.

    Terms whose discount factor is not a positive finite number are skipped.
    """
    value = -loan_amount
    base = 1 + rate
    for k, payment in enumerate(payments, start=1):
        if base <= ZERO:
            logger.debug("Skipping NPV term %d: discount base %s is not positive", k, base)
            continue
        factor = base ** (Decimal(k * DAYS_PER_MONTH) / Decimal(DAYS_PER_YEAR))
        if not factor.is_finite() or factor <= ZERO:
            logger.debug("Skipping NPV term %d: invalid discount factor %s", k, factor)
            continue
        value += payment / factor
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_indicators(
    loan_amount: Decimal,
    tea: Decimal,
    schedule: Sequence[PaymentPeriod],
) -> FinancialIndicators:
    """Derive TEA, TCEA, VAN and TIR from a built schedule.

    Cash flows are seen from the borrower: the loan received at day 0, then
    every period's total payment (insurance included) paid out.
    """
    payments = [row.total_payment for row in schedule]
    cash_flows = [float(loan_amount)] + [-float(p) for p in payments]
    period_rate = irr(cash_flows)

    tir = ZERO
    tir_annual = _annualize(period_rate, TIR_ANNUAL_BOUNDS)
    if tir_annual is not None:
        tir = Decimal(str(tir_annual))
    else:
        logger.debug("TIR rejected for period rate %r; using 0", period_rate)

    tcea = tea
    total_paid = sum(payments, ZERO)
    if loan_amount > ZERO and total_paid > loan_amount:
        tcea_annual = _annualize(period_rate, TCEA_ANNUAL_BOUNDS)
        if tcea_annual is not None:
            tcea = max(Decimal(str(tcea_annual)), tea)
        else:
            logger.debug("TCEA rejected for period rate %r; using TEA", period_rate)

    return FinancialIndicators(
        tea=_round_rate(tea),
        tcea=_round_rate(tcea),
        van=npv(tea, loan_amount, payments),
        tir=_round_rate(tir),
    )
