"""Unit tests for parameters.py — validation and financed amount."""
from dataclasses import FrozenInstanceError, replace
from datetime import date
from decimal import Decimal

import pytest

from credit_engine.parameters import (
    InvalidLoanParameters,
    LoanParameters,
    financed_amount,
    validate_parameters,
)


def _params(**kwargs) -> LoanParameters:
    defaults = dict(
        loan_amount=Decimal("100000"),
        annual_interest_rate=Decimal("0.08"),
        loan_term_years=20,
        insurance_rate=Decimal("0.0033"),
        start_date=date(2025, 1, 1),
    )
    defaults.update(kwargs)
    return LoanParameters(**defaults)


class TestLoanParameters:
    def test_total_periods(self):
        assert _params(loan_term_years=15).total_periods == 180

    def test_start_date_defaults_to_today(self):
        params = LoanParameters(loan_amount=Decimal("1000"), annual_interest_rate=Decimal("0.08"))
        assert params.start_date == date.today()

    def test_frozen(self):
        params = _params()
        with pytest.raises(FrozenInstanceError):
            params.loan_amount = Decimal("1")  # type: ignore[misc]


class TestValidateParameters:
    @pytest.mark.parametrize("overrides", [
        {},
        {"interest_rate_type": "nominal", "capitalization": "quarterly"},
        {"capitalization": "monthly"},  # ignored for effective rates
        {"grace_period_type": "total", "grace_period_months": 12},
        {"grace_period_type": "partial", "grace_period_months": 239},
        {"grace_period_type": "partial", "grace_period_months": 0},
        {"annual_interest_rate": Decimal("0"), "insurance_rate": Decimal("0")},
    ])
    def test_valid(self, overrides):
        validate_parameters(_params(**overrides))  # should not raise

    @pytest.mark.parametrize("overrides,match", [
        ({"loan_amount": Decimal("0")}, "loan_amount"),
        ({"loan_amount": Decimal("-5")}, "loan_amount"),
        ({"loan_term_years": 0}, "loan_term_years"),
        ({"annual_interest_rate": Decimal("-0.01")}, "annual_interest_rate"),
        ({"insurance_rate": Decimal("-0.001")}, "insurance_rate"),
        ({"interest_rate_type": "simple"}, "interest_rate_type"),
        ({"interest_rate_type": "nominal"}, "capitalization"),
        ({"interest_rate_type": "nominal", "capitalization": "weekly"}, "capitalization"),
        ({"grace_period_type": "full"}, "grace_period_type"),
        ({"grace_period_type": "partial", "grace_period_months": -1}, "grace_period_months"),
        ({"grace_period_months": 3}, "'none'"),
        ({"grace_period_type": "total", "grace_period_months": 240}, "lower than the loan term"),
        ({"grace_period_type": "total", "grace_period_months": 300}, "lower than the loan term"),
        ({"loan_amount": Decimal("NaN")}, "loan_amount must be a finite number"),
        ({"loan_amount": Decimal("Infinity")}, "loan_amount must be a finite number"),
        ({"annual_interest_rate": Decimal("NaN")}, "annual_interest_rate must be a finite number"),
        ({"annual_interest_rate": Decimal("Infinity")}, "annual_interest_rate must be a finite number"),
        ({"insurance_rate": Decimal("sNaN")}, "insurance_rate must be a finite number"),
        ({"insurance_rate": Decimal("-Infinity")}, "insurance_rate must be a finite number"),
    ])
    def test_invalid(self, overrides, match):
        with pytest.raises(InvalidLoanParameters, match=match):
            validate_parameters(_params(**overrides))

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            validate_parameters(replace(_params(), loan_amount=Decimal("0")))


class TestFinancedAmount:
    def test_subtracts_initial_payment_and_bonus(self):
        amount = financed_amount(Decimal("350000"), Decimal("35000"), Decimal("15000"))
        assert amount == Decimal("300000")

    def test_defaults(self):
        assert financed_amount(Decimal("250000")) == Decimal("250000")

    def test_not_positive(self):
        with pytest.raises(InvalidLoanParameters, match="Financed amount"):
            financed_amount(Decimal("100000"), Decimal("90000"), Decimal("10000"))

    @pytest.mark.parametrize("price", [Decimal("NaN"), Decimal("Infinity")])
    def test_not_finite(self, price):
        with pytest.raises(InvalidLoanParameters, match="finite"):
            financed_amount(price, Decimal("35000"))
