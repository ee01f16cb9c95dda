"""Command-line front end — click entry point + rich rendering.

Builds LoanParameters from the options (prompting for the loan amount when
neither --amount nor --property-price is given), runs the engine and prints
the indicators and the payment schedule, or the storage records as JSON.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .calculator import CalculationResult, compute_amortization
from .config import (
    DEFAULT_ANNUAL_RATE,
    DEFAULT_CAPITALIZATION,
    DEFAULT_CURRENCY,
    DEFAULT_INSURANCE_RATE,
    DEFAULT_RATE_TYPE,
    DEFAULT_TERM_YEARS,
    VALID_CAPITALIZATIONS,
    VALID_CURRENCIES,
    VALID_GRACE_TYPES,
    VALID_RATE_TYPES,
    ZERO,
)
from .parameters import InvalidLoanParameters, LoanParameters, financed_amount

console = Console()
err_console = Console(stderr=True, style="bold red")

# ──────────────────────────────────────────────────────────────────────────────
# Formatting helpers
# ──────────────────────────────────────────────────────────────────────────────

def _fmt_money(value: Decimal, currency: str) -> str:
    return f"{value:,.2f} {currency}"


def _fmt_pct(value: Decimal) -> str:
    return f"{float(value) * 100:.4f}%"


def _fmt_term(years: int, grace_months: int, grace_type: str) -> str:
    term = f"{years * 12} months ({years} years)"
    if grace_months:
        return f"{term}, {grace_months} months {grace_type} grace"
    return term


# ──────────────────────────────────────────────────────────────────────────────
# Result display
# ──────────────────────────────────────────────────────────────────────────────

def display_result(params: LoanParameters, result: CalculationResult, currency: str) -> None:
    console.print()
    console.print(Panel(
        f"[bold green]French Ordinary Schedule[/bold green] — "
        f"{_fmt_term(params.loan_term_years, params.grace_period_months, params.grace_period_type)}",
        expand=False,
    ))

    t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    t.add_column("Field", style="cyan")
    t.add_column("Value", justify="right")

    t.add_row("Loan amount", _fmt_money(params.loan_amount, currency))
    t.add_row("TEA (effective annual rate)", _fmt_pct(result.tea))
    t.add_row("  └ 30-day period rate", _fmt_pct(result.monthly_rate))
    t.add_row("  └ 30-day insurance rate", _fmt_pct(result.monthly_insurance_rate))
    t.add_row("TCEA (annual cost rate)", _fmt_pct(result.tcea))
    t.add_row("TIR (annualized IRR)", _fmt_pct(result.tir))
    t.add_row("VAN (NPV at TEA)", _fmt_money(result.van, currency))
    t.add_row("Fixed installment (P+I)", _fmt_money(result.fixed_installment, currency))
    t.add_row("Total interest paid", _fmt_money(result.total_interest, currency))
    t.add_row("Total insurance paid", _fmt_money(result.total_insurance, currency))
    t.add_row("Total paid", _fmt_money(result.total_paid, currency))
    console.print(t)


def display_schedule(result: CalculationResult, currency: str) -> None:
    t = Table(title=f"Payment Schedule ({currency})", box=box.MINIMAL_HEAVY_HEAD)
    for col in ("#", "Date", "Opening Bal.", "Principal", "Interest", "Insurance", "Payment", "Closing Bal."):
        t.add_column(col, justify="right")

    for row in result.payment_schedule:
        number = f"{row.period_number}*" if row.is_grace_period else str(row.period_number)
        t.add_row(
            number,
            row.payment_date.isoformat(),
            f"{row.beginning_balance:,.2f}",
            f"{row.principal_payment:,.2f}",
            f"{row.interest_payment:,.2f}",
            f"{row.insurance_payment:,.2f}",
            f"{row.total_payment:,.2f}",
            f"{row.ending_balance:,.2f}",
        )
    console.print(t)
    if result.grace_periods:
        console.print(f"  * grace period ({result.grace_periods} months)", style="dim")


# ──────────────────────────────────────────────────────────────────────────────
# Input helpers
# ──────────────────────────────────────────────────────────────────────────────

def _prompt_decimal(prompt: str, *, positive: bool = True) -> Decimal:
    while True:
        raw = console.input(f"[bold]{prompt}[/bold] ").strip()
        try:
            value = Decimal(raw.replace(",", ".").replace(" ", ""))
        except InvalidOperation:
            err_console.print(f"  Invalid number: '{raw}'")
            continue
        if positive and value <= 0:
            err_console.print("  Value must be > 0.")
            continue
        return value


def _parse_decimal(raw: Optional[str], name: str) -> Optional[Decimal]:
    if raw is None:
        return None
    try:
        return Decimal(raw.replace(",", ".").replace(" ", ""))
    except InvalidOperation:
        err_console.print(f"Invalid value for --{name}: '{raw}'")
        sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


# ──────────────────────────────────────────────────────────────────────────────
# Click entry point
# ──────────────────────────────────────────────────────────────────────────────

@click.command()
@click.option("--amount", type=str, default=None, help="Loan amount (financed amount)")
@click.option("--property-price", type=str, default=None, help="Property price; the loan is price - initial payment - bonus")
@click.option("--initial-payment", type=str, default="0", show_default=True, help="Initial payment (with --property-price)")
@click.option("--bonus", type=str, default="0", show_default=True, help="Housing bonus (with --property-price)")
@click.option("--rate", type=str, default=str(DEFAULT_ANNUAL_RATE), show_default=True, help="Annual interest rate as a fraction (e.g. 0.08)")
@click.option("--rate-type", type=click.Choice(sorted(VALID_RATE_TYPES)), default=DEFAULT_RATE_TYPE, show_default=True)
@click.option("--capitalization", type=click.Choice(sorted(VALID_CAPITALIZATIONS)), default=None, help=f"Capitalization of a nominal rate (default: {DEFAULT_CAPITALIZATION})")
@click.option("--years", type=click.IntRange(min=1), default=DEFAULT_TERM_YEARS, show_default=True, help="Loan term in years")
@click.option("--grace-type", type=click.Choice(sorted(VALID_GRACE_TYPES)), default="none", show_default=True)
@click.option("--grace-months", type=click.IntRange(min=0), default=0, show_default=True)
@click.option("--insurance", type=str, default=str(DEFAULT_INSURANCE_RATE), show_default=True, help="Annual insurance rate as a fraction")
@click.option("--start-date", type=str, default=None, help="Disbursement date, YYYY-MM-DD (default: today)")
@click.option("--currency", type=click.Choice(sorted(VALID_CURRENCIES)), default=DEFAULT_CURRENCY, show_default=True)
@click.option("--schedule/--no-schedule", "show_schedule", default=True, show_default=True, help="Print the payment schedule")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the storage records as JSON")
@click.option("--verbose", is_flag=True, default=False, help="Log numeric fallbacks")
def main(
    amount: Optional[str],
    property_price: Optional[str],
    initial_payment: str,
    bonus: str,
    rate: str,
    rate_type: str,
    capitalization: Optional[str],
    years: int,
    grace_type: str,
    grace_months: int,
    insurance: str,
    start_date: Optional[str],
    currency: str,
    show_schedule: bool,
    as_json: bool,
    verbose: bool,
) -> None:
    """Credit Engine — French ordinary amortization with TEA, TCEA, VAN and TIR."""
    _configure_logging(verbose)

    try:
        loan_amount = _parse_decimal(amount, "amount")
        if loan_amount is None:
            price = _parse_decimal(property_price, "property-price")
            if price is not None:
                loan_amount = financed_amount(
                    price,
                    _parse_decimal(initial_payment, "initial-payment") or ZERO,
                    _parse_decimal(bonus, "bonus") or ZERO,
                )
            else:
                loan_amount = _prompt_decimal("Loan amount?", positive=True)

        start: Optional[date] = None
        if start_date is not None:
            try:
                start = date.fromisoformat(start_date)
            except ValueError:
                err_console.print(f"Invalid --start-date '{start_date}'. Use YYYY-MM-DD.")
                sys.exit(1)

        if rate_type == "nominal" and capitalization is None:
            capitalization = DEFAULT_CAPITALIZATION

        params = LoanParameters(
            loan_amount=loan_amount,
            annual_interest_rate=_parse_decimal(rate, "rate"),
            interest_rate_type=rate_type,  # type: ignore[arg-type]
            capitalization=capitalization if rate_type == "nominal" else None,  # type: ignore[arg-type]
            loan_term_years=years,
            grace_period_type=grace_type,  # type: ignore[arg-type]
            grace_period_months=grace_months,
            insurance_rate=_parse_decimal(insurance, "insurance"),
            start_date=start or date.today(),
        )
        result = compute_amortization(params)
    except InvalidLoanParameters as exc:
        err_console.print(f"Parameter error: {exc}")
        sys.exit(1)
    except (KeyboardInterrupt, EOFError):
        console.print("\nSession ended.")
        return

    if as_json:
        click.echo(json.dumps(result.to_record(), default=float, indent=2))
        return

    console.print(Panel("[bold blue]Credit Engine[/bold blue]", expand=False))
    display_result(params, result, currency)
    if show_schedule:
        display_schedule(result, currency)
