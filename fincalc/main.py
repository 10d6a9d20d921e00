"""Command-line interface for the calculators.

This module uses the ``click`` library to implement a multi-command
interface: ``loan``, ``mortgage``, ``invest``, ``emi``, ``simple-interest``
and the savings instruments ``sip``, ``lumpsum``, ``fd``, ``rd`` and ``ppf``. Amounts are taken as raw strings, so currency symbols,
thousands separators and ``k``/``m`` shorthand ("500k") all work. Inputs are
checked with the form validators unless ``--no-validate`` is given, in which
case the engines' own lenient normalization applies. Results can be printed
to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

import click

from .data_models import GrowthBreakdownEntry, PaymentScheduleEntry
from .engine import PREPAYMENT_FREQUENCIES, TENURE_TYPES, calculate_emi, calculate_loan
from .formatter import (
    print_breakdown,
    print_emi_summary,
    print_investment_summary,
    print_loan_summary,
    print_mortgage_summary,
    print_savings_summary,
    print_schedule,
    print_simple_interest,
)
from .growth import (
    COMPOUNDING_PERIODS,
    FD_COMPOUNDING_PERIODS,
    calculate_fd,
    calculate_investment,
    calculate_lumpsum,
    calculate_ppf,
    calculate_rd,
    calculate_simple_interest,
    calculate_sip,
)
from .mortgage import calculate_mortgage
from .utils import normalize
from .validation import (
    validate_emi_inputs,
    validate_fd_inputs,
    validate_investment_inputs,
    validate_loan_inputs,
    validate_lumpsum_inputs,
    validate_mortgage_inputs,
    validate_ppf_inputs,
    validate_rd_inputs,
    validate_simple_interest_inputs,
    validate_sip_inputs,
)

logger = logging.getLogger(__name__)

MAX_SCREEN_ROWS = 120


def parse_amount(value: Optional[str]) -> Optional[float]:
    """Parse an amount with optional shorthand suffixes.

    Accepts anything the normalizer does ("₹10,00,000", "$1,200") and
    shorthand with ``k``/``m`` suffixes (e.g., "500k" meaning 500_000).
    ``None`` passes through so optional fields stay missing.
    """
    if value is None:
        return None
    text = value.strip().lower()
    factor = 1.0
    if text.endswith("k"):
        factor = 1_000.0
        text = text[:-1]
    elif text.endswith("m"):
        factor = 1_000_000.0
        text = text[:-1]
    return normalize(text) * factor


def checked_inputs(
    raw: Dict[str, Any], validator: Callable[[Mapping], Any], validate: bool
) -> Dict[str, Any]:
    """Validate ``raw`` and return the parsed values, or raise ``click.UsageError``."""
    if not validate:
        return {name: value for name, value in raw.items() if value is not None}
    outcome = validator(raw)
    if not outcome.is_valid:
        problems = "; ".join(f"{name}: {error}" for name, error in outcome.errors.items())
        raise click.UsageError(f"Invalid input: {problems}")
    return outcome.values


def export_to_json(path: Path, result: Any) -> None:
    """Export a result record (summary and rows) to a JSON file."""
    with path.open("w", encoding="utf-8") as f:
        json.dump(asdict(result), f, indent=2)


def export_to_csv(path: Path, rows: List[Any], row_type: type) -> None:
    """Export schedule or breakdown rows to a CSV file."""
    header = [f.name for f in fields(row_type)]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in rows:
            writer.writerow([getattr(row, name) for name in header])


def emit(
    result: Any,
    rows: List[Any],
    row_type: type,
    print_summary: Callable[[Any], None],
    print_rows: Callable[[List[Any]], None],
    output: Optional[str],
    show_all: bool,
) -> None:
    if output:
        path = Path(output)
        logger.debug("Exporting %d rows to %s", len(rows), path)
        if path.suffix.lower() == ".json":
            export_to_json(path, result)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, rows, row_type)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
        click.echo(f"Results exported to {path}")
        return
    print_summary(result)
    if not rows:
        return
    # Limit schedule length printed to avoid flooding the terminal
    if len(rows) > MAX_SCREEN_ROWS and not show_all:
        click.echo(f"Schedule has {len(rows)} rows; showing first {MAX_SCREEN_ROWS} rows.")
        rows = rows[:MAX_SCREEN_ROWS]
    print_rows(rows)


output_option = click.option("--output", "-o", "output", type=str, help="Output file path (.json or .csv)")
all_option = click.option("--all", "show_all", is_flag=True, help="Print every schedule row")
validate_option = click.option(
    "--validate/--no-validate",
    default=True,
    help="Check inputs against the form rules before calculating",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Financial calculators: loans, mortgages, EMI and investments."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--principal", "-p", "principal", required=True, help="Loan amount")
@click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)")
@click.option("--years", "-y", "years", required=True, help="Loan term in years")
@click.option("--extra", "-e", "extra", help="Extra principal paid every month")
@output_option
@all_option
@validate_option
def loan(
    principal: str,
    rate: str,
    years: str,
    extra: Optional[str],
    output: Optional[str],
    show_all: bool,
    validate: bool,
) -> None:
    """Compute a fixed-installment loan with optional extra payments."""
    values = checked_inputs(
        {
            "principal": parse_amount(principal),
            "annual_rate_percent": rate,
            "term_years": years,
            "extra_monthly_payment": parse_amount(extra),
        },
        validate_loan_inputs,
        validate,
    )
    result = calculate_loan(**values)
    emit(result, result.schedule, PaymentScheduleEntry, print_loan_summary, print_schedule, output, show_all)


@cli.command()
@click.option("--price", "-p", "price", required=True, help="Home price")
@click.option("--down-payment", "-d", "down_payment", help="Down payment amount")
@click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)")
@click.option("--years", "-y", "years", required=True, help="Loan term in years")
@click.option("--property-tax", "property_tax", help="Annual property tax")
@click.option("--insurance", "insurance", help="Annual homeowner's insurance")
@click.option("--pmi", "pmi", help="Annual mortgage insurance")
@output_option
@all_option
@validate_option
def mortgage(
    price: str,
    down_payment: Optional[str],
    rate: str,
    years: str,
    property_tax: Optional[str],
    insurance: Optional[str],
    pmi: Optional[str],
    output: Optional[str],
    show_all: bool,
    validate: bool,
) -> None:
    """Compute a mortgage payment including escrow."""
    values = checked_inputs(
        {
            "home_price": parse_amount(price),
            "down_payment": parse_amount(down_payment),
            "annual_rate_percent": rate,
            "term_years": years,
            "annual_property_tax": parse_amount(property_tax),
            "annual_insurance": parse_amount(insurance),
            "annual_pmi": parse_amount(pmi),
        },
        validate_mortgage_inputs,
        validate,
    )
    values.setdefault("down_payment", 0)
    result = calculate_mortgage(**values)
    emit(result, result.schedule, PaymentScheduleEntry, print_mortgage_summary, print_schedule, output, show_all)


@cli.command()
@click.option("--initial", "-i", "initial", default="0", help="Lump sum invested at the start")
@click.option("--monthly", "-m", "monthly", default="0", help="Contribution added every month")
@click.option("--rate", "-r", "rate", required=True, help="Annual return (percent)")
@click.option("--years", "-y", "years", required=True, help="Investment horizon in years")
@click.option(
    "--compounding",
    "-c",
    "compounding",
    type=click.Choice(list(COMPOUNDING_PERIODS)),
    default="monthly",
    help="Compounding frequency",
)
@output_option
@validate_option
def invest(
    initial: str,
    monthly: str,
    rate: str,
    years: str,
    compounding: str,
    output: Optional[str],
    validate: bool,
) -> None:
    """Project the growth of a lump sum plus monthly contributions."""
    values = checked_inputs(
        {
            "initial_amount": parse_amount(initial),
            "periodic_contribution": parse_amount(monthly),
            "annual_rate_percent": rate,
            "term_years": years,
            "compounding_frequency": compounding,
        },
        validate_investment_inputs,
        validate,
    )
    result = calculate_investment(**values)
    emit(result, result.breakdown, GrowthBreakdownEntry, print_investment_summary, print_breakdown, output, True)


@cli.command()
@click.option("--amount", "-a", "amount", required=True, help="Loan amount")
@click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)")
@click.option("--tenure", "-t", "tenure", required=True, help="Loan tenure")
@click.option("--tenure-type", "tenure_type", type=click.Choice(list(TENURE_TYPES)), default="years")
@click.option("--prepayment", "prepayment", help="Prepayment amount")
@click.option(
    "--prepayment-frequency",
    "prepayment_frequency",
    type=click.Choice(list(PREPAYMENT_FREQUENCIES)),
    default="none",
)
@output_option
@all_option
@validate_option
def emi(
    amount: str,
    rate: str,
    tenure: str,
    tenure_type: str,
    prepayment: Optional[str],
    prepayment_frequency: str,
    output: Optional[str],
    show_all: bool,
    validate: bool,
) -> None:
    """Compute an EMI with a tenure in years or months and optional prepayments."""
    values = checked_inputs(
        {
            "loan_amount": parse_amount(amount),
            "annual_rate_percent": rate,
            "tenure": tenure,
            "tenure_type": tenure_type,
            "prepayment_amount": parse_amount(prepayment),
            "prepayment_frequency": prepayment_frequency,
        },
        validate_emi_inputs,
        validate,
    )
    result = calculate_emi(**values)
    emit(result, result.schedule, PaymentScheduleEntry, print_emi_summary, print_schedule, output, show_all)


@cli.command("simple-interest")
@click.option("--principal", "-p", "principal", required=True, help="Principal amount")
@click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)")
@click.option("--years", "-y", "years", required=True, help="Time in years")
@validate_option
def simple_interest(principal: str, rate: str, years: str, validate: bool) -> None:
    """Compute simple (non-compounding) interest."""
    values = checked_inputs(
        {"principal": parse_amount(principal), "annual_rate_percent": rate, "years": years},
        validate_simple_interest_inputs,
        validate,
    )
    print_simple_interest(calculate_simple_interest(**values))


def emit_savings(result: Any, output: Optional[str]) -> None:
    emit(result, result.breakdown, GrowthBreakdownEntry, print_savings_summary, print_breakdown, output, True)


@cli.command()
@click.option("--monthly", "-m", "monthly", required=True, help="Amount invested every month")
@click.option("--rate", "-r", "rate", required=True, help="Expected annual return (percent)")
@click.option("--years", "-y", "years", required=True, help="Investment period in years")
@output_option
@validate_option
def sip(monthly: str, rate: str, years: str, output: Optional[str], validate: bool) -> None:
    """Project a systematic investment plan (monthly investments)."""
    values = checked_inputs(
        {"monthly_investment": parse_amount(monthly), "annual_return_percent": rate, "years": years},
        validate_sip_inputs,
        validate,
    )
    emit_savings(calculate_sip(**values), output)


@cli.command()
@click.option("--principal", "-p", "principal", required=True, help="Amount invested once")
@click.option("--rate", "-r", "rate", required=True, help="Expected annual return (percent)")
@click.option("--years", "-y", "years", required=True, help="Investment period in years")
@output_option
@validate_option
def lumpsum(principal: str, rate: str, years: str, output: Optional[str], validate: bool) -> None:
    """Project a one-off investment compounded yearly."""
    values = checked_inputs(
        {"principal": parse_amount(principal), "annual_return_percent": rate, "years": years},
        validate_lumpsum_inputs,
        validate,
    )
    emit_savings(calculate_lumpsum(**values), output)


@cli.command()
@click.option("--principal", "-p", "principal", required=True, help="Deposit amount")
@click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)")
@click.option("--years", "-y", "years", required=True, help="Deposit term in years")
@click.option(
    "--compounding",
    "-c",
    "compounding",
    type=click.Choice(list(FD_COMPOUNDING_PERIODS)),
    default="yearly",
    help="Compounding frequency",
)
@output_option
@validate_option
def fd(principal: str, rate: str, years: str, compounding: str, output: Optional[str], validate: bool) -> None:
    """Compute the maturity of a fixed deposit."""
    values = checked_inputs(
        {
            "principal": parse_amount(principal),
            "annual_rate_percent": rate,
            "years": years,
            "compounding_frequency": compounding,
        },
        validate_fd_inputs,
        validate,
    )
    emit_savings(calculate_fd(**values), output)


@cli.command()
@click.option("--monthly", "-m", "monthly", required=True, help="Amount deposited every month")
@click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)")
@click.option("--years", "-y", "years", required=True, help="Deposit term in years")
@output_option
@validate_option
def rd(monthly: str, rate: str, years: str, output: Optional[str], validate: bool) -> None:
    """Compute the maturity of a recurring deposit."""
    values = checked_inputs(
        {"monthly_deposit": parse_amount(monthly), "annual_rate_percent": rate, "years": years},
        validate_rd_inputs,
        validate,
    )
    emit_savings(calculate_rd(**values), output)


@cli.command()
@click.option("--yearly", "-a", "yearly", required=True, help="Amount invested every year")
@click.option("--years", "-y", "years", required=True, help="Account term in years")
@click.option("--rate", "-r", "rate", help="Annual interest rate (percent); defaults to the PPF rate")
@output_option
@validate_option
def ppf(yearly: str, years: str, rate: Optional[str], output: Optional[str], validate: bool) -> None:
    """Compute the maturity of a public provident fund account."""
    values = checked_inputs(
        {"yearly_investment": parse_amount(yearly), "years": years, "annual_rate_percent": rate},
        validate_ppf_inputs,
        validate,
    )
    emit_savings(calculate_ppf(**values), output)


if __name__ == "__main__":
    cli()
