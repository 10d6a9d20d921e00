"""Output helpers for the calculators.

This module renders results in a simple tabular text format for the
terminal. It relies only on built-in printing and string formatting; the
records it prints are already rounded, so ``:.2f`` is purely cosmetic.
"""

from __future__ import annotations

from typing import Iterable

from .data_models import (
    EMIResult,
    GrowthBreakdownEntry,
    GrowthResult,
    LoanResult,
    MortgageResult,
    PaymentScheduleEntry,
    SavingsResult,
    SimpleInterestResult,
    Termination,
)


def _print_termination(termination: Termination) -> None:
    if termination == Termination.ITERATION_CEILING:
        print("Warning            : schedule stopped at the iteration ceiling; balance remains")
    elif termination == Termination.UNDERPAID:
        print("Warning            : payment does not amortize the loan; balance remains")


def print_loan_summary(result: LoanResult) -> None:
    """Print the headline figures of a loan in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Principal          : {result.principal:.2f}")
    print(f"Monthly payment    : {result.periodic_payment:.2f}")
    print(f"Total interest     : {result.total_interest:.2f}")
    print(f"Total paid         : {result.total_paid:.2f}")
    print(f"Payments made      : {result.payoff_periods}")
    if result.interest_saved:
        print(f"Interest saved     : {result.interest_saved:.2f}")
    _print_termination(result.termination)
    print("-" * 72)


def print_mortgage_summary(result: MortgageResult) -> None:
    print("Summary")
    print("-" * 72)
    print(f"Home price         : {result.home_price:.2f}")
    print(f"Down payment       : {result.down_payment:.2f}")
    print(f"Loan amount        : {result.loan_amount:.2f}")
    print(f"Loan-to-value      : {result.loan_to_value:.2f}%")
    print(f"Principal+interest : {result.monthly_principal_and_interest:.2f}")
    print(f"Property tax       : {result.monthly_property_tax:.2f}")
    print(f"Insurance          : {result.monthly_insurance:.2f}")
    print(f"Mortgage insurance : {result.monthly_pmi:.2f}")
    print(f"Monthly payment    : {result.monthly_payment:.2f}")
    print(f"Total interest     : {result.total_interest:.2f}")
    print(f"Total paid (P&I)   : {result.total_paid:.2f}")
    _print_termination(result.termination)
    print("-" * 72)


def print_emi_summary(result: EMIResult) -> None:
    print("Summary")
    print("-" * 72)
    if result.error:
        print(f"Error              : {result.error}")
        print("-" * 72)
        return
    print(f"Monthly EMI        : {result.monthly_emi:.2f}")
    print(f"Total interest     : {result.total_interest:.2f}")
    print(f"Total amount       : {result.total_amount:.2f}")
    print(f"Interest/loan      : {result.interest_to_loan_ratio:.2f}%")
    if result.total_prepayment:
        print(f"Total prepayment   : {result.total_prepayment:.2f}")
    print(f"Payments made      : {result.payoff_periods}")
    _print_termination(result.termination)
    print("-" * 72)


def print_investment_summary(result: GrowthResult) -> None:
    print("Summary")
    print("-" * 72)
    print(f"Final amount       : {result.final_amount:.2f}")
    print(f"Total contributions: {result.total_contributions:.2f}")
    print(f"Total growth       : {result.total_growth:.2f}")
    print(f"Annualized return  : {result.annualized_return:.2f}%")
    print(f"Compounding/year   : {result.periods_per_year}")
    print("-" * 72)


def print_simple_interest(result: SimpleInterestResult) -> None:
    print("Summary")
    print("-" * 72)
    if result.error:
        print(f"Error              : {result.error}")
    else:
        print(f"Principal          : {result.principal:.2f}")
        print(f"Simple interest    : {result.simple_interest:.2f}")
        print(f"Total amount       : {result.total_amount:.2f}")
        print(f"Effective rate     : {result.effective_rate:.2f}%")
        print(f"Monthly interest   : {result.monthly_interest:.2f}")
    print("-" * 72)


def print_savings_summary(result: SavingsResult) -> None:
    print("Summary")
    print("-" * 72)
    if result.error:
        print(f"Error              : {result.error}")
    else:
        print(f"Total invested     : {result.total_invested:.2f}")
        print(f"Maturity amount    : {result.maturity_amount:.2f}")
        print(f"Total gains        : {result.total_gains:.2f}")
        print(f"Effective yield    : {result.effective_yield:.2f}%")
    print("-" * 72)


def print_schedule(schedule: Iterable[PaymentScheduleEntry]) -> None:
    """Print an amortization schedule as a tab-separated table."""
    headers = ["Period", "Payment", "Principal", "Interest", "Extra", "EndBal", "CumInterest"]
    print("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.period_index),
            f"{entry.scheduled_payment:.2f}",
            f"{entry.principal_portion:.2f}",
            f"{entry.interest_portion:.2f}",
            f"{entry.extra_principal:.2f}",
            f"{entry.ending_balance:.2f}",
            f"{entry.cumulative_interest:.2f}",
        ]
        print("\t".join(row))


def print_breakdown(breakdown: Iterable[GrowthBreakdownEntry]) -> None:
    """Print a yearly investment breakdown as a tab-separated table."""
    headers = ["Year", "Opening", "Contrib", "Growth", "Closing", "CumContrib", "CumGrowth"]
    print("\t".join(headers))
    for entry in breakdown:
        row = [
            str(entry.period_index),
            f"{entry.opening_balance:.2f}",
            f"{entry.contributions:.2f}",
            f"{entry.growth:.2f}",
            f"{entry.closing_balance:.2f}",
            f"{entry.cumulative_contributions:.2f}",
            f"{entry.cumulative_growth:.2f}",
        ]
        print("\t".join(row))
