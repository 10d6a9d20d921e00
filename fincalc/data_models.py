"""Data models for the calculation core.

This module defines dataclasses for the parameters and results exchanged
with the engines: validation outcomes, loan and mortgage schedules, and
investment growth breakdowns. Results carry no behaviour beyond a few
read-only conveniences, so ``dataclasses.asdict`` turns any of them into a
plain record ready for JSON or CSV output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Termination(str, Enum):
    """Why a simulated loan schedule stopped."""

    PAID_OFF = "paid_off"
    ITERATION_CEILING = "iteration_ceiling"
    UNDERPAID = "underpaid"
    NOT_STARTED = "not_started"


@dataclass
class SafeNumberResult:
    """Outcome of ``validate_safe_number``.

    ``number`` is always the parsed value, even when ``is_valid`` is False,
    so callers can echo back what was understood.
    """

    is_valid: bool
    number: float
    error: Optional[str] = None


@dataclass
class ParseResult:
    """Outcome of validating a single form field."""

    is_valid: bool
    value: float
    error: Optional[str] = None


@dataclass
class RecordValidation:
    """Outcome of validating a whole calculator form.

    ``values`` holds the parsed value of every field that passed; ``errors``
    maps each failing field name to its message.
    """

    values: Dict[str, object] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class LoanParameters:
    """Normalized inputs of a loan calculation."""

    principal: float
    annual_rate_percent: float
    term_years: float
    extra_monthly_payment: float = 0.0

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate_percent / 1200

    @property
    def term_months(self) -> int:
        return max(1, int(round(self.term_years * 12)))


@dataclass
class PaymentScheduleEntry:
    """One period of an amortization schedule.

    ``scheduled_payment`` is the part of the installment actually paid that
    period: smaller on the last period, and below ``interest_portion`` when
    the installment cannot cover the interest. ``extra_principal`` is paid on
    top of it. ``principal_portion`` excludes the extra amount.
    """

    period_index: int
    scheduled_payment: float
    principal_portion: float
    interest_portion: float
    extra_principal: float
    ending_balance: float
    cumulative_interest: float


@dataclass
class LoanResult:
    """Totals and schedule of an amortizing loan."""

    periodic_payment: float
    total_paid: float
    total_interest: float
    payoff_periods: int
    interest_saved: float
    schedule: List[PaymentScheduleEntry]
    principal: float
    termination: Termination = Termination.NOT_STARTED

    @property
    def converged(self) -> bool:
        return self.termination == Termination.PAID_OFF


@dataclass
class MortgageResult(LoanResult):
    """A ``LoanResult`` for the principal-and-interest part plus escrow."""

    home_price: float = 0.0
    down_payment: float = 0.0
    loan_amount: float = 0.0
    monthly_principal_and_interest: float = 0.0
    monthly_property_tax: float = 0.0
    monthly_insurance: float = 0.0
    monthly_pmi: float = 0.0
    monthly_payment: float = 0.0
    loan_to_value: float = 0.0


@dataclass
class EMIResult:
    """Result of the advanced EMI calculator.

    When the inputs cannot describe a loan, every figure is zero and
    ``error`` says why.
    """

    monthly_emi: float
    total_interest: float
    total_amount: float
    interest_to_loan_ratio: float
    total_prepayment: float
    payoff_periods: int
    schedule: List[PaymentScheduleEntry]
    termination: Termination = Termination.NOT_STARTED
    error: Optional[str] = None


@dataclass
class GrowthParameters:
    """Normalized inputs of an investment growth calculation."""

    initial_amount: float
    periodic_contribution: float
    annual_rate_percent: float
    term_years: float
    compounding_frequency: str = "monthly"


@dataclass
class GrowthBreakdownEntry:
    """One year (or a trailing partial year) of investment growth."""

    period_index: int
    opening_balance: float
    contributions: float
    growth: float
    closing_balance: float
    cumulative_contributions: float
    cumulative_growth: float


@dataclass
class GrowthResult:
    """Totals and yearly breakdown of an investment.

    ``annualized_return`` is a percentage.
    """

    final_amount: float
    total_contributions: float
    total_growth: float
    annualized_return: float
    periods_per_year: int
    breakdown: List[GrowthBreakdownEntry]


@dataclass
class SimpleInterestResult:
    principal: float
    simple_interest: float
    total_amount: float
    effective_rate: float
    monthly_interest: float
    error: Optional[str] = None


@dataclass
class SavingsResult:
    """Maturity figures of a savings instrument (SIP, lump sum, FD, RD, PPF).

    ``total_gains`` and ``effective_yield`` (a percentage of the money put
    in) are never negative. ``breakdown`` holds one entry per year.
    """

    total_invested: float
    maturity_amount: float
    total_gains: float
    effective_yield: float
    breakdown: List[GrowthBreakdownEntry]
    error: Optional[str] = None
