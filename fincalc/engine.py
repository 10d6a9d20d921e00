"""Amortizing loan engine.

This module implements the fixed-installment (EMI) loan calculation: the
level payment for a principal, rate and term, a month-by-month amortization
schedule with optional extra principal payments, early termination once the
balance is gone, and a hard iteration ceiling. Results are returned as
``LoanResult`` / ``EMIResult`` records holding pre-rounded money figures.

The period step (``amortization_step``) and the schedule simulator
(``simulate_schedule``) are public because the mortgage engine reuses them
for its principal-and-interest part.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from . import config
from .data_models import (
    EMIResult,
    LoanParameters,
    LoanResult,
    PaymentScheduleEntry,
    Termination,
)
from .safe_math import (
    is_effectively_zero,
    round_to_precision,
    safe_divide,
    safe_multiply,
    safe_power,
)
from .utils import normalize

logger = logging.getLogger(__name__)

TENURE_TYPES = ("years", "months")
PREPAYMENT_FREQUENCIES = ("none", "monthly", "yearly")


@dataclass
class Simulation:
    """Raw outcome of ``simulate_schedule``; the totals are unrounded.

    ``total_paid`` is the money actually handed over (installments plus
    extra principal), which falls short of ``total_principal +
    total_interest`` when the installment cannot cover the interest.
    """

    schedule: List[PaymentScheduleEntry] = field(default_factory=list)
    termination: Termination = Termination.NOT_STARTED
    total_interest: float = 0.0
    total_principal: float = 0.0
    total_extra: float = 0.0
    total_paid: float = 0.0
    remaining_balance: float = 0.0


def amortizing_payment(principal: float, monthly_rate: float, periods: int) -> float:
    """Return the level payment that repays ``principal`` over ``periods``.

    The formula is:

        payment = P * r * (1 + r)^n / ((1 + r)^n - 1)

    where ``P`` is the principal, ``r`` the periodic rate and ``n`` the number
    of payments. The growth factor is divided out before multiplying by the
    principal, so no intermediate leaves the safe range for long, high-rate
    loans. When the rate is effectively zero the payment is simply ``P / n``.
    A non-positive period count gives ``0.0``.
    """
    if periods <= 0:
        return 0.0
    if is_effectively_zero(monthly_rate):
        return safe_divide(principal, periods)
    factor = safe_power(1 + monthly_rate, periods)
    return safe_multiply(principal, monthly_rate * safe_divide(factor, factor - 1))


def installment(principal: float, monthly_rate: float, periods: int) -> float:
    """``amortizing_payment`` rounded to cents, never below one cent for a positive principal."""
    payment = round_to_precision(amortizing_payment(principal, monthly_rate, periods))
    if principal > 0 and periods > 0:
        return max(payment, 10.0 ** -config.CURRENCY_DECIMAL_PLACES)
    return payment


def amortization_step(
    balance: float,
    monthly_rate: float,
    payment: float,
    extra: float = 0.0,
    true_up: float = 0.0,
) -> Tuple[float, float, float, float, float]:
    """Apply one period's payment to ``balance``.

    Returns ``(paid, principal_portion, interest, extra_applied,
    ending_balance)``, all unrounded. ``paid`` is the part of the installment
    actually paid this period; ``interest`` is what the period charged. The
    principal portion never goes negative, so a payment that cannot cover
    the interest leaves the balance unchanged and ``paid < interest`` shows
    the shortfall. A balance left over after the payment is cleared when it
    is under ``BALANCE_TOLERANCE`` or under ``true_up``, the allowance the
    simulator grants on the last scheduled period for cent rounding of the
    installment.
    """
    payment = max(payment, 0.0)
    interest = balance * monthly_rate
    principal_portion = min(max(payment - interest, 0.0), balance)
    extra_applied = min(max(extra, 0.0), balance - principal_portion)
    ending_balance = balance - principal_portion - extra_applied
    if ending_balance < max(config.BALANCE_TOLERANCE, true_up):
        # fold the residue into this period's principal
        principal_portion += ending_balance
        ending_balance = 0.0
    paid = principal_portion + min(interest, payment)
    return paid, principal_portion, interest, extra_applied, ending_balance


def simulate_schedule(
    principal: float,
    monthly_rate: float,
    payment: float,
    term_periods: int,
    extra_for_period: Optional[Callable[[int], float]] = None,
    max_periods: Optional[int] = None,
) -> Simulation:
    """Run ``amortization_step`` period by period.

    The run stops when the balance reaches zero, after ``term_periods``
    periods, or after ``max_periods`` periods, whichever comes first.
    ``max_periods`` defaults to ``config.MAX_SCHEDULE_PERIODS``; stopping
    there is reported as ``Termination.ITERATION_CEILING``.

    The last scheduled period clears what cent rounding of the installment
    can account for: half a cent per period, compounded at ``monthly_rate``.
    A larger balance left at the end of the term means the installment does
    not amortize the loan; the run is then reported as
    ``Termination.UNDERPAID`` with ``remaining_balance`` outstanding.
    """
    ceiling = config.MAX_SCHEDULE_PERIODS if max_periods is None else max(0, int(max_periods))
    outcome = Simulation(remaining_balance=max(principal, 0.0))
    if outcome.remaining_balance <= 0 or term_periods <= 0:
        return outcome

    balance = outcome.remaining_balance
    cumulative_interest = 0.0
    rounding_allowance = 0.0
    period = 0
    while balance > 0 and period < term_periods:
        if period >= ceiling:
            logger.warning(
                "Schedule stopped at the %d period ceiling with %.2f outstanding",
                ceiling,
                balance,
            )
            outcome.termination = Termination.ITERATION_CEILING
            break
        period += 1
        rounding_allowance = rounding_allowance * (1 + monthly_rate) + config.BALANCE_TOLERANCE
        extra = extra_for_period(period) if extra_for_period else 0.0
        paid, principal_portion, interest, extra_applied, balance = amortization_step(
            balance,
            monthly_rate,
            payment,
            extra,
            true_up=rounding_allowance if period == term_periods else 0.0,
        )
        cumulative_interest += interest
        outcome.total_principal += principal_portion + extra_applied
        outcome.total_extra += extra_applied
        outcome.total_paid += paid + extra_applied
        outcome.schedule.append(
            PaymentScheduleEntry(
                period_index=period,
                scheduled_payment=round_to_precision(paid),
                principal_portion=round_to_precision(principal_portion),
                interest_portion=round_to_precision(interest),
                extra_principal=round_to_precision(extra_applied),
                ending_balance=round_to_precision(max(balance, 0.0)),
                cumulative_interest=round_to_precision(cumulative_interest),
            )
        )
    else:
        if balance > 0:
            logger.warning(
                "Payment of %.2f does not amortize the loan; %.2f outstanding after %d periods",
                payment,
                balance,
                period,
            )
            outcome.termination = Termination.UNDERPAID
        else:
            outcome.termination = Termination.PAID_OFF

    outcome.total_interest = cumulative_interest
    outcome.remaining_balance = balance
    return outcome


def _default_loan_result(principal: float) -> LoanResult:
    return LoanResult(
        periodic_payment=0.0,
        total_paid=0.0,
        total_interest=0.0,
        payoff_periods=0,
        interest_saved=0.0,
        schedule=[],
        principal=round_to_precision(max(principal, 0.0)),
        termination=Termination.NOT_STARTED,
    )


def calculate_loan(
    principal: Any,
    annual_rate_percent: Any,
    term_years: Any,
    extra_monthly_payment: Any = 0,
    max_periods: Optional[int] = None,
) -> LoanResult:
    """Compute the installment, totals and schedule of an amortizing loan.

    Parameters
    ----------
    principal, annual_rate_percent, term_years, extra_monthly_payment:
        Raw or numeric inputs; each is normalized first. The rate is an
        annual percentage (``8.5`` means 8.5 % a year). The extra payment is
        added to principal every month until the loan is repaid.
    max_periods:
        Iteration ceiling for the simulation; defaults to
        ``config.MAX_SCHEDULE_PERIODS``.

    Returns
    -------
    LoanResult
        A zeroed result (``Termination.NOT_STARTED``) when the principal or
        term is not positive or the rate is negative. ``interest_saved``
        compares against the same loan without extra payments.
    """
    params = LoanParameters(
        principal=normalize(principal),
        annual_rate_percent=normalize(annual_rate_percent),
        term_years=normalize(term_years),
        extra_monthly_payment=max(normalize(extra_monthly_payment), 0.0),
    )
    if params.principal <= 0 or params.term_years <= 0 or params.annual_rate_percent < 0:
        logger.debug("Degenerate loan inputs %s; returning zeroed result", params)
        return _default_loan_result(params.principal)

    monthly_rate = params.monthly_rate
    periods = params.term_months
    payment = installment(params.principal, monthly_rate, periods)

    extra = params.extra_monthly_payment
    actual = simulate_schedule(
        params.principal, monthly_rate, payment, periods, lambda _period: extra, max_periods
    )
    if extra > 0:
        baseline = simulate_schedule(params.principal, monthly_rate, payment, periods, None, max_periods)
    else:
        baseline = actual
    interest_saved = max(0.0, baseline.total_interest - actual.total_interest)

    return LoanResult(
        periodic_payment=payment,
        total_paid=round_to_precision(actual.total_paid),
        total_interest=round_to_precision(actual.total_interest),
        payoff_periods=len(actual.schedule),
        interest_saved=round_to_precision(interest_saved),
        schedule=actual.schedule,
        principal=round_to_precision(params.principal),
        termination=actual.termination,
    )


def _emi_error(message: str) -> EMIResult:
    logger.debug("EMI inputs rejected: %s", message)
    return EMIResult(
        monthly_emi=0.0,
        total_interest=0.0,
        total_amount=0.0,
        interest_to_loan_ratio=0.0,
        total_prepayment=0.0,
        payoff_periods=0,
        schedule=[],
        error=message,
    )


def _choice(value: Any, choices: Tuple[str, ...], default: str) -> str:
    text = str(value).strip().lower() if value is not None else ""
    return text if text in choices else default


def calculate_emi(
    loan_amount: Any,
    annual_rate_percent: Any,
    tenure: Any,
    tenure_type: str = "years",
    prepayment_amount: Any = 0,
    prepayment_frequency: str = "none",
    max_periods: Optional[int] = None,
) -> EMIResult:
    """Advanced EMI calculation with a tenure unit and periodic prepayments.

    ``tenure_type`` is ``"years"`` or ``"months"``. ``prepayment_frequency``
    is ``"none"``, ``"monthly"`` (every period) or ``"yearly"`` (every 12th
    period). Unknown values fall back to years and no prepayment. Inputs
    that cannot describe a loan give a zeroed result with ``error`` set.
    """
    amount = normalize(loan_amount)
    rate = normalize(annual_rate_percent)
    tenure_value = normalize(tenure)
    prepayment = normalize(prepayment_amount)

    if amount <= 0:
        return _emi_error("Loan amount must be positive.")
    if rate < 0:
        return _emi_error("Interest rate cannot be negative.")
    if tenure_value <= 0:
        return _emi_error("Loan tenure must be positive.")
    if prepayment < 0:
        return _emi_error("Prepayment amount cannot be negative.")

    unit = _choice(tenure_type, TENURE_TYPES, "years")
    frequency = _choice(prepayment_frequency, PREPAYMENT_FREQUENCIES, "none")
    months = tenure_value if unit == "months" else tenure_value * 12
    periods = max(1, int(round(months)))
    monthly_rate = rate / 1200

    def prepayment_for(period: int) -> float:
        if frequency == "monthly":
            return prepayment
        if frequency == "yearly" and period % 12 == 0:
            return prepayment
        return 0.0

    emi = installment(amount, monthly_rate, periods)
    run = simulate_schedule(amount, monthly_rate, emi, periods, prepayment_for, max_periods)

    return EMIResult(
        monthly_emi=emi,
        total_interest=round_to_precision(run.total_interest),
        total_amount=round_to_precision(run.total_paid),
        interest_to_loan_ratio=round_to_precision(safe_divide(run.total_interest * 100, amount)),
        total_prepayment=round_to_precision(run.total_extra),
        payoff_periods=len(run.schedule),
        schedule=run.schedule,
        termination=run.termination,
    )
