"""Growth and investment engine.

``calculate_investment`` grows a lump sum plus month-end contributions under
any of the supported compounding frequencies. Totals come from the closed
forms; the yearly breakdown re-simulates the same growth month by month at
the equivalent monthly rate, so the breakdown's last closing balance agrees
with ``final_amount``.

``calculate_simple_interest`` covers the plain ``P * R * T / 100`` case.

The savings instruments (``calculate_sip``, ``calculate_lumpsum``,
``calculate_fd``, ``calculate_rd`` and ``calculate_ppf``) differ only in when
money goes in and how often interest is credited; they share the same yearly
breakdown and report a ``SavingsResult``.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from . import config
from .data_models import (
    GrowthBreakdownEntry,
    GrowthParameters,
    GrowthResult,
    SavingsResult,
    SimpleInterestResult,
)
from .safe_math import (
    is_effectively_zero,
    round_to_precision,
    safe_add,
    safe_divide,
    safe_multiply,
    safe_power,
)
from .utils import clamp_number, normalize, percentage_to_decimal

logger = logging.getLogger(__name__)

COMPOUNDING_PERIODS = {
    "annually": 1,
    "semiannually": 2,
    "quarterly": 4,
    "monthly": 12,
    "daily": 365,
}
DEFAULT_PERIODS_PER_YEAR = 12


def periods_per_year(frequency: Any) -> int:
    """Map a compounding frequency name to periods per year (default 12)."""
    if not isinstance(frequency, str):
        return DEFAULT_PERIODS_PER_YEAR
    return COMPOUNDING_PERIODS.get(frequency.strip().lower(), DEFAULT_PERIODS_PER_YEAR)


def effective_monthly_rate(annual_rate: float, compounding_periods: int) -> float:
    """Monthly rate equivalent to ``annual_rate`` compounded ``compounding_periods`` times a year."""
    if compounding_periods == 12:
        return annual_rate / 12
    per_period = safe_divide(annual_rate, compounding_periods)
    return safe_power(1 + per_period, compounding_periods / 12) - 1


def _horizon_months(term_years: float) -> int:
    """Whole months in ``term_years``, capped at ``config.MAX_SCHEDULE_PERIODS``."""
    if term_years <= 0:
        return 0
    months = max(1, int(round(term_years * 12)))
    if months > config.MAX_SCHEDULE_PERIODS:
        logger.warning(
            "Investment horizon of %d months capped at %d", months, config.MAX_SCHEDULE_PERIODS
        )
        months = config.MAX_SCHEDULE_PERIODS
    return months


def _yearly_breakdown(
    initial_amount: float,
    contribution: float,
    monthly_rate: float,
    months: int,
    contribution_at_start: bool = False,
    contribution_every: int = 1,
) -> List[GrowthBreakdownEntry]:
    # contributions land every ``contribution_every`` months, at the start or
    # the end of the month; a start-of-month contribution earns that month's growth
    breakdown: List[GrowthBreakdownEntry] = []
    balance = initial_amount
    cumulative_contributions = initial_amount
    cumulative_growth = 0.0
    for year_start in range(0, months, 12):
        opening = balance
        contributions = 0.0
        growth = 0.0
        for month in range(year_start, min(year_start + 12, months)):
            if contribution_at_start:
                due = contribution if month % contribution_every == 0 else 0.0
                balance = safe_add(balance, due)
                monthly_growth = safe_multiply(balance, monthly_rate)
                balance = safe_add(balance, monthly_growth)
            else:
                due = contribution if (month + 1) % contribution_every == 0 else 0.0
                monthly_growth = safe_multiply(balance, monthly_rate)
                balance = safe_add(balance, monthly_growth, due)
            growth += monthly_growth
            contributions += due
        cumulative_contributions = safe_add(cumulative_contributions, contributions)
        cumulative_growth = safe_add(cumulative_growth, growth)
        breakdown.append(
            GrowthBreakdownEntry(
                period_index=year_start // 12 + 1,
                opening_balance=round_to_precision(opening),
                contributions=round_to_precision(contributions),
                growth=round_to_precision(growth),
                closing_balance=round_to_precision(balance),
                cumulative_contributions=round_to_precision(cumulative_contributions),
                cumulative_growth=round_to_precision(cumulative_growth),
            )
        )
    return breakdown


def calculate_investment(
    initial_amount: Any,
    periodic_contribution: Any,
    annual_rate_percent: Any,
    term_years: Any,
    compounding_frequency: Any = "monthly",
) -> GrowthResult:
    """Project an investment of a lump sum plus monthly contributions.

    Parameters
    ----------
    initial_amount:
        Lump sum invested at the start.
    periodic_contribution:
        Amount added at the end of every month.
    annual_rate_percent:
        Nominal annual return in percent; values under -100 are floored.
    term_years:
        Investment horizon; fractional years produce a partial last bucket.
    compounding_frequency:
        ``annually``, ``semiannually``, ``quarterly``, ``monthly`` or
        ``daily``; anything else compounds monthly.

    Returns
    -------
    GrowthResult
        ``total_contributions`` includes the lump sum, ``total_growth`` is
        ``final_amount - total_contributions`` and ``annualized_return`` is
        the compound annual return on the money put in, in percent.
    """
    params = GrowthParameters(
        initial_amount=max(normalize(initial_amount), 0.0),
        periodic_contribution=max(normalize(periodic_contribution), 0.0),
        annual_rate_percent=clamp_number(
            annual_rate_percent, -100.0, config.MAX_SAFE_CALCULATION_VALUE
        ),
        term_years=normalize(term_years),
        compounding_frequency=compounding_frequency,
    )
    compounding = periods_per_year(params.compounding_frequency)
    initial = params.initial_amount
    contribution = params.periodic_contribution

    if params.term_years <= 0:
        logger.debug("Investment term %s is not positive; nothing to grow", params.term_years)
        return GrowthResult(
            final_amount=round_to_precision(initial),
            total_contributions=round_to_precision(initial),
            total_growth=0.0,
            annualized_return=0.0,
            periods_per_year=compounding,
            breakdown=[],
        )

    months = _horizon_months(params.term_years)
    years = months / 12

    rate = percentage_to_decimal(params.annual_rate_percent)
    monthly_rate = effective_monthly_rate(rate, compounding)

    growth_factor = safe_power(1 + safe_divide(rate, compounding), compounding * years)
    fv_initial = safe_multiply(initial, growth_factor)
    if is_effectively_zero(monthly_rate):
        fv_contributions = safe_multiply(contribution, months)
    else:
        annuity_factor = safe_divide(safe_power(1 + monthly_rate, months) - 1, monthly_rate)
        fv_contributions = safe_multiply(contribution, annuity_factor)

    final_amount = round_to_precision(safe_add(fv_initial, fv_contributions))
    total_contributions = round_to_precision(safe_add(initial, safe_multiply(contribution, months)))
    total_growth = round_to_precision(final_amount - total_contributions)

    annualized_return = 0.0
    if total_contributions > 0:
        ratio = safe_divide(final_amount, total_contributions)
        annualized_return = round_to_precision(
            safe_multiply(safe_power(ratio, 1 / years) - 1, 100)
        )

    return GrowthResult(
        final_amount=final_amount,
        total_contributions=total_contributions,
        total_growth=total_growth,
        annualized_return=annualized_return,
        periods_per_year=compounding,
        breakdown=_yearly_breakdown(initial, contribution, monthly_rate, months),
    )


def _simple_interest_error(message: str) -> SimpleInterestResult:
    return SimpleInterestResult(
        principal=0.0,
        simple_interest=0.0,
        total_amount=0.0,
        effective_rate=0.0,
        monthly_interest=0.0,
        error=message,
    )


def calculate_simple_interest(principal: Any, annual_rate_percent: Any, years: Any) -> SimpleInterestResult:
    """Simple (non-compounding) interest ``P * R * T / 100``."""
    amount = normalize(principal)
    rate = normalize(annual_rate_percent)
    time = normalize(years)
    if amount < 0:
        return _simple_interest_error("Principal amount cannot be negative.")
    if rate < 0:
        return _simple_interest_error("Interest rate cannot be negative.")
    if time < 0:
        return _simple_interest_error("Time period cannot be negative.")

    interest = safe_divide(safe_multiply(safe_multiply(amount, rate), time), 100)
    return SimpleInterestResult(
        principal=round_to_precision(amount),
        simple_interest=round_to_precision(interest),
        total_amount=round_to_precision(safe_add(amount, interest)),
        effective_rate=round_to_precision(safe_divide(safe_multiply(interest, 100), amount)),
        monthly_interest=round_to_precision(safe_divide(interest, safe_multiply(time, 12))),
    )


# -------- Savings instruments --------
PPF_RATE_PERCENT = 7.1

FD_COMPOUNDING_PERIODS = {
    "monthly": 12,
    "quarterly": 4,
    "yearly": 1,
}


def _savings_error(message: str) -> SavingsResult:
    logger.debug("Savings inputs rejected: %s", message)
    return SavingsResult(
        total_invested=0.0,
        maturity_amount=0.0,
        total_gains=0.0,
        effective_yield=0.0,
        breakdown=[],
        error=message,
    )


def _savings_result(
    invested: float, maturity: float, breakdown: List[GrowthBreakdownEntry]
) -> SavingsResult:
    gains = max(0.0, maturity - invested)
    effective_yield = 0.0
    if invested > 0:
        effective_yield = max(0.0, safe_multiply(safe_divide(maturity, invested) - 1, 100))
    return SavingsResult(
        total_invested=round_to_precision(invested),
        maturity_amount=round_to_precision(maturity),
        total_gains=round_to_precision(gains),
        effective_yield=round_to_precision(effective_yield),
        breakdown=breakdown,
    )


def _check_savings_inputs(amount: float, rate: float, years: float, amount_label: str) -> Optional[str]:
    if amount < 0:
        return f"{amount_label} cannot be negative."
    if rate < 0:
        return "Interest rate cannot be negative."
    if years < 0:
        return "Time period cannot be negative."
    return None


def calculate_sip(monthly_investment: Any, annual_return_percent: Any, years: Any) -> SavingsResult:
    """Systematic investment plan: a fixed amount invested at the start of every month.

    Each instalment earns the month it is invested in, at
    ``annual_return_percent / 12`` a month, so the maturity amount is the
    annuity-due value ``P * ((1 + r)^n - 1) / r * (1 + r)``.
    """
    amount = normalize(monthly_investment)
    rate = normalize(annual_return_percent)
    term = normalize(years)
    error = _check_savings_inputs(amount, rate, term, "Monthly investment")
    if error:
        return _savings_error(error)

    months = _horizon_months(term)
    monthly_rate = rate / 1200
    invested = safe_multiply(amount, months)
    if is_effectively_zero(monthly_rate):
        maturity = invested
    else:
        annuity_factor = safe_divide(safe_power(1 + monthly_rate, months) - 1, monthly_rate)
        maturity = safe_multiply(amount, safe_multiply(annuity_factor, 1 + monthly_rate))
    breakdown = _yearly_breakdown(0.0, amount, monthly_rate, months, contribution_at_start=True)
    return _savings_result(invested, maturity, breakdown)


def calculate_lumpsum(principal: Any, annual_return_percent: Any, years: Any) -> SavingsResult:
    """A one-off investment compounded once a year."""
    amount = normalize(principal)
    rate = normalize(annual_return_percent)
    term = normalize(years)
    error = _check_savings_inputs(amount, rate, term, "Principal amount")
    if error:
        return _savings_error(error)

    months = _horizon_months(term)
    annual_rate = percentage_to_decimal(rate)
    maturity = safe_multiply(amount, safe_power(1 + annual_rate, months / 12))
    breakdown = _yearly_breakdown(amount, 0.0, effective_monthly_rate(annual_rate, 1), months)
    return _savings_result(amount, maturity, breakdown)


def calculate_fd(
    principal: Any, annual_rate_percent: Any, years: Any, compounding_frequency: Any = "yearly"
) -> SavingsResult:
    """Fixed deposit: ``P * (1 + r / n)^(n * t)``.

    ``compounding_frequency`` is ``monthly``, ``quarterly`` or ``yearly``;
    anything else compounds yearly. Terms may be fractional (a 3-month
    deposit is ``years=0.25``).
    """
    amount = normalize(principal)
    rate = normalize(annual_rate_percent)
    term = normalize(years)
    error = _check_savings_inputs(amount, rate, term, "Principal amount")
    if error:
        return _savings_error(error)

    frequency = str(compounding_frequency).strip().lower() if compounding_frequency is not None else ""
    compounding = FD_COMPOUNDING_PERIODS.get(frequency, 1)
    months = _horizon_months(term)
    annual_rate = percentage_to_decimal(rate)
    growth_factor = safe_power(1 + safe_divide(annual_rate, compounding), compounding * months / 12)
    maturity = safe_multiply(amount, growth_factor)
    breakdown = _yearly_breakdown(amount, 0.0, effective_monthly_rate(annual_rate, compounding), months)
    return _savings_result(amount, maturity, breakdown)


def calculate_rd(monthly_deposit: Any, annual_rate_percent: Any, years: Any) -> SavingsResult:
    """Recurring deposit: a fixed deposit at the end of every month.

    Interest accrues monthly on the balance before that month's deposit.
    """
    amount = normalize(monthly_deposit)
    rate = normalize(annual_rate_percent)
    term = normalize(years)
    error = _check_savings_inputs(amount, rate, term, "Monthly deposit")
    if error:
        return _savings_error(error)

    months = _horizon_months(term)
    monthly_rate = rate / 1200
    invested = safe_multiply(amount, months)
    if is_effectively_zero(monthly_rate):
        maturity = invested
    else:
        annuity_factor = safe_divide(safe_power(1 + monthly_rate, months) - 1, monthly_rate)
        maturity = safe_multiply(amount, annuity_factor)
    breakdown = _yearly_breakdown(0.0, amount, monthly_rate, months)
    return _savings_result(invested, maturity, breakdown)


def calculate_ppf(
    yearly_investment: Any, years: Any, annual_rate_percent: Any = PPF_RATE_PERCENT
) -> SavingsResult:
    """Public provident fund: a yearly deposit at the start of every year.

    Interest is credited once a year on the balance including that year's
    deposit. Years are whole; a missing rate means ``PPF_RATE_PERCENT``.
    """
    amount = normalize(yearly_investment)
    rate = PPF_RATE_PERCENT if annual_rate_percent is None else normalize(annual_rate_percent)
    term = normalize(years)
    error = _check_savings_inputs(amount, rate, term, "Yearly investment")
    if error:
        return _savings_error(error)

    months = _horizon_months(max(0, int(round(term))))
    whole_years = months // 12
    annual_rate = percentage_to_decimal(rate)
    invested = safe_multiply(amount, whole_years)
    if is_effectively_zero(annual_rate):
        maturity = invested
    else:
        annuity_factor = safe_divide(safe_power(1 + annual_rate, whole_years) - 1, annual_rate)
        maturity = safe_multiply(amount, safe_multiply(annuity_factor, 1 + annual_rate))
    breakdown = _yearly_breakdown(
        0.0,
        amount,
        effective_monthly_rate(annual_rate, 1),
        whole_years * 12,
        contribution_at_start=True,
        contribution_every=12,
    )
    return _savings_result(invested, maturity, breakdown)
