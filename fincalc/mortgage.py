"""Mortgage engine.

A mortgage is an amortizing loan on ``home_price - down_payment`` with
escrow items (property tax, homeowner's insurance and mortgage insurance)
collected alongside each installment. Escrow is a flat monthly share of the
annual amounts; only the principal-and-interest part amortizes, and it does
so through the loan engine's simulator.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .data_models import MortgageResult, Termination
from .engine import installment, simulate_schedule
from .safe_math import round_to_precision, safe_add, safe_divide, safe_multiply
from .utils import normalize

logger = logging.getLogger(__name__)


def calculate_mortgage(
    home_price: Any,
    down_payment: Any,
    annual_rate_percent: Any,
    term_years: Any,
    annual_property_tax: Any = 0,
    annual_insurance: Any = 0,
    annual_pmi: Any = 0,
    max_periods: Optional[int] = None,
) -> MortgageResult:
    """Compute the monthly cost, totals and schedule of a mortgage.

    The loan amount is ``max(0, home_price - down_payment)``. A down payment
    covering the whole price is not an error: the schedule is empty and
    every loan figure is zero, while escrow is still reported.
    ``loan_to_value`` is a percentage of the home price.
    """
    price = max(normalize(home_price), 0.0)
    down = max(normalize(down_payment), 0.0)
    rate = normalize(annual_rate_percent)
    years = normalize(term_years)

    monthly_tax = safe_divide(max(normalize(annual_property_tax), 0.0), 12)
    monthly_insurance = safe_divide(max(normalize(annual_insurance), 0.0), 12)
    monthly_pmi = safe_divide(max(normalize(annual_pmi), 0.0), 12)
    escrow = safe_add(monthly_tax, monthly_insurance, monthly_pmi)

    loan_amount = max(0.0, price - down)
    loan_to_value = safe_multiply(safe_divide(loan_amount, price), 100)

    payment = 0.0
    total_interest = 0.0
    total_paid = 0.0
    schedule = []
    termination = Termination.NOT_STARTED
    if loan_amount > 0 and years > 0 and rate >= 0:
        monthly_rate = rate / 1200
        periods = max(1, int(round(years * 12)))
        payment = installment(loan_amount, monthly_rate, periods)
        run = simulate_schedule(loan_amount, monthly_rate, payment, periods, None, max_periods)
        schedule = run.schedule
        termination = run.termination
        total_interest = run.total_interest
        total_paid = run.total_paid
    else:
        logger.debug(
            "Nothing to amortize (loan %.2f, %s years at %s%%)", loan_amount, years, rate
        )

    return MortgageResult(
        periodic_payment=payment,
        total_paid=round_to_precision(total_paid),
        total_interest=round_to_precision(total_interest),
        payoff_periods=len(schedule),
        interest_saved=0.0,
        schedule=schedule,
        principal=round_to_precision(loan_amount),
        termination=termination,
        home_price=round_to_precision(price),
        down_payment=round_to_precision(down),
        loan_amount=round_to_precision(loan_amount),
        monthly_principal_and_interest=payment,
        monthly_property_tax=round_to_precision(monthly_tax),
        monthly_insurance=round_to_precision(monthly_insurance),
        monthly_pmi=round_to_precision(monthly_pmi),
        monthly_payment=round_to_precision(payment + escrow),
        loan_to_value=round_to_precision(loan_to_value),
    )
