"""fincalc - robust numeric core for public financial calculators.

Every calculator accepts raw user input, normalizes it defensively and
returns plain dataclass records with money rounded to cents.
"""

from __future__ import annotations

__version__ = "1.0.0"

from .config import MAX_SAFE_CALCULATION_VALUE, MIN_SAFE_CALCULATION_VALUE
from .data_models import (
    EMIResult,
    GrowthBreakdownEntry,
    GrowthResult,
    LoanResult,
    MortgageResult,
    ParseResult,
    PaymentScheduleEntry,
    RecordValidation,
    SafeNumberResult,
    SavingsResult,
    SimpleInterestResult,
    Termination,
)
from .engine import (
    amortization_step,
    amortizing_payment,
    calculate_emi,
    calculate_loan,
    installment,
    simulate_schedule,
)
from .growth import (
    calculate_fd,
    calculate_investment,
    calculate_lumpsum,
    calculate_ppf,
    calculate_rd,
    calculate_simple_interest,
    calculate_sip,
    periods_per_year,
)
from .mortgage import calculate_mortgage
from .safe_math import (
    is_effectively_zero,
    round_to_precision,
    safe_add,
    safe_divide,
    safe_multiply,
    safe_power,
    safe_subtract,
)
from .utils import normalize
from .validation import parse_and_validate, validate_safe_number

__all__ = [
    "__version__",
    "MAX_SAFE_CALCULATION_VALUE",
    "MIN_SAFE_CALCULATION_VALUE",
    # Records
    "EMIResult",
    "GrowthBreakdownEntry",
    "GrowthResult",
    "LoanResult",
    "MortgageResult",
    "ParseResult",
    "PaymentScheduleEntry",
    "RecordValidation",
    "SafeNumberResult",
    "SavingsResult",
    "SimpleInterestResult",
    "Termination",
    # Normalizer and primitives
    "normalize",
    "validate_safe_number",
    "parse_and_validate",
    "is_effectively_zero",
    "round_to_precision",
    "safe_add",
    "safe_subtract",
    "safe_multiply",
    "safe_divide",
    "safe_power",
    # Engines
    "amortizing_payment",
    "installment",
    "amortization_step",
    "simulate_schedule",
    "calculate_loan",
    "calculate_emi",
    "calculate_mortgage",
    "calculate_investment",
    "calculate_simple_interest",
    "calculate_sip",
    "calculate_lumpsum",
    "calculate_fd",
    "calculate_rd",
    "calculate_ppf",
    "periods_per_year",
]
