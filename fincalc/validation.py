"""Form-level validation built on the number normalizer.

Where the engines silently fall back to zero, the functions here report
what is wrong so a form can show it. Nothing in this module raises for bad
input: single values produce a ``ParseResult`` or ``SafeNumberResult`` and
whole forms a ``RecordValidation``.

Each calculator form is described by a table of ``FieldRule`` objects, one
explicit rule per field, and validated by ``validate_record``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from . import config
from .data_models import ParseResult, RecordValidation, SafeNumberResult
from .engine import PREPAYMENT_FREQUENCIES, TENURE_TYPES
from .growth import COMPOUNDING_PERIODS, FD_COMPOUNDING_PERIODS, PPF_RATE_PERCENT
from .safe_math import is_effectively_zero, round_to_precision
from .utils import format_large_number, normalize, parse_unbounded

REQUIRED_MESSAGE = "This field is required"


def validate_safe_number(value: Any) -> SafeNumberResult:
    """Parse ``value`` and reject magnitudes outside the safe range.

    Unlike ``normalize``, which clamps, this reports an out-of-range number
    as invalid so the user can be told.
    """
    parsed = parse_unbounded(value)
    if parsed > config.MAX_SAFE_CALCULATION_VALUE:
        return SafeNumberResult(
            is_valid=False,
            number=parsed,
            error=(
                "Number is too large. Maximum supported value is "
                f"{format_large_number(config.MAX_SAFE_CALCULATION_VALUE)}"
            ),
        )
    if parsed < config.MIN_SAFE_CALCULATION_VALUE:
        return SafeNumberResult(
            is_valid=False,
            number=parsed,
            error=(
                "Number is too small. Minimum supported value is "
                f"{format_large_number(config.MIN_SAFE_CALCULATION_VALUE)}"
            ),
        )
    return SafeNumberResult(is_valid=True, number=parsed)


def parse_and_validate(
    value: Any,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
    allow_zero: bool = True,
    allow_negative: bool = True,
    decimals: Optional[int] = None,
) -> ParseResult:
    """Normalize ``value`` and check it against a range and sign policy.

    The value is rounded to ``decimals`` places (default
    ``config.PRECISION_DECIMAL_PLACES``) before the checks, which run in
    this order: zero, sign, lower bound, upper bound. The first failure is
    reported.
    """
    if min_value is None:
        min_value = config.MIN_SAFE_CALCULATION_VALUE
    if max_value is None:
        max_value = config.MAX_SAFE_CALCULATION_VALUE
    if decimals is None:
        decimals = config.PRECISION_DECIMAL_PLACES

    rounded = round_to_precision(normalize(value), decimals)
    if not allow_zero and is_effectively_zero(rounded):
        return ParseResult(False, rounded, "Zero is not allowed")
    if not allow_negative and rounded < 0:
        return ParseResult(False, rounded, "Negative numbers are not allowed")
    if rounded < min_value:
        return ParseResult(False, rounded, f"Value must be at least {format_large_number(min_value)}")
    if rounded > max_value:
        return ParseResult(False, rounded, f"Value cannot exceed {format_large_number(max_value)}")
    return ParseResult(True, rounded)


def make_number_parser(**policy: Any) -> Callable[[Any], ParseResult]:
    """Bind a ``parse_and_validate`` policy into a one-argument parser."""

    def parser(value: Any) -> ParseResult:
        return parse_and_validate(value, **policy)

    return parser


parse_positive_number = make_number_parser(min_value=0.01, allow_zero=False, allow_negative=False)
parse_non_negative_number = make_number_parser(min_value=0, allow_negative=False)
parse_percentage = make_number_parser(min_value=0, max_value=100, allow_negative=False)
parse_interest_rate = make_number_parser(min_value=0, max_value=50, allow_negative=False)


@dataclass(frozen=True)
class FieldRule:
    """How one form field is validated.

    Numeric fields use ``parser``; choice fields list their ``choices``
    instead. Optional fields that are missing take ``default``.
    """

    parser: Optional[Callable[[Any], ParseResult]] = None
    required: bool = True
    default: Any = None
    whole: bool = False
    choices: Tuple[str, ...] = ()


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_field(rule: FieldRule, value: Any) -> Tuple[Any, Optional[str]]:
    """Return ``(parsed_value, error)`` for a single field."""
    if _is_missing(value):
        if rule.required:
            return None, REQUIRED_MESSAGE
        return rule.default, None
    if rule.choices:
        choice = str(value).strip().lower()
        if choice not in rule.choices:
            return None, "Must be one of: " + ", ".join(rule.choices)
        return choice, None
    result = rule.parser(value) if rule.parser else parse_and_validate(value)
    if not result.is_valid:
        return None, result.error
    if rule.whole and not float(result.value).is_integer():
        return None, "Must be a whole number"
    return result.value, None


def validate_record(form: Mapping, rules: Mapping[str, FieldRule]) -> RecordValidation:
    """Validate every field of ``form`` named in ``rules``; extra keys are ignored."""
    outcome = RecordValidation()
    for name, rule in rules.items():
        value, error = validate_field(rule, form.get(name))
        if error:
            outcome.errors[name] = error
        else:
            outcome.values[name] = value
    return outcome


_RATE = FieldRule(parse_interest_rate)
_TERM_YEARS = FieldRule(make_number_parser(min_value=1, max_value=50), whole=True)
_OPTIONAL_AMOUNT = FieldRule(parse_non_negative_number, required=False, default=0.0)

LOAN_RULES: Dict[str, FieldRule] = {
    "principal": FieldRule(make_number_parser(min_value=100, allow_zero=False, allow_negative=False)),
    "annual_rate_percent": _RATE,
    "term_years": _TERM_YEARS,
    "extra_monthly_payment": _OPTIONAL_AMOUNT,
}

MORTGAGE_RULES: Dict[str, FieldRule] = {
    "home_price": FieldRule(make_number_parser(min_value=1000, allow_zero=False, allow_negative=False)),
    "down_payment": _OPTIONAL_AMOUNT,
    "annual_rate_percent": _RATE,
    "term_years": _TERM_YEARS,
    "annual_property_tax": _OPTIONAL_AMOUNT,
    "annual_insurance": _OPTIONAL_AMOUNT,
    "annual_pmi": _OPTIONAL_AMOUNT,
}

INVESTMENT_RULES: Dict[str, FieldRule] = {
    "initial_amount": FieldRule(parse_non_negative_number),
    "periodic_contribution": FieldRule(parse_non_negative_number),
    "annual_rate_percent": FieldRule(make_number_parser(min_value=-50, max_value=50)),
    "term_years": FieldRule(make_number_parser(min_value=1, max_value=100), whole=True),
    "compounding_frequency": FieldRule(
        required=False, default="monthly", choices=tuple(COMPOUNDING_PERIODS)
    ),
}

EMI_RULES: Dict[str, FieldRule] = {
    "loan_amount": FieldRule(parse_positive_number),
    "annual_rate_percent": _RATE,
    "tenure": FieldRule(parse_positive_number),
    "tenure_type": FieldRule(required=False, default="years", choices=TENURE_TYPES),
    "prepayment_amount": _OPTIONAL_AMOUNT,
    "prepayment_frequency": FieldRule(required=False, default="none", choices=PREPAYMENT_FREQUENCIES),
}

SIMPLE_INTEREST_RULES: Dict[str, FieldRule] = {
    "principal": FieldRule(parse_non_negative_number),
    "annual_rate_percent": FieldRule(parse_non_negative_number),
    "years": FieldRule(parse_non_negative_number),
}

_DEPOSIT_RATE = FieldRule(make_number_parser(min_value=1, max_value=20))
_RETURN_RATE = FieldRule(make_number_parser(min_value=1, max_value=50))

SIP_RULES: Dict[str, FieldRule] = {
    "monthly_investment": FieldRule(make_number_parser(min_value=100, max_value=1e6)),
    "annual_return_percent": _RETURN_RATE,
    "years": _TERM_YEARS,
}

LUMPSUM_RULES: Dict[str, FieldRule] = {
    "principal": FieldRule(make_number_parser(min_value=1000, max_value=1e8)),
    "annual_return_percent": _RETURN_RATE,
    "years": _TERM_YEARS,
}

FD_RULES: Dict[str, FieldRule] = {
    "principal": FieldRule(make_number_parser(min_value=1000, max_value=5e7)),
    "annual_rate_percent": _DEPOSIT_RATE,
    "years": FieldRule(make_number_parser(min_value=0.25, max_value=20)),
    "compounding_frequency": FieldRule(
        required=False, default="yearly", choices=tuple(FD_COMPOUNDING_PERIODS)
    ),
}

RD_RULES: Dict[str, FieldRule] = {
    "monthly_deposit": FieldRule(make_number_parser(min_value=100, max_value=1e6)),
    "annual_rate_percent": _DEPOSIT_RATE,
    "years": FieldRule(make_number_parser(min_value=1, max_value=10), whole=True),
}

PPF_RULES: Dict[str, FieldRule] = {
    "yearly_investment": FieldRule(make_number_parser(min_value=500, max_value=150_000)),
    "years": FieldRule(make_number_parser(min_value=15, max_value=50), whole=True),
    "annual_rate_percent": FieldRule(
        make_number_parser(min_value=1, max_value=20), required=False, default=PPF_RATE_PERCENT
    ),
}


def validate_loan_inputs(form: Mapping) -> RecordValidation:
    return validate_record(form, LOAN_RULES)


def validate_mortgage_inputs(form: Mapping) -> RecordValidation:
    """Validate a mortgage form; the down payment may not exceed the price."""
    outcome = validate_record(form, MORTGAGE_RULES)
    price = outcome.values.get("home_price")
    down = outcome.values.get("down_payment")
    if price is not None and down is not None and down > price:
        del outcome.values["down_payment"]
        outcome.errors["down_payment"] = "Down payment cannot exceed the home price"
    return outcome


def validate_investment_inputs(form: Mapping) -> RecordValidation:
    return validate_record(form, INVESTMENT_RULES)


def validate_emi_inputs(form: Mapping) -> RecordValidation:
    return validate_record(form, EMI_RULES)


def validate_simple_interest_inputs(form: Mapping) -> RecordValidation:
    return validate_record(form, SIMPLE_INTEREST_RULES)


def validate_sip_inputs(form: Mapping) -> RecordValidation:
    return validate_record(form, SIP_RULES)


def validate_lumpsum_inputs(form: Mapping) -> RecordValidation:
    return validate_record(form, LUMPSUM_RULES)


def validate_fd_inputs(form: Mapping) -> RecordValidation:
    return validate_record(form, FD_RULES)


def validate_rd_inputs(form: Mapping) -> RecordValidation:
    return validate_record(form, RD_RULES)


def validate_ppf_inputs(form: Mapping) -> RecordValidation:
    return validate_record(form, PPF_RULES)
