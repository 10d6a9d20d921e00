"""Total arithmetic primitives.

Every function here accepts raw or already-normalized operands, never raises
and never returns NaN or an infinity. Results that would leave the safe
range are clamped to ``config.MAX_SAFE_CALCULATION_VALUE`` (or its negative);
operations with no meaningful result return the caller's ``fallback``.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from . import config
from .utils import normalize

logger = logging.getLogger(__name__)


def _clamp(result: float, operation: str) -> float:
    if math.isnan(result):
        return 0.0
    if result > config.MAX_SAFE_CALCULATION_VALUE:
        logger.debug("%s overflow clamped to %s", operation, config.MAX_SAFE_CALCULATION_VALUE)
        return config.MAX_SAFE_CALCULATION_VALUE
    if result < config.MIN_SAFE_CALCULATION_VALUE:
        logger.debug("%s underflow clamped to %s", operation, config.MIN_SAFE_CALCULATION_VALUE)
        return config.MIN_SAFE_CALCULATION_VALUE
    return result


def is_effectively_zero(value: Any, tolerance: float | None = None) -> bool:
    """Return True when ``|value|`` is below ``tolerance`` (default ``config.EPSILON``)."""
    if tolerance is None:
        tolerance = config.EPSILON
    return abs(normalize(value)) < tolerance


def safe_add(*values: Any) -> float:
    """Sum any number of operands; ``None`` and garbage count as zero."""
    total = 0.0
    for value in values:
        total = _clamp(total + normalize(value), "add")
    return total


def safe_subtract(a: Any, b: Any) -> float:
    return _clamp(normalize(a) - normalize(b), "subtract")


def safe_multiply(a: Any, b: Any) -> float:
    return _clamp(normalize(a) * normalize(b), "multiply")


def safe_divide(numerator: Any, denominator: Any, fallback: float = 0.0) -> float:
    """Divide, returning ``fallback`` for a zero divisor or a non-finite quotient."""
    den = normalize(denominator)
    if is_effectively_zero(den):
        return fallback
    result = normalize(numerator) / den
    if math.isnan(result) or math.isinf(result):
        return fallback
    return _clamp(result, "divide")


def safe_power(base: Any, exponent: Any, fallback: float = 0.0) -> float:
    """Raise ``base`` to ``exponent``.

    ``x ** 0`` is 1 for every ``x`` (``0 ** 0`` included) and ``0 ** y`` is 0
    for positive ``y``. A zero base with a negative exponent, or a negative
    base with a fractional exponent, has no finite real result and gives
    ``fallback``. Overflow is clamped.
    """
    base_num = normalize(base)
    exp_num = normalize(exponent)
    if is_effectively_zero(exp_num):
        return 1.0
    if is_effectively_zero(base_num):
        return 0.0 if exp_num > 0 else fallback
    try:
        result = math.pow(base_num, exp_num)
    except OverflowError:
        odd_power = float(exp_num).is_integer() and exp_num % 2 == 1
        result = -math.inf if base_num < 0 and odd_power else math.inf
    except ValueError:
        return fallback
    return _clamp(result, "power")


def round_to_precision(value: Any, digits: int = 2) -> float:
    """Round half-up to ``digits`` decimal places (``1.005 -> 1.01``).

    The float's shortest repr is rounded as a decimal, so values that print
    as an exact half round away from zero as a person would expect.
    """
    number = normalize(value)
    try:
        quantum = Decimal(1).scaleb(-digits)
        rounded = Decimal(repr(number)).quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return number
    return float(rounded) + 0.0
