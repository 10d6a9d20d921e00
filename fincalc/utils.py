"""Input normalization helpers for the calculation core.

Calculator forms hand us whatever the user typed: numbers, strings with
currency symbols and locale separators, booleans, lists from multi-value
fields, small objects from rich inputs, or nothing at all. ``normalize``
turns any of these into a finite float and never raises; unparseable input
becomes ``0.0``. The remaining helpers are small conveniences built on it.
"""

from __future__ import annotations

import math
import numbers
import re
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from . import config

# Lookup order for numbers carried inside a mapping.
MAPPING_KEYS = ("value", "amount", "number", "price")

_MAX_DEPTH = 32

_CURRENCY_SYMBOLS = "₹$€£¥₩₽₴₸₺₼₾₿฿₫₭₮₱₲₳₵"

# Currency signs plus thousands separators: commas, apostrophes (Swiss),
# underscores and every kind of whitespace (NBSP and thin spaces included).
_STRIP_RE = re.compile("[" + re.escape(_CURRENCY_SYMBOLS) + r",'_\s]")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")


def _finite_or_zero(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        return 0.0
    if abs(value) < config.EPSILON:
        return 0.0
    return value


def _parse_string(text: str) -> float:
    cleaned = _STRIP_RE.sub("", text.strip())
    if not cleaned:
        return 0.0
    match = _NUMBER_RE.search(cleaned)
    if match is None:
        return 0.0
    try:
        return _finite_or_zero(float(match.group(0)))
    except (ValueError, OverflowError):
        return 0.0


def parse_unbounded(value: Any, _depth: int = 0) -> float:
    """Parse ``value`` like ``normalize`` but without magnitude clamping.

    Validators use this to tell "too large" apart from a legitimate maximum.
    """
    if _depth > _MAX_DEPTH or value is None:
        return 0.0
    # bool is a subclass of int, so it must be tested first
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (numbers.Real, Decimal)):
        try:
            return _finite_or_zero(float(value))
        except (ValueError, OverflowError):
            return 0.0
    if isinstance(value, (bytes, bytearray)):
        return _parse_string(bytes(value).decode("utf-8", errors="ignore"))
    if isinstance(value, str):
        return _parse_string(value)
    if isinstance(value, Sequence):
        if len(value) == 0:
            return 0.0
        return parse_unbounded(value[0], _depth + 1)
    if isinstance(value, Mapping):
        for key in MAPPING_KEYS:
            if key in value:
                return parse_unbounded(value[key], _depth + 1)
        return 0.0
    return 0.0


def normalize(value: Any) -> float:
    """Convert any raw input into a finite float.

    Parameters
    ----------
    value:
        ``None``, a bool, any real number, a string (currency symbols,
        thousands separators such as ``"₹10,00,000"`` and surrounding
        whitespace are stripped; the first numeric substring wins), a
        sequence (its first element is used) or a mapping (looked up under
        ``value``, ``amount``, ``number`` and ``price``, in that order).

    Returns
    -------
    float
        The parsed number clamped to the configured safe range. NaN,
        infinities, empty or unparseable input all give ``0.0``.
    """
    parsed = parse_unbounded(value)
    return min(max(parsed, config.MIN_SAFE_CALCULATION_VALUE), config.MAX_SAFE_CALCULATION_VALUE)


def format_large_number(value: float, decimals: int = 2) -> str:
    """Format a magnitude with a K/M/B/T suffix, e.g. ``1e15 -> "1000.00T"``."""
    value = normalize(value)
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")):
        if magnitude >= threshold:
            return f"{sign}{magnitude / threshold:.{decimals}f}{suffix}"
    return f"{sign}{magnitude:.{decimals}f}"


def clamp_number(value: Any, minimum: float, maximum: float) -> float:
    return min(max(normalize(value), minimum), maximum)


def is_positive_number(value: Any) -> bool:
    return normalize(value) > 0


def is_non_negative_number(value: Any) -> bool:
    return normalize(value) >= 0


def percentage_to_decimal(percentage: Any) -> float:
    return normalize(percentage) / 100


def decimal_to_percentage(fraction: Any) -> float:
    return normalize(fraction) * 100
