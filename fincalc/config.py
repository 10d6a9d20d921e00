"""Tunable constants for the calculation core.

Every engine reads these values through this module at call time (for
example ``config.MAX_SAFE_CALCULATION_VALUE``) rather than copying them, so a
deployment can override them through environment variables and tests can
patch them. Overrides are read once, at import:

``FINCALC_MAX_SAFE_VALUE``
    Largest magnitude the engines operate on (the minimum is its negative).
``FINCALC_MAX_SCHEDULE_PERIODS``
    Hard ceiling on the number of simulated periods.
``FINCALC_EPSILON``
    Magnitude below which a value is treated as zero.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def _float_from_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number", name, raw)
        return default
    if value != value or value in (float("inf"), float("-inf")) or value <= 0:
        logger.warning("Ignoring %s=%r: must be a positive finite number", name, raw)
        return default
    return value


MAX_SAFE_CALCULATION_VALUE = _float_from_env("FINCALC_MAX_SAFE_VALUE", 1e15)
MIN_SAFE_CALCULATION_VALUE = -MAX_SAFE_CALCULATION_VALUE

EPSILON = _float_from_env("FINCALC_EPSILON", 1e-9)

PRECISION_DECIMAL_PLACES = 10
CURRENCY_DECIMAL_PLACES = 2

# Anything under half a cent left on a loan is floating residue.
BALANCE_TOLERANCE = 0.005

MAX_SCHEDULE_PERIODS = int(_float_from_env("FINCALC_MAX_SCHEDULE_PERIODS", 2400))
