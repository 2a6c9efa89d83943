"""
Variance arithmetic and amount parsing utilities.
"""

import math
import re
from typing import Any, Optional

import numpy as np
import pandas as pd


# Sentinel used when the prior-year balance is zero and the current one is not
ZERO_BASE_VARIANCE_PERCENT = 100.0

_AMOUNT_NOISE = re.compile(r"[,\s$€£¥₹]")


def calculate_variance_amount(current: float, previous: float) -> float:
    """
    Calculate absolute variance amount between two values.

    Args:
        current: Current year balance
        previous: Prior year balance

    Returns:
        Variance amount
    """
    return current - previous


def calculate_variance_percentage(current: float, previous: float) -> float:
    """
    Calculate variance percentage between two values.

    A zero prior balance cannot be used as a base, so the result falls back to
    +/-100% following the sign of the current balance (0% when both are zero).

    Args:
        current: Current year balance
        previous: Prior year balance

    Returns:
        Variance percentage
    """
    if previous == 0:
        if current > 0:
            return ZERO_BASE_VARIANCE_PERCENT
        if current < 0:
            return -ZERO_BASE_VARIANCE_PERCENT
        return 0.0
    return (calculate_variance_amount(current, previous) / previous) * 100


def is_finite_number(value: Any) -> bool:
    """Check that value is a real, finite number (bools excluded)."""
    if isinstance(value, bool):
        return False
    if not isinstance(value, (int, float, np.integer, np.floating)):
        return False
    return math.isfinite(float(value))


def parse_amount(value: Any) -> Optional[float]:
    """
    Parse a spreadsheet cell into a finite float.

    Handles native numbers, comma thousands separators, currency symbols and
    accounting-style negatives such as ``(1,250.00)``. Decimal-comma amounts
    such as ``1.234,56`` are rejected rather than guessed at.

    Args:
        value: Raw cell value

    Returns:
        Parsed amount, or None if the value is empty or not a finite number
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, np.integer, np.floating)):
        if pd.isna(value) or not math.isfinite(float(value)):
            return None
        return float(value)

    text = str(value).strip()
    if not text:
        return None

    negative = False
    if text.startswith('(') and text.endswith(')'):
        negative = True
        text = text[1:-1]

    if '.' in text and text.rfind(',') > text.rfind('.'):
        return None

    text = _AMOUNT_NOISE.sub('', text)
    if text.endswith('-'):
        # Trailing minus as exported by some ledgers
        negative = not negative
        text = text[:-1]

    try:
        amount = float(text)
    except ValueError:
        return None

    if not math.isfinite(amount):
        return None
    return -amount if negative else amount
