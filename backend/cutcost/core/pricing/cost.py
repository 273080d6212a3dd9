"""Cost calculator: length in the selected unit times the unit price."""

from __future__ import annotations

import math
import re
from typing import Mapping, Optional

from cutcost.core.pricing.currency import format_currency
from cutcost.utils.units import CM_TO_UNIT, convert_length

# Leading decimal number, the way a browser's parseFloat reads a number input
_LEADING_NUMBER_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_price(text: Optional[str]) -> Optional[float]:
    """Parse a price field. Empty -> None, unparseable -> nan."""
    if not text:
        return None
    m = _LEADING_NUMBER_RE.match(text)
    if not m:
        return math.nan
    return float(m.group(1))


def calculate_cost(
    length_cm: Optional[float],
    unit: str,
    price: Optional[str],
    factors: Mapping[str, float] = CM_TO_UNIT,
) -> Optional[float]:
    """Estimated cutting cost, or None while length or price is missing.

    An unparseable price gives nan rather than an error.
    """
    if length_cm is None:
        return None
    unit_price = parse_price(price)
    if unit_price is None:
        return None
    return convert_length(length_cm, unit, factors) * unit_price


def format_cost(amount: Optional[float], currency: str, locale: str) -> Optional[str]:
    """Formatted cost, or None when there is nothing sensible to display."""
    if amount is None or not math.isfinite(amount):
        return None
    return format_currency(amount, currency, locale)
