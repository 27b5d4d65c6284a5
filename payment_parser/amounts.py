from __future__ import annotations

from decimal import Decimal, InvalidOperation
import re
from typing import Optional

# "50", "50.00", "1,250.00"
AMOUNT = r"(\d{1,3}(?:,\d{3})+(?:\.\d{2})?|\d+(?:\.\d{2})?)"

_NOT_NUMERIC = re.compile(r"[^\d.]")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d+)?|\.\d+")


def parse_amount(raw: Optional[str]) -> Optional[Decimal]:
    """Turn a captured amount into a Decimal, dropping symbols, spaces and thousands separators.

    Only the leading number is used, so "12.50.3" reads as 12.50.
    """
    if not raw:
        return None
    cleaned = _NOT_NUMERIC.sub("", raw)
    m = _LEADING_NUMBER.match(cleaned)
    if not m:
        return None
    try:
        amount = Decimal(m.group(0))
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


def is_positive(amount: Optional[Decimal]) -> bool:
    return amount is not None and amount.is_finite() and amount > 0
