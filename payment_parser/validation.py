from __future__ import annotations

from collections.abc import Collection
from decimal import Decimal
import math
from typing import Optional

from common.countries import registry
from payment_parser.parsers.registry import STATIC_SOURCES
from payment_parser.types import ParsedPayment

KNOWN_SOURCES: frozenset[str] = STATIC_SOURCES | frozenset(
    wallet for country in registry.all() for wallet in country.supported_wallets
)


def validate(parsed: Optional[ParsedPayment], known_sources: Optional[Collection[str]] = None) -> bool:
    if parsed is None:
        return False

    amount = parsed.amount
    if isinstance(amount, Decimal):
        if not amount.is_finite() or amount <= 0:
            return False
    elif isinstance(amount, (int, float)) and not isinstance(amount, bool):
        if math.isnan(amount) or math.isinf(amount) or amount <= 0:
            return False
    else:
        return False

    if not parsed.source:
        return False
    if known_sources is not None and parsed.source not in known_sources:
        return False
    return True
