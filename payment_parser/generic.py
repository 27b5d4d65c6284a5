"""
Currency-symbol driven last-resort parser.

Used for countries without a dedicated parser and when a dedicated parser
finds nothing. The caller attaches the currency code.
"""
from __future__ import annotations

import re
from typing import Optional

from payment_parser.amounts import AMOUNT, is_positive, parse_amount
from payment_parser.parsers.base import NAME_LOWER, NAME_UPPER, extract_sender
from payment_parser.types import OTHER_SOURCE, ParsedPayment

# first symbol present in the text wins
KNOWN_SYMBOLS: tuple[str, ...] = ("s/", "bs.", "r$", "$", "€", "₡", "₲", "q", "l", "c$", "b/.", "rd$")

SENDER_PATTERNS: tuple[re.Pattern[str], ...] = (
    # "de NOMBRE", "from NAME"
    re.compile(rf"\b(?:de|from)\s+([{NAME_LOWER}\s]+?)(?:\s+(?:via|con|desde|te|envió)|[.,]|$)", re.IGNORECASE),
    # "NOMBRE te envió", "NAME sent you"
    re.compile(rf"([{NAME_UPPER}][{NAME_LOWER}\s]+?)\s+(?:te\s+)?(?:envió|envio|sent|transferred|paid)", re.IGNORECASE),
    re.compile(r"(?:recibiste|received).*?\b(?:de|from)\s+([^\n.,]+)", re.IGNORECASE),
    re.compile(r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\s+paid\s+you", re.IGNORECASE),
    re.compile(r"you\s+received.*?from\s+([^\n.,]+)", re.IGNORECASE),
    # two or more upper-case words
    re.compile(rf"([{NAME_UPPER}]{{2,}}(?:\s+[{NAME_UPPER}]{{2,}})+)"),
)

_MIN_SENDER_LENGTH = 3


def detect_symbol(text: str) -> Optional[str]:
    lowered = text.lower()
    for symbol in KNOWN_SYMBOLS:
        if symbol in lowered:
            return symbol
    return None


def amount_pattern(symbol: str) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(symbol)}\s*{AMOUNT}", re.IGNORECASE)


def parse_generic(text: str, currency_symbol: Optional[str] = None) -> Optional[ParsedPayment]:
    symbol = currency_symbol or detect_symbol(text)
    if not symbol:
        return None

    m = amount_pattern(symbol).search(text)
    if not m:
        return None
    amount = parse_amount(m.group(1))
    if not is_positive(amount):
        return None

    return ParsedPayment(
        amount=amount,
        sender=extract_sender(text, SENDER_PATTERNS, min_length=_MIN_SENDER_LENGTH),
        source=OTHER_SOURCE,
        raw_match=m.group(0),
    )
