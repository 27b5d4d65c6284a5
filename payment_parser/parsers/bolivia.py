"""Bolivia: Yape (QR transfers) and Tigo Money, amounts in bolivianos (Bs.)."""
from __future__ import annotations

import re
from typing import Optional

from payment_parser.amounts import AMOUNT
from payment_parser.parsers.base import (
    NAME_LOWER,
    NAME_UPPER,
    CountryParser,
    KeywordRoute,
    MethodParser,
    PatternRule,
    local_name_patterns,
    symbol_amount,
)
from payment_parser.types import ParsedPayment

COUNTRY = "BO"
CURRENCY = "BOB"

_BS = r"bs\.?\s*"
_NAME = rf"[{NAME_UPPER}][{NAME_UPPER}{NAME_LOWER}\s]+?"

YAPE = MethodParser(
    source="yape",
    currency=CURRENCY,
    rules=(
        # "QR DE NOMBRE te envió Bs. 10"
        PatternRule.compile(rf"qr\s+de\s+({_NAME})\s+te\s+envió\s+{_BS}{AMOUNT}", sender=1, amount=2),
        PatternRule.compile(
            rf"^({_NAME})\s+te\s+envió\s+{_BS}{AMOUNT}",
            sender=1,
            amount=2,
            flags=re.IGNORECASE | re.MULTILINE,
        ),
        PatternRule.compile(rf"yapeo\s+({_NAME})\s+te\s+envió\s+{_BS}{AMOUNT}", sender=1, amount=2),
        # "Recibiste Bs. 10 de NOMBRE via Yape"
        PatternRule.compile(rf"recibiste\s+{_BS}{AMOUNT}\s+de\s+([^\n]+?)(?:\s+via\s+yape|\.|$)", amount=1, sender=2),
    ),
)

TIGO_MONEY = MethodParser(
    source="tigo_money",
    currency=CURRENCY,
    rules=(
        PatternRule.compile(rf"tigo\s+money.*?{_BS}{AMOUNT}", amount=1),
        PatternRule.compile(rf"recibiste\s+{_BS}{AMOUNT}\s+.*?tigo", amount=1),
    ),
    sender_lookup=re.compile(
        r"\bde\s+(?!bs\.?\s*\d)([^\n]+?)(?:\s+(?:via|por|con|en)\s+tigo|\.|$)",
        re.IGNORECASE,
    ),
    default_sender="Tigo Money",
)

PARSER = CountryParser(
    country=COUNTRY,
    currency=CURRENCY,
    routes=(
        KeywordRoute(("yape", "yapeo", "qr de"), YAPE),
        KeywordRoute(("tigo",), TIGO_MONEY),
    ),
    fallback_amount=symbol_amount(r"bs\."),
    fallback_names=local_name_patterns(),
)


def parse_yape(text: str) -> Optional[ParsedPayment]:
    return YAPE.parse(text)


def parse_tigo_money(text: str) -> Optional[ParsedPayment]:
    return TIGO_MONEY.parse(text)


def parse(text: str) -> Optional[ParsedPayment]:
    return PARSER.parse(text)
