"""Perú: Yape, Plin and BCP deposits, amounts in soles (S/)."""
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

COUNTRY = "PE"
CURRENCY = "PEN"

_SOL = r"s/?\s*"
_NAME = rf"[{NAME_UPPER}][{NAME_UPPER}{NAME_LOWER}\s]+?"

_INTERBANK = re.compile(r"interbank", re.IGNORECASE)


def _strip_interbank(sender: str) -> str:
    return _INTERBANK.sub("", sender).strip(" :-")


YAPE = MethodParser(
    source="yape",
    currency=CURRENCY,
    rules=(
        # "Confirmación de Pago Yape! NOMBRE te envió un pago por S/ 50"
        PatternRule.compile(rf"yape!\s+([^!]+?)\s+te\s+envió\s+un\s+pago\s+por\s+{_SOL}{AMOUNT}", sender=1, amount=2),
        # "NOMBRE te envió S/ 50"
        PatternRule.compile(
            rf"^({_NAME})\s+te\s+envió\s+{_SOL}{AMOUNT}",
            sender=1,
            amount=2,
            flags=re.IGNORECASE | re.MULTILINE,
        ),
        # "NOMBRE te ha yapeado S/ 50", "NOMBRE te yapeó S/ 50"
        PatternRule.compile(
            rf"^({_NAME})\s+te\s+(?:ha\s+yapeado|yapeó)\s+{_SOL}{AMOUNT}",
            sender=1,
            amount=2,
            flags=re.IGNORECASE | re.MULTILINE,
        ),
        # "Recibiste S/ 50.00 de NOMBRE via Yape"
        PatternRule.compile(rf"recibiste\s+{_SOL}{AMOUNT}\s+de\s+([^\n]+?)(?:\s+via\s+yape|\.|$)", amount=1, sender=2),
    ),
)

PLIN = MethodParser(
    source="plin",
    currency=CURRENCY,
    rules=(
        PatternRule.compile(rf"(.+?)\s+te\s+ha\s+plineado\s+{_SOL}{AMOUNT}", sender=1, amount=2),
        PatternRule.compile(rf"(.+?)\s+te\s+plineó\s+{_SOL}{AMOUNT}", sender=1, amount=2),
        PatternRule.compile(rf"recibiste\s+{_SOL}{AMOUNT}\s+de\s+([^\n]+?)(?:\s+con\s+plin|\.|$)", amount=1, sender=2),
    ),
    sender_cleanup=_strip_interbank,
)

BCP = MethodParser(
    source="bcp",
    currency=CURRENCY,
    rules=(
        PatternRule.compile(rf"bcp.*?abono.*?{_SOL}{AMOUNT}", amount=1),
        PatternRule.compile(rf"transferencia.*?recibida.*?{_SOL}{AMOUNT}", amount=1),
        PatternRule.compile(rf"dep[oó]sito.*?{_SOL}{AMOUNT}", amount=1),
    ),
    sender_lookup=re.compile(r"\bde\s+(?!s/)([^\n]+)", re.IGNORECASE),
    default_sender="BCP",
)

PARSER = CountryParser(
    country=COUNTRY,
    currency=CURRENCY,
    routes=(
        KeywordRoute(("yape",), YAPE),
        KeywordRoute(("plin",), PLIN),
        KeywordRoute(("bcp", "banco de credito", "banco de crédito"), BCP),
    ),
    fallback_amount=symbol_amount(r"s/"),
    fallback_names=local_name_patterns(),
)


def parse_yape(text: str) -> Optional[ParsedPayment]:
    return YAPE.parse(text)


def parse_plin(text: str) -> Optional[ParsedPayment]:
    return PLIN.parse(text)


def parse_bcp(text: str) -> Optional[ParsedPayment]:
    return BCP.parse(text)


def parse(text: str) -> Optional[ParsedPayment]:
    return PARSER.parse(text)
