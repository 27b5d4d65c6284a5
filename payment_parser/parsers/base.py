"""
Building blocks shared by the per-country parsers.

Every pattern carries its own ``amount_group``/``sender_group`` so phrasings
that put the name first and phrasings that put the amount first can live in
the same ordered list.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Callable, Iterable, Optional, Sequence

from payment_parser.amounts import AMOUNT, is_positive, parse_amount
from payment_parser.types import OTHER_SOURCE, UNKNOWN_SENDER, ParsedPayment

_WHITESPACE = re.compile(r"\s+")

# name characters used across the Spanish wallet phrasings
NAME_UPPER = "A-ZÁÉÍÓÚÑ"
NAME_LOWER = "a-záéíóúñ"


def clean_sender(raw: str) -> str:
    return _WHITESPACE.sub(" ", raw).strip()


def extract_sender(
    text: str,
    patterns: Iterable[re.Pattern[str]],
    default: str = UNKNOWN_SENDER,
    min_length: int = 1,
) -> str:
    for pattern in patterns:
        m = pattern.search(text)
        if m and m.group(1):
            sender = clean_sender(m.group(1))
            if len(sender) >= min_length:
                return sender
    return default


@dataclass(frozen=True)
class PatternRule:
    regex: re.Pattern[str]
    amount_group: int
    sender_group: int = 0

    @classmethod
    def compile(cls, pattern: str, *, amount: int, sender: int = 0, flags: int = re.IGNORECASE) -> "PatternRule":
        return cls(re.compile(pattern, flags), amount_group=amount, sender_group=sender)


@dataclass(frozen=True)
class MethodParser:
    """Ordered rules for one payment method; the first rule that matches wins."""

    source: str
    currency: str
    rules: Sequence[PatternRule]
    # used when the winning rule captures no sender
    sender_lookup: Optional[re.Pattern[str]] = None
    default_sender: str = UNKNOWN_SENDER
    sender_cleanup: Optional[Callable[[str], str]] = None

    def parse(self, text: str) -> Optional[ParsedPayment]:
        for rule in self.rules:
            m = rule.regex.search(text)
            if not m:
                continue
            amount = parse_amount(m.group(rule.amount_group))
            if not is_positive(amount):
                continue
            return ParsedPayment(
                amount=amount,
                sender=self._sender(text, m, rule),
                source=self.source,
                currency=self.currency,
                raw_match=m.group(0),
            )
        return None

    def _sender(self, text: str, m: re.Match[str], rule: PatternRule) -> str:
        sender = ""
        if rule.sender_group > 0 and m.group(rule.sender_group):
            sender = clean_sender(m.group(rule.sender_group))
        elif self.sender_lookup is not None:
            found = self.sender_lookup.search(text)
            if found:
                sender = clean_sender(found.group(1))
        if sender and self.sender_cleanup is not None:
            sender = self.sender_cleanup(sender)
        return sender or self.default_sender


@dataclass(frozen=True)
class KeywordRoute:
    keywords: tuple[str, ...]
    parser: MethodParser

    def applies(self, normalized: str) -> bool:
        return any(k in normalized for k in self.keywords)


@dataclass(frozen=True)
class CountryParser:
    """Keyword-routed wallet parsers plus a currency-anchored local fallback."""

    country: str
    currency: str
    routes: Sequence[KeywordRoute]
    fallback_amount: re.Pattern[str]
    fallback_names: Sequence[re.Pattern[str]] = field(default_factory=tuple)

    def parse(self, text: str) -> Optional[ParsedPayment]:
        normalized = text.lower().strip()

        for route in self.routes:
            if not route.applies(normalized):
                continue
            result = route.parser.parse(text)
            if result is not None:
                return result

        return self.parse_fallback(text)

    def parse_fallback(self, text: str) -> Optional[ParsedPayment]:
        m = self.fallback_amount.search(text)
        if not m:
            return None
        amount = parse_amount(m.group(1))
        if not is_positive(amount):
            return None
        return ParsedPayment(
            amount=amount,
            sender=extract_sender(text, self.fallback_names),
            source=OTHER_SOURCE,
            currency=self.currency,
            raw_match=m.group(0),
        )


def symbol_amount(symbol_regex: str) -> re.Pattern[str]:
    """``<symbol> [space] <amount>`` with the amount in group 1."""
    return re.compile(rf"{symbol_regex}\s*{AMOUNT}", re.IGNORECASE)


def local_name_patterns() -> tuple[re.Pattern[str], ...]:
    return (
        re.compile(rf"\bde\s+([{NAME_LOWER}\s]+?)(?:\s+via|\s+con|\s+desde|\.|$)", re.IGNORECASE),
        re.compile(rf"([{NAME_UPPER}][{NAME_LOWER}\s]+?)\s+te\s+(?:envió|transfirió)", re.IGNORECASE),
    )
