from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
import enum
from typing import Any, Optional

UNKNOWN_SENDER = "Desconocido"
OTHER_SOURCE = "other"
ALL_COUNTRIES = "ALL"


class RejectReason(str, enum.Enum):
    outgoing = "outgoing"
    promotional = "promotional"
    no_amount = "no-amount"


@dataclass(frozen=True)
class ParsedPayment:
    amount: Decimal
    sender: str
    source: str
    currency: Optional[str] = None
    pattern_id: Optional[int] = None
    raw_match: Optional[str] = None

    def with_currency(self, currency: Optional[str]) -> "ParsedPayment":
        """Attach a currency unless the parser already set one."""
        if self.currency or not currency:
            return self
        return replace(self, currency=currency)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "amount": float(self.amount),
            "sender": self.sender,
            "source": self.source,
            "currency": self.currency,
        }
        if self.pattern_id is not None:
            data["pattern_id"] = self.pattern_id
        if self.raw_match is not None:
            data["raw_match"] = self.raw_match
        return data


@dataclass(frozen=True)
class DynamicPattern:
    id: int
    name: str
    pattern: str
    country: str = ALL_COUNTRIES
    wallet_type: Optional[str] = None
    regex_flags: Optional[str] = "i"
    amount_group: int = 1
    sender_group: int = 0
    priority: int = 100
    is_active: bool = True
    currency: Optional[str] = None

    def applies_to(self, country: Optional[str], wallet_type: Optional[str] = None) -> bool:
        country_ok = not country or self.country == ALL_COUNTRIES or self.country == country
        wallet_ok = not wallet_type or self.wallet_type == wallet_type
        return country_ok and wallet_ok


@dataclass(frozen=True)
class ParsingLogEntry:
    text: str
    country: Optional[str]
    pattern_id: Optional[int]
    success: bool
    extracted_amount: Optional[Decimal] = None
    extracted_sender: Optional[str] = None
    extracted_source: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
