from __future__ import annotations

from typing import Callable, Optional

from payment_parser.parsers import bolivia, peru
from payment_parser.types import ParsedPayment

CountryParse = Callable[[str], Optional[ParsedPayment]]

# country code -> dedicated parser; must agree with CountryProfile.has_dedicated_parser
DEDICATED_PARSERS: dict[str, CountryParse] = {
    peru.COUNTRY: peru.parse,
    bolivia.COUNTRY: bolivia.parse,
}

STATIC_SOURCES: frozenset[str] = frozenset(
    {"other"}
    | {m.source for m in (peru.YAPE, peru.PLIN, peru.BCP, bolivia.YAPE, bolivia.TIGO_MONEY)}
)


def get_parser(country: Optional[str]) -> Optional[CountryParse]:
    if not country:
        return None
    return DEDICATED_PARSERS.get(country.upper())
