from __future__ import annotations

from typing import Optional

from common.countries import CountryRegistry, registry as default_registry
from common.logger import Logger
from payment_parser.filters import should_reject
from payment_parser.generic import parse_generic
from payment_parser.parsers.registry import CountryParse, get_parser
from payment_parser.types import ParsedPayment


class PaymentRouter:
    """Static side of classification: filters, then country parser, then generic fallback."""

    def __init__(self, registry: CountryRegistry = default_registry) -> None:
        self._registry = registry

    @property
    def registry(self) -> CountryRegistry:
        return self._registry

    def parse(self, text: str, country_code: Optional[str]) -> Optional[ParsedPayment]:
        reason = should_reject(text)
        if reason is not None:
            Logger.info("Notification rejected: reason=%s country=%s", reason.value, country_code)
            return None
        return self.extract(text, country_code)

    def extract(self, text: str, country_code: Optional[str]) -> Optional[ParsedPayment]:
        """Run the parsers on text that already passed the filters."""
        profile = self._registry.get(country_code)
        if profile is None:
            Logger.warning("Country %r is not configured, using generic parser", country_code)
            return parse_generic(text)

        if profile.has_dedicated_parser:
            parser = self._dedicated(profile.code)
            if parser is not None:
                result = parser(text)
                if result is not None:
                    Logger.debug("Parsed by %s parser: source=%s", profile.code, result.source)
                    return result.with_currency(profile.currency_code)

        Logger.debug("Using generic parser for %s", profile.code)
        result = parse_generic(text, profile.currency_symbol)
        if result is None:
            return None
        return result.with_currency(profile.currency_code)

    def _dedicated(self, code: str) -> Optional[CountryParse]:
        parser = get_parser(code)
        if parser is None:
            Logger.warning("Country %s is flagged with a dedicated parser but none is registered", code)
        return parser
