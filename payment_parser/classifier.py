from __future__ import annotations

from typing import Optional

from common import db
from common.countries import CountryRegistry, registry as default_registry
from common.logger import Logger
from payment_parser.audit import ParsingAuditor
from payment_parser.cache import PatternCache
from payment_parser.config import ParserConfig
from payment_parser.dynamic import DynamicPatternEngine
from payment_parser.filters import should_reject
from payment_parser.router import PaymentRouter
from payment_parser.store import DbParsingLogSink, DbPatternStore
from payment_parser.types import ParsedPayment
from payment_parser.validation import validate


class PaymentClassifier:
    """
    Entry point for the notification ingestion endpoint.

    Dynamic patterns are offered first; static country parsers only run when
    none of them matches. ``None`` means "not a receivable payment".
    """

    def __init__(
        self,
        *,
        router: Optional[PaymentRouter] = None,
        engine: Optional[DynamicPatternEngine] = None,
        registry: CountryRegistry = default_registry,
    ) -> None:
        self._registry = registry
        self._router = router or PaymentRouter(registry)
        self._engine = engine

    @property
    def engine(self) -> Optional[DynamicPatternEngine]:
        return self._engine

    async def classify(self, text: str, country_code: Optional[str]) -> Optional[ParsedPayment]:
        reason = should_reject(text)
        if reason is not None:
            Logger.info("Notification rejected: reason=%s country=%s", reason.value, country_code)
            return None

        result = await self._classify_dynamic(text, country_code)
        if result is None:
            result = self._router.extract(text, country_code)

        if result is None:
            Logger.info("No parser matched the notification for %s", country_code)
            return None
        if not validate(result):
            Logger.warning("Discarding invalid parse result: %r", result)
            return None
        return result

    async def _classify_dynamic(self, text: str, country_code: Optional[str]) -> Optional[ParsedPayment]:
        if self._engine is None:
            return None
        result = await self._engine.parse(text, country_code)
        if result is None:
            return None
        profile = self._registry.get(country_code)
        return result.with_currency(profile.currency_code if profile else None)


def build_classifier(config: ParserConfig, *, with_database: Optional[bool] = None) -> PaymentClassifier:
    if with_database is None:
        with_database = db.is_initialized()
    engine = None
    if with_database and config.dynamic_patterns_enabled:
        cache = PatternCache(DbPatternStore(), ttl_seconds=config.pattern_cache_ttl_seconds)
        auditor = ParsingAuditor(
            DbParsingLogSink(text_limit=config.parsing_log_text_limit),
            sample_rate=config.parsing_log_sample_rate,
        )
        engine = DynamicPatternEngine(cache, auditor)
    return PaymentClassifier(engine=engine)
