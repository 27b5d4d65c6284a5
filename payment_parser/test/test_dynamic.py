import re
import unittest
from decimal import Decimal

from common.logger import Level, Logger
from payment_parser.audit import ParsingAuditor
from payment_parser.cache import PatternCache
from payment_parser.dynamic import DynamicPatternEngine, PatternCompileError, compile_pattern, parse_flags
from payment_parser.types import UNKNOWN_SENDER, DynamicPattern


class FakeLoader:
    def __init__(self, patterns):
        self.patterns = list(patterns)
        self.calls = 0
        self.fail = False

    async def load_active(self):
        self.calls += 1
        if self.fail:
            raise ConnectionError("pattern store unavailable")
        return list(self.patterns)


class FakeSink:
    def __init__(self, fail: bool = False) -> None:
        self.entries = []
        self.fail = fail

    async def write(self, entry) -> None:
        if self.fail:
            raise ConnectionError("log sink unavailable")
        self.entries.append(entry)


class CountingEngine(DynamicPatternEngine):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.evaluated = []

    def _evaluate(self, pattern, text):
        self.evaluated.append(pattern.id)
        return super()._evaluate(pattern, text)


CONCHAS = DynamicPattern(
    id=1,
    name="Conchas",
    pattern=r"recibiste (\d+) conchas de ([a-zA-Z ]+)",
    country="XX",
    wallet_type="conchas",
    amount_group=1,
    sender_group=2,
    priority=10,
)


def _engine(patterns, *, sink=None, random=lambda: 0.99, engine_cls=DynamicPatternEngine):
    loader = FakeLoader(patterns)
    sink = sink if sink is not None else FakeSink()
    cache = PatternCache(loader, ttl_seconds=300)
    auditor = ParsingAuditor(sink, sample_rate=0.1, random=random)
    return engine_cls(cache, auditor), loader, sink


class DynamicPatternEngineTest(unittest.IsolatedAsyncioTestCase):
    @classmethod
    def setUpClass(cls) -> None:
        if not Logger.is_configured():
            Logger.configure("payment-parser-test", level=Level.WARNING)

    async def test_configured_pattern(self) -> None:
        engine, _, _ = _engine([CONCHAS])

        result = await engine.parse("recibiste 50 conchas de Rey Triton", "XX")

        self.assertIsNotNone(result)
        self.assertEqual(result.amount, Decimal("50"))
        self.assertEqual(result.sender, "Rey Triton")
        self.assertEqual(result.source, "conchas")
        self.assertEqual(result.pattern_id, 1)
        self.assertEqual(result.raw_match, "recibiste 50 conchas de Rey Triton")

    async def test_first_priority_wins_and_stops(self) -> None:
        first = DynamicPattern(id=1, name="first", pattern=r"pago (\d+) de (\w+)", amount_group=1, sender_group=2, priority=1, wallet_type="a")
        second = DynamicPattern(id=2, name="second", pattern=r"pago (\d+)", amount_group=1, priority=2, wallet_type="b")
        engine, _, _ = _engine([first, second], engine_cls=CountingEngine)

        result = await engine.parse("pago 15 de Lucia", "PE")

        self.assertEqual(result.pattern_id, 1)
        self.assertEqual(result.source, "a")
        self.assertEqual(engine.evaluated, [1])

    async def test_malformed_pattern_is_skipped(self) -> None:
        broken = DynamicPattern(id=1, name="broken", pattern=r"pago (\d+", priority=1)
        good = DynamicPattern(id=2, name="good", pattern=r"pago (\d+)", priority=2, wallet_type="yape")
        engine, _, _ = _engine([broken, good])

        with self.assertLogs(level="WARNING"):
            result = await engine.parse("pago 20", "PE")

        self.assertEqual(result.pattern_id, 2)
        self.assertEqual(result.amount, Decimal("20"))

    async def test_evaluation_error_is_skipped(self) -> None:
        class ExplodingEngine(DynamicPatternEngine):
            def _evaluate(self, pattern, text):
                if pattern.id == 1:
                    raise RuntimeError("boom")
                return super()._evaluate(pattern, text)

        first = DynamicPattern(id=1, name="first", pattern=r"pago (\d+)", priority=1)
        second = DynamicPattern(id=2, name="second", pattern=r"pago (\d+)", priority=2)
        engine, _, _ = _engine([first, second], engine_cls=ExplodingEngine)

        with self.assertLogs(level="ERROR"):
            result = await engine.parse("pago 20", "PE")
        self.assertEqual(result.pattern_id, 2)

    async def test_amount_cleanup(self) -> None:
        pattern = DynamicPattern(id=3, name="total", pattern=r"total: (S/\s*[\d,.]+)", priority=1, currency="PEN")
        engine, _, _ = _engine([pattern])

        result = await engine.parse("Abono total: S/ 1,250.00", "PE")

        self.assertEqual(result.amount, Decimal("1250.00"))
        self.assertEqual(result.sender, UNKNOWN_SENDER)
        self.assertEqual(result.source, "other")
        self.assertEqual(result.currency, "PEN")

    async def test_zero_amount_falls_through(self) -> None:
        zero = DynamicPattern(id=1, name="zero", pattern=r"pago (\d+)", priority=1)
        other = DynamicPattern(id=2, name="other", pattern=r"total (\d+)", priority=2)
        engine, _, _ = _engine([zero, other])

        result = await engine.parse("pago 0 total 7", "PE")
        self.assertEqual(result.pattern_id, 2)

    async def test_case_sensitive_flags(self) -> None:
        pattern = DynamicPattern(id=1, name="strict", pattern=r"Recibiste (\d+)", regex_flags="u", priority=1)
        engine, _, _ = _engine([pattern])

        self.assertIsNone(await engine.parse("recibiste 5", "PE"))
        self.assertIsNotNone(await engine.parse("Recibiste 5", "PE"))

    async def test_country_scoping(self) -> None:
        bolivia = DynamicPattern(id=1, name="bo", pattern=r"pago (\d+)", country="BO", priority=1)
        everywhere = DynamicPattern(id=2, name="all", pattern=r"pago (\d+)", country="ALL", priority=2)
        engine, _, _ = _engine([bolivia, everywhere])

        self.assertEqual((await engine.parse("pago 3", "PE")).pattern_id, 2)
        self.assertEqual((await engine.parse("pago 3", "bo")).pattern_id, 1)

    async def test_get_active_patterns_by_wallet(self) -> None:
        yape = DynamicPattern(id=1, name="yape", pattern=r"(\d+)", country="PE", wallet_type="yape", priority=1)
        plin = DynamicPattern(id=2, name="plin", pattern=r"(\d+)", country="PE", wallet_type="plin", priority=2)
        anywhere = DynamicPattern(id=3, name="any", pattern=r"(\d+)", country="ALL", wallet_type="yape", priority=3)
        engine, _, _ = _engine([yape, plin, anywhere])

        self.assertEqual([p.id for p in await engine.get_active_patterns("PE")], [1, 2, 3])
        self.assertEqual([p.id for p in await engine.get_active_patterns("PE", "yape")], [1, 3])
        self.assertEqual([p.id for p in await engine.get_active_patterns("BO")], [3])

    async def test_failure_is_always_logged(self) -> None:
        engine, _, sink = _engine([CONCHAS])

        self.assertIsNone(await engine.parse("hola", "XX"))
        await engine.auditor.drain()

        self.assertEqual(len(sink.entries), 1)
        entry = sink.entries[0]
        self.assertFalse(entry.success)
        self.assertIsNone(entry.pattern_id)
        self.assertEqual(entry.country, "XX")

    async def test_success_is_sampled(self) -> None:
        engine, _, sink = _engine([CONCHAS], random=lambda: 0.5)
        await engine.parse("recibiste 50 conchas de Rey Triton", "XX")
        await engine.auditor.drain()
        self.assertEqual(sink.entries, [])

        engine, _, sink = _engine([CONCHAS], random=lambda: 0.05)
        await engine.parse("recibiste 50 conchas de Rey Triton", "XX")
        await engine.auditor.drain()
        self.assertEqual(len(sink.entries), 1)
        self.assertTrue(sink.entries[0].success)
        self.assertEqual(sink.entries[0].pattern_id, 1)
        self.assertEqual(sink.entries[0].extracted_amount, Decimal("50"))

    async def test_log_sink_errors_do_not_change_result(self) -> None:
        engine, _, _ = _engine([CONCHAS], sink=FakeSink(fail=True), random=lambda: 0.0)

        result = await engine.parse("recibiste 50 conchas de Rey Triton", "XX")
        self.assertIsNone(await engine.parse("nada", "XX"))
        await engine.auditor.drain()

        self.assertEqual(result.sender, "Rey Triton")

    async def test_warm_cache_survives_store_outage(self) -> None:
        engine, loader, _ = _engine([CONCHAS])
        await engine.parse("recibiste 1 conchas de A", "XX")

        engine.cache._last_refreshed_at -= 10_000
        loader.fail = True
        result = await engine.parse("recibiste 50 conchas de Rey Triton", "XX")

        self.assertEqual(loader.calls, 2)
        self.assertEqual(result.amount, Decimal("50"))

    async def test_cold_cache_with_store_outage(self) -> None:
        engine, loader, _ = _engine([CONCHAS])
        loader.fail = True

        self.assertIsNone(await engine.parse("recibiste 50 conchas de Rey Triton", "XX"))

    async def test_refresh_cache_reloads(self) -> None:
        engine, loader, _ = _engine([CONCHAS])
        await engine.parse("recibiste 50 conchas de Rey Triton", "XX")

        loader.patterns = []
        engine.refresh_cache()
        self.assertIsNone(await engine.parse("recibiste 50 conchas de Rey Triton", "XX"))
        self.assertEqual(loader.calls, 2)

    async def test_reload_drops_compiled_rules_of_replaced_sources(self) -> None:
        engine, loader, _ = _engine([CONCHAS])
        await engine.parse("recibiste 50 conchas de Rey Triton", "XX")

        edited = DynamicPattern(
            id=1,
            name="Conchas",
            pattern=r"recibiste (\d+) perlas de ([a-zA-Z ]+)",
            country="XX",
            wallet_type="conchas",
            sender_group=2,
            priority=10,
        )
        loader.patterns = [edited]
        engine.cache._last_refreshed_at -= 10_000
        result = await engine.parse("recibiste 7 perlas de Rey Triton", "XX")

        self.assertEqual(result.amount, Decimal("7"))
        self.assertEqual([key[0] for key in engine._compiled], [edited.pattern])

    async def test_failed_reload_keeps_compiled_rules(self) -> None:
        engine, loader, _ = _engine([CONCHAS])
        await engine.parse("recibiste 50 conchas de Rey Triton", "XX")

        loader.fail = True
        engine.cache._last_refreshed_at -= 10_000
        await engine.parse("recibiste 5 conchas de A", "XX")

        self.assertEqual([key[0] for key in engine._compiled], [CONCHAS.pattern])

    async def test_rejects_non_string(self) -> None:
        engine, _, _ = _engine([CONCHAS])
        with self.assertRaises(TypeError):
            await engine.parse(b"recibiste 50", "XX")


class CompilePatternTest(unittest.TestCase):
    def test_flags(self) -> None:
        self.assertEqual(parse_flags(None), re.IGNORECASE)
        self.assertEqual(parse_flags("im"), re.IGNORECASE | re.MULTILINE)
        self.assertEqual(parse_flags("gu"), 0)
        with self.assertRaises(ValueError):
            parse_flags("x")

    def test_group_count_is_checked(self) -> None:
        pattern = DynamicPattern(id=9, name="short", pattern=r"pago (\d+)", amount_group=1, sender_group=2)
        with self.assertRaises(PatternCompileError):
            compile_pattern(pattern)

    def test_bad_flag_is_compile_error(self) -> None:
        pattern = DynamicPattern(id=9, name="flags", pattern=r"pago (\d+)", regex_flags="iz")
        with self.assertRaises(PatternCompileError):
            compile_pattern(pattern)


if __name__ == "__main__":
    unittest.main()
