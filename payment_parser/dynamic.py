"""
Data-driven pattern layer.

Rules live in the ``notification_patterns`` table and are edited without a
deployment. Each rule is a regex source plus flags and the capture-group
indices of amount and sender. Rules are tried in ascending priority; the first
one that yields a positive amount wins and nothing after it is evaluated.
"""
from __future__ import annotations

import re
from typing import Optional

from common.logger import Logger
from payment_parser.amounts import is_positive, parse_amount
from payment_parser.audit import ParsingAuditor
from payment_parser.cache import PatternCache
from payment_parser.types import (
    OTHER_SOURCE,
    UNKNOWN_SENDER,
    DynamicPattern,
    ParsedPayment,
    ParsingLogEntry,
)

DEFAULT_FLAGS = "i"

# flag letters as stored by the admin panel (JavaScript RegExp syntax)
_FLAG_MAP: dict[str, int] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    # unicode is the default for str patterns; global/sticky mean nothing to re.search
    "u": 0,
    "g": 0,
    "y": 0,
}


class PatternCompileError(ValueError):
    def __init__(self, pattern: DynamicPattern, reason: str) -> None:
        super().__init__(f"pattern {pattern.id} ({pattern.name!r}): {reason}")
        self.pattern = pattern
        self.reason = reason


def parse_flags(flags: Optional[str]) -> int:
    value = 0
    for letter in flags or DEFAULT_FLAGS:
        if letter.isspace():
            continue
        if letter not in _FLAG_MAP:
            raise ValueError(f"unsupported regex flag {letter!r}")
        value |= _FLAG_MAP[letter]
    return value


def compile_pattern(pattern: DynamicPattern) -> re.Pattern[str]:
    if pattern.amount_group < 1:
        raise PatternCompileError(pattern, f"amount_group must be >= 1, got {pattern.amount_group}")
    try:
        flags = parse_flags(pattern.regex_flags)
        compiled = re.compile(pattern.pattern, flags)
    except (ValueError, re.error) as e:
        raise PatternCompileError(pattern, str(e)) from e

    needed = max(pattern.amount_group, pattern.sender_group)
    if compiled.groups < needed:
        raise PatternCompileError(pattern, f"regex has {compiled.groups} groups, needs {needed}")
    return compiled


def _memo_key(pattern: DynamicPattern) -> tuple:
    return (pattern.pattern, pattern.regex_flags, pattern.amount_group, pattern.sender_group)


class DynamicPatternEngine:
    def __init__(self, cache: PatternCache, auditor: ParsingAuditor) -> None:
        self._cache = cache
        self._auditor = auditor
        # (source, flags, groups) -> compiled regex, or None when it does not compile
        self._compiled: dict[tuple, Optional[re.Pattern[str]]] = {}
        # snapshot the memo was last pruned against
        self._compiled_for: tuple[DynamicPattern, ...] = ()

    @property
    def cache(self) -> PatternCache:
        return self._cache

    @property
    def auditor(self) -> ParsingAuditor:
        return self._auditor

    def refresh_cache(self) -> None:
        """Force a reload on the next parse (after patterns are edited)."""
        self._cache.invalidate()
        self._compiled.clear()

    async def get_active_patterns(
        self,
        country: Optional[str],
        wallet_type: Optional[str] = None,
    ) -> list[DynamicPattern]:
        snapshot = await self._cache.get()
        if snapshot is not self._compiled_for:
            self._prune_compiled(snapshot)
        code = country.upper() if country else None
        return [p for p in snapshot if p.applies_to(code, wallet_type)]

    async def parse(self, text: str, country: Optional[str]) -> Optional[ParsedPayment]:
        if not isinstance(text, str):
            raise TypeError(f"notification text must be str, got {type(text).__name__}")
        if not text.strip():
            return None

        patterns = await self.get_active_patterns(country)
        Logger.debug("Trying %d dynamic patterns for %s", len(patterns), country)

        for pattern in patterns:
            try:
                result = self._evaluate(pattern, text)
            except Exception:
                Logger.exception("Dynamic pattern %s (%r) failed, skipping", pattern.id, pattern.name)
                continue
            if result is None:
                continue

            Logger.info("Dynamic pattern matched: %r (id=%s)", pattern.name, pattern.id)
            self._auditor.record_success(
                ParsingLogEntry(
                    text=text,
                    country=country,
                    pattern_id=pattern.id,
                    success=True,
                    extracted_amount=result.amount,
                    extracted_sender=result.sender,
                    extracted_source=result.source,
                )
            )
            return result

        Logger.info("No dynamic pattern matched for %s", country)
        self._auditor.record_failure(
            ParsingLogEntry(text=text, country=country, pattern_id=None, success=False)
        )
        return None

    def _prune_compiled(self, snapshot: tuple[DynamicPattern, ...]) -> None:
        live = {_memo_key(p) for p in snapshot}
        self._compiled = {k: v for k, v in self._compiled.items() if k in live}
        self._compiled_for = snapshot

    def _compile(self, pattern: DynamicPattern) -> Optional[re.Pattern[str]]:
        key = _memo_key(pattern)
        if key in self._compiled:
            return self._compiled[key]
        try:
            compiled: Optional[re.Pattern[str]] = compile_pattern(pattern)
        except PatternCompileError as e:
            Logger.warning("Skipping malformed dynamic pattern: %s", e)
            compiled = None
        self._compiled[key] = compiled
        return compiled

    def _evaluate(self, pattern: DynamicPattern, text: str) -> Optional[ParsedPayment]:
        regex = self._compile(pattern)
        if regex is None:
            return None

        # original case: stored patterns may be case-sensitive
        m = regex.search(text)
        if not m:
            return None

        amount = parse_amount(m.group(pattern.amount_group))
        if not is_positive(amount):
            return None

        sender = UNKNOWN_SENDER
        if pattern.sender_group > 0:
            captured = m.group(pattern.sender_group)
            if captured and captured.strip():
                sender = captured.strip()

        return ParsedPayment(
            amount=amount,
            sender=sender,
            source=pattern.wallet_type or OTHER_SOURCE,
            currency=pattern.currency,
            pattern_id=pattern.id,
            raw_match=m.group(0),
        )
