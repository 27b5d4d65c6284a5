from __future__ import annotations

from typing import Optional

from common.db import db_call
from common.models import NotificationPattern
from payment_parser.types import ALL_COUNTRIES, DynamicPattern, ParsingLogEntry

DEFAULT_TEXT_LIMIT = 1000
SENDER_LIMIT = 255


def to_dynamic_pattern(row: NotificationPattern) -> DynamicPattern:
    return DynamicPattern(
        id=row.id,
        name=row.name,
        pattern=row.pattern,
        country=(row.country or ALL_COUNTRIES).upper(),
        wallet_type=row.wallet_type,
        regex_flags=row.regex_flags,
        amount_group=row.amount_group,
        sender_group=row.sender_group or 0,
        priority=row.priority,
        is_active=row.is_active,
        currency=row.currency,
    )


class DbPatternStore:
    async def load_active(self) -> list[DynamicPattern]:
        async def work(db):
            rows = await db.patterns.active()
            return [to_dynamic_pattern(r) for r in rows]

        return await db_call(work)


def _truncate(value: Optional[str], limit: int) -> Optional[str]:
    if value is None:
        return None
    return value[:limit]


class DbParsingLogSink:
    def __init__(self, *, text_limit: int = DEFAULT_TEXT_LIMIT) -> None:
        self._text_limit = text_limit

    async def write(self, entry: ParsingLogEntry) -> None:
        async def work(db):
            await db.parsing_logs.add(
                notification_text=entry.text[: self._text_limit],
                country=entry.country,
                pattern_id=entry.pattern_id,
                success=entry.success,
                extracted_amount=entry.extracted_amount,
                extracted_sender=_truncate(entry.extracted_sender, SENDER_LIMIT),
                extracted_source=entry.extracted_source,
            )

        await db_call(work)
