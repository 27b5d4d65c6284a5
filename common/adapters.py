from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from common.models import NotificationParsingLog, NotificationPattern


class PatternsAdapter:
    def __init__(self, session: AsyncSession):
        self.s = session

    async def active(self) -> list[NotificationPattern]:
        # lower priority number = evaluated first
        stmt = (
            select(NotificationPattern)
            .where(NotificationPattern.is_active.is_(True))
            .order_by(NotificationPattern.priority.asc(), NotificationPattern.id.asc())
        )
        res = await self.s.execute(stmt)
        return list(res.scalars().all())

    async def count(self) -> int:
        res = await self.s.execute(select(func.count()).select_from(NotificationPattern))
        return int(res.scalar_one())

    async def add(
        self,
        *,
        name: str,
        pattern: str,
        country: str = "ALL",
        wallet_type: Optional[str] = None,
        regex_flags: Optional[str] = "i",
        amount_group: int = 1,
        sender_group: int = 0,
        priority: int = 100,
        is_active: bool = True,
        currency: Optional[str] = None,
    ) -> NotificationPattern:
        p = NotificationPattern(
            name=name,
            pattern=pattern,
            country=country,
            wallet_type=wallet_type,
            regex_flags=regex_flags,
            amount_group=amount_group,
            sender_group=sender_group,
            priority=priority,
            is_active=is_active,
            currency=currency,
        )
        self.s.add(p)
        await self.s.flush()
        return p


class ParsingLogsAdapter:
    def __init__(self, session: AsyncSession):
        self.s = session

    async def add(
        self,
        *,
        notification_text: str,
        country: Optional[str],
        pattern_id: Optional[int],
        success: bool,
        extracted_amount: Optional[Decimal] = None,
        extracted_sender: Optional[str] = None,
        extracted_source: Optional[str] = None,
    ) -> NotificationParsingLog:
        row = NotificationParsingLog(
            notification_text=notification_text,
            country=country,
            pattern_id=pattern_id,
            success=success,
            extracted_amount=extracted_amount,
            extracted_sender=extracted_sender,
            extracted_source=extracted_source,
        )
        self.s.add(row)
        await self.s.flush()
        return row

    async def recent(self, limit: int = 50) -> list[NotificationParsingLog]:
        stmt = (
            select(NotificationParsingLog)
            .order_by(NotificationParsingLog.id.desc())
            .limit(limit)
        )
        res = await self.s.execute(stmt)
        return list(res.scalars().all())


class DbAdapters:
    def __init__(self, session: AsyncSession):
        self.patterns = PatternsAdapter(session)
        self.parsing_logs = ParsingLogsAdapter(session)
        self._s = session

    async def commit(self) -> None:
        await self._s.commit()

    async def rollback(self) -> None:
        await self._s.rollback()

    async def close(self) -> None:
        await self._s.close()
