import asyncio
import os

from sqlmodel import SQLModel

from common import db
from common.db import db_call
from common.logger import Level, Logger
from common.models import NotificationParsingLog, NotificationPattern  # важно: импортировать модели, чтобы они зарегистрировались

DEFAULT_PATTERNS = [
    {
        "name": "Yape Perú - Yape! te envió un pago",
        "country": "PE",
        "wallet_type": "yape",
        "pattern": r"yape!\s+([^!]+?)\s+te\s+envió\s+un\s+pago\s+por\s+s/?\s*(\d+(?:\.\d{2})?)",
        "amount_group": 2,
        "sender_group": 1,
        "priority": 10,
        "currency": "PEN",
    },
    {
        "name": "Yape Perú - Recibiste de",
        "country": "PE",
        "wallet_type": "yape",
        "pattern": r"recibiste\s+s/?\s*(\d+(?:\.\d{2})?)\s+de\s+([^\n]+?)\s+via\s+yape",
        "amount_group": 1,
        "sender_group": 2,
        "priority": 20,
        "currency": "PEN",
    },
    {
        "name": "Plin - te ha plineado",
        "country": "PE",
        "wallet_type": "plin",
        "pattern": r"^(.+?)\s+te\s+ha\s+plineado\s+s/?\s*(\d+(?:\.\d{2})?)",
        "regex_flags": "im",
        "amount_group": 2,
        "sender_group": 1,
        "priority": 30,
        "currency": "PEN",
    },
    {
        "name": "Yape Bolivia - QR de",
        "country": "BO",
        "wallet_type": "yape",
        "pattern": r"qr\s+de\s+(.+?)\s+te\s+envió\s+bs\.?\s*(\d+(?:\.\d{2})?)",
        "amount_group": 2,
        "sender_group": 1,
        "priority": 10,
        "currency": "BOB",
    },
]


async def seed_default_patterns() -> int:
    async def work(d):
        if await d.patterns.count() > 0:
            return 0
        for p in DEFAULT_PATTERNS:
            await d.patterns.add(**p)
        return len(DEFAULT_PATTERNS)

    return await db_call(work)


async def main() -> None:
    Logger.configure("migrate", Level.INFO)
    engine = db.init_db_engine(
        os.environ.get("PARSER_DB_USERNAME"),
        os.environ.get("PARSER_DB_PASSWORD"),
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    Logger.info("Tables ready: %s, %s", NotificationPattern.__tablename__, NotificationParsingLog.__tablename__)

    seeded = await seed_default_patterns()
    Logger.info("Seeded %d default notification patterns", seeded)
    await db.dispose_db_engine()


if __name__ == "__main__":
    asyncio.run(main())
