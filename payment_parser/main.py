import asyncio
import json
import os
import sys

from common import db
from common.logger import Level, Logger
from payment_parser.classifier import build_classifier
from payment_parser.config import load_config


def _database_configured() -> bool:
    if os.environ.get("DATABASE_URL", "").strip():
        return True
    return bool(os.environ.get("PARSER_DB_USERNAME") and os.environ.get("PARSER_DB_PASSWORD"))


def main() -> None:
    Logger.configure("payment-parser", level=Level.INFO)
    Logger.silence("sqlalchemy.engine", "asyncio", level=Level.WARNING)

    cfg = load_config()
    country = (sys.argv[1] if len(sys.argv) > 1 else cfg.default_country).upper()

    if _database_configured():
        db.init_db_engine(
            os.environ.get("PARSER_DB_USERNAME"),
            os.environ.get("PARSER_DB_PASSWORD"),
        )
    else:
        Logger.warning("No database configured, dynamic patterns disabled")

    classifier = build_classifier(cfg)

    async def _run() -> None:
        try:
            for line in sys.stdin:
                text = line.rstrip("\n")
                if not text.strip():
                    continue
                result = await classifier.classify(text.replace("\\n", "\n"), country)
                print(json.dumps(result.to_dict() if result else None, ensure_ascii=False), flush=True)
        finally:
            if classifier.engine is not None:
                await classifier.engine.auditor.drain()
            await db.dispose_db_engine()

    asyncio.run(_run())


if __name__ == "__main__":
    main()
