from __future__ import annotations

import asyncio
import random as _random
from typing import Callable, Protocol

from common.logger import Logger
from payment_parser.types import ParsingLogEntry

DEFAULT_SAMPLE_RATE = 0.1


class ParsingLogSink(Protocol):
    async def write(self, entry: ParsingLogEntry) -> None:
        ...


class ParsingAuditor:
    """
    Fire-and-forget audit trail of dynamic classification attempts.

    Every failure is written, successes only for a sampled fraction. Writes run
    as background tasks; their errors are discarded.
    """

    def __init__(
        self,
        sink: ParsingLogSink,
        *,
        sample_rate: float = DEFAULT_SAMPLE_RATE,
        random: Callable[[], float] = _random.random,
    ) -> None:
        self._sink = sink
        self._sample_rate = min(max(sample_rate, 0.0), 1.0)
        self._random = random
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def record_success(self, entry: ParsingLogEntry) -> bool:
        if self._random() >= self._sample_rate:
            return False
        self._dispatch(entry)
        return True

    def record_failure(self, entry: ParsingLogEntry) -> None:
        self._dispatch(entry)

    async def drain(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _dispatch(self, entry: ParsingLogEntry) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            Logger.debug("No running loop, parsing log entry dropped")
            return
        task = loop.create_task(self._write(entry))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, entry: ParsingLogEntry) -> None:
        try:
            await self._sink.write(entry)
        except Exception as e:
            Logger.debug("Parsing log write failed: %s", e)


class NullParsingLogSink:
    async def write(self, entry: ParsingLogEntry) -> None:
        return None
