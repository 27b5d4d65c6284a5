from __future__ import annotations

import enum
import time
from typing import Callable, Optional, Protocol, Sequence

from common.logger import Logger
from payment_parser.types import DynamicPattern

DEFAULT_TTL_SECONDS = 300.0


class PatternLoader(Protocol):
    async def load_active(self) -> Sequence[DynamicPattern]:
        ...


class CacheState(str, enum.Enum):
    cold = "cold"
    warm = "warm"
    stale = "stale"


class PatternCache:
    """
    In-memory snapshot of the active dynamic patterns.

    The snapshot is replaced as a whole on refresh and keeps the loader's
    priority order. A failed reload keeps the previous snapshot; with nothing
    loaded yet it yields an empty set. Concurrent callers may trigger duplicate
    reloads; the last one to finish wins.
    """

    def __init__(
        self,
        loader: PatternLoader,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._ttl = ttl_seconds
        self._clock = clock
        self._snapshot: tuple[DynamicPattern, ...] = ()
        self._last_refreshed_at: Optional[float] = None

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def last_refreshed_at(self) -> Optional[float]:
        return self._last_refreshed_at

    @property
    def snapshot(self) -> tuple[DynamicPattern, ...]:
        return self._snapshot

    @property
    def state(self) -> CacheState:
        if self._last_refreshed_at is None:
            return CacheState.cold
        if self._clock() - self._last_refreshed_at > self._ttl:
            return CacheState.stale
        return CacheState.warm

    def invalidate(self) -> None:
        self._snapshot = ()
        self._last_refreshed_at = None
        Logger.info("Pattern cache invalidated")

    async def get(self) -> tuple[DynamicPattern, ...]:
        if self.state is not CacheState.warm or not self._snapshot:
            await self.refresh()
        return self._snapshot

    async def refresh(self) -> tuple[DynamicPattern, ...]:
        Logger.info("Refreshing notification pattern cache")
        try:
            loaded = await self._loader.load_active()
        except Exception:
            Logger.exception("Failed to load notification patterns, keeping %d cached", len(self._snapshot))
            return self._snapshot

        self._snapshot = tuple(p for p in loaded if p.is_active)
        self._last_refreshed_at = self._clock()
        Logger.info("Pattern cache refreshed: %d patterns", len(self._snapshot))
        return self._snapshot
