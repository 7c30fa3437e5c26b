"""
In-memory and caching schedule repositories.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from ..domain.models import Event, WorkhourRule
from ..services.availability import ScheduleRepositoryProtocol

T = TypeVar("T")


class InMemoryScheduleRepository:
    """Serves a fixed snapshot of events and work hours."""

    def __init__(
        self,
        events: Sequence[Event] = (),
        workhours: Sequence[WorkhourRule] = ()
    ):
        self._events = tuple(events)
        self._workhours = tuple(workhours)

    async def load_events(self) -> List[Event]:
        return list(self._events)

    async def load_workhours(self) -> List[WorkhourRule]:
        return list(self._workhours)


class _Snapshot(Generic[T]):
    """One cached data set with the monotonic time it was loaded at."""

    def __init__(self) -> None:
        self.value: Optional[Tuple[T, ...]] = None
        self.loaded_at = 0.0
        self.lock = asyncio.Lock()


class CachedScheduleRepository:
    """
    Shares a read-only snapshot of another repository for ttl_seconds.

    Failed loads are not cached; the error propagates and the next call retries.
    """

    def __init__(
        self,
        inner: ScheduleRepositoryProtocol,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None
    ):
        if ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must not be negative, got {ttl_seconds}")

        self._inner = inner
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._events: _Snapshot[Event] = _Snapshot()
        self._workhours: _Snapshot[WorkhourRule] = _Snapshot()

    async def load_events(self) -> List[Event]:
        return await self._get(self._events, self._inner.load_events, "events")

    async def load_workhours(self) -> List[WorkhourRule]:
        return await self._get(self._workhours, self._inner.load_workhours, "work hours")

    def invalidate(self) -> None:
        """Drop both snapshots so the next call reloads them."""
        self._events.value = None
        self._workhours.value = None

    async def _get(
        self,
        snapshot: _Snapshot[T],
        loader: Callable[[], Awaitable[List[T]]],
        name: str
    ) -> List[T]:
        async with snapshot.lock:
            now = self._clock()
            if snapshot.value is None or now - snapshot.loaded_at >= self._ttl_seconds:
                self._logger.debug("Refreshing cached %s", name)
                snapshot.value = tuple(await loader())
                snapshot.loaded_at = now
            return list(snapshot.value)
