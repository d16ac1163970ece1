"""Client-side query cache and the optimistic mutation transaction."""
import asyncio
import logging
import weakref
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

from ..errors import ProcedureError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class QueryCache(Generic[T]):
    """Holds the last fetched list and at most one fetch in flight.

    A fetch cancelled through ``cancel`` never writes its result, so a stale
    response cannot overwrite data patched in the meantime.
    """

    def __init__(self, loader: Callable[[], Awaitable[List[T]]]):
        self._loader = loader
        self._data: Optional[List[T]] = None
        self._inflight: Optional[asyncio.Task] = None
        # Finished fetches drop out on their own
        self._cancelled: "weakref.WeakSet[asyncio.Task]" = weakref.WeakSet()

    def get_data(self) -> Optional[List[T]]:
        return None if self._data is None else list(self._data)

    def set_data(self, data: Optional[List[T]]) -> None:
        self._data = None if data is None else list(data)

    @property
    def is_fetching(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def fetch(self) -> List[T]:
        """Load the list, joining a fetch that is already running."""
        if not self.is_fetching:
            self._inflight = asyncio.ensure_future(self._loader())
        task = self._inflight
        try:
            data = await task
        except asyncio.CancelledError:
            if task not in self._cancelled:
                raise
            logger.debug("Fetch cancelled; keeping current data")
            return self.get_data() or []
        finally:
            if self._inflight is task and task.done():
                self._inflight = None

        self.set_data(data)
        return list(data)

    async def cancel(self) -> None:
        """Cancel the fetch in flight, if any, and wait for it to stop."""
        task = self._inflight
        if task is None or task.done():
            return
        self._cancelled.add(task)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        if self._inflight is task:
            self._inflight = None

    async def invalidate(self) -> List[T]:
        """Drop any fetch in flight and reload from the server."""
        await self.cancel()
        return await self.fetch()


class OptimisticMutation(Generic[T]):
    """Snapshot, apply speculatively, then commit or roll back.

    ``begin`` cancels any fetch in flight, remembers the cached list, and
    writes the speculative list. ``commit`` refetches the canonical list.
    ``rollback`` restores the snapshot exactly.
    """

    def __init__(self, cache: QueryCache[T]):
        self.cache = cache
        self.snapshot: Optional[List[T]] = None
        self.active = False

    async def begin(self, update: Callable[[List[T]], List[T]]) -> None:
        await self.cache.cancel()
        self.snapshot = self.cache.get_data()
        self.cache.set_data(update(list(self.snapshot or [])))
        self.active = True

    async def commit(self) -> List[T]:
        self.active = False
        return await self.cache.invalidate()

    def rollback(self) -> None:
        self.cache.set_data(self.snapshot)
        self.active = False

    async def run(self, update: Callable[[List[T]], List[T]], mutation: Callable[[], Awaitable[R]]) -> R:
        """Apply ``update`` now, then run ``mutation`` against the server.

        Any failure of the mutation restores the snapshot before it is
        re-raised. Once the mutation has succeeded its result is returned even
        if the refetch fails; the speculative list then stays in the cache.
        """
        await self.begin(update)
        try:
            result = await mutation()
        except Exception as exc:
            logger.info("Rolling back optimistic update: %s", getattr(exc, "message", exc))
            self.rollback()
            raise
        try:
            await self.commit()
        except ProcedureError as exc:
            logger.warning("Refetch after a saved mutation failed: %s", exc.message)
        return result
