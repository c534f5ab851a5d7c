"""In-memory query cache keyed by (resource, tenant).

Cached results are addressed by ``QueryKey``. A key whose entry is
invalidated or removed while a fetch is in flight moves to a new
generation, and the late result is discarded instead of being stored.
Requests are never cancelled.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from webclient.observability import DefaultQueryCacheProbe, QueryCacheProbe

T = TypeVar("T")


@dataclass(frozen=True)
class QueryKey:
    """Hashable cache key made of a resource tag followed by the tenant id.

    Equal parts give equal keys, so a key can be rebuilt anywhere without
    keeping a reference to the original instance.
    """

    parts: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.parts:
            raise ValueError("QueryKey needs at least one part")

    @property
    def resource(self) -> str:
        """The resource tag, e.g. ``list-tasks``."""
        return self.parts[0]

    @property
    def tenant_id(self) -> str | None:
        """The tenant the cached result belongs to."""
        return self.parts[1] if len(self.parts) > 1 else None

    def startswith(self, prefix: QueryKey) -> bool:
        """Whether this key equals ``prefix`` or extends it."""
        return self.parts[: len(prefix.parts)] == prefix.parts

    def __str__(self) -> str:
        return "/".join(self.parts)


@dataclass(frozen=True)
class QueryOptions(Generic[T]):
    """A key plus the coroutine function that produces its data."""

    key: QueryKey
    fetch: Callable[[], Awaitable[T]]


@dataclass
class _Entry:
    data: Any = None
    has_data: bool = False
    invalidated: bool = False
    updated_at: float = 0.0
    generation: int = 0
    options: QueryOptions[Any] | None = None
    in_flight: asyncio.Task[Any] | None = field(default=None, repr=False)


class QueryClient:
    """Async query cache with in-flight deduplication.

    All methods must be called from the event loop that owns the client.
    """

    def __init__(
        self,
        probe: QueryCacheProbe | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._entries: dict[QueryKey, _Entry] = {}
        self._probe = probe or DefaultQueryCacheProbe()
        self._clock = clock

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def keys(self) -> list[QueryKey]:
        """Keys currently held by the cache."""
        return list(self._entries)

    async def fetch_query(self, options: QueryOptions[T]) -> T:
        """Fetch and cache the data for a key.

        Concurrent calls for the same key share one request. The result is
        stored only if the key was not invalidated or removed meanwhile; the
        caller receives the result either way.

        Exceptions raised by the fetch function propagate unchanged.
        """
        entry = self._entries.setdefault(options.key, _Entry())
        entry.options = options

        if entry.in_flight is None:
            entry.in_flight = asyncio.ensure_future(
                self._run_fetch(options, entry, entry.generation)
            )
        return await asyncio.shield(entry.in_flight)

    async def _run_fetch(
        self, options: QueryOptions[T], entry: _Entry, generation: int
    ) -> T:
        try:
            data = await options.fetch()
        finally:
            if entry.in_flight is asyncio.current_task():
                entry.in_flight = None

        if self._entries.get(options.key) is entry and entry.generation == generation:
            entry.data = data
            entry.has_data = True
            entry.invalidated = False
            entry.updated_at = self._clock()
            self._probe.query_fetched(str(options.key))
        else:
            self._probe.stale_result_discarded(str(options.key))
        return data

    async def ensure_query_data(self, options: QueryOptions[T]) -> T:
        """Return cached data for a key, fetching it if absent or invalidated."""
        entry = self._entries.get(options.key)
        if entry is not None and entry.has_data and not entry.invalidated:
            return entry.data
        return await self.fetch_query(options)

    def get_query_data(self, key: QueryKey) -> Any:
        """Return the cached data for a key, or None."""
        entry = self._entries.get(key)
        if entry is None or not entry.has_data:
            return None
        return entry.data

    def set_query_data(self, key: QueryKey, value: Any) -> Any:
        """Store data for a key.

        ``value`` may be a callable receiving the previous data (None when
        absent) and returning the new data.

        Returns:
            The data now stored
        """
        entry = self._entries.setdefault(key, _Entry())
        previous = entry.data if entry.has_data else None
        data = value(previous) if callable(value) else value

        entry.data = data
        entry.has_data = True
        entry.invalidated = False
        entry.updated_at = self._clock()
        return data

    def _matching(
        self, key: QueryKey | None, tenant_id: str | None
    ) -> list[tuple[QueryKey, _Entry]]:
        return [
            (k, e)
            for k, e in self._entries.items()
            if (key is None or k.startswith(key))
            and (tenant_id is None or k.tenant_id == tenant_id)
        ]

    def remove_queries(
        self, key: QueryKey | None = None, tenant_id: str | None = None
    ) -> int:
        """Drop matching entries. With no filter every entry is dropped.

        Returns:
            Number of entries removed
        """
        matched = self._matching(key, tenant_id)
        for k, entry in matched:
            entry.generation += 1
            entry.in_flight = None
            del self._entries[k]
        return len(matched)

    def mark_invalidated(
        self, key: QueryKey | None = None, tenant_id: str | None = None
    ) -> list[QueryKey]:
        """Mark matching entries invalid without refetching.

        Invalidated entries are never served by ensure_query_data, and any
        fetch already in flight for them is discarded when it lands.
        """
        matched = self._matching(key, tenant_id)
        for _, entry in matched:
            entry.invalidated = True
            entry.generation += 1
            entry.in_flight = None
        self._probe.queries_invalidated(len(matched), tenant_id)
        return [k for k, _ in matched]

    async def invalidate_queries(
        self,
        key: QueryKey | None = None,
        tenant_id: str | None = None,
        refetch: bool = True,
    ) -> None:
        """Invalidate matching entries and optionally refetch them.

        ``key`` matches by prefix on the key parts; ``tenant_id`` matches every
        key of that tenant. Only entries whose fetch function is known are
        refetched. Refetch failures are logged; the entry stays invalidated.
        """
        keys = self.mark_invalidated(key, tenant_id)
        if not refetch:
            return

        options = [
            self._entries[k].options
            for k in keys
            if self._entries[k].options is not None
        ]
        results = await asyncio.gather(
            *(self.fetch_query(o) for o in options if o is not None),
            return_exceptions=True,
        )
        for opts, result in zip(options, results):
            if isinstance(result, Exception) and opts is not None:
                self._probe.refetch_failed(str(opts.key), str(result))
