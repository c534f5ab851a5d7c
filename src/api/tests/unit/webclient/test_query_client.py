"""Unit tests for the in-memory query cache."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from webclient.observability import QueryCacheProbe
from webclient.query_client import QueryClient, QueryKey, QueryOptions


@pytest.fixture
def mock_probe() -> MagicMock:
    """Create a mock query cache probe."""
    return MagicMock(spec=QueryCacheProbe)


@pytest.fixture
def client(mock_probe: MagicMock) -> QueryClient:
    """Create a QueryClient with a mocked probe."""
    return QueryClient(probe=mock_probe)


def counting_options(key: QueryKey, value="data") -> tuple[QueryOptions, list[int]]:
    """Options whose fetch returns value and records every call."""
    calls: list[int] = []

    async def fetch():
        calls.append(1)
        return value

    return QueryOptions(key=key, fetch=fetch), calls


class TestQueryKey:
    """Tests for QueryKey."""

    def test_equal_parts_are_equal_keys(self):
        """Keys compare and hash by value."""
        assert QueryKey(("list-tasks", "t1")) == QueryKey(("list-tasks", "t1"))
        assert hash(QueryKey(("list-tasks", "t1"))) == hash(QueryKey(("list-tasks", "t1")))

    def test_tenant_is_second_part(self):
        """The tenant id follows the resource tag."""
        key = QueryKey(("list-tasks", "t1"))

        assert key.resource == "list-tasks"
        assert key.tenant_id == "t1"
        assert str(key) == "list-tasks/t1"

    def test_startswith(self):
        """Prefix matching works on whole parts."""
        key = QueryKey(("list-tasks", "t1"))

        assert key.startswith(QueryKey(("list-tasks",)))
        assert not key.startswith(QueryKey(("list-task",)))

    def test_empty_key_rejected(self):
        """A key needs a resource tag."""
        with pytest.raises(ValueError):
            QueryKey(())


class TestFetchQuery:
    """Tests for fetch_query() and ensure_query_data()."""

    @pytest.mark.asyncio
    async def test_fetch_stores_result(self, client: QueryClient, mock_probe: MagicMock):
        """A completed fetch is cached under its key."""
        key = QueryKey(("list-tasks", "t1"))
        options, _ = counting_options(key, [1, 2])

        result = await client.fetch_query(options)

        assert result == [1, 2]
        assert client.get_query_data(key) == [1, 2]
        mock_probe.query_fetched.assert_called_once_with("list-tasks/t1")

    @pytest.mark.asyncio
    async def test_concurrent_fetches_share_one_request(self, client: QueryClient):
        """Two callers of the same key trigger one fetch."""
        key = QueryKey(("list-tasks", "t1"))
        release = asyncio.Event()
        calls: list[int] = []

        async def fetch():
            calls.append(1)
            await release.wait()
            return "shared"

        options = QueryOptions(key=key, fetch=fetch)
        first = asyncio.create_task(client.fetch_query(options))
        second = asyncio.create_task(client.fetch_query(options))
        await asyncio.sleep(0)
        release.set()

        assert await asyncio.gather(first, second) == ["shared", "shared"]
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_ensure_uses_cache(self, client: QueryClient):
        """Fresh data is served without fetching again."""
        key = QueryKey(("list-tasks", "t1"))
        options, calls = counting_options(key)

        await client.ensure_query_data(options)
        await client.ensure_query_data(options)

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_ensure_refetches_invalidated(self, client: QueryClient):
        """Invalidated data is fetched again."""
        key = QueryKey(("list-tasks", "t1"))
        options, calls = counting_options(key)

        await client.ensure_query_data(options)
        client.mark_invalidated(key)
        await client.ensure_query_data(options)

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_fetch_errors_propagate(self, client: QueryClient):
        """Exceptions from the fetch function reach the caller."""
        key = QueryKey(("list-tasks", "t1"))

        async def fetch():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await client.fetch_query(QueryOptions(key=key, fetch=fetch))

        assert client.get_query_data(key) is None

    @pytest.mark.asyncio
    async def test_late_result_after_invalidation_is_discarded(
        self, client: QueryClient, mock_probe: MagicMock
    ):
        """A fetch that lands after its key was invalidated is not stored."""
        key = QueryKey(("list-tasks", "t1"))
        release = asyncio.Event()

        async def fetch():
            await release.wait()
            return "late"

        pending = asyncio.create_task(
            client.fetch_query(QueryOptions(key=key, fetch=fetch))
        )
        await asyncio.sleep(0)
        client.mark_invalidated(key)
        release.set()

        assert await pending == "late"
        assert client.get_query_data(key) is None
        mock_probe.stale_result_discarded.assert_called_once_with("list-tasks/t1")

    @pytest.mark.asyncio
    async def test_late_result_after_removal_is_discarded(self, client: QueryClient):
        """A fetch that lands after its key was removed leaves no entry."""
        key = QueryKey(("list-tasks", "t1"))
        release = asyncio.Event()

        async def fetch():
            await release.wait()
            return "late"

        pending = asyncio.create_task(
            client.fetch_query(QueryOptions(key=key, fetch=fetch))
        )
        await asyncio.sleep(0)
        client.remove_queries(key)
        release.set()
        await pending

        assert key not in client


class TestSetAndRemove:
    """Tests for set_query_data() and remove_queries()."""

    def test_set_value(self, client: QueryClient):
        """A plain value is stored."""
        key = QueryKey(("list-tasks", "t1"))

        client.set_query_data(key, [1])

        assert client.get_query_data(key) == [1]

    def test_set_with_updater(self, client: QueryClient):
        """A callable receives the previous value."""
        key = QueryKey(("list-tasks", "t1"))
        client.set_query_data(key, [1])

        result = client.set_query_data(key, lambda previous: previous + [2])

        assert result == [1, 2]
        assert client.get_query_data(key) == [1, 2]

    def test_remove_by_tenant(self, client: QueryClient):
        """Only keys of the given tenant are removed."""
        client.set_query_data(QueryKey(("list-tasks", "t1")), [])
        client.set_query_data(QueryKey(("list-task-x", "t1")), {})
        client.set_query_data(QueryKey(("list-tasks", "t2")), [])

        removed = client.remove_queries(tenant_id="t1")

        assert removed == 2
        assert client.keys() == [QueryKey(("list-tasks", "t2"))]

    def test_remove_all(self, client: QueryClient):
        """Without filters everything is removed."""
        client.set_query_data(QueryKey(("list-tasks", "t1")), [])
        client.set_query_data(QueryKey(("list-tasks", "t2")), [])

        assert client.remove_queries() == 2
        assert client.keys() == []


class TestInvalidateQueries:
    """Tests for invalidate_queries()."""

    @pytest.mark.asyncio
    async def test_refetches_known_queries(self, client: QueryClient):
        """Entries with known options are fetched again."""
        key = QueryKey(("list-tasks", "t1"))
        options, calls = counting_options(key, ["fresh"])
        await client.fetch_query(options)

        await client.invalidate_queries(key)

        assert len(calls) == 2
        assert client.get_query_data(key) == ["fresh"]

    @pytest.mark.asyncio
    async def test_tenant_filter_leaves_other_tenants(self, client: QueryClient):
        """Invalidating one tenant keeps the other tenant's data fresh."""
        t1_options, t1_calls = counting_options(QueryKey(("list-tasks", "t1")))
        t2_options, t2_calls = counting_options(QueryKey(("list-tasks", "t2")))
        await client.fetch_query(t1_options)
        await client.fetch_query(t2_options)

        await client.invalidate_queries(tenant_id="t1", refetch=False)
        await client.ensure_query_data(t2_options)
        await client.ensure_query_data(t1_options)

        assert len(t1_calls) == 2
        assert len(t2_calls) == 1

    @pytest.mark.asyncio
    async def test_refetch_failure_is_logged(
        self, client: QueryClient, mock_probe: MagicMock
    ):
        """A failing refetch is reported and does not raise."""
        key = QueryKey(("list-tasks", "t1"))
        attempts: list[int] = []

        async def fetch():
            attempts.append(1)
            if len(attempts) > 1:
                raise RuntimeError("offline")
            return []

        await client.fetch_query(QueryOptions(key=key, fetch=fetch))
        await client.invalidate_queries(key)

        mock_probe.refetch_failed.assert_called_once_with("list-tasks/t1", "offline")
