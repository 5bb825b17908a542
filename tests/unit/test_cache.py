"""Unit tests for the watch cache adapter over kopf indices."""

import asyncio
import pytest
from secretsync.cache import WatchCache


class TestWatchCache:
    """Tests for WatchCache."""

    def test_empty_before_attach(self):
        cache = WatchCache()
        assert cache.synced is False
        assert cache.list_candidate_objects() == []
        assert cache.list_partitions() == []

    def test_first_attach_marks_synced(self, make_secret, make_namespace, index_of):
        cache = WatchCache()
        secrets = index_of(make_secret("db-cred"))
        namespaces = index_of(make_namespace("team-a"))

        assert cache.attach(secrets, namespaces) is True
        assert cache.synced is True
        assert cache.sync_wait_time >= 0
        assert cache.attach(secrets, namespaces) is False

    def test_lists_are_snapshots_of_current_index(self, make_secret, make_namespace, index_of):
        cache = WatchCache()
        secrets = index_of(make_secret("db-cred"), make_secret("api-key"))
        cache.attach(secrets, index_of(make_namespace("team-a")))

        assert sorted(s.name for s in cache.list_candidate_objects()) == ["api-key", "db-cred"]
        assert [ns.name for ns in cache.list_partitions()] == ["team-a"]

        # kopf mutates the index in place
        del secrets["api-key"]
        assert [s.name for s in cache.list_candidate_objects()] == ["db-cred"]

    @pytest.mark.asyncio
    async def test_wait_for_sync(self):
        cache = WatchCache()
        waiter = asyncio.create_task(cache.wait_for_sync(1))
        await asyncio.sleep(0.01)
        cache.attach({}, {})
        assert await waiter is True

    @pytest.mark.asyncio
    async def test_wait_for_sync_already_synced(self):
        cache = WatchCache()
        cache.attach({}, {})
        assert await cache.wait_for_sync(0) is True

    @pytest.mark.asyncio
    async def test_wait_for_sync_timeout(self):
        assert await WatchCache().wait_for_sync(0.01) is False

    @pytest.mark.asyncio
    async def test_wait_for_sync_stopped(self):
        cache = WatchCache()
        stopped = asyncio.Event()
        stopped.set()
        assert await cache.wait_for_sync(5, stopped=stopped) is False
