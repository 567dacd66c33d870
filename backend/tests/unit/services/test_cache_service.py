"""
Unit Tests for the dashboard TTL cache
Tests for: expiry, capacity eviction, invalidation, stats, background sweep
"""
import asyncio
import pytest

from app.services.cache_service import TTLCache


class TestBasicOperations:
    """get/set/has/delete with a controllable clock"""

    def test_get_returns_value_after_set(self, cache: TTLCache):
        cache.set('dashboard:overview:abc', {'total': 1})

        assert cache.get('dashboard:overview:abc') == {'total': 1}
        assert cache.has('dashboard:overview:abc') is True

    def test_get_missing_key_returns_none(self, cache: TTLCache):
        assert cache.get('missing') is None
        assert cache.has('missing') is False

    def test_entry_expires_after_ttl(self, cache: TTLCache, clock):
        cache.set('key', 'value', ttl=10)

        clock.advance(10)
        assert cache.get('key') == 'value'

        clock.advance(0.5)
        assert cache.get('key') is None
        assert cache.has('key') is False
        assert len(cache) == 0

    def test_default_ttl_applies(self, clock):
        cache = TTLCache(default_ttl=5, max_size=10, clock=clock)
        cache.set('key', 'value')

        clock.advance(6)

        assert cache.get('key') is None

    def test_set_overwrites_existing_value(self, cache: TTLCache):
        cache.set('key', 1)
        cache.set('key', 2)

        assert cache.get('key') == 2
        assert len(cache) == 1

    def test_delete(self, cache: TTLCache):
        cache.set('key', 'value')

        assert cache.delete('key') is True
        assert cache.delete('key') is False
        assert cache.get('key') is None

    def test_clear(self, cache: TTLCache):
        cache.set('a', 1)
        cache.set('b', 2)

        cache.clear()

        assert len(cache) == 0

    def test_refresh_extends_expiry(self, cache: TTLCache, clock):
        cache.set('key', 'value', ttl=10)
        clock.advance(8)

        assert cache.refresh('key') is True
        clock.advance(8)

        assert cache.get('key') == 'value'

    def test_refresh_expired_key_returns_false(self, cache: TTLCache, clock):
        cache.set('key', 'value', ttl=1)
        clock.advance(2)

        assert cache.refresh('key') is False
        assert cache.refresh('never-set') is False


class TestCapacity:
    """Oldest-stored entry is evicted when the cache is full"""

    def test_inserting_past_capacity_evicts_oldest(self, clock):
        cache = TTLCache(default_ttl=300, max_size=3, clock=clock)
        for key in ('a', 'b', 'c'):
            cache.set(key, key)
            clock.advance(1)

        cache.set('d', 'd')

        assert len(cache) == 3
        assert cache.has('a') is False
        assert all(cache.has(key) for key in ('b', 'c', 'd'))

    def test_reads_do_not_change_eviction_order(self, clock):
        cache = TTLCache(default_ttl=300, max_size=2, clock=clock)
        cache.set('a', 1)
        clock.advance(1)
        cache.set('b', 2)
        clock.advance(1)

        cache.get('a')
        cache.set('c', 3)

        assert cache.has('a') is False
        assert cache.has('b') is True

    def test_refresh_moves_entry_to_back_of_eviction_order(self, clock):
        cache = TTLCache(default_ttl=300, max_size=2, clock=clock)
        cache.set('a', 1)
        clock.advance(1)
        cache.set('b', 2)
        clock.advance(1)

        cache.refresh('a')
        cache.set('c', 3)

        assert cache.has('a') is True
        assert cache.has('b') is False

    def test_overwrite_when_full_does_not_evict(self, clock):
        cache = TTLCache(default_ttl=300, max_size=2, clock=clock)
        cache.set('a', 1)
        cache.set('b', 2)

        cache.set('a', 10)

        assert cache.get('a') == 10
        assert cache.get('b') == 2

    def test_is_healthy_below_ninety_percent(self, clock):
        cache = TTLCache(default_ttl=300, max_size=10, clock=clock)
        for i in range(8):
            cache.set(f'k{i}', i)
        assert cache.is_healthy() is True

        cache.set('k8', 8)
        assert cache.is_healthy() is False


class TestInvalidation:
    """Pattern and category invalidation"""

    def test_invalidate_pattern_returns_count(self, cache: TTLCache):
        cache.set('dashboard:overview:1', 1)
        cache.set('dashboard:widget:system-overview:1', 2)
        cache.set('media:list', 3)

        removed = cache.invalidate_pattern('widget')

        assert removed == 1
        assert cache.has('dashboard:overview:1') is True

    def test_invalidate_category_only_matches_prefix(self, cache: TTLCache):
        cache.set('dashboard:overview:1', 1)
        cache.set('dashboard:config:admin', 2)
        cache.set('admin:dashboard:x', 3)

        removed = cache.invalidate_category('dashboard')

        assert removed == 2
        assert cache.has('admin:dashboard:x') is True

    def test_invalidate_category_escapes_regex(self, cache: TTLCache):
        cache.set('a.b:1', 1)
        cache.set('axb:1', 2)

        assert cache.invalidate_category('a.b') == 1
        assert cache.has('axb:1') is True

    def test_cleanup_removes_only_expired(self, cache: TTLCache, clock):
        cache.set('short', 1, ttl=1)
        cache.set('long', 2, ttl=100)
        clock.advance(5)

        assert cache.cleanup() == 1
        assert cache.get_stats()['keys'] == ['long']


class TestKeysAndStats:
    """Key helpers and hit/miss accounting"""

    def test_generate_key(self):
        assert TTLCache.generate_key('dashboard', 'widget', 'hr-analytics') == 'dashboard:widget:hr-analytics'
        assert TTLCache.generate_key('dashboard', 'exports', 'u1', 1700) == 'dashboard:exports:u1:1700'

    def test_keys_by_category(self, cache: TTLCache):
        cache.set('dashboard:a', 1)
        cache.set('dashboard:b', 2)
        cache.set('media:c', 3)

        assert sorted(cache.get_keys_by_category('dashboard')) == ['dashboard:a', 'dashboard:b']
        assert cache.get_category_size('media') == 1

    def test_bulk_operations(self, cache: TTLCache, clock):
        cache.set_multiple([('a', 1), ('b', 2, 1)])
        clock.advance(2)

        assert cache.get_multiple(['a', 'b', 'c']) == {'a': 1, 'b': None, 'c': None}

    def test_preload_prefixes_category(self, cache: TTLCache):
        cache.preload('config', {'admin': {'layout': 'grid'}})

        assert cache.get('config:admin') == {'layout': 'grid'}

    def test_stats_track_hits_and_misses(self, cache: TTLCache):
        cache.set('a', 1)
        cache.get('a')
        cache.get('a')
        cache.get('b')

        stats = cache.get_stats()

        assert stats['hits'] == 2
        assert stats['misses'] == 1
        assert stats['hit_rate'] == pytest.approx(0.6667, abs=1e-4)
        assert stats['size'] == 1
        assert stats['max_size'] == 1000
        assert stats['keys'] == ['a']

    def test_hit_rate_zero_without_lookups(self, cache: TTLCache):
        assert cache.get_stats()['hit_rate'] == 0.0


class TestBackgroundSweep:
    """start()/stop() lifecycle"""

    @pytest.mark.asyncio
    async def test_sweep_removes_expired_entries(self, clock):
        cache = TTLCache(default_ttl=1, max_size=10, sweep_interval=0.01, clock=clock)
        cache.set('a', 1)
        clock.advance(5)

        await cache.start()
        try:
            await asyncio.sleep(0.05)
            assert len(cache) == 0
        finally:
            await cache.stop()

    @pytest.mark.asyncio
    async def test_start_and_stop_are_idempotent(self, cache: TTLCache):
        await cache.start()
        await cache.start()
        assert cache.is_running is True

        await cache.stop()
        await cache.stop()
        assert cache.is_running is False
