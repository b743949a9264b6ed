"""
Image memory cache tests

Covers capacity (FIFO eviction), freshness (TTL), and the management
helpers used by the stats/cleanup/clear endpoints.
"""

import threading

import pytest

from image_proxy.memory_cache import ImageMemoryCache, DEFAULT_CONTENT_TYPE


# ============================================
# 1. Capacity / FIFO eviction
# ============================================

class TestCapacity:
    """Size never exceeds max_entries; the oldest insertion goes first."""

    def test_size_never_exceeds_max_entries(self, clock):
        c = ImageMemoryCache(max_entries=3, ttl_seconds=100, clock=clock)

        for i in range(10):
            c.put(f"https://img.example/{i}.jpg", b"x")
            assert len(c) <= 3

        assert len(c) == 3

    def test_evicts_exactly_the_oldest_inserted(self, clock):
        c = ImageMemoryCache(max_entries=3, ttl_seconds=100, clock=clock)
        c.put("a", b"1")
        c.put("b", b"2")
        c.put("c", b"3")

        c.put("d", b"4")

        assert "a" not in c
        assert all(k in c for k in ("b", "c", "d"))

    def test_reads_do_not_refresh_position(self, clock):
        c = ImageMemoryCache(max_entries=2, ttl_seconds=100, clock=clock)
        c.put("a", b"1")
        c.put("b", b"2")

        # Reading "a" would save it under LRU, not under FIFO
        assert c.get("a") is not None
        c.put("c", b"3")

        assert c.get("a") is None
        assert c.get("b").payload == b"2"
        assert c.get("c").payload == b"3"

    def test_overwrite_does_not_evict(self, clock):
        c = ImageMemoryCache(max_entries=2, ttl_seconds=100, clock=clock)
        c.put("a", b"1")
        c.put("b", b"2")

        c.put("b", b"2-new")

        assert len(c) == 2
        assert c.get("a").payload == b"1"
        assert c.get("b").payload == b"2-new"

    def test_overwrite_moves_key_to_newest(self, clock):
        c = ImageMemoryCache(max_entries=2, ttl_seconds=100, clock=clock)
        c.put("a", b"1")
        c.put("b", b"2")
        c.put("a", b"1-new")

        c.put("c", b"3")

        assert "b" not in c
        assert "a" in c and "c" in c

    def test_keys_are_not_normalized(self, clock):
        c = ImageMemoryCache(max_entries=10, ttl_seconds=100, clock=clock)
        c.put("http://img.example/a.jpg", b"1")

        assert c.get("https://img.example/a.jpg") is None
        assert c.get("http://img.example/a.jpg?") is None
        assert c.get("http://img.example/a.jpg").payload == b"1"

    def test_concurrent_puts_respect_capacity(self):
        c = ImageMemoryCache(max_entries=50, ttl_seconds=100)

        def worker(n: int):
            for i in range(200):
                c.put(f"{n}-{i}", b"x")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(c) == 50


# ============================================
# 2. Freshness / TTL
# ============================================

class TestFreshness:
    """Entries are served strictly before stored_at + ttl."""

    def test_fresh_entry_is_served(self, cache, clock):
        cache.put("k", b"payload", "image/png")
        clock.advance(1799.9)

        entry = cache.get("k")
        assert entry is not None
        assert entry.payload == b"payload"
        assert entry.content_type == "image/png"

    def test_entry_at_exact_ttl_is_a_miss(self, cache, clock):
        cache.put("k", b"payload")
        clock.advance(1800)

        assert cache.get("k") is None

    def test_stale_entry_is_removed_on_lookup(self, cache, clock):
        cache.put("k", b"payload")
        clock.advance(5000)

        assert cache.get("k") is None
        assert "k" not in cache

    def test_reinsert_after_expiry_is_fresh(self, cache, clock):
        cache.put("k", b"old")
        clock.advance(2000)
        assert cache.get("k") is None

        cache.put("k", b"new")
        assert cache.get("k").payload == b"new"

    def test_default_content_type(self, cache):
        entry = cache.put("k", b"payload", None)
        assert entry.content_type == DEFAULT_CONTENT_TYPE == "image/jpeg"


# ============================================
# 3. Management helpers
# ============================================

class TestManagement:

    def test_cleanup_expired_removes_only_stale(self, cache, clock):
        cache.put("old", b"1")
        clock.advance(1000)
        cache.put("new", b"2")
        clock.advance(900)

        assert cache.cleanup_expired() == 1
        assert "old" not in cache
        assert "new" in cache

    def test_clear_returns_count(self, cache):
        cache.put("a", b"1")
        cache.put("b", b"2")

        assert cache.clear() == 2
        assert len(cache) == 0

    def test_stats_tracks_hits_and_misses(self, cache):
        cache.put("a", b"12345")
        cache.get("a")
        cache.get("missing")

        stats = cache.stats()
        assert stats["total_entries"] == 1
        assert stats["max_entries"] == 100
        assert stats["total_size_bytes"] == 5
        assert stats["ttl_seconds"] == 1800
        assert stats["hits"] == 1
        assert stats["misses"] == 1

    @pytest.mark.parametrize("bad", [0, -5])
    def test_max_entries_is_at_least_one(self, bad):
        c = ImageMemoryCache(max_entries=bad)
        c.put("a", b"1")
        c.put("b", b"2")

        assert len(c) == 1
        assert "b" in c
