"""
Tests for the two-tier translation cache.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from transcache.core.models import CacheKey, ContentKind
from transcache.i18n.cache import TranslationCache
from transcache.storage.local import InMemoryTranslationStore, LocalTranslationStore


def make_key(content_id="a1", kind=ContentKind.TITLE, language="fr"):
    return CacheKey(content_id=content_id, kind=kind, target_language=language)


class BlockingStore(InMemoryTranslationStore):
    """Writes wait until released."""

    def __init__(self):
        super().__init__()
        self.release = threading.Event()

    def write(self, name, text):
        self.release.wait(timeout=5)
        super().write(name, text)


class PausedReadStore(InMemoryTranslationStore):
    """Reads fetch their value, then wait until released before returning it."""

    def __init__(self):
        super().__init__()
        self.reading = threading.Event()
        self.release = threading.Event()

    def read(self, name):
        text = super().read(name)
        self.reading.set()
        self.release.wait(timeout=5)
        return text


class PausedClearStore(InMemoryTranslationStore):
    """Wipes wait until released."""

    def __init__(self):
        super().__init__()
        self.release = threading.Event()

    def clear(self):
        self.release.wait(timeout=5)
        super().clear()


class BrokenStore(InMemoryTranslationStore):
    def read(self, name):
        raise OSError("disk on fire")

    def write(self, name, text):
        raise OSError("disk full")


# =============================================================================
# CacheKey Tests
# =============================================================================


class TestCacheKey:
    def test_equal_tuples_are_equal_keys(self):
        assert make_key() == make_key()
        assert hash(make_key()) == hash(make_key())
        assert make_key(kind=ContentKind.BODY) != make_key()

    def test_storage_name_concatenates_components(self):
        assert make_key().storage_name == "a1_title_fr"

    def test_storage_name_round_trips_awkward_ids(self):
        key = make_key(content_id="https://example.com/a_b?x=1", language="zh-Hans")
        assert "/" not in key.storage_name
        assert CacheKey.from_storage_name(key.storage_name) == key

    def test_foreign_names_are_ignored(self):
        assert CacheKey.from_storage_name(".DS_Store") is None
        assert CacheKey.from_storage_name("a_summary_fr") is None


# =============================================================================
# Read / Write Tests
# =============================================================================


class TestReadWrite:
    def test_set_is_visible_before_disk_write(self):
        store = BlockingStore()
        cache = TranslationCache(store)
        try:
            cache.set(make_key(), "Bonjour")
            assert cache.get(make_key()) == "Bonjour"
            assert store.read(make_key().storage_name) is None
        finally:
            store.release.set()
            cache.close()

        assert store.read(make_key().storage_name) == "Bonjour"

    def test_survives_restart(self, store):
        with TranslationCache(store) as cache:
            cache.set(make_key(), "Bonjour")

        with TranslationCache(store) as fresh:
            assert fresh.get(make_key()) == "Bonjour"

    def test_disk_hit_is_promoted(self, store, cache):
        store.write(make_key().storage_name, "Bonjour")

        assert cache.get(make_key()) == "Bonjour"
        assert make_key() in cache._memory

        store.delete(make_key().storage_name)
        assert cache.get(make_key()) == "Bonjour"

    def test_miss(self, cache):
        assert cache.get(make_key()) is None
        assert cache.stats["misses"] == 1

    def test_overwrite_replaces_wholesale(self, store, cache):
        cache.set(make_key(), "first")
        cache.set(make_key(), "second")
        cache.flush()

        assert cache.get(make_key()) == "second"
        assert store.read(make_key().storage_name) == "second"

    def test_set_during_disk_read_wins(self):
        store = PausedReadStore()
        store.write(make_key().storage_name, "old")
        cache = TranslationCache(store)
        results = []
        reader = threading.Thread(target=lambda: results.append(cache.get(make_key())))
        try:
            reader.start()
            assert store.reading.wait(timeout=5)
            cache.set(make_key(), "new")
            store.release.set()
            reader.join(timeout=5)

            assert results == ["new"]
            assert cache.get(make_key()) == "new"
            cache.flush()
            assert store.read(make_key().storage_name) == "new"
        finally:
            store.release.set()
            cache.close()

    def test_evicted_before_disk_write_is_still_served(self):
        store = BlockingStore()
        InMemoryTranslationStore.write(store, make_key("a").storage_name, "old")
        cache = TranslationCache(store, memory_limit=1)
        try:
            cache.set(make_key("a"), "new")
            cache.set(make_key("b"), "B")
            assert make_key("a") not in cache._memory

            assert cache.get(make_key("a")) == "new"
        finally:
            store.release.set()
            cache.close()

        assert store.read(make_key("a").storage_name) == "new"

    def test_write_evicted_during_disk_read_is_not_shadowed(self):
        store = PausedReadStore()
        store.write(make_key("a").storage_name, "old")
        cache = TranslationCache(store, memory_limit=1)
        reader = threading.Thread(target=cache.get, args=(make_key("a"),))
        try:
            reader.start()
            assert store.reading.wait(timeout=5)
            cache.set(make_key("a"), "new")
            cache.set(make_key("b"), "B")
            cache.flush()
            store.release.set()
            reader.join(timeout=5)

            assert make_key("a") not in cache._memory
            assert cache.get(make_key("a")) == "new"
        finally:
            store.release.set()
            cache.close()

    def test_read_failure_is_a_miss(self):
        with TranslationCache(BrokenStore()) as cache:
            assert cache.get(make_key()) is None

    def test_write_failure_keeps_memory_value(self):
        with TranslationCache(BrokenStore()) as cache:
            cache.set(make_key(), "Bonjour")
            cache.flush()
            assert cache.get(make_key()) == "Bonjour"

    def test_invalid_limit(self, store):
        with pytest.raises(ValueError):
            TranslationCache(store, memory_limit=0)


# =============================================================================
# Eviction Tests
# =============================================================================


class TestEviction:
    def test_least_recently_used_goes_first(self, store):
        with TranslationCache(store, memory_limit=2) as cache:
            a, b, c = make_key("a"), make_key("b"), make_key("c")
            cache.set(a, "A")
            cache.set(b, "B")
            cache.get(a)
            cache.set(c, "C")

            assert a in cache._memory
            assert c in cache._memory
            assert b not in cache._memory

            # Still on disk
            cache.flush()
            assert cache.get(b) == "B"

    def test_concurrent_access_respects_limit(self, store):
        with TranslationCache(store, memory_limit=50) as cache:
            def work(i):
                key = make_key(f"item{i}")
                cache.set(key, f"value {i}")
                cache.get(make_key(f"item{i // 2}"))

            with ThreadPoolExecutor(max_workers=8) as pool:
                list(pool.map(work, range(200)))

            assert cache.stats["memory_entries"] <= 50
            cache.flush()
            assert all(cache.get(make_key(f"item{i}")) == f"value {i}" for i in range(200))


# =============================================================================
# Clearing and Size Tests
# =============================================================================


class TestClearing:
    def test_clear_all(self, store, cache):
        cache.set(make_key("a"), "A")
        cache.set(make_key("b"), "B")
        cache.clear_all()

        assert cache.stats["memory_entries"] == 0
        assert cache.get(make_key("a")) is None
        cache.flush()
        assert store.list_names() == []
        assert cache.get(make_key("a")) is None

    def test_cleared_entries_not_served_before_wipe_runs(self):
        store = PausedClearStore()
        cache = TranslationCache(store)
        try:
            cache.set(make_key(), "old")
            cache.flush()
            cache.clear_all()

            assert cache.get(make_key()) is None
            # Still on disk, but not promoted back into memory
            assert store.read(make_key().storage_name) == "old"
            assert make_key() not in cache._memory
        finally:
            store.release.set()
            cache.close()

        assert store.list_names() == []

    def test_set_after_clear_all_survives_the_wipe(self):
        store = PausedClearStore()
        cache = TranslationCache(store)
        try:
            cache.set(make_key(), "old")
            cache.clear_all()
            cache.set(make_key(), "new")

            assert cache.get(make_key()) == "new"
        finally:
            store.release.set()
            cache.close()

        assert store.read(make_key().storage_name) == "new"

    def test_disk_read_racing_clear_all_is_dropped(self):
        store = PausedReadStore()
        store.write(make_key().storage_name, "old")
        cache = TranslationCache(store)
        results = []
        reader = threading.Thread(target=lambda: results.append(cache.get(make_key())))
        try:
            reader.start()
            assert store.reading.wait(timeout=5)
            cache.clear_all()
            store.release.set()
            reader.join(timeout=5)

            assert results == [None]
            assert make_key() not in cache._memory
        finally:
            store.release.set()
            cache.close()

    def test_clear_for_only_touches_disk(self, store, cache):
        cache.set(make_key("a1"), "A title")
        cache.set(make_key("a1", kind=ContentKind.BODY), "A body")
        cache.set(make_key("a1_2"), "Other article")
        cache.clear_for("a1")
        cache.flush()

        assert store.list_names() == [make_key("a1_2").storage_name]
        # Warm memory entry is still served
        assert cache.get(make_key("a1")) == "A title"

    def test_clear_for_then_restart(self, store):
        with TranslationCache(store) as cache:
            cache.set(make_key("a1"), "A title")
            cache.clear_for("a1")

        with TranslationCache(store) as fresh:
            assert fresh.get(make_key("a1")) is None

    def test_size_bytes(self, cache):
        cache.set(make_key("a"), "été")  # 5 bytes in UTF-8
        cache.set(make_key("b"), "abc")
        cache.flush()

        assert cache.size_bytes() == 8

    def test_size_of_empty_cache(self, cache):
        assert cache.size_bytes() == 0


# =============================================================================
# Filesystem Store Tests
# =============================================================================


class TestLocalStore:
    def test_one_raw_file_per_key(self, tmp_path):
        with TranslationCache(LocalTranslationStore(tmp_path)) as cache:
            cache.set(make_key(), "Ça va")

        path = tmp_path / "a1_title_fr"
        assert path.read_bytes() == "Ça va".encode("utf-8")

    def test_tolerates_purged_directory(self, tmp_path):
        directory = tmp_path / "TranslationCache"
        store = LocalTranslationStore(directory)
        directory.rmdir()

        with TranslationCache(store) as cache:
            assert cache.get(make_key()) is None
            assert cache.size_bytes() == 0
            cache.set(make_key(), "Bonjour")

        assert store.read(make_key().storage_name) == "Bonjour"

    def test_corrupted_entry_is_a_miss(self, tmp_path):
        (tmp_path / "a1_title_fr").write_bytes(b"\xff\xfe\xfa")
        with TranslationCache(LocalTranslationStore(tmp_path)) as cache:
            assert cache.get(make_key()) is None
