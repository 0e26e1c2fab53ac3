"""
Two-tier translation cache.

Memory tier: bounded LRU, guarded by a lock, read-after-write consistent.
Persistent tier: a TranslationStore, one entry per key, written by a single
background worker so callers never wait on disk for writes.

Usage:
    cache = TranslationCache(LocalTranslationStore(path))

    key = CacheKey(content_id="a1", kind=ContentKind.TITLE, target_language="fr")
    cache.set(key, "Bonjour")
    cache.get(key)  # -> "Bonjour", immediately

    cache.close()  # drain pending writes on shutdown
"""

from __future__ import annotations

import logging
import queue
import threading
from collections import OrderedDict
from typing import Any, Callable

from transcache.core.models import CacheKey
from transcache.storage.base import TranslationStore

logger = logging.getLogger(__name__)

DEFAULT_MEMORY_LIMIT = 1000


class TranslationCache:
    """
    Translation cache keyed by (content id, content kind, target language).

    ``clear_for`` only touches the persistent tier. The memory tier has no
    enumeration by content id, so a warm entry for a cleared article keeps
    being served until it is evicted or the process restarts.
    """

    def __init__(self, store: TranslationStore, memory_limit: int = DEFAULT_MEMORY_LIMIT):
        if memory_limit < 1:
            raise ValueError("memory_limit must be at least 1")

        self._store = store
        self._memory: OrderedDict[CacheKey, str] = OrderedDict()
        self._memory_limit = memory_limit
        self._lock = threading.Lock()

        self._hits = 0
        self._misses = 0

        # Disk state the worker has not caught up with yet. Guarded by _lock.
        # _generation moves on every clear_all; a disk value read under an
        # older generation is never promoted.
        self._generation = 0
        self._pending_wipes = 0
        self._unwritten: dict[CacheKey, tuple[int, str]] = {}
        self._write_seq = 0

        # FIFO queue drained by one worker: writes to the same key land in
        # submission order
        self._jobs: queue.Queue[Callable[[], None] | None] = queue.Queue()
        self._closed = False
        self._worker = threading.Thread(
            target=self._run_worker,
            name="translation-cache-writer",
            daemon=True,
        )
        self._worker.start()

    # -------------------------------------------------------------------------
    # Memory tier (callers hold _lock)
    # -------------------------------------------------------------------------

    def _lookup(self, key: CacheKey) -> str | None:
        text = self._memory.get(key)
        if text is not None:
            self._memory.move_to_end(key)
            return text
        # Evicted before its disk write ran
        pending = self._unwritten.get(key)
        return pending[1] if pending else None

    def _insert(self, key: CacheKey, text: str) -> None:
        self._memory[key] = text
        self._memory.move_to_end(key)
        while len(self._memory) > self._memory_limit:
            evicted, _ = self._memory.popitem(last=False)
            logger.debug(f"Evicted {evicted.storage_name} from memory tier")

    def _count(self, hit: bool) -> None:
        with self._lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1

    def _promote(self, key: CacheKey, text: str, generation: int, write_seq: int) -> str | None:
        """
        Move a disk hit into memory unless something newer got there first.

        Returns the value callers should see: the disk text, a value set while
        the disk read was in progress, or None if the cache was cleared.
        """
        with self._lock:
            if generation != self._generation:
                return None
            current = self._lookup(key)
            if current is not None:
                return current
            if write_seq == self._write_seq:
                self._insert(key, text)
            # else a write may have landed and been evicted meanwhile; serve
            # the read but leave memory alone
            return text

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def get(self, key: CacheKey) -> str | None:
        """Memory first, then disk; a disk hit is promoted into memory."""
        with self._lock:
            text = self._lookup(key)
            generation = self._generation
            write_seq = self._write_seq
            wiping = self._pending_wipes > 0

        if text is not None:
            self._count(hit=True)
            logger.debug(f"Translation cache HIT (memory) for {key.storage_name}")
            return text

        if wiping:
            # Whatever is on disk is about to be deleted
            self._count(hit=False)
            logger.debug(f"Translation cache MISS for {key.storage_name} (wipe pending)")
            return None

        try:
            text = self._store.read(key.storage_name)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read translation from disk cache: {e}")
            text = None

        if text is not None:
            text = self._promote(key, text, generation, write_seq)

        if text is None:
            self._count(hit=False)
            logger.debug(f"Translation cache MISS for {key.storage_name}")
            return None

        self._count(hit=True)
        logger.debug(f"Translation cache HIT (disk) for {key.storage_name}")
        return text

    def set(self, key: CacheKey, text: str) -> None:
        """Visible to ``get`` on return; the disk write happens later."""
        with self._lock:
            self._insert(key, text)
            self._write_seq += 1
            seq = self._write_seq
            # Queued under the lock so writes and wipes reach the worker in
            # the order their effects hit memory
            if self._submit(lambda: self._persist(key, seq, text)):
                self._unwritten[key] = (seq, text)

    def clear_all(self) -> None:
        """
        Empty memory now, schedule removal of every disk entry.

        Until the wipe has run, reads skip the disk tier, so nothing written
        before this call can be served again.
        """
        with self._lock:
            self._memory.clear()
            self._unwritten.clear()
            self._generation += 1
            if self._submit(self._clear_store):
                self._pending_wipes += 1

    def clear_for(self, content_id: str) -> None:
        """Schedule removal of disk entries for one article."""
        self._submit(lambda: self._clear_content(content_id))

    def size_bytes(self) -> int:
        """Point-in-time estimate of the disk tier's size."""
        size = 0
        try:
            names = self._store.list_names()
        except OSError as e:
            logger.error(f"Failed to calculate cache size: {e}")
            return 0

        for name in names:
            try:
                size += self._store.size_of(name)
            except OSError:
                # Deleted or replaced between listing and stat
                continue
        return size

    @property
    def stats(self) -> dict[str, Any]:
        with self._lock:
            entries = len(self._memory)
            hits, misses = self._hits, self._misses
        total = hits + misses
        return {
            "memory_entries": entries,
            "memory_limit": self._memory_limit,
            "hits": hits,
            "misses": misses,
            "hit_rate": hits / total if total else 0.0,
        }

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def flush(self) -> None:
        """Block until every scheduled disk operation has run."""
        self._jobs.join()

    def close(self) -> None:
        """Drain pending writes and stop the worker. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._jobs.put(None)
        self._worker.join()

    def __enter__(self) -> TranslationCache:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Background worker
    # -------------------------------------------------------------------------

    def _submit(self, job: Callable[[], None]) -> bool:
        if self._closed:
            logger.warning("Translation cache is closed; dropping disk operation")
            return False
        self._jobs.put(job)
        return True

    def _run_worker(self) -> None:
        while True:
            job = self._jobs.get()
            try:
                if job is None:
                    return
                job()
            except Exception:
                logger.exception("Translation cache worker job failed")
            finally:
                self._jobs.task_done()

    def _persist(self, key: CacheKey, seq: int, text: str) -> None:
        try:
            self._store.write(key.storage_name, text)
        except OSError as e:
            logger.error(f"Failed to write translation to disk cache: {e}")
        finally:
            with self._lock:
                pending = self._unwritten.get(key)
                if pending is not None and pending[0] == seq:
                    del self._unwritten[key]

    def _clear_store(self) -> None:
        try:
            self._store.clear()
        except OSError as e:
            logger.error(f"Failed to clear disk cache: {e}")
        finally:
            with self._lock:
                self._pending_wipes -= 1

    def _clear_content(self, content_id: str) -> None:
        try:
            for name in self._store.list_names():
                key = CacheKey.from_storage_name(name)
                if key is not None and key.content_id == content_id:
                    self._store.delete(name)
        except OSError as e:
            logger.error(f"Failed to clear translations for article {content_id}: {e}")
