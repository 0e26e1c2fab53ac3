"""
Local storage implementations.

A filesystem store (one file per entry) for real use, and an in-memory
store that works without touching disk.
"""

from __future__ import annotations

import threading
from pathlib import Path

from transcache.storage.base import TranslationStore


# =============================================================================
# Local Filesystem Store
# =============================================================================


class LocalTranslationStore(TranslationStore):
    """One file per entry under ``base_path``, raw UTF-8 contents."""

    def __init__(self, base_path: str | Path):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _name_to_path(self, name: str) -> Path:
        return self.base_path / name

    def read(self, name: str) -> str | None:
        path = self._name_to_path(name)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        return data.decode("utf-8")

    def write(self, name: str, text: str) -> None:
        # The host may have purged the directory since startup
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._name_to_path(name).write_bytes(text.encode("utf-8"))

    def delete(self, name: str) -> bool:
        try:
            self._name_to_path(name).unlink()
        except FileNotFoundError:
            return False
        return True

    def list_names(self) -> list[str]:
        if not self.base_path.exists():
            return []
        return [path.name for path in self.base_path.iterdir() if path.is_file()]

    def size_of(self, name: str) -> int:
        return self._name_to_path(name).stat().st_size


# =============================================================================
# In-Memory Store
# =============================================================================


class InMemoryTranslationStore(TranslationStore):
    """Dict-backed store for tests and ephemeral sessions."""

    def __init__(self):
        self._entries: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def read(self, name: str) -> str | None:
        with self._lock:
            data = self._entries.get(name)
        return data.decode("utf-8") if data is not None else None

    def write(self, name: str, text: str) -> None:
        with self._lock:
            self._entries[name] = text.encode("utf-8")

    def delete(self, name: str) -> bool:
        with self._lock:
            return self._entries.pop(name, None) is not None

    def list_names(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def size_of(self, name: str) -> int:
        with self._lock:
            data = self._entries.get(name)
        if data is None:
            raise FileNotFoundError(name)
        return len(data)


# =============================================================================
# Factory
# =============================================================================


def create_local_store(cache_dir: str | Path | None = None) -> TranslationStore:
    """Filesystem store at ``cache_dir``, or the configured default."""
    if cache_dir is None:
        from transcache.config import get_settings
        cache_dir = get_settings().resolved_cache_dir
    return LocalTranslationStore(cache_dir)
