"""
Storage abstraction for the persistent cache tier.

The translation cache only ever talks to this interface, so the backing
store can be swapped (filesystem, in-memory for tests) without touching
cache logic.

Every entry is a flat name mapped to raw UTF-8 text. There is no manifest:
listing the store is the source of truth.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class TranslationStore(ABC):
    """
    Flat name -> text store.

    Implementations may raise ``OSError`` (or ``UnicodeDecodeError`` on
    read) for I/O trouble; the cache above decides what that means.
    Methods are synchronous and are called from the cache's background
    writer thread as well as from callers' threads.
    """

    @abstractmethod
    def read(self, name: str) -> str | None:
        """Return stored text, or None if nothing is stored under ``name``."""
        pass

    @abstractmethod
    def write(self, name: str, text: str) -> None:
        """Store ``text``, replacing any previous entry wholesale."""
        pass

    @abstractmethod
    def delete(self, name: str) -> bool:
        """Delete an entry. Returns False if it was already gone."""
        pass

    @abstractmethod
    def list_names(self) -> list[str]:
        """All stored names. An empty or missing store lists nothing."""
        pass

    @abstractmethod
    def size_of(self, name: str) -> int:
        """Size in bytes of one stored entry."""
        pass

    def clear(self) -> None:
        """Delete every entry."""
        for name in self.list_names():
            self.delete(name)
