"""
Storage abstractions for the persistent cache tier.

- TranslationStore -> interface
- LocalTranslationStore -> one file per entry in a cache directory
- InMemoryTranslationStore -> tests and ephemeral use
"""

from transcache.storage.base import TranslationStore
from transcache.storage.local import (
    InMemoryTranslationStore,
    LocalTranslationStore,
    create_local_store,
)

__all__ = [
    "TranslationStore",
    "LocalTranslationStore",
    "InMemoryTranslationStore",
    "create_local_store",
]
