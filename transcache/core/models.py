"""
Core data models for the translation layer.

Cache keys, display modes, extracted text units, and the article shape
the orchestrator works on.
"""

from __future__ import annotations

from enum import Enum
from urllib.parse import quote, unquote

from pydantic import BaseModel, ConfigDict


# =============================================================================
# Enums
# =============================================================================


class ContentKind(str, Enum):
    """Which part of an article a translation belongs to."""

    TITLE = "title"
    BODY = "body"


class RenderMode(str, Enum):
    """How translated text is displayed."""

    BILINGUAL = "bilingual"  # Original followed by translation
    TRANSLATION_ONLY = "translation_only"  # Translation replaces original


class AvailabilityStatus(str, Enum):
    """Engine-reported availability of a target language."""

    UNSUPPORTED = "unsupported"
    SUPPORTED = "supported"  # Usable, may need a download first
    INSTALLED = "installed"  # Ready on this machine


# =============================================================================
# Cache Keys
# =============================================================================


def _escape(part: str) -> str:
    # "_" separates key components in storage names
    return quote(part, safe="").replace("_", "%5F")


class CacheKey(BaseModel):
    """
    Identity of a cached translation.

    Two keys with the same (content_id, kind, target_language) are equal
    and hash the same, so they can index the in-memory tier directly.
    """

    model_config = ConfigDict(frozen=True)

    content_id: str
    kind: ContentKind
    target_language: str

    @property
    def storage_name(self) -> str:
        """Deterministic persistent-tier name: ``<id>_<kind>_<lang>``."""
        return "_".join(
            (_escape(self.content_id), self.kind.value, _escape(self.target_language))
        )

    @classmethod
    def from_storage_name(cls, name: str) -> CacheKey | None:
        """Parse a storage name back into a key; None for foreign files."""
        parts = name.rsplit("_", 2)
        if len(parts) != 3:
            return None
        content_id, kind, language = parts
        try:
            return cls(
                content_id=unquote(content_id),
                kind=ContentKind(kind),
                target_language=unquote(language),
            )
        except ValueError:
            return None


# =============================================================================
# Text Units
# =============================================================================


class TextUnit(BaseModel):
    """
    A translatable fragment pulled out of markup.

    ``html`` is the full matched element, tags included, and is the anchor
    used to put the translation back.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    html: str


# =============================================================================
# Articles
# =============================================================================


class Article(BaseModel):
    """The slice of an article the translation layer needs."""

    article_id: str
    title: str | None = None
    body: str | None = None
    # Per-feed switch, supplied by the caller
    translation_enabled: bool = False


class Rendering(BaseModel):
    """An already-rendered article page."""

    html: str = ""
