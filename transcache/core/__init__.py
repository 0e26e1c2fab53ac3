"""
Core types shared by every layer.
"""

from transcache.core.models import (
    Article,
    AvailabilityStatus,
    CacheKey,
    ContentKind,
    Rendering,
    RenderMode,
    TextUnit,
)

__all__ = [
    "Article",
    "AvailabilityStatus",
    "CacheKey",
    "ContentKind",
    "Rendering",
    "RenderMode",
    "TextUnit",
]
