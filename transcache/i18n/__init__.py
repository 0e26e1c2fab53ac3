"""
Article translation - cache, capability client, segmentation, orchestration.

Design:
1. Two-tier cache keyed by (article, title|body, target language)
2. One reusable engine session per client, batched fan-out with a cap
3. Regex segmentation of article markup into translatable units
4. Bilingual or translation-only composition; failures fall back to
   the original text

Usage:
    from transcache.i18n import create_orchestrator

    orchestrator = create_orchestrator()
    title = await orchestrator.translate_title(article)
    body = await orchestrator.translate_body(article)
"""

from transcache.i18n.cache import TranslationCache
from transcache.i18n.client import TranslationClient
from transcache.i18n.engine import (
    DSPyTranslationEngine,
    SessionUnavailableError,
    TranslationEngine,
    TranslationError,
    TranslationSession,
)
from transcache.i18n.languages import (
    COMMON_LANGUAGES,
    get_language_name,
    normalize_language_code,
    system_language,
)
from transcache.i18n.orchestrator import TranslationOrchestrator, create_orchestrator
from transcache.i18n.segmenter import extract_units, reinsert

__all__ = [
    # Services
    "TranslationCache",
    "TranslationClient",
    "TranslationOrchestrator",
    "create_orchestrator",
    # Engines
    "TranslationEngine",
    "TranslationSession",
    "DSPyTranslationEngine",
    "TranslationError",
    "SessionUnavailableError",
    # Segmentation
    "extract_units",
    "reinsert",
    # Language utilities
    "COMMON_LANGUAGES",
    "get_language_name",
    "normalize_language_code",
    "system_language",
]
