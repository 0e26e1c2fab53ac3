"""
Translation orchestrator.

Top-level coordinator between the cache and the capability client:
resolves the target language, honours the per-article switch, reads the
cache, translates on a miss, writes back, and composes bilingual or
translation-only output for titles, bodies and rendered pages.

Usage:
    orchestrator = create_orchestrator()

    title = await orchestrator.translate_title(article)
    body = await orchestrator.translate_body(article)
    row_title = await orchestrator.formatted_title(article)
    page = await orchestrator.render_article(article, rendering)
"""

from __future__ import annotations

import html
import logging

from transcache.config import Settings, get_settings
from transcache.core.models import Article, CacheKey, ContentKind, Rendering, RenderMode
from transcache.i18n.cache import TranslationCache
from transcache.i18n.client import TranslationClient
from transcache.i18n.languages import normalize_language_code, system_language
from transcache.i18n.segmenter import extract_units, is_translatable, reinsert

logger = logging.getLogger(__name__)

TRANSLATED_TITLE_MARKUP = '{title}<br><em class="translated-title">{translation}</em>'


class TranslationOrchestrator:
    """
    Cache-first translation of article titles and bodies.

    Holds no state of its own beyond references to the cache, the client
    and the settings it reads on every call.
    """

    def __init__(
        self,
        cache: TranslationCache,
        client: TranslationClient,
        settings: Settings | None = None,
    ):
        self.cache = cache
        self.client = client
        self.settings = settings or get_settings()

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    @property
    def target_language(self) -> str:
        """Configured override, else the system language."""
        if self.settings.target_language:
            return normalize_language_code(self.settings.target_language)
        return system_language()

    @property
    def render_mode(self) -> RenderMode:
        return self.settings.render_mode

    def update_settings(self, settings: Settings) -> None:
        """
        Switch to new settings.

        A new target language invalidates the client's session. A new
        render mode clears the cache, since composed bodies are stored in
        the mode they were built with; the cleared entries stop being served
        at once, before the disk wipe runs.
        """
        previous_language = self.target_language
        previous_mode = self.render_mode
        self.settings = settings

        if self.target_language != previous_language:
            logger.info(f"Target language changed {previous_language} -> {self.target_language}")
            self.client.invalidate_session()
        if self.render_mode != previous_mode:
            logger.info(f"Render mode changed {previous_mode.value} -> {self.render_mode.value}")
            self.cache.clear_all()

    # -------------------------------------------------------------------------
    # Titles
    # -------------------------------------------------------------------------

    async def translated_title(self, article: Article) -> str | None:
        """
        The translated title, from cache or freshly translated.

        None when translation is disabled for the article, the title is
        empty, or translation failed.
        """
        if not article.translation_enabled:
            return None

        language = self.target_language
        key = CacheKey(content_id=article.article_id, kind=ContentKind.TITLE, target_language=language)

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        if not article.title:
            return None

        translated = await self.client.translate(article.title, language)
        if translated is None:
            return None

        self.cache.set(key, translated)
        return translated

    async def translate_title(self, article: Article) -> str:
        """Translated title, or the original when there is none."""
        original = article.title or ""
        if not article.translation_enabled:
            return original
        return await self.translated_title(article) or original

    async def formatted_title(self, article: Article, mode: RenderMode | None = None) -> str:
        """
        Title for a list row.

        Bilingual puts the translation on a second line; translation-only
        shows it alone. Falls back to the original title.
        """
        original = article.title or ""
        translated = await self.translated_title(article)
        if translated is None:
            return original

        mode = mode or self.render_mode
        if mode == RenderMode.BILINGUAL:
            return f"{original}\n{translated}"
        return translated

    # -------------------------------------------------------------------------
    # Bodies
    # -------------------------------------------------------------------------

    async def translate_body(self, article: Article, body: str | None = None) -> str:
        """
        Compose the translated body.

        ``body`` overrides ``article.body`` (e.g. extracted full-text
        content). The body is composed in the current render mode and cached
        whole under one key, so a hit returns it in one lookup. If every
        unit fails to translate nothing is cached and the original is
        returned.
        """
        original = body if body is not None else article.body or ""
        if not article.translation_enabled:
            return original

        language = self.target_language
        key = CacheKey(content_id=article.article_id, kind=ContentKind.BODY, target_language=language)

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        units = [
            unit for unit in extract_units(original)
            if is_translatable(unit, self.settings.min_unit_length)
        ]
        if not units:
            return original

        translations = await self.client.translate_batch([unit.text for unit in units], language)
        pairs = [
            (unit, translation)
            for unit, translation in zip(units, translations)
            if translation is not None
        ]
        if not pairs:
            logger.warning(f"No paragraphs of article {article.article_id} could be translated")
            return original

        composed = reinsert(original, pairs, self.render_mode)
        self.cache.set(key, composed)

        logger.debug(
            f"Translated {len(pairs)}/{len(units)} units of article {article.article_id} "
            f"into {language}"
        )
        return composed

    # -------------------------------------------------------------------------
    # Rendered pages
    # -------------------------------------------------------------------------

    async def render_article(
        self,
        article: Article,
        rendering: Rendering,
        body: str | None = None,
    ) -> Rendering:
        """
        Swap translated title and body into an already-rendered page.

        The page is expected to contain the HTML-escaped title and the
        original body markup verbatim. Disabled articles pass through.
        """
        if not article.translation_enabled:
            return rendering

        mode = self.render_mode
        page = rendering.html

        translated_title = await self.translated_title(article) if article.title else None
        original_body = body if body is not None else article.body or ""
        translated_body = await self.translate_body(article, original_body)

        if translated_title is not None:
            escaped_title = html.escape(article.title, quote=False)
            if mode == RenderMode.BILINGUAL:
                display_title = TRANSLATED_TITLE_MARKUP.format(
                    title=escaped_title, translation=translated_title
                )
            else:
                display_title = translated_title
            page = page.replace(escaped_title, display_title)

        if original_body:
            page = page.replace(original_body, translated_body)

        return rendering.model_copy(update={"html": page})

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        self.client.invalidate_session()
        self.cache.close()


def create_orchestrator(settings: Settings | None = None) -> TranslationOrchestrator:
    """Build the default service graph: filesystem cache + LLM engine."""
    from transcache.i18n.engine import DSPyTranslationEngine
    from transcache.storage.local import create_local_store

    settings = settings or get_settings()
    cache = TranslationCache(
        create_local_store(settings.resolved_cache_dir),
        memory_limit=settings.memory_cache_limit,
    )
    client = TranslationClient(
        DSPyTranslationEngine(settings.llm_provider, settings.llm_model or None),
        max_concurrency=settings.max_concurrent_translations,
    )
    return TranslationOrchestrator(cache, client, settings)
