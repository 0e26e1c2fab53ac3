"""
Cache warming for article translations.

Pre-translates titles (and optionally bodies) of a set of articles so the
first time a reader opens a feed the translations are already on disk.

Usage:
    await warm_translation_cache(orchestrator, articles, languages=["fr", "de"])

    # CLI
    python -m transcache.i18n.warmup articles.yaml -l fr de --bodies

The YAML file holds a list of articles (or ``{"articles": [...]}``) with
``article_id``, ``title``, ``body`` and optional ``translation_enabled``
(defaults to true here).
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from transcache.config import get_settings
from transcache.core.models import Article, CacheKey, ContentKind
from transcache.i18n.languages import get_language_name
from transcache.i18n.orchestrator import TranslationOrchestrator, create_orchestrator
from transcache.integrations.sentry import capture_exception, init_sentry, set_tag

logger = logging.getLogger(__name__)


# =============================================================================
# Article Loading
# =============================================================================


def load_articles(path: str | Path) -> list[Article]:
    """Load articles from a YAML file. Bad entries are skipped."""
    path = Path(path)
    if not path.exists():
        print(f"⚠️  Article file not found: {path}")
        return []

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if isinstance(data, dict):
        data = data.get("articles", [])
    if not isinstance(data, list):
        print(f"⚠️  Expected a list of articles in {path}")
        return []

    articles: list[Article] = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        try:
            articles.append(Article(**{"translation_enabled": True, **entry}))
        except ValidationError as e:
            logger.warning(f"Skipping invalid article entry: {e}")
    return articles


# =============================================================================
# Cache Warming
# =============================================================================


async def warm_translation_cache(
    orchestrator: TranslationOrchestrator,
    articles: list[Article],
    languages: list[str] | None = None,
    include_bodies: bool = False,
    batch_size: int = 20,
    verbose: bool = True,
) -> dict[str, Any]:
    """
    Pre-warm the translation cache.

    Args:
        orchestrator: Orchestrator whose cache and client are used
        articles: Articles to warm; disabled ones are skipped
        languages: Target languages (defaults to the configured one)
        include_bodies: Also compose and cache article bodies
        batch_size: Titles per translate_batch call
        verbose: Print progress

    Returns:
        Stats dict with counts
    """
    base_settings = orchestrator.settings
    if not languages:
        languages = [orchestrator.target_language]

    enabled = [a for a in articles if a.translation_enabled]

    stats = {
        "languages": len(languages),
        "articles": len(enabled),
        "translated": 0,
        "cached": 0,
        "failed": 0,
    }

    if verbose:
        print("=" * 60)
        print("🔥 TRANSLATION CACHE WARM-UP")
        print("=" * 60)
        print(f"\nTarget languages: {', '.join(languages)}")
        print(f"Articles: {len(enabled)} ({len(articles) - len(enabled)} disabled)")

    try:
        for language in languages:
            orchestrator.update_settings(base_settings.model_copy(update={"target_language": language}))
            language = orchestrator.target_language
            set_tag("target_language", language)

            if verbose:
                print(f"\n🌍 Warming {get_language_name(language)} ({language})...")

            await _warm_titles(orchestrator, enabled, language, batch_size, stats)
            if include_bodies:
                await _warm_bodies(orchestrator, enabled, language, stats)

            if verbose:
                print(f"   ✓ {stats['translated']} translated, {stats['cached']} cached, "
                      f"{stats['failed']} failed so far")
    finally:
        orchestrator.update_settings(base_settings)

    orchestrator.cache.flush()

    if verbose:
        print("\n" + "=" * 60)
        print("✅ WARM-UP COMPLETE")
        print(f"   Cache size on disk: {orchestrator.cache.size_bytes()} bytes")
        print("=" * 60)

    return stats


async def _warm_titles(
    orchestrator: TranslationOrchestrator,
    articles: list[Article],
    language: str,
    batch_size: int,
    stats: dict[str, Any],
) -> None:
    uncached: list[tuple[CacheKey, str]] = []
    for article in articles:
        if not article.title:
            continue
        key = CacheKey(content_id=article.article_id, kind=ContentKind.TITLE, target_language=language)
        if orchestrator.cache.get(key) is not None:
            stats["cached"] += 1
        else:
            uncached.append((key, article.title))

    for i in range(0, len(uncached), batch_size):
        batch = uncached[i:i + batch_size]
        translations = await orchestrator.client.translate_batch([title for _, title in batch], language)
        for (key, _), translation in zip(batch, translations):
            if translation is None:
                stats["failed"] += 1
            else:
                orchestrator.cache.set(key, translation)
                stats["translated"] += 1


async def _warm_bodies(
    orchestrator: TranslationOrchestrator,
    articles: list[Article],
    language: str,
    stats: dict[str, Any],
) -> None:
    for article in articles:
        if not article.body:
            continue
        key = CacheKey(content_id=article.article_id, kind=ContentKind.BODY, target_language=language)
        if orchestrator.cache.get(key) is not None:
            stats["cached"] += 1
            continue

        await orchestrator.translate_body(article)
        if orchestrator.cache.get(key) is not None:
            stats["translated"] += 1
        else:
            stats["failed"] += 1


# =============================================================================
# CLI Entry Point
# =============================================================================


def main():
    """Run cache warm-up from command line."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Pre-translate article titles and bodies into the cache"
    )
    parser.add_argument("articles", help="YAML file with articles to warm")
    parser.add_argument(
        "--languages", "-l",
        nargs="+",
        help="Target languages (default: configured target language)"
    )
    parser.add_argument(
        "--bodies", "-b",
        action="store_true",
        help="Also translate article bodies"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Minimal output"
    )

    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    init_sentry(settings)

    try:
        articles = load_articles(args.articles)
    except (OSError, yaml.YAMLError) as e:
        capture_exception(e, path=args.articles)
        raise SystemExit(f"Could not load {args.articles}: {e}")

    orchestrator = create_orchestrator(settings)
    try:
        asyncio.run(warm_translation_cache(
            orchestrator,
            articles,
            languages=args.languages,
            include_bodies=args.bodies,
            verbose=not args.quiet,
        ))
    finally:
        orchestrator.close()


if __name__ == "__main__":
    main()
