"""
Translation cache maintenance.

    python -m transcache size
    python -m transcache clear
    python -m transcache clear-article ARTICLE_ID
    python -m transcache languages
"""

from __future__ import annotations

import argparse
import logging

from transcache.config import get_settings
from transcache.i18n.cache import TranslationCache
from transcache.i18n.languages import language_choices
from transcache.integrations.sentry import init_sentry
from transcache.storage.local import create_local_store


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="transcache", description="Manage the translation cache")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("size", help="Show the on-disk cache size")
    subparsers.add_parser("clear", help="Delete every cached translation")
    clear_article = subparsers.add_parser("clear-article", help="Delete cached translations for one article")
    clear_article.add_argument("article_id")
    subparsers.add_parser("languages", help="List selectable target languages")

    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    init_sentry(settings)

    if args.command == "languages":
        for code, name in language_choices():
            print(f"{code or '-':10} {name}")
        return 0

    with TranslationCache(
        create_local_store(settings.resolved_cache_dir),
        memory_limit=settings.memory_cache_limit,
    ) as cache:
        if args.command == "size":
            print(f"{cache.size_bytes()} bytes in {settings.resolved_cache_dir}")
        elif args.command == "clear":
            cache.clear_all()
            print("Translation cache cleared")
        elif args.command == "clear-article":
            cache.clear_for(args.article_id)
            print(f"Cleared translations for {args.article_id}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
