"""
Translation capability client.

Wraps a TranslationEngine: owns the single reusable session, translates
single strings and batches, and answers language-availability checks.
Nothing here raises on engine trouble; failures come back as None and the
caller falls back to the original text.
"""

from __future__ import annotations

import asyncio
import logging
import threading

from transcache.core.models import AvailabilityStatus
from transcache.i18n.engine import TranslationEngine, TranslationSession

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 8


class TranslationClient:
    """
    Session-managed access to a translation engine.

    Usage:
        client = TranslationClient(DSPyTranslationEngine())

        fr = await client.translate("Hello", "fr")            # -> "Bonjour" | None
        many = await client.translate_batch(["a", "b"], "de")  # -> [str | None, ...]

        client.invalidate_session()  # after changing the target language

    The session is created lazily for the first target language seen and
    reused for every later call, whatever language those calls ask for.
    Callers switching languages must call ``invalidate_session`` first.
    """

    def __init__(self, engine: TranslationEngine, max_concurrency: int = DEFAULT_MAX_CONCURRENCY):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self._engine = engine
        self._max_concurrency = max_concurrency
        self._session: TranslationSession | None = None
        self._session_lock = threading.Lock()

    @property
    def session(self) -> TranslationSession | None:
        return self._session

    def _get_session(self, target_language: str) -> TranslationSession:
        with self._session_lock:
            if self._session is None:
                self._session = self._engine.create_session(target_language)
            elif self._session.target_language != target_language:
                logger.warning(
                    f"Reusing {self._session.target_language} session for a "
                    f"{target_language} request; invalidate the session on language change"
                )
            return self._session

    async def translate(self, text: str, target_language: str) -> str | None:
        """
        Translate a single text string.

        Returns:
            Translated text, or None for empty input or any engine failure.
        """
        if not text:
            return None

        try:
            session = self._get_session(target_language)
        except Exception as e:
            logger.error(f"Translation session unavailable: {e}")
            return None

        try:
            return await session.translate(text)
        except Exception as e:
            logger.error(f"Translation failed: {e}")
            return None

    async def translate_batch(self, texts: list[str], target_language: str) -> list[str | None]:
        """
        Translate many strings concurrently.

        At most ``max_concurrency`` translations are in flight. The result
        has one slot per input, in input order, with None where that item
        failed. Returns only once every item has finished.
        """
        semaphore = asyncio.Semaphore(self._max_concurrency)
        results: list[str | None] = [None] * len(texts)

        async def run(index: int, text: str) -> None:
            async with semaphore:
                results[index] = await self.translate(text, target_language)

        await asyncio.gather(*(run(i, text) for i, text in enumerate(texts)))
        return results

    async def is_available(self, target_language: str) -> bool:
        """True if the engine reports the language as installed or supported."""
        try:
            status = await self._engine.check_availability(target_language)
        except Exception as e:
            logger.error(f"Availability check failed for {target_language}: {e}")
            return False
        return status in (AvailabilityStatus.INSTALLED, AvailabilityStatus.SUPPORTED)

    def invalidate_session(self) -> None:
        """Destroy the current session; the next call creates a new one."""
        with self._session_lock:
            if self._session is not None:
                self._session.invalidate()
            self._session = None
