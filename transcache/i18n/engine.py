"""
Translation engine interface, plus an LLM-backed engine.

The engine is the external capability the rest of the layer wraps. It
hands out sessions bound to one target language; sessions do the actual
translating. Engines signal trouble by raising TranslationError, and the
capability client turns that into "no translation".
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

import dspy

from transcache.core.models import AvailabilityStatus
from transcache.i18n.languages import get_language_name, is_known_language, normalize_language_code
from transcache.i18n.llm import get_lm

logger = logging.getLogger(__name__)


# =============================================================================
# Errors
# =============================================================================


class TranslationError(Exception):
    """The engine could not produce a translation."""


class SessionUnavailableError(TranslationError):
    """A session could not be created or has been invalidated."""


# =============================================================================
# Interfaces
# =============================================================================


class TranslationSession(ABC):
    """A reusable handle bound to one target language (source auto-detected)."""

    def __init__(self, target_language: str):
        self.target_language = target_language

    @abstractmethod
    async def translate(self, text: str) -> str:
        """Translate ``text``. Raises TranslationError on failure."""
        pass

    def invalidate(self) -> None:
        """Release engine resources. The session is unusable afterwards."""
        pass


class TranslationEngine(ABC):
    """
    External translation capability.

    Example:
        class EchoEngine(TranslationEngine):
            def create_session(self, target_language):
                return EchoSession(target_language)

            async def check_availability(self, target_language):
                return AvailabilityStatus.INSTALLED
    """

    @abstractmethod
    def create_session(self, target_language: str) -> TranslationSession:
        """Open a session. Raises SessionUnavailableError on failure."""
        pass

    @abstractmethod
    async def check_availability(self, target_language: str) -> AvailabilityStatus:
        pass


# =============================================================================
# DSPy Engine
# =============================================================================


class TranslateText(dspy.Signature):
    """Translate text into the target language, preserving meaning, tone, and style.
    Detect the source language automatically. Return only the translation."""

    text: str = dspy.InputField(desc="Text to translate")
    target_language: str = dspy.InputField(desc="Language to translate into (e.g., 'French')")

    translated_text: str = dspy.OutputField(desc="Translated text")


class DSPyTranslationSession(TranslationSession):
    """Session backed by a DSPy predictor and a fixed language model."""

    def __init__(self, lm: dspy.LM, target_language: str):
        super().__init__(target_language)
        self._lm = lm
        self._module = dspy.Predict(TranslateText)
        self._valid = True

    def _predict(self, text: str) -> dspy.Prediction:
        # Scoped LM instead of dspy.configure: sessions may run concurrently
        with dspy.context(lm=self._lm):
            return self._module(
                text=text,
                target_language=get_language_name(self.target_language),
            )

    async def translate(self, text: str) -> str:
        if not self._valid:
            raise SessionUnavailableError("Session has been invalidated")

        try:
            result = await asyncio.to_thread(self._predict, text)
        except Exception as e:
            raise TranslationError(f"LLM call failed: {e}") from e

        translated = (result.translated_text or "").strip()
        if not translated:
            raise TranslationError("LLM returned an empty translation")
        return translated

    def invalidate(self) -> None:
        self._valid = False


class DSPyTranslationEngine(TranslationEngine):
    """
    LLM translation through DSPy.

    Every language with a known name counts as SUPPORTED; nothing is ever
    INSTALLED since there is no local model to download.
    """

    def __init__(self, provider: str | None = None, model: str | None = None):
        self.provider = provider
        self.model = model

    def create_session(self, target_language: str) -> TranslationSession:
        try:
            lm = get_lm(self.provider, self.model)
        except Exception as e:
            raise SessionUnavailableError(str(e)) from e

        logger.info(f"Opened LLM translation session for {target_language}")
        return DSPyTranslationSession(lm, normalize_language_code(target_language))

    async def check_availability(self, target_language: str) -> AvailabilityStatus:
        if is_known_language(target_language):
            return AvailabilityStatus.SUPPORTED
        return AvailabilityStatus.UNSUPPORTED
