"""
Shared fixtures: a scriptable fake engine and in-memory services.
"""

from __future__ import annotations

import asyncio

import pytest

from transcache.config import Settings
from transcache.core.models import AvailabilityStatus, RenderMode
from transcache.i18n.cache import TranslationCache
from transcache.i18n.client import TranslationClient
from transcache.i18n.engine import (
    SessionUnavailableError,
    TranslationEngine,
    TranslationError,
    TranslationSession,
)
from transcache.i18n.orchestrator import TranslationOrchestrator
from transcache.storage.local import InMemoryTranslationStore


# =============================================================================
# Fake Engine
# =============================================================================


class FakeSession(TranslationSession):
    def __init__(self, engine: FakeEngine, target_language: str):
        super().__init__(target_language)
        self.engine = engine
        self.invalidated = False

    async def translate(self, text: str) -> str:
        self.engine.calls.append(text)
        self.engine.in_flight += 1
        self.engine.max_in_flight = max(self.engine.max_in_flight, self.engine.in_flight)
        try:
            delay = self.engine.delays.get(text, self.engine.default_delay)
            if delay:
                await asyncio.sleep(delay)
            if text in self.engine.failures:
                raise TranslationError(f"cannot translate {text!r}")
            if text in self.engine.translations:
                return self.engine.translations[text]
            return f"[{self.target_language}] {text}"
        finally:
            self.engine.in_flight -= 1

    def invalidate(self) -> None:
        self.invalidated = True


class FakeEngine(TranslationEngine):
    """Deterministic engine: canned translations, failures and latencies."""

    def __init__(self):
        self.translations: dict[str, str] = {}
        self.failures: set[str] = set()
        self.delays: dict[str, float] = {}
        self.default_delay = 0.0
        self.availability: dict[str, AvailabilityStatus] = {}
        self.session_error: str | None = None
        self.session_exception: Exception | None = None

        self.calls: list[str] = []
        self.sessions: list[FakeSession] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def create_session(self, target_language: str) -> TranslationSession:
        if self.session_error:
            raise SessionUnavailableError(self.session_error)
        if self.session_exception is not None:
            raise self.session_exception
        session = FakeSession(self, target_language)
        self.sessions.append(session)
        return session

    async def check_availability(self, target_language: str) -> AvailabilityStatus:
        return self.availability.get(target_language, AvailabilityStatus.UNSUPPORTED)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def store():
    return InMemoryTranslationStore()


@pytest.fixture
def cache(store):
    cache = TranslationCache(store, memory_limit=100)
    yield cache
    cache.close()


@pytest.fixture
def client(engine):
    return TranslationClient(engine, max_concurrency=4)


@pytest.fixture
def settings():
    return Settings(_env_file=None, target_language="fr", render_mode=RenderMode.BILINGUAL)


@pytest.fixture
def orchestrator(cache, client, settings):
    return TranslationOrchestrator(cache, client, settings)
