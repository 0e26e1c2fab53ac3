"""
Application configuration.

Loads settings from environment variables (prefix ``TRANSCACHE_``) with
sensible defaults.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from transcache.core.models import RenderMode


def default_cache_dir() -> Path:
    """Process-scoped cache area; the host may purge it at any time."""
    base = os.getenv("XDG_CACHE_HOME") or str(Path.home() / ".cache")
    return Path(base) / "transcache" / "TranslationCache"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="TRANSCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ==========================================================================
    # Translation
    # ==========================================================================

    # None means "use the system language"
    target_language: str | None = None
    render_mode: RenderMode = RenderMode.BILINGUAL

    # Units whose trimmed text is this long or shorter are left alone
    min_unit_length: int = 3

    # Cap on in-flight translations for a single batch
    max_concurrent_translations: int = 8

    # ==========================================================================
    # Cache
    # ==========================================================================

    cache_dir: Path | None = None
    memory_cache_limit: int = 1000

    # ==========================================================================
    # AI / LLM
    # ==========================================================================

    llm_provider: str = "gemini"
    llm_model: str = ""
    google_api_key: str = ""
    gemini_api_key: str = ""  # Alias for google_api_key
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def resolved_cache_dir(self) -> Path:
        return self.cache_dir or default_cache_dir()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
