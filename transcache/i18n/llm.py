"""
LLM client configuration using DSPy.

Supports Gemini (default), OpenAI, and Anthropic. Provider, model and
keys come from settings.
"""

from __future__ import annotations

from functools import lru_cache

import dspy

from transcache.config import get_settings

DEFAULT_MODELS = {
    "gemini": "gemini-2.0-flash",
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-haiku-latest",
}


@lru_cache
def get_lm(provider: str | None = None, model: str | None = None) -> dspy.LM:
    """
    Get configured language model.

    Args:
        provider: 'gemini', 'openai', or 'anthropic'. Defaults to settings.
        model: Model name. Defaults to settings, then a provider default.

    Returns:
        Configured DSPy LM instance.

    Raises:
        ValueError: unknown provider or missing API key.
    """
    settings = get_settings()
    provider = provider or settings.llm_provider

    if provider not in DEFAULT_MODELS:
        raise ValueError(f"Unknown provider: {provider}")

    model = model or settings.llm_model or DEFAULT_MODELS[provider]

    if provider == "gemini":
        # Accept both GOOGLE_API_KEY and GEMINI_API_KEY
        api_key = settings.google_api_key or settings.gemini_api_key
    elif provider == "openai":
        api_key = settings.openai_api_key
    else:
        api_key = settings.anthropic_api_key

    if not api_key:
        raise ValueError(f"No API key configured for {provider}")

    # litellm-style "<provider>/<model>" names
    return dspy.LM(model=f"{provider}/{model}", api_key=api_key)
