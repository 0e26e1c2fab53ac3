"""
Target languages and language-tag utilities.

Tags follow BCP 47 casing: lowercase language, titlecase script,
uppercase region (``en``, ``zh-Hans``, ``pt-BR``).
"""

from __future__ import annotations

import locale
import os


# Offered by the settings screens, after "System Language"
COMMON_LANGUAGES: list[tuple[str, str]] = [
    ("en", "English"),
    ("zh-Hans", "Simplified Chinese"),
    ("zh-Hant", "Traditional Chinese"),
    ("ja", "Japanese"),
    ("ko", "Korean"),
    ("es", "Spanish"),
    ("fr", "French"),
    ("de", "German"),
    ("it", "Italian"),
    ("pt", "Portuguese"),
    ("ru", "Russian"),
    ("ar", "Arabic"),
    ("hi", "Hindi"),
    ("th", "Thai"),
    ("vi", "Vietnamese"),
]


# Human-readable names, keyed by primary language subtag or full tag
LANGUAGE_NAMES: dict[str, str] = {
    **dict(COMMON_LANGUAGES),
    "zh": "Chinese",
    "nl": "Dutch",
    "pl": "Polish",
    "tr": "Turkish",
    "id": "Indonesian",
    "sv": "Swedish",
    "no": "Norwegian",
    "da": "Danish",
    "fi": "Finnish",
    "el": "Greek",
    "cs": "Czech",
    "hu": "Hungarian",
    "ro": "Romanian",
    "uk": "Ukrainian",
    "he": "Hebrew",
    "fa": "Persian",
    "bn": "Bengali",
}


DEFAULT_LANGUAGE = "en"


# =============================================================================
# Utilities
# =============================================================================


def normalize_language_code(code: str) -> str:
    """
    Normalize a language tag to BCP 47 casing.

    Accepts POSIX-style locales too: ``zh_hans`` -> ``zh-Hans``,
    ``pt_br.UTF-8`` -> ``pt-BR``.
    """
    code = code.strip().split(".")[0].split("@")[0].replace("_", "-")
    if not code:
        return code

    subtags = code.split("-")
    result = [subtags[0].lower()]
    for subtag in subtags[1:]:
        if len(subtag) == 4 and subtag.isalpha():
            result.append(subtag.title())  # script
        elif len(subtag) in (2, 3):
            result.append(subtag.upper())  # region
        else:
            result.append(subtag.lower())
    return "-".join(result)


def primary_subtag(code: str) -> str:
    """``zh-Hans`` -> ``zh``."""
    return normalize_language_code(code).split("-")[0]


def get_language_name(code: str) -> str:
    """Get human-readable language name."""
    code = normalize_language_code(code)
    return LANGUAGE_NAMES.get(code) or LANGUAGE_NAMES.get(primary_subtag(code), code)


def is_known_language(code: str) -> bool:
    code = normalize_language_code(code)
    return code in LANGUAGE_NAMES or primary_subtag(code) in LANGUAGE_NAMES


def system_language() -> str:
    """
    The display language's primary subtag, falling back to English.

    Checks the usual locale environment variables before asking the
    ``locale`` module.
    """
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = (os.environ.get(var) or "").split(".")[0]
        if value and value not in ("C", "POSIX"):
            return primary_subtag(value)

    current, _ = locale.getlocale()
    if current and current not in ("C", "POSIX"):
        return primary_subtag(current) or DEFAULT_LANGUAGE
    return DEFAULT_LANGUAGE


def language_choices() -> list[tuple[str | None, str]]:
    """Settings-screen choices; ``None`` stands for the system language."""
    return [(None, f"System Language ({system_language()})"), *COMMON_LANGUAGES]
