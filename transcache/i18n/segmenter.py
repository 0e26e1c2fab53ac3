"""
Text segmentation and reinsertion for article markup.

Extraction is deliberately regex-based: each container pattern (paragraph,
div, list item, heading) is scanned on its own, non-greedy, and the
results are concatenated pattern by pattern. Consequences worth knowing:

- units come out grouped by pattern, not in document order
- nested same-type containers end at the first closing tag
- a container holding other containers yields a unit for each level

Swapping in a real HTML parser would change which fragments get
translated, so this stays as is.
"""

from __future__ import annotations

import re
from typing import Iterable

from transcache.core.models import RenderMode, TextUnit

CONTAINER_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"<p[^>]*>(.*?)</p>", re.DOTALL),
    re.compile(r"<div[^>]*>(.*?)</div>", re.DOTALL),
    re.compile(r"<li[^>]*>(.*?)</li>", re.DOTALL),
    re.compile(r"<h[1-6][^>]*>(.*?)</h[1-6]>", re.DOTALL),
]

TAG_PATTERN = re.compile(r"<[^>]+>")

# Units this short (after trimming) are bullets, stray characters and the like
MIN_UNIT_LENGTH = 3

TRANSLATION_BLOCK = '<div class="translation">{translation}</div>'


def strip_tags(html: str) -> str:
    return TAG_PATTERN.sub("", html)


def extract_units(html: str) -> list[TextUnit]:
    """Pull translatable units out of ``html``; blank units are dropped."""
    units: list[TextUnit] = []
    for pattern in CONTAINER_PATTERNS:
        for match in pattern.finditer(html):
            text = strip_tags(match.group(1))
            if text.strip():
                units.append(TextUnit(text=text, html=match.group(0)))
    return units


def is_translatable(unit: TextUnit, min_length: int = MIN_UNIT_LENGTH) -> bool:
    return len(unit.text.strip()) > min_length


def render_unit(unit: TextUnit, translation: str, mode: RenderMode) -> str:
    """
    Markup that replaces ``unit.html``.

    Bilingual keeps the original element and appends a translation block.
    Translation-only swaps the text inside the element; if the element had
    inner markup the plain text won't be found and the element is kept.
    """
    if mode == RenderMode.BILINGUAL:
        return unit.html + TRANSLATION_BLOCK.format(translation=translation)
    return unit.html.replace(unit.text, translation)


def reinsert(html: str, translations: Iterable[tuple[TextUnit, str]], mode: RenderMode) -> str:
    """Apply each (unit, translation) pair to ``html`` in order."""
    for unit, translation in translations:
        html = html.replace(unit.html, render_unit(unit, translation, mode))
    return html
