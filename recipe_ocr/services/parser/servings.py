"""Servings extraction."""

from __future__ import annotations

import re
from typing import Callable, Optional, Pattern

from recipe_ocr.services.parser.document import Document
from recipe_ocr.services.parser.strategies import contained, first_match
from recipe_ocr.services.parser.times import header_block_values, normalize_range

_SP = r"[^\S\n]*"
_DASH = r"[-‐‑‒–—―]"
# "4", "4-6", "4 – 6"
_COUNT = rf"(\d+(?:{_SP}{_DASH}{_SP}\d+)?)"

SERVING_PATTERNS = (
    re.compile(rf"\bserves{_SP}:?{_SP}{_COUNT}(?:{_SP}(?:people|persons))?", re.IGNORECASE),
    re.compile(rf"\bservings?{_SP}:?{_SP}{_COUNT}", re.IGNORECASE),
    re.compile(rf"\byield{_SP}:?{_SP}{_COUNT}(?:{_SP}servings?)?", re.IGNORECASE),
    re.compile(rf"\bmakes{_SP}:?{_SP}{_COUNT}(?:{_SP}servings?)?", re.IGNORECASE),
    re.compile(rf"\bfor{_SP}:?{_SP}{_COUNT}{_SP}(?:people|persons)\b", re.IGNORECASE),
    re.compile(rf"{_COUNT}{_SP}servings?\b", re.IGNORECASE),
)
INGREDIENTS_HEADER = re.compile(rf"\bingredients{_SP}(?:for|serves)?{_SP}(\d+)", re.IGNORECASE)


def header_block_servings(doc: Document) -> Optional[str]:
    return header_block_values(doc).get("servings")


def _pattern_strategy(pattern: Pattern[str]) -> Callable[[Document], Optional[str]]:
    def strategy(doc: Document) -> Optional[str]:
        m = pattern.search(doc.text)
        return normalize_range(m.group(1)) if m else None

    strategy.__name__ = f"servings_pattern_{pattern.pattern[:20]}"
    return strategy


def ingredients_header_servings(doc: Document) -> Optional[str]:
    m = INGREDIENTS_HEADER.search(doc.text)
    return m.group(1) if m else None


STRATEGIES = (
    header_block_servings,
    *(_pattern_strategy(p) for p in SERVING_PATTERNS),
    ingredients_header_servings,
)


@contained("")
def extract_servings(text: str) -> str:
    """Return servings as ``N`` or ``N-M``, or an empty string."""
    return first_match(STRATEGIES, Document.from_text(text)) or ""
