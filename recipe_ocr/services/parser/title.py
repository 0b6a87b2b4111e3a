"""Recipe title extraction."""

from __future__ import annotations

import re
from typing import Optional

from recipe_ocr.services.parser.document import Document
from recipe_ocr.services.parser.strategies import contained, first_match
from recipe_ocr.utils.text_cleaner import clean_text

DEFAULT_TITLE = "Untitled Recipe"

# Words that mark headers and section labels rather than titles
NON_TITLE_WORDS = (
    "ingredients",
    "instructions",
    "directions",
    "steps",
    "method",
    "preparation",
    "recipe",
    "yield",
    "serves",
    "servings",
    "prep time",
    "cook time",
    "total time",
)

HEAD_LINES = 5

_EXPLICIT_PATTERNS = (
    re.compile(r"\brecipe\s*:\s*([^:\n]+)", re.IGNORECASE),
    re.compile(r"\btitle\s*:\s*([^:\n]+)", re.IGNORECASE),
    re.compile(r"\bname\s*:\s*([^:\n]+)", re.IGNORECASE),
)
# "Banana Bread Recipe"; only the first line declares a title this way
_TRAILING_RECIPE = re.compile(r"^([^:]+?)\s*\brecipe\s*$", re.IGNORECASE)
_EMPHASIS = re.compile(r"[*_]")


def is_likely_title(line: str) -> bool:
    """Check length, vocabulary and capitalization of a title candidate."""
    if len(line) < 2 or len(line) > 50:
        return False
    lowered = line.lower()
    if any(word in lowered for word in NON_TITLE_WORDS):
        return False
    if not line[0].isupper():
        return False
    return not line[0].isdigit()


def explicit_title(doc: Document) -> Optional[str]:
    for pattern in _EXPLICIT_PATTERNS:
        m = pattern.search(doc.text)
        if m:
            candidate = clean_text(m.group(1))
            if is_likely_title(candidate):
                return candidate
    lines = doc.non_empty_lines
    m = _TRAILING_RECIPE.match(lines[0]) if lines else None
    candidate = clean_text(m.group(1)) if m else ""
    return candidate if is_likely_title(candidate) else None


def first_lines_title(doc: Document) -> Optional[str]:
    for line in doc.non_empty_lines[:HEAD_LINES]:
        if is_likely_title(line):
            return line
    return None


def emphasized_title(doc: Document) -> Optional[str]:
    for line in doc.non_empty_lines[:HEAD_LINES]:
        if "*" in line or "_" in line:
            candidate = clean_text(_EMPHASIS.sub("", line))
            return candidate if is_likely_title(candidate) else None
    return None


def longest_title(doc: Document) -> Optional[str]:
    candidates = [line for line in doc.non_empty_lines[:HEAD_LINES] if is_likely_title(line)]
    if not candidates:
        return None
    # max() keeps the earliest line on ties
    return max(candidates, key=len)


STRATEGIES = (
    explicit_title,
    first_lines_title,
    emphasized_title,
    longest_title,
)


@contained(DEFAULT_TITLE)
def extract_title(text: str) -> str:
    """Find the most likely title, falling back to the first line or a default."""
    doc = Document.from_text(text)
    title = first_match(STRATEGIES, doc)
    if title:
        return title
    lines = doc.non_empty_lines
    return lines[0] if lines else DEFAULT_TITLE
