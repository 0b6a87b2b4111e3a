"""Text normalization applied to recognized text before any field extraction."""

import re
from typing import List

from recipe_ocr.models.recipe import TextLine

FRACTION_MAP = {
    "½": "1/2",
    "⅓": "1/3",
    "⅔": "2/3",
    "¼": "1/4",
    "¾": "3/4",
    "⅕": "1/5",
    "⅖": "2/5",
    "⅗": "3/5",
    "⅘": "4/5",
    "⅙": "1/6",
    "⅚": "5/6",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}
FRACTION_GLYPHS = "".join(FRACTION_MAP)

UNIT_MAP = {
    "tbsp": "tablespoon",
    "tsp": "teaspoon",
    "oz": "ounce",
    "lb": "pound",
    "c": "cup",
    "g": "gram",
    "kg": "kilogram",
    "ml": "milliliter",
    "l": "liter",
}

_WS = re.compile(r"\s+")
_GLUED_FRACTION = re.compile(rf"(\d)([{FRACTION_GLYPHS}])")
_FRACTION = re.compile(rf"[{FRACTION_GLYPHS}]")
# Only abbreviations that directly follow a quantity: "2 tbsp", "500g", "1/2 c."
_UNIT_ABBREV = re.compile(
    r"(?<=[\d/])([ \t]*)(tbsps?|tsps?|ozs?|lbs?|kg|ml|c|g|l)\.?(?![A-Za-z])",
    re.IGNORECASE,
)
# A bare "c" is Celsius in "bake at 200 C for", "heat to 90 C until", "oven 180 C"
_TEMPERATURE_BEFORE = re.compile(r"\b(?:at|to|oven)[ \t]+[\d/]+$", re.IGNORECASE)
_TEMPERATURE_AFTER = re.compile(r"[ \t]*(?:(?:for|until)\b|$)", re.IGNORECASE | re.MULTILINE)
_BLANK_RUN = re.compile(r"\n{3,}")


def clean_text(text: str) -> str:
    """Collapse all whitespace runs to a single space and trim."""
    return _WS.sub(" ", text or "").strip()


def normalize_fractions(text: str) -> str:
    """Rewrite unicode fraction glyphs as ASCII ``a/b``; ``1½`` becomes ``1 1/2``."""
    if not text:
        return ""
    text = text.replace("⁄", "/")
    text = _GLUED_FRACTION.sub(r"\1 \2", text)
    return _FRACTION.sub(lambda m: FRACTION_MAP.get(m.group(0), m.group(0)), text)


def _is_temperature(match: "re.Match[str]") -> bool:
    text = match.string
    if _TEMPERATURE_BEFORE.search(text, 0, match.start()):
        return True
    return _TEMPERATURE_AFTER.match(text, match.end()) is not None


def _expand_unit(match: "re.Match[str]") -> str:
    abbrev = match.group(2).lower()
    if abbrev == "c" and _is_temperature(match):
        return match.group(0)
    if abbrev.endswith("s") and abbrev[:-1] in UNIT_MAP:
        abbrev = abbrev[:-1]
    return " " + UNIT_MAP.get(abbrev, match.group(2))


def normalize_units(text: str) -> str:
    """Expand unit abbreviations that follow a quantity to their full word."""
    if not text:
        return ""
    return _UNIT_ABBREV.sub(_expand_unit, text)


def normalize_whitespace(text: str) -> str:
    """
    Collapse whitespace inside each line while keeping line breaks.

    Runs of blank lines become a single blank line; leading and trailing blank
    lines are dropped.
    """
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [clean_text(line) for line in text.split("\n")]
    return _BLANK_RUN.sub("\n\n", "\n".join(lines)).strip("\n")


def normalize_text(text: str) -> str:
    """Full normalization pass: fractions, units, then whitespace."""
    return normalize_whitespace(normalize_units(normalize_fractions(text)))


def to_lines(text: str) -> List[TextLine]:
    """Split normalized text into indexed lines (blank lines included)."""
    if not text:
        return []
    return [TextLine(index=i, text=line) for i, line in enumerate(text.split("\n"))]
