"""Ingredient line detection and segmentation."""

from __future__ import annotations

import re
from typing import AbstractSet, Iterable, List

from recipe_ocr.models.recipe import IngredientLine, TextLine
from recipe_ocr.services.parser.document import Document
from recipe_ocr.services.parser.sections import find_ingredients_section
from recipe_ocr.services.parser.strategies import contained
from recipe_ocr.services.parser.times import header_value_lines
from recipe_ocr.utils.text_cleaner import FRACTION_GLYPHS, clean_text, normalize_fractions, normalize_units

# Plural / alternate spelling -> canonical unit
UNIT_ALIASES = {
    "cup": "cup", "cups": "cup",
    "tablespoon": "tablespoon", "tablespoons": "tablespoon",
    "teaspoon": "teaspoon", "teaspoons": "teaspoon",
    "pound": "pound", "pounds": "pound",
    "ounce": "ounce", "ounces": "ounce",
    "gram": "gram", "grams": "gram",
    "kilogram": "kilogram", "kilograms": "kilogram",
    "milliliter": "milliliter", "milliliters": "milliliter", "millilitre": "milliliter", "millilitres": "milliliter",
    "liter": "liter", "liters": "liter", "litre": "liter", "litres": "liter",
    "quart": "quart", "quarts": "quart",
    "pint": "pint", "pints": "pint",
    "gallon": "gallon", "gallons": "gallon",
    "pinch": "pinch", "pinches": "pinch",
    "dash": "dash", "dashes": "dash",
    "clove": "clove", "cloves": "clove",
    "can": "can", "cans": "can",
    "package": "package", "packages": "package",
    "stick": "stick", "sticks": "stick",
    "slice": "slice", "slices": "slice",
    "sprig": "sprig", "sprigs": "sprig",
    "bunch": "bunch", "bunches": "bunch",
    "handful": "handful", "handfuls": "handful",
}

_UNIT_WORDS = "|".join(sorted(UNIT_ALIASES, key=len, reverse=True))
_QTY = r"\d+\s+\d+/\d+|\d+/\d+|\d*\.\d+|\d+"

_CANDIDATE_PATTERNS = (
    re.compile(rf"^[\d{FRACTION_GLYPHS}]"),
    re.compile(
        r"^(?:[a-z]+\s)?(?:cups?|tablespoons?|tbsp|teaspoons?|tsp|pounds?|lbs?|ounces?|oz)\b",
        re.IGNORECASE,
    ),
    re.compile(r"^[•·▪●◦–-]"),
    re.compile(r"^[a-z][a-z ,'-]*\s(?:to taste|chopped|minced|diced|sliced|grated|crushed)\.?$", re.IGNORECASE),
    re.compile(r"^[a-z][a-z\s]*[(\[].*?[)\]]"),
)
# Lines that start like an ingredient but carry recipe metadata
_METADATA = re.compile(
    r"\b(?:servings?|serves|prep(?:aration)?\s*time|cook(?:ing)?\s*time|total\s*time)\b", re.IGNORECASE
)
_STEP_NUMBER = re.compile(r"^\d+[.)](?!\d)")
_BULLET = re.compile(r"^[•·▪●◦–-]\s*")

_SEGMENT = re.compile(
    rf"^(?P<amount>(?:{_QTY})(?:\s*(?:-|to)\s*(?:{_QTY}))?)?\s*"
    rf"(?:(?P<unit>{_UNIT_WORDS})\b\.?)?\s*"
    r"(?P<name>.*)$",
    re.IGNORECASE,
)


def is_ingredient_line(line: str) -> bool:
    if _METADATA.search(line):
        return False
    return any(pattern.search(line) for pattern in _CANDIDATE_PATTERNS)


def parse_ingredient_line(line: str) -> IngredientLine:
    """
    Split a line into amount, unit and name.

    The whole line becomes the name when no amount or unit can be isolated, so
    a non-empty line never yields an empty ``ingredientName``.
    """
    line = clean_text(normalize_units(normalize_fractions(line)))
    line = _BULLET.sub("", line)
    m = _SEGMENT.match(line)
    if m:
        amount = re.sub(r"\s*(?:-|to)\s*(?=\d)", "-", (m.group("amount") or "").strip())
        unit = UNIT_ALIASES.get((m.group("unit") or "").lower(), "")
        name = re.sub(r"^of\s+", "", m.group("name").strip(), flags=re.IGNORECASE)
        if (amount or unit) and name:
            return IngredientLine(amount=amount, unit=unit, ingredientName=name)
    return IngredientLine(amount="", unit="", ingredientName=line)


def _collect(lines: Iterable[TextLine], skip_numbered: bool, skip: AbstractSet[int]) -> List[IngredientLine]:
    ingredients = []
    for line in lines:
        if line.is_blank or line.index in skip:
            continue
        if skip_numbered and _STEP_NUMBER.match(line.text):
            continue
        if is_ingredient_line(line.text):
            ingredients.append(parse_ingredient_line(line.text))
    return ingredients


@contained(list)
def extract_ingredients(text: str) -> List[IngredientLine]:
    """Ingredients in source order, scoped to the ingredients section when one exists."""
    doc = Document.from_text(text)
    # Values under a "Prep Time  Cook Time  Servings" row are metadata, not quantities
    skip = header_value_lines(doc)
    section = find_ingredients_section(doc)
    if section is not None:
        return _collect(section.lines, skip_numbered=False, skip=skip)
    # Without a heading, numbered lines are far more likely to be steps
    return _collect(doc.lines, skip_numbered=True, skip=skip)
