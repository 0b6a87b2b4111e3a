"""Pydantic models."""

from recipe_ocr.models.recipe import (
    IngredientLine,
    RawPage,
    Recipe,
    TextLine,
)

__all__ = [
    "IngredientLine",
    "RawPage",
    "Recipe",
    "TextLine",
]
