"""Shared API dependencies."""

from recipe_ocr.services.recipe_extractor import RecipeExtractor


def get_recipe_extractor() -> RecipeExtractor:
    """Get recipe extractor service instance (Tesseract-backed)."""
    return RecipeExtractor()
