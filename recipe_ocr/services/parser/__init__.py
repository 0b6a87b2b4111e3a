"""Turn recognized recipe text into a structured ``Recipe``."""

from __future__ import annotations

import asyncio
import logging

from recipe_ocr.models.recipe import Recipe
from recipe_ocr.services.parser.ingredients import extract_ingredients
from recipe_ocr.services.parser.instructions import extract_instructions
from recipe_ocr.services.parser.servings import extract_servings
from recipe_ocr.services.parser.times import derive_total_time, extract_times
from recipe_ocr.services.parser.title import extract_title
from recipe_ocr.utils.text_cleaner import normalize_text

logger = logging.getLogger(__name__)


async def assemble_recipe(normalized_text: str) -> Recipe:
    """Run the five field extractors concurrently and merge their results."""
    title, times, servings, ingredients, instructions = await asyncio.gather(
        asyncio.to_thread(extract_title, normalized_text),
        asyncio.to_thread(extract_times, normalized_text),
        asyncio.to_thread(extract_servings, normalized_text),
        asyncio.to_thread(extract_ingredients, normalized_text),
        asyncio.to_thread(extract_instructions, normalized_text),
    )
    times = derive_total_time(times)

    logger.info(
        "[parser] assembled recipe: title=%r ingredients=%d servings=%r times=%s",
        title,
        len(ingredients),
        servings,
        times,
    )
    return Recipe(
        title=title,
        prepTime=times.get("prepTime", ""),
        cookTime=times.get("cookTime", ""),
        totalTime=times.get("totalTime", ""),
        servings=servings,
        ingredients=tuple(ingredients),
        instructions=instructions,
    )


async def parse_recipe_text(text: str) -> Recipe:
    """Normalize raw recognized text and structure it into a recipe."""
    normalized = normalize_text(text or "")
    if not normalized:
        logger.warning("[parser] no text to parse, returning default recipe")
    return await assemble_recipe(normalized)


__all__ = ["assemble_recipe", "parse_recipe_text"]
