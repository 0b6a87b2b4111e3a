"""Recipe extraction from photographed or screenshotted recipe pages."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from recipe_ocr.config import settings
from recipe_ocr.models.recipe import RawPage, Recipe
from recipe_ocr.services.ocr_service import Recognizer, extract_text_from_image
from recipe_ocr.services.parser import parse_recipe_text
from recipe_ocr.utils.exceptions import RecipeOcrException

logger = logging.getLogger(__name__)


def combine_pages(pages: Sequence[RawPage]) -> str:
    """Concatenate page texts in upload order, separated by a blank line."""
    ordered = sorted(pages, key=lambda page: page.index)
    return "\n\n".join(page.text for page in ordered if page.text.strip())


class RecipeExtractor:
    """Drive images through recognition and structure the text into a recipe."""

    def __init__(self, recognizer: Optional[Recognizer] = None, max_concurrency: Optional[int] = None):
        self.recognizer = recognizer
        self.max_concurrency = max(1, max_concurrency or settings.ocr_max_concurrency)

    async def recognize_pages(self, images: Sequence[bytes]) -> List[RawPage]:
        """
        Recognize every image; a failing image contributes an empty page.

        Recognition runs in worker threads, at most ``max_concurrency`` at a time.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _recognize(index: int, image_bytes: bytes) -> RawPage:
            async with semaphore:
                try:
                    text = await asyncio.to_thread(extract_text_from_image, image_bytes, self.recognizer)
                except RecipeOcrException as e:
                    logger.warning(f"[extract_from_images] image {index} yielded no text: {e}")
                    text = ""
                except Exception as e:
                    logger.error(f"[extract_from_images] unexpected failure on image {index}: {e}", exc_info=True)
                    text = ""
            return RawPage(index=index, text=text)

        pages = await asyncio.gather(*(_recognize(i, data) for i, data in enumerate(images)))
        return sorted(pages, key=lambda page: page.index)

    async def extract_from_images(self, images: Sequence[bytes]) -> Recipe:
        if not images:
            logger.warning("[extract_from_images] called without images")
        pages = await self.recognize_pages(images)
        failed = sum(1 for page in pages if not page.text.strip())
        if failed:
            logger.info(f"[extract_from_images] {failed}/{len(pages)} images produced no text")
        return await parse_recipe_text(combine_pages(pages))

    async def extract_from_text(self, text: str) -> Recipe:
        return await parse_recipe_text(text)
