"""Input validation utilities."""

from typing import Sequence

from recipe_ocr.config import settings
from recipe_ocr.utils.exceptions import ValidationError

MAX_TEXT_LENGTH = 100_000


def validate_image_count(images: Sequence[object]) -> None:
    """
    Check the number of uploaded images.

    Raises:
        ValidationError: If no image or too many images were sent
    """
    if not images:
        raise ValidationError("At least one image is required")
    if len(images) > settings.max_images:
        raise ValidationError(f"Too many images (max {settings.max_images})")


def validate_recipe_text(text: str) -> str:
    """
    Validate raw recipe text submitted for parsing.

    Returns:
        The text unchanged

    Raises:
        ValidationError: If the text is not a string or is too long
    """
    if not isinstance(text, str):
        raise ValidationError("Text must be a string")
    if len(text) > MAX_TEXT_LENGTH:
        raise ValidationError(f"Text cannot exceed {MAX_TEXT_LENGTH} characters")
    return text
