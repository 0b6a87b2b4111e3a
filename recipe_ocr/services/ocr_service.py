"""OCR service for extracting text from images."""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

import pytesseract
from PIL import Image

from recipe_ocr.config import settings
from recipe_ocr.services.image_service import ImageService
from recipe_ocr.utils.exceptions import RecognitionError

logger = logging.getLogger(__name__)

# Any callable that turns a preprocessed image into text can stand in for Tesseract
Recognizer = Callable[[Image.Image], str]


def tesseract_recognizer(image: Image.Image) -> str:
    """Run Tesseract on a preprocessed image."""
    try:
        return pytesseract.image_to_string(
            image, lang=settings.ocr_lang, config=settings.tesseract_config
        )
    except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as e:
        raise RecognitionError(f"OCR processing failed: {e}") from e


@contextmanager
def recognition_session(image_bytes: bytes) -> Iterator[Image.Image]:
    """
    Decode and preprocess one image for recognition.

    Every image opened for the session is closed when the block exits, whether
    recognition succeeded or raised.
    """
    opened: List[Image.Image] = []
    try:
        original = ImageService.open_image(image_bytes)
        opened.append(original)
        processed = ImageService.preprocess(original)
        if processed is not original:
            opened.append(processed)
        logger.debug("[OCR] session opened (size=%s, mode=%s)", processed.size, processed.mode)
        yield processed
    finally:
        for image in opened:
            image.close()
        logger.debug("[OCR] session closed (%d images released)", len(opened))


def extract_text_from_image(image_bytes: bytes, recognizer: Optional[Recognizer] = None) -> str:
    """
    Extract text from image bytes using OCR.

    Raises:
        ImageProcessingError: If the image cannot be decoded or enhanced
        RecognitionError: If the recognition engine fails
    """
    recognize = recognizer or tesseract_recognizer
    with recognition_session(image_bytes) as image:
        text = recognize(image) or ""
    logger.debug("[OCR] extracted %d chars", len(text))
    return text
