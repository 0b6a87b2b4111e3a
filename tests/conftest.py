"""Pytest configuration and fixtures."""

import io
from typing import Callable, Dict, Tuple

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from recipe_ocr.api.dependencies import get_recipe_extractor
from recipe_ocr.main import app
from recipe_ocr.services.recipe_extractor import RecipeExtractor

Size = Tuple[int, int]


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def soup_text() -> str:
    """OCR text of a small, well-formed recipe."""
    return (
        "Grandma's Soup\n"
        "Serves: 4\n"
        "Ingredients:\n"
        "2 cups carrots\n"
        "1 onion\n"
        "Instructions:\n"
        "1. Chop vegetables.\n"
        "2. Simmer for 30 minutes."
    )


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Factory encoding a blank in-memory image."""

    def make(size: Size = (40, 20), mode: str = "RGB", fmt: str = "PNG") -> bytes:
        color = (255, 255, 255, 0) if mode == "RGBA" else (255, 255, 255)
        out = io.BytesIO()
        Image.new(mode, size, color).save(out, format=fmt)
        return out.getvalue()

    return make


@pytest.fixture
def size_recognizer() -> Callable[[Dict[Size, str]], Callable[[Image.Image], str]]:
    """Factory for a fake OCR engine whose text depends on the image size."""

    def build(texts: Dict[Size, str]) -> Callable[[Image.Image], str]:
        def recognize(image: Image.Image) -> str:
            return texts.get(image.size, "")

        return recognize

    return build


@pytest.fixture
def fake_extractor(size_recognizer):
    """Swap the Tesseract-backed extractor for one using a size-keyed fake recognizer."""

    def install(texts: Dict[Size, str]) -> RecipeExtractor:
        extractor = RecipeExtractor(recognizer=size_recognizer(texts))
        app.dependency_overrides[get_recipe_extractor] = lambda: extractor
        return extractor

    yield install
    app.dependency_overrides.pop(get_recipe_extractor, None)
