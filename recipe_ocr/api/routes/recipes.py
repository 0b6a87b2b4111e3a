"""Recipe extraction endpoints."""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from pydantic import BaseModel, Field

from recipe_ocr.api.dependencies import get_recipe_extractor
from recipe_ocr.config import settings
from recipe_ocr.models.recipe import Recipe
from recipe_ocr.services.image_service import SUPPORTED_MIME_TYPES, ImageService
from recipe_ocr.services.recipe_extractor import RecipeExtractor
from recipe_ocr.utils.exceptions import ImageProcessingError, ValidationError
from recipe_ocr.utils.validators import validate_image_count, validate_recipe_text

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/recipes", tags=["recipes"])


class TextRequest(BaseModel):
    """Request model for parsing already-recognized text."""

    text: str = Field(..., description="Raw recipe text, e.g. OCR output the user corrected")


def _bad_request(error: str, e: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"error": error, "detail": str(e)})


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": "Internal server error", "detail": "An unexpected error occurred"},
    )


async def _read_uploads(files: List[UploadFile]) -> List[bytes]:
    """Read uploads in order, rejecting wrong types and oversized files before any OCR runs."""
    images: List[bytes] = []
    for upload in files:
        name = upload.filename or f"image {len(images) + 1}"
        content_type = (upload.content_type or "").lower()
        if content_type and content_type not in SUPPORTED_MIME_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "Invalid image type",
                    "detail": f"{name}: content-type {upload.content_type} is not one of {list(SUPPORTED_MIME_TYPES)}",
                },
            )
        data = await upload.read()
        if len(data) > settings.max_request_size:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail={"error": "File too large", "detail": f"{name}: max size is {settings.max_request_size} bytes"},
            )
        image_bytes, _ = ImageService.validate_image(data, name)
        images.append(image_bytes)
    return images


@router.post("/from-images", response_model=Recipe)
async def extract_from_images(
    request: Request,
    files: List[UploadFile] = File(..., description="Recipe page images, in reading order"),
    recipe_extractor: RecipeExtractor = Depends(get_recipe_extractor),
) -> Recipe:
    """
    Extract one recipe from one or more photographed pages.

    - **files**: JPEG, PNG or WebP images; upload order is page order
    """
    logger.info(
        f"[from-images] {len(files)} image(s) received",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "filenames": [f.filename for f in files],
        },
    )

    try:
        validate_image_count(files)
        images = await _read_uploads(files)
        return await asyncio.wait_for(
            recipe_extractor.extract_from_images(images),
            timeout=settings.extract_timeout_s,
        )
    except asyncio.TimeoutError as e:
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail={
                "error": "Timeout",
                "detail": f"Recognition took longer than {settings.extract_timeout_s:.0f}s; "
                          f"try fewer or smaller images",
            },
        ) from e
    except ValidationError as e:
        raise _bad_request("Invalid request", e) from e
    except ImageProcessingError as e:
        raise _bad_request("Invalid image", e) from e
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[from-images] unexpected error: {e}", exc_info=True)
        raise _internal_error() from e


@router.post("/from-text", response_model=Recipe)
async def extract_from_text(
    request: Request,
    body: TextRequest,
    recipe_extractor: RecipeExtractor = Depends(get_recipe_extractor),
) -> Recipe:
    """Structure raw recipe text without running OCR."""
    logger.info(
        f"[from-text] {len(body.text)} chars received",
        extra={"request_id": getattr(request.state, "request_id", None)},
    )

    try:
        return await recipe_extractor.extract_from_text(validate_recipe_text(body.text))
    except ValidationError as e:
        raise _bad_request("Invalid text", e) from e
    except Exception as e:
        logger.error(f"[from-text] unexpected error: {e}", exc_info=True)
        raise _internal_error() from e
