"""Health check endpoints."""

import logging
import shutil
from typing import Any, Dict

from fastapi import APIRouter

from recipe_ocr.config import settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check() -> Dict[str, str]:
    """
    Liveness check.

    Returns:
        Health status
    """
    return {"status": "healthy"}


@router.get("/ready")
async def readiness_check() -> Dict[str, Any]:
    """
    Readiness check: reports whether the Tesseract binary is on PATH.
    """
    tesseract_found = shutil.which("tesseract") is not None
    if not tesseract_found:
        logger.warning("Tesseract binary not found on PATH; image extraction will return empty recipes")
    return {
        "status": "ready" if tesseract_found else "degraded",
        "dependencies": {
            "tesseract": tesseract_found,
            "ocr_lang": settings.ocr_lang,
        },
    }
