"""FastAPI application entry point."""

import logging
from typing import Any, Tuple

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recipe_ocr.api.routes import health, recipes
from recipe_ocr.config import settings
from recipe_ocr.core.request_id import get_request_id
from recipe_ocr.middleware.logging import RequestLoggingMiddleware
from recipe_ocr.utils.exceptions import (
    ImageProcessingError,
    RecipeOcrException,
    RecognitionError,
    ValidationError,
)
from recipe_ocr.utils.logging_config import setup_logging

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Most specific first
ERROR_STATUS: Tuple[Tuple[type, int, str], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST, "Invalid input"),
    (ImageProcessingError, status.HTTP_400_BAD_REQUEST, "Invalid image"),
    (RecognitionError, status.HTTP_502_BAD_GATEWAY, "Recognition engine error"),
)

app = FastAPI(
    title="Recipe OCR API",
    description="Turns photographed recipe pages into structured recipes using OCR and text heuristics",
    version="1.0.0",
)


def _error_response(status_code: int, error: str, detail: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "detail": detail, "request_id": get_request_id()},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests with the field-level errors."""
    logger.warning(
        f"Rejected {request.method} {request.url.path}: {len(exc.errors())} validation error(s)",
        extra={"request_id": get_request_id(), "errors": exc.errors()},
    )
    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation error", exc.errors())


@app.exception_handler(RecipeOcrException)
async def recipe_ocr_exception_handler(request: Request, exc: RecipeOcrException) -> JSONResponse:
    """Map service exceptions that escaped a route to HTTP responses."""
    for exc_type, status_code, error in ERROR_STATUS:
        if isinstance(exc, exc_type):
            break
    else:
        status_code, error = status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"

    logger.error(f"{error}: {exc}", extra={"request_id": get_request_id()}, exc_info=True)
    return _error_response(status_code, error, str(exc))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; never leaks internals to the client."""
    logger.error(f"Unhandled {type(exc).__name__}: {exc}", extra={"request_id": get_request_id()}, exc_info=True)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "An unexpected error occurred"
    )


app.add_middleware(RequestLoggingMiddleware)
# Wildcard origins cannot be combined with credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.cors_origins_list != ["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

app.include_router(health.router)
app.include_router(recipes.router)


@app.on_event("startup")
async def log_ocr_settings():
    logger.info(
        f"Recipe OCR API ready (lang={settings.ocr_lang}, psm={settings.ocr_psm}, "
        f"max_images={settings.max_images}, log_level={settings.log_level})"
    )


@app.get("/")
async def root():
    """Service name and where to find the docs."""
    return {"name": "Recipe OCR API", "version": "1.0.0", "docs": "/docs"}


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
