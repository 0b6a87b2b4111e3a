"""Custom exception classes."""


class RecipeOcrException(Exception):
    """Base exception for the recipe OCR service."""

    pass


class ValidationError(RecipeOcrException):
    """Raised when request input validation fails."""

    pass


class ImageProcessingError(RecipeOcrException):
    """Raised when an image cannot be decoded or preprocessed."""

    pass


class RecognitionError(RecipeOcrException):
    """Raised when the recognition engine fails on a single image."""

    pass
