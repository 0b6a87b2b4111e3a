"""Image validation and enhancement before recognition."""

import io
import logging
from typing import Tuple

from PIL import Image, ImageEnhance, ImageOps, UnidentifiedImageError

from recipe_ocr.config import settings
from recipe_ocr.utils.exceptions import ImageProcessingError

logger = logging.getLogger(__name__)

# Magic bytes of accepted formats; WebP needs an offset check
_SIGNATURES = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
)
SUPPORTED_MIME_TYPES = ("image/jpeg", "image/png", "image/webp")


class ImageService:
    """Checks uploads and prepares decoded pages for recognition."""

    @staticmethod
    def validate_image(file_content: bytes, filename: str) -> Tuple[bytes, str]:
        """
        Check that an upload is a non-empty JPEG, PNG or WebP within the size limit.

        Returns:
            Tuple of (image_bytes, mime_type)

        Raises:
            ImageProcessingError: If the upload cannot be used as a recipe page
        """
        if not file_content:
            raise ImageProcessingError(f"{filename}: file is empty")

        limit = settings.max_request_size
        if len(file_content) > limit:
            raise ImageProcessingError(f"{filename}: larger than {limit / 1024 / 1024:.0f}MB")

        mime_type = ImageService.sniff_mime_type(file_content)
        if mime_type not in SUPPORTED_MIME_TYPES:
            raise ImageProcessingError(f"{filename}: unsupported format {mime_type}, expected JPEG, PNG or WebP")

        logger.debug(f"[image] accepted {filename} ({mime_type}, {len(file_content)} bytes)")
        return file_content, mime_type

    @staticmethod
    def sniff_mime_type(file_content: bytes) -> str:
        """MIME type from the file's magic bytes; the declared content-type is not trusted."""
        for signature, mime_type in _SIGNATURES:
            if file_content.startswith(signature):
                return mime_type
        if file_content[:4] == b"RIFF" and file_content[8:12] == b"WEBP":
            return "image/webp"
        return "application/octet-stream"

    @staticmethod
    def open_image(image_bytes: bytes) -> Image.Image:
        """Decode image bytes, raising ImageProcessingError for unreadable data."""
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
            return image
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise ImageProcessingError(f"Cannot decode image: {e}") from e

    @staticmethod
    def preprocess(image: Image.Image) -> Image.Image:
        """
        Enhance an image for text recognition.

        Applies EXIF orientation, flattens transparency onto white, downscales
        very large photos and boosts contrast and brightness.
        """
        try:
            img = ImageOps.exif_transpose(image)
            if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
                bg = Image.new("RGBA", img.size, (255, 255, 255, 255))
                img = Image.alpha_composite(bg, img.convert("RGBA")).convert("RGB")
            else:
                img = img.convert("RGB")

            w, h = img.size
            max_side = max(w, h)
            if max_side > settings.image_max_dim:
                scale = settings.image_max_dim / float(max_side)
                img = img.resize((max(1, int(w * scale)), max(1, int(h * scale))), Image.LANCZOS)

            img = ImageEnhance.Contrast(img).enhance(settings.image_contrast)
            img = ImageEnhance.Brightness(img).enhance(settings.image_brightness)
            return img
        except (OSError, ValueError) as e:
            raise ImageProcessingError(f"Image preprocessing failed: {e}") from e
