"""Application configuration using pydantic-settings."""

import shlex
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    port: int = 8080
    host: str = "0.0.0.0"

    # Logging
    log_level: str = "INFO"

    # Upload limits
    max_request_size: int = 10 * 1024 * 1024  # 10MB per image
    max_images: int = 10
    extract_timeout_s: float = 110.0

    # CORS
    cors_origins: str = "*"  # Comma-separated origins or "*" for all

    # Recognition engine (Tesseract)
    ocr_lang: str = "eng"
    ocr_psm: int = 6  # Assume a uniform block of text
    # Punctuation the parser keys on: "Serves: 4-6", "Grandma's", "(optional)", bullets
    ocr_char_whitelist: str = (
        "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
        ".,/°⁄½⅓¼⅔¾:;-–'’()•*&%!?"
    )
    ocr_max_concurrency: int = 2

    # Image enhancement before recognition
    image_contrast: float = 1.2
    image_brightness: float = 1.1
    image_max_dim: int = 3000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Get list of CORS origins."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def tesseract_config(self) -> str:
        """Command-line config string passed to Tesseract."""
        config = f"--psm {self.ocr_psm}"
        if self.ocr_char_whitelist:
            # pytesseract shlex-splits the config, so quotes in the whitelist must be escaped
            config += f" -c tessedit_char_whitelist={shlex.quote(self.ocr_char_whitelist)}"
        return config


# Global settings instance
settings = Settings()
