"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    warscroll_log_level: str = "info"
    warscroll_language: str = "en"

    # Export size when no background is available
    fallback_width: int = 800
    fallback_height: int = 1100

    # Fonts are looked up by Pillow; the built-in font is used when missing
    serif_font: str = "DejaVuSerif.ttf"
    sans_font: str = "DejaVuSans.ttf"

    # Seconds an export waits for a pending background load
    background_timeout: float = 5.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
