"""Application configuration."""

import os
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

from nutrition_ocr.adapters.ocr_space_engine import OCR_SPACE_URL
from nutrition_ocr.domain.recognition import OcrProvider

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    ocr_provider: OcrProvider = OcrProvider.OCRSPACE
    ocr_space_api_key: str
    ocr_space_url: str = OCR_SPACE_URL
    ocr_language: str = "eng"
    ocr_timeout_seconds: float = 30.0
    tesseract_cmd: str | None = None
    local_timezone: str | None = None
    records_table: str = "nutrition_facts"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_timezone(raw: str | None) -> ZoneInfo | None:
    """Parse the configured zone name; None means the host's local zone."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if cleaned in {"", "local"}:
        return None
    return ZoneInfo(cleaned)
