"""Configuration settings for the PDF to image converter."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Order of priority for pydantic-settings:
#
# 1. Arguments to the Initializer (e.g., Settings(DEFAULT_RESOLUTION=300)).
# 2. System Environment Variables (e.g., export DEFAULT_RESOLUTION=300).
# 3. .env File Values, when a .env file exists at the project root.
# 4. Default Values in the Class.

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / ".env"


class Settings(BaseSettings):  # type: ignore
    """Configuration settings for PDF rendering."""

    model_config = SettingsConfigDict(
        # Only load .env if it exists (local dev)
        env_file=str(ENV_FILE_PATH) if ENV_FILE_PATH.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # -- Rendering --
    DEFAULT_RESOLUTION: int = 144
    # Used when neither an explicit format nor a supported file extension is given
    FALLBACK_OUTPUT_FORMAT: str = "jpg"
    # Directory holding the poppler binaries (pdfinfo, pdftoppm) when they are not on PATH
    POPPLER_PATH: Optional[str] = None

    # -- URL sources --
    URL_DOWNLOAD_TIMEOUT_SECONDS: int = 30
    TEMP_FILE_PREFIX: str = "urltopdf"

    LOG_LEVEL: str = "INFO"


settings = Settings()
