"""Package initialization for pdf_to_image."""

from pathlib import Path

from dotenv import load_dotenv

# Load .env at package initialization
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / ".env"

if ENV_FILE_PATH.exists():
    # Don't override existing env vars; values already set by the OS or deployment platform win.
    load_dotenv(ENV_FILE_PATH, override=False)

from pdf_to_image.exceptions import InvalidFormat, PageDoesNotExist, PdfDoesNotExist, PdfToImageException  # noqa: E402
from pdf_to_image.pdf import Pdf  # noqa: E402

__all__ = [
    "InvalidFormat",
    "PageDoesNotExist",
    "Pdf",
    "PdfDoesNotExist",
    "PdfToImageException",
]
