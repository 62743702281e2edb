"""Custom logging context to tag log messages with the PDF and page being converted."""

import logging
from contextvars import ContextVar
from typing import Optional

from pdf_to_image.config import settings

# The PDF and the 1-indexed page of a running batch export.
source_pdf_context: ContextVar[Optional[str]] = ContextVar("source_pdf", default=None)
source_page_context: ContextVar[Optional[int]] = ContextVar("source_page", default=None)


def current_source_label() -> Optional[str]:
    """Returns "name.pdf" or "name.pdf p<page>" for the running conversion, or None outside of one."""
    source_pdf = source_pdf_context.get()
    if not source_pdf:
        return None

    page = source_page_context.get()
    return f"{source_pdf} p{page}" if page is not None else source_pdf


class ContextFilter(logging.Filter):
    """Prefixes log records with the PDF, and page, being converted."""

    def filter(self, record):
        label = current_source_label()
        if label:
            record.msg = f"[{label}] {record.msg}"
        return True


def setup_logging(level: Optional[str] = None):
    """Call this once at app startup.

    Args:
        level (str, optional): Log level name. Defaults to settings.LOG_LEVEL.
    """
    root_logger = logging.getLogger()

    # Clear any existing handlers (prevents duplicates)
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S"))
    handler.addFilter(ContextFilter())

    root_logger.addHandler(handler)
    root_logger.setLevel((level or settings.LOG_LEVEL).upper())
