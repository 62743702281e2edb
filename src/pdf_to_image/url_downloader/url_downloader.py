"""Module for staging PDF documents referenced by URL on the local filesystem."""

import logging
import os
import tempfile
from typing import Optional
from urllib.parse import urlparse

import requests

from pdf_to_image.config import settings
from pdf_to_image.exceptions import PdfDoesNotExist

logger = logging.getLogger(__name__)

URL_SCHEMES = ("http", "https")


def is_url(value) -> bool:
    """Checks whether the value is a syntactically valid http(s) URL.

    Only the syntax is checked, the URL is not contacted.

    Args:
        value: The candidate string (anything else is never a URL).

    Returns:
        bool: True when the value has an http(s) scheme and a host.
    """
    if not isinstance(value, str):
        return False
    parsed = urlparse(value)
    return parsed.scheme in URL_SCHEMES and bool(parsed.netloc)


def download_pdf_to_temp_file(url: str, timeout: Optional[int] = None) -> str:
    """Downloads a PDF from a URL into a new temporary file.

    Args:
        url (str): The URL of the PDF.
        timeout (int, optional): Request timeout in seconds.
            Defaults to settings.URL_DOWNLOAD_TIMEOUT_SECONDS.

    Returns:
        str: The path of the temporary file holding the PDF. The caller owns the file.

    Raises:
        PdfDoesNotExist: If the download fails or the temporary file cannot be written.
    """
    timeout = timeout if timeout is not None else settings.URL_DOWNLOAD_TIMEOUT_SECONDS

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Error downloading PDF from {url}: {e}")
        raise PdfDoesNotExist(f"PDF could not be downloaded from {url}") from e

    download_path = None
    try:
        fd, download_path = tempfile.mkstemp(prefix=settings.TEMP_FILE_PREFIX, suffix=".pdf")
        with os.fdopen(fd, "wb") as temp_file:
            temp_file.write(response.content)
    except OSError as e:
        if download_path and os.path.exists(download_path):
            os.remove(download_path)
        logger.error(f"Error staging PDF from {url} to a temporary file: {e}")
        raise PdfDoesNotExist(f"PDF from {url} could not be stored locally") from e

    logger.info(f"Successfully downloaded {url} to {download_path}")
    return download_path
