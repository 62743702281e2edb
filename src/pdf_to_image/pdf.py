"""Module for converting the pages of a PDF document into images.

Classes:
    ImageSettings: Callback protocol applied to the render engine around each page read.
    Pdf: Binds one PDF document (local path or URL) and renders its pages to image files.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Protocol

from pdf_to_image.config import settings
from pdf_to_image.custom_logging.log_context import source_page_context, source_pdf_context
from pdf_to_image.engine.render_engine import RenderEngine
from pdf_to_image.exceptions import InvalidFormat, PageDoesNotExist, PdfDoesNotExist
from pdf_to_image.url_downloader.url_downloader import download_pdf_to_temp_file, is_url

logger = logging.getLogger(__name__)


class ImageSettings(Protocol):
    """Takes the render engine and the current page number, and returns the engine to keep using."""

    def __call__(self, engine: RenderEngine, page: int) -> RenderEngine: ...


class Pdf:
    """Renders pages of a single PDF document to JPEG or PNG files.

    The converter holds mutable configuration (resolution, output format, current page)
    that is applied to its render engine on every read. It is not safe to share an
    instance between threads.
    """

    VALID_OUTPUT_FORMATS = ("jpg", "jpeg", "png")

    def __init__(
        self,
        pdf_file,
        before_settings: Optional[ImageSettings] = None,
        after_settings: Optional[ImageSettings] = None,
        engine: Optional[RenderEngine] = None,
    ):
        """Initializes the converter.

        Args:
            pdf_file (str | os.PathLike): The path or http(s) URL of the PDF.
            before_settings (ImageSettings, optional): Applied to the engine before a page is read.
            after_settings (ImageSettings, optional): Applied to the engine after a page is read.
            engine (RenderEngine, optional): The engine to render with. A new one is created by default.

        Raises:
            PdfDoesNotExist: If pdf_file is neither an existing file nor a URL,
                or the URL could not be downloaded.
        """
        from_url = is_url(pdf_file)
        if not from_url and not os.path.exists(pdf_file):
            raise PdfDoesNotExist(f"PDF {pdf_file} does not exist")

        self.temp_file: Optional[str] = None
        if from_url:
            self.temp_file = download_pdf_to_temp_file(pdf_file)
            pdf_file = self.temp_file

        self.engine = engine or RenderEngine()
        self.pdf_file = os.fspath(pdf_file)
        self.before_settings = before_settings
        self.after_settings = after_settings

        self.resolution = settings.DEFAULT_RESOLUTION
        self.output_format = ""
        self.page = 1
        self._number_of_pages: Optional[int] = None
        # Pages the last batch export failed to write
        self.unwritten_pages: List[int] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        """Removes the temporary copy of a PDF downloaded from a URL."""
        if self.temp_file and os.path.exists(self.temp_file):
            os.remove(self.temp_file)
            logger.debug(f"Removed temporary file {self.temp_file}")
        self.temp_file = None

    def set_before_settings(self, before_settings: ImageSettings) -> "Pdf":
        """Sets the callback applied to the engine before the page is read."""
        self.before_settings = before_settings
        return self

    def set_after_settings(self, after_settings: ImageSettings) -> "Pdf":
        """Sets the callback applied to the engine after the page is read, flattened and formatted."""
        self.after_settings = after_settings
        return self

    def set_resolution(self, resolution: int) -> "Pdf":
        self.resolution = resolution
        return self

    def set_output_format(self, output_format: str) -> "Pdf":
        """Sets the output format used regardless of the destination file extension.

        Raises:
            InvalidFormat: If the format is not one of VALID_OUTPUT_FORMATS.
        """
        if not self.is_valid_output_format(output_format):
            raise InvalidFormat(f"Format {output_format} is not supported")

        self.output_format = output_format
        return self

    def is_valid_output_format(self, output_format) -> bool:
        return output_format in self.VALID_OUTPUT_FORMATS

    def set_page(self, page: int) -> "Pdf":
        """Sets the 1-indexed page to render.

        Raises:
            PageDoesNotExist: If the page is outside the document.
        """
        if page < 1 or page > self.get_number_of_pages():
            raise PageDoesNotExist(f"Page {page} does not exist")

        self.page = page
        return self

    def get_number_of_pages(self) -> int:
        """Returns the number of pages, opening the document on the first call only."""
        if self._number_of_pages is not None:
            return self._number_of_pages

        self.engine.set_resolution(self.resolution, self.resolution)
        self._apply_before_settings()
        self.engine.ping_image(self.pdf_file)

        self._number_of_pages = self.engine.get_number_images()
        logger.info(f"{self.pdf_file} has {self._number_of_pages} pages")
        return self._number_of_pages

    def get_image_data(self, path_to_image) -> RenderEngine:
        """Renders the current page and returns the engine holding the image.

        The destination path is only used to infer the output format when none is set.
        """
        self.engine.set_resolution(self.resolution, self.resolution)
        self._apply_before_settings()

        self.engine.read_image(self.pdf_file, self.page - 1)
        self.engine.merge_image_layers()
        self.engine.set_format(self.determine_output_format(path_to_image))

        if self.after_settings:
            self.engine = self.after_settings(self.engine, self.page)

        return self.engine

    def save_image(self, path_to_image) -> bool:
        """Renders the current page to the given path.

        Returns:
            bool: False if the image could not be written.
        """
        image_data = self.get_image_data(path_to_image).get_image_blob()

        try:
            Path(path_to_image).write_bytes(image_data)
        except OSError as e:
            logger.error(f"Error writing page {self.page} to {path_to_image}: {e}")
            return False

        logger.info(f"Saved page {self.page} to {path_to_image}")
        return True

    def save_all_pages_as_images(self, directory, prefix: str = "") -> List[str]:
        """Renders every page into the directory as {prefix}{page}.{format}.

        Leaves the current page set to the last page. Pages whose file could not be
        written are still listed, and recorded in unwritten_pages.

        Returns:
            list: The paths of the created images, in page order.
        """
        self.unwritten_pages = []
        number_of_pages = self.get_number_of_pages()
        if number_of_pages == 0:
            return []

        Path(directory).mkdir(parents=True, exist_ok=True)
        extension = self.output_format or settings.FALLBACK_OUTPUT_FORMAT

        pdf_token = source_pdf_context.set(Path(self.pdf_file).name)
        try:
            destinations = []
            for page_number in range(1, number_of_pages + 1):
                self.set_page(page_number)
                page_token = source_page_context.set(page_number)
                try:
                    destination = str(Path(directory) / f"{prefix}{page_number}.{extension}")
                    if not self.save_image(destination):
                        logger.warning(f"Page was not written to {destination}")
                        self.unwritten_pages.append(page_number)
                finally:
                    source_page_context.reset(page_token)

                destinations.append(destination)
            return destinations
        finally:
            source_pdf_context.reset(pdf_token)

    def determine_output_format(self, path_to_image) -> str:
        """Picks the configured format, else the destination extension, else the fallback format."""
        output_format = self.output_format or Path(path_to_image).suffix.lstrip(".")
        output_format = output_format.lower()

        if not self.is_valid_output_format(output_format):
            output_format = settings.FALLBACK_OUTPUT_FORMAT

        return output_format

    def _apply_before_settings(self):
        if self.before_settings:
            self.engine = self.before_settings(self.engine, self.page)
