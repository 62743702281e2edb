"""Rendering engine that rasterizes PDF pages with pdf2image and holds the result as Pillow images.

Classes:
    RenderEngine: A mutable handle around the current document, resolution, output format
        and the page image loaded from it.

The engine is shared with user supplied settings callbacks, which receive it, may change it
in place (resize, colourspace, ...) and hand it back.
"""

import io
import logging
from typing import List, Optional, Tuple

from pdf2image import convert_from_path, pdfinfo_from_path
from PIL import Image

from pdf_to_image.config import settings

logger = logging.getLogger(__name__)

# Pillow encoder names for the supported output formats
PIL_FORMATS = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
}


class RenderEngine:
    """Handle around pdf2image/poppler and the Pillow image it produced."""

    def __init__(self, poppler_path: Optional[str] = None):
        """Initializes an empty engine; no document is opened yet.

        Args:
            poppler_path (str, optional): Directory of the poppler binaries.
                Defaults to settings.POPPLER_PATH.
        """
        self.poppler_path = poppler_path or settings.POPPLER_PATH
        self.resolution: Tuple[int, int] = (settings.DEFAULT_RESOLUTION, settings.DEFAULT_RESOLUTION)
        self.colorspace: Optional[str] = None
        self.format: Optional[str] = None
        self.number_images = 0
        self.images: List[Image.Image] = []

    @property
    def image(self) -> Image.Image:
        """The current page image."""
        if not self.images:
            raise ValueError("No image has been read")
        return self.images[0]

    @image.setter
    def image(self, image: Image.Image):
        self.images = [image]

    def set_resolution(self, x_resolution: int, y_resolution: int):
        """Sets the DPI used by the next read."""
        self.resolution = (x_resolution, y_resolution)

    def get_image_resolution(self) -> Tuple[int, int]:
        """Returns the (x, y) DPI of the current image."""
        x_resolution, y_resolution = self.image.info.get("dpi", self.resolution)
        return int(round(x_resolution)), int(round(y_resolution))

    def set_colorspace(self, mode: str):
        """Converts the current image, and every image read afterwards, to a Pillow mode such as "RGB" or "L"."""
        self.colorspace = mode
        self.images = [self._with_info(image.convert(mode), image) for image in self.images]

    def ping_image(self, pdf_file: str):
        """Reads the document metadata without rasterizing any page.

        Raises:
            PDFPageCountError: If the page count cannot be read from the PDF.
            PDFInfoNotInstalledError: If poppler is not available.
        """
        info = pdfinfo_from_path(pdf_file, poppler_path=self.poppler_path)
        self.number_images = int(info["Pages"])
        logger.debug(f"Pinged {pdf_file}: {self.number_images} pages")

    def read_image(self, pdf_file: str, index: int):
        """Rasterizes one page of the document, replacing any loaded image.

        Args:
            pdf_file (str): Path of the PDF.
            index (int): Zero-based page index.

        Raises:
            PDFPageCountError: If the PDF cannot be read.
            PDFSyntaxError: If the PDF is malformed.
        """
        x_resolution, y_resolution = self.resolution
        images = convert_from_path(
            pdf_file,
            dpi=x_resolution,
            first_page=index + 1,
            last_page=index + 1,
            poppler_path=self.poppler_path,
        )

        loaded = []
        for image in images:
            if y_resolution != x_resolution:
                # poppler renders a single DPI, stretch vertically to honour the y resolution
                height = max(1, round(image.height * y_resolution / x_resolution))
                image = image.resize((image.width, height), Image.Resampling.LANCZOS)
            if self.colorspace:
                image = image.convert(self.colorspace)
            image.info["dpi"] = self.resolution
            loaded.append(image)

        self.images = loaded
        logger.debug(f"Read page {index + 1} of {pdf_file} at {self.resolution} dpi")

    def get_number_images(self) -> int:
        """Returns the number of pages reported by the last ping."""
        return self.number_images

    def merge_image_layers(self):
        """Flattens every loaded layer onto a single white image.

        The result keeps the colourspace set with set_colorspace, or a grayscale first layer's mode,
        and is RGB otherwise.
        """
        if not self.images:
            raise ValueError("No image has been read")

        base = Image.new("RGB", self.images[0].size, "white")
        for layer in self.images:
            rgba = layer.convert("RGBA")
            base.paste(rgba, (0, 0), rgba)

        mode = self.colorspace or ("L" if self.images[0].mode in ("L", "LA") else "RGB")
        if mode != "RGB":
            base = base.convert(mode)

        self.images = [self._with_info(base, self.images[0])]

    def set_format(self, output_format: str):
        self.format = output_format.lower()

    def get_format(self) -> Optional[str]:
        return self.format

    def resize_image(self, width: int, height: int, bestfit: bool = False):
        """Resizes the current image with a Lanczos filter.

        Args:
            width (int): Target width in pixels.
            height (int): Target height in pixels.
            bestfit (bool): When True, fit inside width x height keeping the aspect ratio.
        """
        image = self.image
        width, height = int(width), int(height)
        if bestfit:
            ratio = min(width / image.width, height / image.height)
            width = max(1, round(image.width * ratio))
            height = max(1, round(image.height * ratio))

        self.image = self._with_info(image.resize((width, height), Image.Resampling.LANCZOS), image)

    def get_image_blob(self) -> bytes:
        """Encodes the current image in the current output format.

        Raises:
            ValueError: If no image was read or the format is not supported.
        """
        image = self.image
        pil_format = PIL_FORMATS.get(self.format or "")
        if pil_format is None:
            raise ValueError(f"Cannot encode image in format {self.format!r}")

        if pil_format == "JPEG" and image.mode not in ("RGB", "L", "CMYK"):
            image = image.convert("RGB")

        buf = io.BytesIO()
        image.save(buf, format=pil_format, dpi=self.get_image_resolution())
        return buf.getvalue()

    @staticmethod
    def _with_info(image: Image.Image, source: Image.Image) -> Image.Image:
        """Carries the DPI of the source image over to a derived image."""
        if "dpi" in source.info:
            image.info["dpi"] = source.info["dpi"]
        return image
