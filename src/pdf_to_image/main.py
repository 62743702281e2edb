"""Command line entry point for converting PDF pages to images.

Usage:
    pdf-to-image document.pdf page.png
    pdf-to-image document.pdf page-2.jpg --page 2 --resolution 300
    pdf-to-image https://example.com/document.pdf out/ --all --prefix page- --format png
"""

import argparse
import logging
import sys
from typing import List, Optional

from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError

from pdf_to_image.config import settings
from pdf_to_image.custom_logging.log_context import setup_logging
from pdf_to_image.exceptions import PdfToImageException
from pdf_to_image.pdf import Pdf

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert PDF pages to JPEG or PNG images")
    parser.add_argument("source", help="Path or URL of the PDF")
    parser.add_argument("destination", help="Output image path, or output directory with --all")
    parser.add_argument("--page", type=int, default=1, help="Page to convert (default: 1)")
    parser.add_argument("--all", action="store_true", help="Convert every page into the destination directory")
    parser.add_argument("--prefix", default="", help="File name prefix used with --all")
    parser.add_argument(
        "--resolution",
        type=int,
        default=settings.DEFAULT_RESOLUTION,
        help=f"Resolution in DPI (default: {settings.DEFAULT_RESOLUTION})",
    )
    parser.add_argument(
        "--format",
        choices=Pdf.VALID_OUTPUT_FORMATS,
        help="Output format (default: taken from the destination extension)",
    )
    parser.add_argument("--log-level", help=f"Log level (default: {settings.LOG_LEVEL})")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the converter and return the process exit status."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        with Pdf(args.source) as pdf:
            pdf.set_resolution(args.resolution)
            if args.format:
                pdf.set_output_format(args.format)

            if args.all:
                paths = pdf.save_all_pages_as_images(args.destination, args.prefix)
                if pdf.unwritten_pages:
                    logger.error(f"Pages {pdf.unwritten_pages} could not be written into {args.destination}")
                    return 1
                logger.info(f"Converted {len(paths)} pages into {args.destination}")
                return 0

            pdf.set_page(args.page)
            if not pdf.save_image(args.destination):
                return 1
    except PdfToImageException as e:
        logger.error(f"Conversion failed: {e}")
        return 1
    except (PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError) as e:
        logger.error(f"Could not read {args.source}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
