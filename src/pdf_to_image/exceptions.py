"""Exceptions raised while converting PDF pages to images."""


class PdfToImageException(Exception):
    """Base class for all PDF to image conversion errors."""

    pass


class PdfDoesNotExist(PdfToImageException):
    """Raised when the PDF source is neither an existing file nor a downloadable URL."""

    pass


class InvalidFormat(PdfToImageException):
    """Raised when an unsupported output format is requested."""

    pass


class PageDoesNotExist(PdfToImageException):
    """Raised when the requested page is outside the document."""

    pass
