import pytest
from PIL import Image

# Letter size page, in inches
PAGE_WIDTH_INCHES = 8.5
PAGE_HEIGHT_INCHES = 11


class FakePoppler:
    """Stands in for pdf2image so tests do not need the poppler binaries."""

    def __init__(self, pages=3, mode="RGB"):
        self.pages = pages
        self.mode = mode
        self.info_calls = []
        self.convert_calls = []

    def pdfinfo_from_path(self, pdf_path, poppler_path=None, **kwargs):
        self.info_calls.append(pdf_path)
        return {"Pages": self.pages}

    def convert_from_path(self, pdf_path, dpi=200, first_page=None, last_page=None, poppler_path=None, **kwargs):
        self.convert_calls.append({"pdf_path": pdf_path, "dpi": dpi, "first_page": first_page, "last_page": last_page})
        size = (round(PAGE_WIDTH_INCHES * dpi), round(PAGE_HEIGHT_INCHES * dpi))
        return [Image.new(self.mode, size, "white") for _ in range(first_page, last_page + 1)]


@pytest.fixture
def fake_poppler(monkeypatch):
    fake = FakePoppler()
    monkeypatch.setattr("pdf_to_image.engine.render_engine.pdfinfo_from_path", fake.pdfinfo_from_path)
    monkeypatch.setattr("pdf_to_image.engine.render_engine.convert_from_path", fake.convert_from_path)
    return fake


@pytest.fixture
def pdf_file(tmp_path):
    path = tmp_path / "test.pdf"
    path.write_bytes(b"%PDF-1.4\n%%EOF\n")
    return path
