import io

import pytest
from PIL import Image

from pdf_to_image.engine.render_engine import RenderEngine


def test_new_engine_uses_default_resolution_and_no_image():
    engine = RenderEngine()
    assert engine.resolution == (144, 144)
    assert engine.get_format() is None
    with pytest.raises(ValueError):
        engine.image


def test_ping_image_records_page_count_without_rendering(fake_poppler, pdf_file):
    engine = RenderEngine()
    engine.ping_image(str(pdf_file))

    assert engine.get_number_images() == 3
    assert fake_poppler.info_calls == [str(pdf_file)]
    assert fake_poppler.convert_calls == []


def test_read_image_renders_single_page_at_resolution(fake_poppler, pdf_file):
    engine = RenderEngine()
    engine.set_resolution(72, 72)
    engine.read_image(str(pdf_file), 1)

    assert fake_poppler.convert_calls == [{"pdf_path": str(pdf_file), "dpi": 72, "first_page": 2, "last_page": 2}]
    assert engine.image.size == (612, 792)
    assert engine.get_image_resolution() == (72, 72)


def test_read_image_scales_height_for_different_y_resolution(fake_poppler, pdf_file):
    engine = RenderEngine()
    engine.set_resolution(72, 144)
    engine.read_image(str(pdf_file), 0)

    assert engine.image.size == (612, 1584)
    assert engine.get_image_resolution() == (72, 144)


def test_set_colorspace_applies_to_later_reads(fake_poppler, pdf_file):
    engine = RenderEngine()
    engine.set_colorspace("L")
    engine.set_resolution(10, 10)
    engine.read_image(str(pdf_file), 0)

    assert engine.image.mode == "L"


def test_merge_image_layers_flattens_transparency_onto_white():
    engine = RenderEngine()
    transparent = Image.new("RGBA", (4, 4), (255, 0, 0, 0))
    red_square = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
    red_square.paste((255, 0, 0, 255), (0, 0, 2, 2))
    engine.images = [transparent, red_square]

    engine.merge_image_layers()

    assert len(engine.images) == 1
    assert engine.image.mode == "RGB"
    assert engine.image.getpixel((0, 0)) == (255, 0, 0)
    assert engine.image.getpixel((3, 3)) == (255, 255, 255)


def test_merge_image_layers_without_image_raises():
    with pytest.raises(ValueError):
        RenderEngine().merge_image_layers()


def test_set_format_is_lower_cased():
    engine = RenderEngine()
    engine.set_format("PNG")
    assert engine.get_format() == "png"


@pytest.mark.parametrize("output_format, pil_format", [("png", "PNG"), ("jpg", "JPEG"), ("jpeg", "JPEG")])
def test_get_image_blob_encodes_current_format(output_format, pil_format):
    engine = RenderEngine()
    engine.image = Image.new("RGB", (20, 10), "white")
    engine.set_format(output_format)

    blob = engine.get_image_blob()

    with Image.open(io.BytesIO(blob)) as image:
        assert image.format == pil_format
        assert image.size == (20, 10)


def test_get_image_blob_embeds_resolution():
    engine = RenderEngine()
    engine.set_resolution(72, 72)
    image = Image.new("RGB", (20, 10), "white")
    image.info["dpi"] = (72, 72)
    engine.image = image
    engine.set_format("png")

    with Image.open(io.BytesIO(engine.get_image_blob())) as saved:
        assert tuple(round(v) for v in saved.info["dpi"]) == (72, 72)


def test_get_image_blob_without_format_raises():
    engine = RenderEngine()
    engine.image = Image.new("RGB", (20, 10), "white")
    with pytest.raises(ValueError, match="Cannot encode image"):
        engine.get_image_blob()


def test_resize_image_exact():
    engine = RenderEngine()
    engine.image = Image.new("RGB", (200, 100), "white")
    engine.resize_image(512 / 3, 64)
    assert engine.image.size == (170, 64)


def test_resize_image_bestfit_keeps_aspect_ratio():
    engine = RenderEngine()
    engine.image = Image.new("RGB", (200, 100), "white")
    engine.resize_image(1024, 1024, bestfit=True)
    assert engine.image.size == (1024, 512)


def test_merge_image_layers_keeps_colorspace():
    engine = RenderEngine()
    engine.images = [Image.new("RGB", (4, 4), "white")]
    engine.set_colorspace("L")

    engine.merge_image_layers()

    assert engine.image.mode == "L"


def test_merge_image_layers_keeps_grayscale_pages():
    engine = RenderEngine()
    engine.images = [Image.new("L", (4, 4), 0)]

    engine.merge_image_layers()

    assert engine.image.mode == "L"
    assert engine.image.getpixel((0, 0)) == 0
