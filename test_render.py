"""End-to-end rendering, config and encoding tests."""

from io import BytesIO

import pytest
from PIL import Image
from pydantic import ValidationError

from postergen.builder import render_poster, render_poster_bytes, render_poster_file
from postergen.config import PosterConfig, load_config
from postergen.markup import MarkupError
from postergen.render import ImageCanvas, save_image
from postergen.utils.dimensions import Rect

MARKUP = (
    '<font size="64" color="navy">Poster</font><r>right</r>\n'
    '<c><font size="48" background="#FFFF0080">centered </font></c>\n'
    '<font size="32"><r>a</r><r>b</r></font>'
)

SMALL = PosterConfig(image_width=640, image_height=360, padding=40)


def test_render_is_deterministic(real_resolver):
    first = render_poster_bytes(MARKUP, SMALL, real_resolver)
    second = render_poster_bytes(MARKUP, SMALL, real_resolver)
    assert first == second


def test_render_bytes_as_jpeg(real_resolver):
    data = render_poster_bytes(MARKUP, SMALL, real_resolver, format="JPEG")

    with Image.open(BytesIO(data)) as img:
        assert img.format == "JPEG"
        assert img.mode == "RGB"
        assert img.size == (640, 360)


def test_render_draws_text_on_background(real_resolver):
    image = render_poster(MARKUP, SMALL, real_resolver)

    assert image.size == (640, 360)
    assert image.mode == "RGBA"
    assert image.getpixel((0, 0)) == (255, 255, 255, 255)
    assert len(image.getcolors(maxcolors=640 * 360)) > 1


def test_transparent_background_config(real_resolver):
    config = SMALL.model_copy(update={"background_color": "transparent"})
    image = render_poster("", config, real_resolver)
    assert image.getpixel((10, 10)) == (0, 0, 0, 0)


def test_render_file_writes_png(tmp_path, real_resolver):
    source = tmp_path / "poster.txt"
    source.write_text(MARKUP, encoding="utf-8")
    output = tmp_path / "poster.png"

    assert render_poster_file(source, output, SMALL, real_resolver) == output
    with Image.open(output) as img:
        assert img.size == (640, 360)


def test_render_file_writes_nothing_on_error(tmp_path, real_resolver):
    source = tmp_path / "broken.txt"
    source.write_text("<font>unclosed", encoding="utf-8")
    output = tmp_path / "poster.png"

    with pytest.raises(MarkupError):
        render_poster_file(source, output, SMALL, real_resolver)
    assert not output.exists()


def test_missing_input_is_an_os_error(tmp_path, real_resolver):
    with pytest.raises(FileNotFoundError):
        render_poster_file(tmp_path / "nope.txt", tmp_path / "out.png", SMALL, real_resolver)


def test_image_canvas_fill_rect_covers_exact_box():
    canvas = ImageCanvas(10, 10)
    canvas.fill((255, 255, 255, 255))
    canvas.fill_rect(Rect(2, 3, 4, 5), (255, 0, 0, 255))

    assert canvas.image.getbbox() == (0, 0, 10, 10)
    assert canvas.image.getpixel((2, 3)) == (255, 0, 0, 255)
    assert canvas.image.getpixel((5, 7)) == (255, 0, 0, 255)
    assert canvas.image.getpixel((6, 7)) == (255, 255, 255, 255)
    assert canvas.image.getpixel((5, 8)) == (255, 255, 255, 255)


def test_save_image_flattens_jpeg(tmp_path):
    img = Image.new("RGBA", (8, 8), (10, 20, 30, 255))
    path = save_image(img, tmp_path / "out.jpg")
    with Image.open(path) as saved:
        assert saved.format == "JPEG"
        assert saved.mode == "RGB"


def test_save_image_rejects_unknown_extension(tmp_path):
    with pytest.raises(ValueError):
        save_image(Image.new("RGBA", (4, 4)), tmp_path / "out.unknown")


def test_config_defaults():
    config = PosterConfig()
    assert (config.image_width, config.image_height, config.padding) == (1920, 1080, 300)
    assert config.background_rgba == (255, 255, 255, 255)
    assert config.content_rect == Rect(300, 300, 1320, 480)


@pytest.mark.parametrize(
    "fields",
    [
        {"image_width": 0},
        {"padding": -1},
        {"padding": 540},
        {"background_color": "not a color"},
        {"line_spacing": 0},
    ],
)
def test_config_validation(fields):
    with pytest.raises(ValidationError):
        PosterConfig(**fields)


def test_load_config(tmp_path):
    path = tmp_path / "postergen.toml"
    path.write_text('[poster]\nimage_width = 800\nimage_height = 600\npadding = 50\nbackground_color = "black"\n')

    config = load_config(path)
    assert config.content_rect == Rect(50, 50, 700, 500)
    assert config.background_rgba == (0, 0, 0, 255)


def test_load_config_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.toml")
