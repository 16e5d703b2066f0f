"""High-level API for rendering posters."""

import logging
from pathlib import Path

from PIL import Image

from postergen.config import PosterConfig
from postergen.fonts import FontResolver
from postergen.markup import MarkupParser
from postergen.render import ImageCanvas, render, save_image, save_image_to_bytes

logger = logging.getLogger(__name__)


def render_poster(
    markup: str,
    config: PosterConfig | None = None,
    resolver: FontResolver | None = None,
) -> Image.Image:
    """
    Render markup into an image.

    Args:
        markup: Raw markup text.
        config: Image settings. If None, uses PosterConfig() defaults.
        resolver: Font resolver to reuse across renders. If None, a new one
            over the installed fonts is created.

    Returns:
        RGBA image.

    Raises:
        MarkupError: If the markup or an attribute is malformed.
        FontNotFoundError: If no usable font can be found.

    Example:
        ```python
        from postergen import PosterConfig, render_poster

        image = render_poster(
            '<font size="96" color="navy">Hello</font><br><c>world</c>',
            PosterConfig(image_width=1280, image_height=720, padding=100),
        )
        image.save("hello.png")
        ```
    """
    config = config or PosterConfig()
    if resolver is None:
        resolver = FontResolver(default_family=config.default_family)

    content = MarkupParser(resolver).parse(markup)

    canvas = ImageCanvas(config.image_width, config.image_height)
    canvas.fill(config.background_rgba)
    render(content, config.content_rect, canvas, config.line_spacing)
    return canvas.image


def render_poster_bytes(
    markup: str,
    config: PosterConfig | None = None,
    resolver: FontResolver | None = None,
    format: str = "PNG",
) -> bytes:
    """
    Render markup straight to encoded image bytes, e.g. for an HTTP response.

    Args:
        markup: Raw markup text.
        config: Image settings.
        resolver: Optional font resolver.
        format: Pillow format name; JPEG output is flattened to RGB.

    Returns:
        Encoded image.
    """
    image = render_poster(markup, config, resolver)
    return save_image_to_bytes(image, format)


def render_poster_file(
    input_path: Path,
    output_path: Path,
    config: PosterConfig | None = None,
    resolver: FontResolver | None = None,
) -> Path:
    """
    Render a UTF-8 markup file to an image file.

    The output is written only once rendering has fully succeeded.

    Args:
        input_path: Markup file.
        output_path: Image file; the format follows the suffix.
        config: Image settings.
        resolver: Optional font resolver.

    Returns:
        The output path.

    Raises:
        OSError: If the input can't be read or the output can't be written.
        UnicodeDecodeError: If the input isn't UTF-8.
    """
    markup = Path(input_path).read_text(encoding="utf-8")
    image = render_poster(markup, config, resolver)
    save_image(image, Path(output_path))
    logger.info(f"Saved {image.width}x{image.height} image to {output_path}")
    return Path(output_path)
