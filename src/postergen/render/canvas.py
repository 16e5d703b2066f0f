"""Drawing surfaces."""

from typing import Protocol

from PIL import Image, ImageDraw

from postergen.fonts import FontFace
from postergen.types import RGBA
from postergen.utils.colors import TRANSPARENT
from postergen.utils.dimensions import Rect


class Canvas(Protocol):
    """The mutating operations layout needs from a surface."""

    def fill(self, color: RGBA) -> None: ...

    def fill_rect(self, rect: Rect, color: RGBA) -> None: ...

    def draw_glyphs(
        self, x: int, y: int, face: FontFace, size: float, color: RGBA, text: str
    ) -> None: ...


class ImageCanvas:
    """Canvas backed by an RGBA Pillow image."""

    def __init__(self, width: int, height: int) -> None:
        """
        Create a fully transparent canvas.

        Args:
            width: Width in pixels.
            height: Height in pixels.
        """
        self.image = Image.new("RGBA", (width, height), TRANSPARENT)
        self._draw = ImageDraw.Draw(self.image, "RGBA")

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def fill(self, color: RGBA) -> None:
        """Replace every pixel with one color."""
        self.image.paste(color, (0, 0, self.width, self.height))

    def fill_rect(self, rect: Rect, color: RGBA) -> None:
        """Composite a filled rectangle covering exactly rect."""
        if rect.width <= 0 or rect.height <= 0:
            return
        self._draw.rectangle(
            (rect.left, rect.top, rect.right - 1, rect.bottom - 1),
            fill=color,
        )

    def draw_glyphs(
        self, x: int, y: int, face: FontFace, size: float, color: RGBA, text: str
    ) -> None:
        """Rasterize text with its ascender line at y."""
        self._draw.text((x, y), text, font=face.variant(size), fill=color)
