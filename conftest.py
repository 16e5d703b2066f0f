"""Shared fixtures: stub fonts, catalogs and a recording canvas."""

from pathlib import Path

import pytest
from PIL import ImageFont, features

from postergen.fonts import FontFace, FontKey, FontResolver
from postergen.fonts.system import InstalledFont, SystemFontCatalog
from postergen.markup import MarkupParser
from postergen.models import Run
from postergen.utils.colors import BLACK, TRANSPARENT


class StubFace(FontFace):
    """Face with fixed metrics: glyphs are size/2 wide, size tall, ascent 0.8 * size."""

    def __init__(self, name: str) -> None:
        super().__init__(name, b"")

    def measure(self, text: str, size: float) -> tuple[int, int]:
        return (int(len(text) * size * 0.5), int(size))

    def ascent(self, size: float) -> int:
        return int(size * 0.8)


class DefaultFace(FontFace):
    """Face rasterized with Pillow's bundled default font."""

    def __init__(self, name: str) -> None:
        super().__init__(name, b"")

    def variant(self, size: float) -> ImageFont.FreeTypeFont:
        font = self._variants.get(size)
        if font is None:
            font = ImageFont.load_default(size)
            self._variants[size] = font
        return font


class StubCatalog(SystemFontCatalog):
    """Catalog over a fixed set of families, one regular face each unless given."""

    def __init__(self, families=(), fonts=None) -> None:
        super().__init__(command="true")
        self.fonts = list(fonts or []) + [
            InstalledFont(family, 80, 0, Path(f"/fonts/{family}.ttf")) for family in families
        ]


class StubResolver(FontResolver):
    """Resolver handing out StubFaces and counting how often a face is opened."""

    def __init__(self, catalog, default_family=None) -> None:
        super().__init__(catalog, default_family)
        self.opened: list[str] = []

    def _open(self, installed: InstalledFont) -> FontFace:
        self.opened.append(installed.family)
        return StubFace(installed.family)


class DefaultFaceResolver(FontResolver):
    def _open(self, installed: InstalledFont) -> FontFace:
        return DefaultFace(installed.family)


class RecordingCanvas:
    """Canvas that records every call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def fill(self, color) -> None:
        self.calls.append(("fill", color))

    def fill_rect(self, rect, color) -> None:
        self.calls.append(("fill_rect", rect, color))

    def draw_glyphs(self, x, y, face, size, color, text) -> None:
        self.calls.append(("draw_glyphs", x, y, size, color, text))


@pytest.fixture
def catalog() -> StubCatalog:
    return StubCatalog(["DejaVu Sans", "Noto Sans CJK SC", "Roboto"])


@pytest.fixture
def resolver(catalog) -> StubResolver:
    return StubResolver(catalog)


@pytest.fixture
def parser(resolver) -> MarkupParser:
    return MarkupParser(resolver)


@pytest.fixture
def canvas() -> RecordingCanvas:
    return RecordingCanvas()


@pytest.fixture
def make_run():
    """Build a run with a StubFace already attached."""

    def factory(text, size=20.0, alignment=None, line_index=1, background=TRANSPARENT):
        key = FontKey("Stub")
        return Run(
            content=text,
            font_size=size,
            font_color=BLACK,
            background_color=background,
            font_key=key,
            face=StubFace("Stub"),
            line_index=line_index,
            alignment=alignment,
        )

    return factory


@pytest.fixture
def default_face() -> DefaultFace:
    if not features.check_module("freetype2"):
        pytest.skip("Pillow built without FreeType")
    return DefaultFace("Aileron")


@pytest.fixture
def real_resolver(default_face) -> DefaultFaceResolver:
    return DefaultFaceResolver(StubCatalog(["Noto Sans CJK SC", "Roboto"]))
