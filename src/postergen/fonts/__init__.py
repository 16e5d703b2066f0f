"""Font resolution and caching."""

import logging
from dataclasses import dataclass
from functools import cached_property
from io import BytesIO
from pathlib import Path
from typing import Iterable

from PIL import ImageFont

from postergen.fonts.system import InstalledFont, SystemFontCatalog
from postergen.types import FontStyle, Weight

logger = logging.getLogger(__name__)

# Substrings identifying CJK-capable families, checked against lowercased names
DEFAULT_FAMILY_HINTS = (
    "yahei",
    "heiti",
    "songti",
    "kaiti",
    "noto sans cjk",
    "noto serif cjk",
    "source han",
    "wenquanyi",
)

# Size used to validate font data when a face is opened
PROBE_SIZE = 12


class FontNotFoundError(LookupError):
    """No usable font for a request, and no usable default either."""

    def __init__(self, message: str, available_families: list[str] | None = None) -> None:
        super().__init__(message)
        self.available_families = available_families or []


@dataclass(frozen=True)
class FontKey:
    """Identity of a font variant, used as the cache key."""

    family: str
    weight: Weight = "normal"
    style: FontStyle = "normal"


class FontFace:
    """
    Shared handle to the data of one loaded font.

    A face is size-independent; sized Pillow fonts are created on demand and
    memoized per size. Every run using the same FontKey holds the same face.
    """

    def __init__(self, name: str, data: bytes, index: int = 0) -> None:
        self.name = name
        self.index = index
        self._data = data
        self._variants: dict[float, ImageFont.FreeTypeFont] = {}

    def __repr__(self) -> str:
        return f"FontFace({self.name!r}, index={self.index})"

    @classmethod
    def from_file(cls, path: Path, index: int = 0, name: str | None = None) -> "FontFace":
        """
        Read and validate a font file.

        Args:
            path: TrueType/OpenType file (collections supported through index).
            index: Face index inside a collection.
            name: Display name. Defaults to the file stem.

        Returns:
            Loaded FontFace.

        Raises:
            OSError: If the file can't be read or isn't a usable font.
        """
        face = cls(name or path.stem, path.read_bytes(), index)
        face.variant(PROBE_SIZE)
        return face

    def variant(self, size: float) -> ImageFont.FreeTypeFont:
        """Return the Pillow font for this face at the given pixel size."""
        font = self._variants.get(size)
        if font is None:
            font = ImageFont.truetype(BytesIO(self._data), size, index=self.index)
            self._variants[size] = font
        return font

    def measure(self, text: str, size: float) -> tuple[int, int]:
        """
        Measure the glyph box of text.

        The box starts at the draw origin (top of the ascender line), so the
        height covers the ascent plus whatever the glyphs descend below it.

        Returns:
            (width, height) in pixels.
        """
        _, _, right, bottom = self.variant(size).getbbox(text)
        return (max(int(right), 0), max(int(bottom), 0))

    def ascent(self, size: float) -> int:
        """Distance from the draw origin to the baseline, in pixels."""
        ascent, _ = self.variant(size).getmetrics()
        return int(ascent)


def find_default_family(
    families: Iterable[str], hints: Iterable[str] = DEFAULT_FAMILY_HINTS
) -> str | None:
    """
    Pick the first family whose name contains one of the hints.

    Args:
        families: Installed family names, in catalog order.
        hints: Lowercase substrings to look for.

    Returns:
        Matching family name, or None.
    """
    hints = tuple(hints)
    for family in families:
        lowercase_name = family.lower()
        if any(hint in lowercase_name for hint in hints):
            return family
    return None


class FontResolver:
    """
    Maps FontKeys to loaded faces, with a process-lifetime cache.

    Lookup failures fall back to the default key; if that fails too the
    request can't be served and FontNotFoundError is raised. The cache is not
    synchronized, so one resolver must not be shared between threads.
    """

    def __init__(
        self,
        catalog: SystemFontCatalog | None = None,
        default_family: str | None = None,
    ) -> None:
        """
        Initialize resolver.

        Args:
            catalog: Installed-font catalog. Defaults to the fontconfig catalog.
            default_family: Family for the default key. If None, the catalog is
                probed for a CJK-capable family.
        """
        self.catalog = catalog if catalog is not None else SystemFontCatalog()
        self._default_family = default_family
        self._cache: dict[FontKey, FontFace] = {}

    @cached_property
    def default_key(self) -> FontKey:
        """
        The fallback FontKey, resolved once.

        Raises:
            FontNotFoundError: If no default family is configured and none of
                the installed families looks CJK-capable.
        """
        if self._default_family:
            return FontKey(self._default_family)

        families = self.catalog.all_families()
        family = find_default_family(families)
        if family is None:
            raise FontNotFoundError(
                "No preferred default font found. Please specify the font family explicitly.",
                families,
            )
        logger.info(f"Default font family: {family}")
        return FontKey(family)

    def available_families(self) -> list[str]:
        return self.catalog.all_families()

    def load(self, key: FontKey) -> FontFace:
        """
        Resolve a key to a face, loading it on first use.

        Args:
            key: Requested font variant.

        Returns:
            Cached FontFace; equal keys always return the same object.

        Raises:
            FontNotFoundError: If neither the key nor the default key can be loaded.
        """
        face = self._cache.get(key)
        if face is not None:
            logger.debug(f"Font cache hit: {key}")
            return face

        face = self._load_or_none(key)
        if face is None:
            default_key = self.default_key
            if default_key == key:
                raise FontNotFoundError(
                    f"Failed to load default font '{key.family}'.", self.available_families()
                )
            logger.warning(f"Font '{key.family}' unavailable, trying default font: {default_key.family}")
            face = self._cache.get(default_key) or self._load_or_none(default_key)
            if face is None:
                raise FontNotFoundError(
                    f"Failed to load font '{key.family}' and default font '{default_key.family}'.",
                    self.available_families(),
                )
            self._cache[default_key] = face

        self._cache[key] = face
        return face

    def _load_or_none(self, key: FontKey) -> FontFace | None:
        installed = self.catalog.select_best_match(key.family, key.weight, key.style)
        if installed is None:
            logger.error(f"Font '{key.family}' not found.")
            self._log_available_families()
            return None

        try:
            face = self._open(installed)
        except OSError as e:
            logger.error(f"Failed to load font data from {installed.path}: {e}")
            return None

        logger.info(f"Loaded font {key} from {installed.path}")
        return face

    def _open(self, installed: InstalledFont) -> FontFace:
        return FontFace.from_file(installed.path, installed.index, name=installed.family)

    def _log_available_families(self) -> None:
        families = self.available_families()
        listing = "\n".join(f"- {name}" for name in families)
        logger.error(f"Available fonts:\n{listing}")
