"""CSS color parsing."""

from PIL import ImageColor
from tinycss2 import color3

from postergen.types import RGBA

BLACK: RGBA = (0, 0, 0, 255)
WHITE: RGBA = (255, 255, 255, 255)
TRANSPARENT: RGBA = (0, 0, 0, 0)


def _to_byte(channel: float) -> int:
    return min(max(int(round(channel * 255)), 0), 255)


def parse_color(value: str) -> RGBA:
    """
    Parse a CSS color string into straight RGBA.

    Accepts CSS Color Level 3 syntax (named colors, `transparent`, #rgb,
    #rrggbb, rgb(), rgba(), hsl(), hsla()) plus the #rgba and #rrggbbaa
    hex forms.

    Args:
        value: CSS color string (e.g., "rgba(255, 0, 0, 0.5)", "navy", "#FF000080").

    Returns:
        (r, g, b, a) tuple with channels in 0-255.

    Raises:
        ValueError: If the string is not a concrete color.
    """
    value = value.strip()
    color = color3.parse_color(value)
    if color is None and value.startswith("#"):
        # Hex with alpha predates support in some tinycss2 releases
        r, g, b, a = ImageColor.getcolor(value, "RGBA")
        return (r, g, b, a)
    if color is None or isinstance(color, str):
        # None for garbage, "currentColor" has no value outside a document
        raise ValueError(f"unknown color specifier: {value!r}")
    return (_to_byte(color.red), _to_byte(color.green), _to_byte(color.blue), _to_byte(color.alpha))


def is_transparent(color: RGBA) -> bool:
    """Return True if the color has zero alpha."""
    return color[3] == 0
