"""Utility modules."""

from postergen.utils.colors import BLACK, TRANSPARENT, WHITE, is_transparent, parse_color
from postergen.utils.dimensions import Rect, content_rect

__all__ = [
    "BLACK",
    "TRANSPARENT",
    "WHITE",
    "Rect",
    "content_rect",
    "is_transparent",
    "parse_color",
]
