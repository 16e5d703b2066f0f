"""Pixel geometry helpers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in device pixels (origin at top-left)."""

    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height


def content_rect(image_width: int, image_height: int, padding: int) -> Rect:
    """
    Build the content rectangle left after removing padding on every side.

    Args:
        image_width: Full image width in pixels.
        image_height: Full image height in pixels.
        padding: Padding in pixels, applied symmetrically.

    Returns:
        Rect positioned at (padding, padding).
    """
    return Rect(
        left=padding,
        top=padding,
        width=image_width - padding * 2,
        height=image_height - padding * 2,
    )
