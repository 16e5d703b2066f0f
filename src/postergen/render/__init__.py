"""Layout and rendering modules."""

from postergen.render.canvas import Canvas, ImageCanvas
from postergen.render.image import save_image, save_image_to_bytes
from postergen.render.layout import LINE_SPACING, LineLayout, PlacedRun, draw_order, layout, render

__all__ = [
    "LINE_SPACING",
    "Canvas",
    "ImageCanvas",
    "LineLayout",
    "PlacedRun",
    "draw_order",
    "layout",
    "render",
    "save_image",
    "save_image_to_bytes",
]
